import uvicorn

from .config import settings


def run() -> None:
    uvicorn.run("melodymakers.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
