import time
import logging
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .domain.errors import AppError, ErrorKind
from .infrastructure.db import engine
from .infrastructure.models import Base
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .interfaces.http.limits import limiter
from .interfaces.http.routers import auth as auth_router
from .interfaces.http.routers import classes as classes_router
from .interfaces.http.routers import payments as payments_router
from .interfaces.http.routers import selections as selections_router
from .interfaces.http.routers import users as users_router

VERSION = "0.1.0"

log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(log_level),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

app = FastAPI(title="MelodyMakers API", version=VERSION)
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def observe_request(request: Request, call_next):
    start_time = time.time()
    method = request.method
    path = request.url.path

    try:
        response = await call_next(request)
    except Exception:
        # unhandled errors still count as 500s before propagating to the handler
        _observe(method, path, request.scope.get("route"), 500, time.time() - start_time)
        raise

    if response.headers.get("content-type", "").startswith("application/json"):
        response.headers["content-type"] = "application/json; charset=utf-8"

    _observe(method, path, request.scope.get("route"), response.status_code, time.time() - start_time)
    return response


def _observe(method: str, path: str, route, status_code: int, duration: float) -> None:
    # label by route template to keep the label set bounded
    endpoint = getattr(route, "path", path)
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

    logger.info(
        "http_request",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=round(duration * 1000, 2)
    )


def error_response(status_code: int, kind: ErrorKind, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": True, "kind": kind.value, "message": message},
        headers=headers,
    )


_STATUS_KINDS = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.UNAUTHENTICATED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    405: ErrorKind.METHOD_NOT_ALLOWED,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.VALIDATION_ERROR,
    429: ErrorKind.RATE_LIMITED,
}


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("request_failed", kind=exc.kind.value, message=exc.message, **exc.context)
    return error_response(exc.status_code, exc.kind, exc.message)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    default = ErrorKind.BAD_REQUEST if exc.status_code < 500 else ErrorKind.INTERNAL
    kind = _STATUS_KINDS.get(exc.status_code, default)
    return error_response(exc.status_code, kind, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()))
    message = f"{where}: {first.get('msg', 'invalid request')}" if where else "invalid request"
    return error_response(422, ErrorKind.VALIDATION_ERROR, message)


@app.exception_handler(RateLimitExceeded)
async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    return error_response(429, ErrorKind.RATE_LIMITED, f"rate limit exceeded: {exc.detail}")


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception):
    logger.error("unhandled_exception", path=request.url.path, exc_info=exc)
    return error_response(500, ErrorKind.INTERNAL, "internal server error")


@app.on_event("startup")
def on_startup():
    logger.info("Starting MelodyMakers API", version=VERSION)
    Base.metadata.create_all(bind=engine)

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection established")


@app.get("/", response_class=PlainTextResponse)
def root():
    return "too much hot so stay home and learn something new. Enjoy!!"


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    """Prometheus metrics endpoint"""
    return metrics_endpoint()


app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(classes_router.router)
app.include_router(selections_router.router)
app.include_router(payments_router.router)
