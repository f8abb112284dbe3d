from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    DATABASE_URL: str = "sqlite:///./melodymakers.db"
    DB_USER: str | None = None
    DB_PASS: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "melodymakers"

    ACCESS_TOKEN_SECRET: str = "dev-secret-melodymakers"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    PAYMENT_SECRET_KEY: str = ""
    PAYMENT_CURRENCY: str = "usd"

    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_ENABLED: bool = True
    CACHE_TTL: int = 300  # 5 minutes

    RATE_LIMIT_ENABLED: bool = True
    JWT_RATE_LIMIT: str = "10/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def database_url(self) -> str:
        # credentials from DB_USER/DB_PASS take precedence over DATABASE_URL
        if self.DB_USER and self.DB_PASS:
            return (
                f"postgresql+psycopg2://{quote_plus(self.DB_USER)}:{quote_plus(self.DB_PASS)}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return self.DATABASE_URL

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
