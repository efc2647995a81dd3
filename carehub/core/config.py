# carehub/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore")

    JWT_SECRET: str = Field(...)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # si viene DATABASE_URL se usa tal cual (tests: sqlite+aiosqlite://)
    DATABASE_URL: str | None = None
    DB_HOST: str | None = None
    DB_PORT: int = 3306
    DB_USER: str | None = None
    DB_PASSWORD: str | None = None
    DB_NAME: str | None = None

    # base del frontend; el QR apunta a {PUBLIC_BASE_URL}/verify?id=...
    PUBLIC_BASE_URL: str = "http://localhost:5173"

    DOCUMENT_RENDERER_URL: str | None = None
    DOCUMENT_RENDERER_TIMEOUT: float = 10.0

    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    LOG_LEVEL: str = "INFO"

    APP_NAME: str = "CareHub Rx"

    @property
    def async_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4")

    @property
    def logging_config(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
            },
            "handlers": {
                "console": {"class": "logging.StreamHandler", "formatter": "default"},
            },
            "loggers": {
                "carehub": {"handlers": ["console"], "level": self.LOG_LEVEL, "propagate": False},
            },
        }

settings = Settings()  # type: ignore[call-arg]
