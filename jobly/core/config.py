"""Configuration management for the Jobly service.

Settings come from environment variables, one prefix per group:
APP_, SERVER_, DATABASE_ (plus DATABASE_URL_APP), SECURITY_ and OTEL_.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

ASYNCPG_DRIVERNAME = "postgresql+asyncpg"
# Engine options that sometimes end up in DATABASE_URL_APP's query string.
ENGINE_OPTION_QUERY_KEYS = ("pool_size", "max_overflow", "pool_timeout", "pool_recycle")
DEV_SECRET_KEY = "secret-dev"


def to_asyncpg_url(url: str) -> str:
    """Point a PostgreSQL URL at the asyncpg driver.

    Accepts `postgres://`, `postgresql://` and `postgresql+<driver>://`. Engine
    options in the query string are dropped; driver options are kept.
    """
    parsed = make_url(url.strip())
    if parsed.get_backend_name() in ("postgres", "postgresql"):
        parsed = parsed.set(drivername=ASYNCPG_DRIVERNAME)
    parsed = parsed.difference_update_query(ENGINE_OPTION_QUERY_KEYS)
    return parsed.render_as_string(hide_password=False)


class AppEnvironment(StrEnum):
    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AppConfig(BaseSettings):
    name: str = Field(default="jobly")
    env: AppEnvironment = Field(default=AppEnvironment.LOCAL)
    version: str = Field(default="0.1.0")
    log_level: LogLevel = Field(default=LogLevel.INFO)
    api_prefix: str = Field(default="/api/v1")

    model_config = SettingsConfigDict(env_prefix="APP_")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        if isinstance(v, LogLevel):
            return v
        return LogLevel(v.upper())


class ServerConfig(BaseSettings):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001)
    workers: int = Field(default=4)

    model_config = SettingsConfigDict(env_prefix="SERVER_")


class DatabaseConfig(BaseSettings):
    url_app: str = Field(default="", alias="database_url_app")

    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    name: str = Field(default="jobly")
    user: str = Field(default="postgres")
    password: SecretStr = Field(default=SecretStr(""))
    pool_size: int = Field(default=10)
    max_overflow: int = Field(default=10)
    pool_timeout: int = Field(default=30)
    pool_recycle: int = Field(default=1800)
    echo: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        populate_by_name=True,
    )

    @property
    def async_url(self) -> str:
        if self.url_app:
            return to_asyncpg_url(self.url_app)
        return URL.create(
            ASYNCPG_DRIVERNAME,
            username=self.user,
            password=self.password.get_secret_value() or None,
            host=self.host,
            port=self.port,
            database=self.name,
        ).render_as_string(hide_password=False)


class SecurityConfig(BaseSettings):
    secret_key: SecretStr = Field(default=SecretStr(DEV_SECRET_KEY))
    jwt_algorithm: str = Field(default="HS256")
    token_ttl_seconds: int | None = Field(default=None)
    cors_allowed_origins: str = Field(default="http://localhost:3000")
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: list[str] = Field(default=["GET", "POST", "PATCH", "DELETE"])
    cors_allow_headers: list[str] = Field(default=["Authorization", "Content-Type", "X-Request-ID"])

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    @field_validator("cors_allowed_origins", mode="after")
    @classmethod
    def validate_cors_allowed_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


class ObservabilityConfig(BaseSettings):
    log_record_format: str = Field(default="json")

    model_config = SettingsConfigDict(env_prefix="OTEL_")


class Settings(BaseSettings):
    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @model_validator(mode="after")
    def validate_security_settings(self) -> Settings:
        if (
            self.app.env == AppEnvironment.PROD
            and self.security.secret_key.get_secret_value() == DEV_SECRET_KEY
        ):
            raise ValueError("SECURITY_SECRET_KEY must be set in production environment")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()


def reload_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()
