import base64
import binascii
from functools import lru_cache
import json
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

SUPPORTED_JWT_ALGORITHMS = ("HS256", "HS384", "HS512")
PROJECT_ROOT = Path(__file__).resolve().parents[2]


class BroadcastingConfig(BaseModel):
    EMAIL_SERVER: str = ""
    EMAIL_PORT: int = 587
    EMAIL_PASSWORD: str = ""
    EMAIL_USER: str = ""
    EMAIL_FROM_NAME: str = "Identity Service"
    EMAIL_USE_TLS: bool = False
    EMAIL_STARTTLS: bool = True
    VALIDATE_CERTS: bool = True

    model_config = ConfigDict(extra="ignore")

    @property
    def is_configured(self) -> bool:
        return bool(self.EMAIL_SERVER and self.EMAIL_USER and self.EMAIL_PASSWORD)


class SentryConfig(BaseModel):
    SENTRY_DSN: str | None = None
    SENTRY_ENV: str = "development"
    SENTRY_ENABLED: bool = False

    model_config = ConfigDict(extra="ignore")


class JWTConfig(BaseModel):
    JWT_SIGNING_KEY: str
    ALGORITHM: str = "HS512"

    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(15, gt=0)

    model_config = ConfigDict(extra="ignore")

    @field_validator("JWT_SIGNING_KEY")
    @classmethod
    def validate_signing_key(cls, value: str) -> str:
        try:
            key = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("JWT_SIGNING_KEY must be valid base64") from exc
        if not key:
            raise ValueError("JWT_SIGNING_KEY must not be empty")
        return value

    @field_validator("ALGORITHM")
    @classmethod
    def validate_algorithm(cls, value: str) -> str:
        algorithm = value.strip().upper()
        if algorithm not in SUPPORTED_JWT_ALGORITHMS:
            raise ValueError(
                f"ALGORITHM must be one of {', '.join(SUPPORTED_JWT_ALGORITHMS)}"
            )
        return algorithm

    @property
    def signing_key(self) -> bytes:
        return base64.b64decode(self.JWT_SIGNING_KEY)


class PostgresConfig(BaseModel):
    DB_ECHO: bool = False

    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "identity"

    model_config = ConfigDict(extra="ignore")

    @property
    def dsn_async(self) -> str:
        return (
            f"postgresql+asyncpg://"
            f"{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{self.POSTGRES_DB}"
        )

    @property
    def dsn_sync(self) -> str:
        return (
            f"postgresql://"
            f"{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{self.POSTGRES_DB}"
        )


class AppConfig(BaseModel):
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    TESTING: bool = False

    LOCAL_TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"
    LOG_LEVEL_FILE: str = "WARNING"

    CORS_ALLOWED_ORIGINS: list[str] = Field(["*"])
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOWED_METHODS: list[str] = Field(["*"])
    CORS_ALLOWED_HEADERS: list[str] = Field(["*"])
    CORS_EXPOSE_HEADERS: list[str] = Field(["*"])

    TRUST_PROXY_HEADERS: bool = False
    TRUSTED_PROXY_HOSTS: list[str] = Field(["127.0.0.1"])

    PROJECT_NAME: str = "Token Rotation Service"

    model_config = ConfigDict(extra="ignore")

    @field_validator(
        "CORS_ALLOWED_ORIGINS",
        "CORS_ALLOWED_METHODS",
        "CORS_ALLOWED_HEADERS",
        "CORS_EXPOSE_HEADERS",
        "TRUSTED_PROXY_HOSTS",
        mode="before",
    )
    @classmethod
    def parse_str_list(cls, v: Any) -> list[str]:
        if isinstance(v, list):
            return v
        if isinstance(v, str) and v.strip().startswith("[") and v.strip().endswith("]"):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(item) for item in parsed]
            except json.JSONDecodeError:
                pass
        sep = "," if "," in v else ";"
        return [item.strip() for item in v.split(sep) if item.strip()]


class Config(BaseModel):
    app: AppConfig
    jwt: JWTConfig
    sentry: SentryConfig
    postgres: PostgresConfig
    broadcasting: BroadcastingConfig

    model_config = ConfigDict(extra="ignore")


@lru_cache
def get_settings() -> Config:
    """
    Cached settings factory. Values from the process environment win over the
    env file; `.env.test` is read instead of `.env` when TESTING=true.
    """
    env_filename = ".env.test" if os.getenv("TESTING") == "true" else ".env"
    env_file_values = dotenv_values(PROJECT_ROOT / env_filename)
    merged_env: dict[str, Any] = {
        k: v
        for k, v in {**env_file_values, **dict(os.environ)}.items()
        if v is not None
    }
    logger.debug("Loading settings from %s", env_filename)

    return Config(
        app=AppConfig(**merged_env),
        jwt=JWTConfig(**merged_env),
        sentry=SentryConfig(**merged_env),
        postgres=PostgresConfig(**merged_env),
        broadcasting=BroadcastingConfig(**merged_env),
    )


config = get_settings()
