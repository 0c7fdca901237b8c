"""
Application settings.

Read once from the environment (after loading `.env`) and passed explicitly
to `create_app()`. Missing or malformed values fail at startup with a
`ConfigError` naming the variable.
"""
import os
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

DEFAULT_DATABASE_URL = "sqlite:///./prompthub.db"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"
DEFAULT_MAX_BODY_BYTES = 50 * 1024 * 1024

ENVIRONMENTS = ("development", "production", "test")


class ConfigError(RuntimeError):
    pass


class Settings(BaseModel):
    auth_secret: str
    auth_algorithm: str = "HS256"
    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False
    environment: str = "production"
    cors_origins: List[str] = []
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    log_level: str = "INFO"

    @field_validator("auth_secret")
    @classmethod
    def validate_secret(cls, v):
        if not v or not v.strip():
            raise ValueError("AUTH_SECRET must not be empty")
        return v.strip()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        v = (v or "").strip().lower()
        if v not in ENVIRONMENTS:
            raise ValueError(f"APP_ENV must be one of {', '.join(ENVIRONMENTS)}")
        return v

    @field_validator("max_body_bytes")
    @classmethod
    def validate_max_body(cls, v):
        if v <= 0:
            raise ValueError("MAX_BODY_BYTES must be > 0")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        v = (v or "").strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be a standard logging level name")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# field name -> environment variable
_ENV_FIELDS = {
    "auth_secret": "AUTH_SECRET",
    "auth_algorithm": "AUTH_ALGORITHM",
    "database_url": "DATABASE_URL",
    "sql_echo": "SQL_ECHO",
    "environment": "APP_ENV",
    "cors_origins": "CORS_ORIGINS",
    "max_body_bytes": "MAX_BODY_BYTES",
    "log_level": "LOG_LEVEL",
}


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from `environ` (defaults to os.environ after load_dotenv)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    secret = environ.get("AUTH_SECRET", "")
    if not secret.strip():
        raise ConfigError(
            "AUTH_SECRET is not set. It must match the secret the auth provider "
            "uses to sign session tokens."
        )

    values = {
        "auth_secret": secret,
        "auth_algorithm": environ.get("AUTH_ALGORITHM", "HS256").strip() or "HS256",
        "database_url": environ.get("DATABASE_URL", DEFAULT_DATABASE_URL).strip() or DEFAULT_DATABASE_URL,
        "sql_echo": environ.get("SQL_ECHO", "false").lower() in ("true", "1", "yes"),
        "environment": environ.get("APP_ENV", "production"),
        "cors_origins": _split_origins(environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
        "max_body_bytes": environ.get("MAX_BODY_BYTES", str(DEFAULT_MAX_BODY_BYTES)),
        "log_level": environ.get("LOG_LEVEL", "INFO"),
    }

    try:
        return Settings(**values)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            field = err["loc"][0] if err["loc"] else "?"
            problems.append(f"{_ENV_FIELDS.get(field, field)}: {err['msg']}")
        raise ConfigError("Invalid configuration: " + "; ".join(problems)) from e
