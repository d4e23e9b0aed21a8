"""
Pydantic-based configuration models for the HeroForge server.

Every section is a pydantic-settings ``BaseSettings`` with its own
environment prefix, aggregated by ``AppConfig``. Values come from the
process environment and an optional ``.env`` file.
"""

import json
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_DATABASE_PREFIXES = ("postgresql", "sqlite")


def _parse_env_list(candidate: Any) -> list[str]:
    """Parse a string from the environment as JSON list or CSV."""
    if candidate is None:
        return []
    if isinstance(candidate, list | tuple):
        return [str(item).strip() for item in candidate if str(item).strip()]
    s = str(candidate).strip()
    if not s:
        return []
    try:
        loaded = json.loads(s)
        if isinstance(loaded, list):
            return [str(item).strip() for item in loaded if str(item).strip()]
    except json.JSONDecodeError:
        pass
    return [item.strip() for item in s.split(",") if item.strip()]


class ServerConfig(BaseSettings):
    """Server network configuration."""

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=3018, description="Server port")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1024 <= v <= 65535:
            logger.error("Invalid server port", port=v, valid_range="1024-65535")
            raise ValueError("Port must be between 1024 and 65535")
        return v

    model_config = {"env_prefix": "SERVER_", "case_sensitive": False, "extra": "ignore"}


class DatabaseConfig(BaseSettings):
    """Database configuration."""

    url: str = Field(default="sqlite+aiosqlite:///./heroforge.db", description="Primary database URL")
    echo: bool = Field(default=False, description="Echo SQL statements to the log")

    # Connection pool configuration (SQLAlchemy, ignored for SQLite)
    pool_size: int = Field(default=5, description="Number of connections to maintain in pool")
    max_overflow: int = Field(default=10, description="Additional connections that can be created beyond pool_size")
    pool_timeout: int = Field(default=30, description="Seconds to wait for connection from pool")

    @field_validator("url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format - PostgreSQL or SQLite."""
        if not v:
            logger.error("Database URL validation failed - empty URL")
            raise ValueError("Database URL cannot be empty")
        if not v.startswith(SUPPORTED_DATABASE_PREFIXES):
            logger.error(
                "Database URL validation failed - invalid protocol",
                url_preview=v[:50],
                expected_protocols=SUPPORTED_DATABASE_PREFIXES,
            )
            raise ValueError("Database URL must start with 'postgresql' or 'sqlite'")
        return v

    @field_validator("pool_size", "max_overflow", "pool_timeout")
    @classmethod
    def validate_pool_config(cls, v: int) -> int:
        """Validate pool configuration values are positive."""
        if v < 1:
            raise ValueError("Pool configuration values must be at least 1")
        return v

    model_config = {"env_prefix": "DATABASE_", "case_sensitive": False, "extra": "ignore"}


class AuthConfig(BaseSettings):
    """Session token and cookie configuration."""

    jwt_secret: str = Field(..., description="HMAC secret used to sign session tokens (required)")
    jwt_algorithm: str = Field(default="HS256", description="Token signature algorithm")
    token_lifetime_seconds: int = Field(default=3600, description="Session token validity window")
    token_audience: str = Field(default="heroforge:session", description="Audience claim for session tokens")
    cookie_name: str = Field(default="authorization", description="Cookie carrying the session token")
    cookie_secure: bool = Field(default=False, description="Only send the session cookie over HTTPS")

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Reject secrets too short to be meaningful."""
        if len(v) < 16:
            logger.error("JWT secret validation failed - too short", secret_length=len(v), minimum_length=16)
            raise ValueError("JWT secret must be at least 16 characters")
        return v

    @field_validator("token_lifetime_seconds")
    @classmethod
    def validate_lifetime(cls, v: int) -> int:
        """Validate token lifetime is positive."""
        if v < 1:
            raise ValueError("Token lifetime must be at least 1 second")
        return v

    model_config = {"env_prefix": "HEROFORGE_", "case_sensitive": False, "extra": "ignore"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(default="development", description="Logging environment")
    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="console", description="Log format")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate logging environment."""
        valid_environments = ["development", "unit_test", "e2e_test", "production"]
        if v not in valid_environments:
            logger.error("Invalid logging environment", environment=v, valid_environments=valid_environments)
            raise ValueError(f"Environment must be one of {valid_environments}, got '{v}'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}, got '{v}'")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["console", "json"]
        if v not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}, got '{v}'")
        return v

    model_config = {"env_prefix": "LOGGING_", "case_sensitive": False, "extra": "ignore"}

    def to_legacy_dict(self) -> dict:
        """Return the dict shape expected by setup_enhanced_logging."""
        return {
            "environment": self.environment,
            "level": self.level,
            "format": self.format,
        }


class CORSConfig(BaseSettings):
    """Cross-origin resource sharing configuration."""

    allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins permitted to access the API",
    )
    allow_credentials: bool = Field(default=True, description="Whether credentialed requests are accepted")
    allow_methods: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        description="HTTP methods permitted by CORS responses",
    )
    max_age: int = Field(default=600, description="Seconds browsers may cache CORS preflight responses")

    @field_validator("allow_origins", "allow_methods", mode="before")
    @classmethod
    def parse_list(cls, v: Any) -> list[str]:
        """Accept JSON lists or comma separated values from the environment."""
        return _parse_env_list(v)

    model_config = {"env_prefix": "CORS_", "case_sensitive": False, "extra": "ignore"}


class AppConfig(BaseSettings):
    """
    Composite application configuration.

    This is the main configuration class that aggregates all other configs.
    Access via get_config() singleton function.
    """

    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)  # type: ignore[arg-type]
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cors: CORSConfig = Field(default_factory=CORSConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}

    def to_legacy_dict(self) -> dict:
        """
        Convert to the dict format consumed by logging setup and diagnostics.

        Secrets are deliberately left out.
        """
        return {
            "host": self.server.host,
            "port": self.server.port,
            "database_url": self.database.url,
            "token_lifetime_seconds": self.auth.token_lifetime_seconds,
            "logging": self.logging.to_legacy_dict(),
        }
