"""
Centralized configuration for the StreamHub API.

Loads all environment variables and provides typed configuration objects.
No hardcoded secrets in production - token secrets must come from environment.
"""

import os
from typing import Optional
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_ACCESS_SECRET = "dev-access-token-secret-change-me-in-production"
DEFAULT_REFRESH_SECRET = "dev-refresh-token-secret-change-me-in-production"


@dataclass
class DatabaseConfig:
    """Entity store connection configuration."""

    database_url: str = field(default_factory=lambda: os.getenv(
        "DATABASE_URL", "sqlite:///./streamhub.db"))
    echo: bool = field(default_factory=lambda: os.getenv(
        "DB_ECHO", "false").lower() == "true")
    auto_create: bool = field(default_factory=lambda: os.getenv(
        "DB_AUTO_CREATE", "true").lower() == "true")

    @property
    def url(self) -> str:
        """
        Return the SQLAlchemy connection URL.

        Normalizes postgres:// to postgresql:// (Heroku-style URLs).
        """
        if self.database_url.startswith("postgres://"):
            return self.database_url.replace("postgres://", "postgresql://", 1)
        return self.database_url

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


@dataclass
class AuthConfig:
    """Access/refresh token configuration."""

    access_token_secret: str = field(default_factory=lambda: os.getenv(
        "ACCESS_TOKEN_SECRET", DEFAULT_ACCESS_SECRET))
    refresh_token_secret: str = field(default_factory=lambda: os.getenv(
        "REFRESH_TOKEN_SECRET", DEFAULT_REFRESH_SECRET))
    access_token_expiry_minutes: int = field(default_factory=lambda: int(
        os.getenv("ACCESS_TOKEN_EXPIRY_MINUTES", "15")))
    refresh_token_expiry_days: int = field(default_factory=lambda: int(
        os.getenv("REFRESH_TOKEN_EXPIRY_DAYS", "10")))
    algorithm: str = field(default_factory=lambda: os.getenv(
        "JWT_ALGORITHM", "HS256"))
    cookie_secure: bool = field(default_factory=lambda: os.getenv(
        "COOKIE_SECURE", "true").lower() == "true")


@dataclass
class StorageConfig:
    """Blob store configuration for video and image binaries."""

    backend: str = field(default_factory=lambda: os.getenv(
        "STORAGE_BACKEND", "local"))
    media_dir: str = field(default_factory=lambda: os.getenv(
        "MEDIA_DIR", "./media"))
    media_base_url: str = field(default_factory=lambda: os.getenv(
        "MEDIA_BASE_URL", "http://localhost:8000/media"))
    blob_store_url: Optional[str] = field(
        default_factory=lambda: os.getenv("BLOB_STORE_URL"))
    blob_store_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("BLOB_STORE_API_KEY"))
    timeout: int = field(default_factory=lambda: int(
        os.getenv("BLOB_STORE_TIMEOUT", "60")))


@dataclass
class PaginationConfig:
    """Defaults and limits for paginated listings."""

    default_page_size: int = field(default_factory=lambda: int(
        os.getenv("DEFAULT_PAGE_SIZE", "10")))
    max_page_size: int = field(default_factory=lambda: int(
        os.getenv("MAX_PAGE_SIZE", "100")))


@dataclass
class ServerConfig:
    """Server runtime configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "SERVER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(
        os.getenv("SERVER_PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv(
        "DEBUG", "false").lower() == "true")
    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    cors_origins: list[str] = field(
        default_factory=lambda: os.getenv("CORS_ORIGINS", "*").split(",")
    )
    api_prefix: str = field(
        default_factory=lambda: os.getenv("API_PREFIX", "/api/v1"))


@dataclass
class Config:
    """
    Root configuration object aggregating all config sections.

    Usage:
        config = Config()
        db_url = config.database.url
        ttl = config.auth.access_token_expiry_minutes
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of warnings/errors.

        Returns:
            List of validation messages (empty if all valid)
        """
        warnings = []

        if not self.server.debug and (
            self.auth.access_token_secret == DEFAULT_ACCESS_SECRET
            or self.auth.refresh_token_secret == DEFAULT_REFRESH_SECRET
        ):
            warnings.append("Default token secrets in use in production mode")

        if self.auth.access_token_secret == self.auth.refresh_token_secret:
            warnings.append("Access and refresh token secrets are identical")

        if self.storage.backend == "http" and not self.storage.blob_store_url:
            warnings.append("STORAGE_BACKEND=http but BLOB_STORE_URL is not set")

        if self.database.is_sqlite and not self.server.debug:
            warnings.append("SQLite entity store in production mode")

        return warnings


# Global config instance - import and use this
config = Config()
