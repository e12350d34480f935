"""
Configuration management for the FastAPI application.
Uses Pydantic Settings for environment variable management.
"""
import re
from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List, Optional


_ENV_JUNK = re.compile(r"[\r\n\t\f\v]")

# Used only when ENVIRONMENT=development and no credentials are configured
DEV_ADMIN_USERNAME = "admin"
DEV_ADMIN_PASSWORD = "admin"
DEV_JWT_SECRET_KEY = "dev-only-secret-key-do-not-use-in-production"


def clean_env_value(value: Optional[str]) -> str:
    """
    Strip hidden characters (CR, LF, tabs, form feeds) and surrounding whitespace
    from an environment value. Values copied from Windows editors often carry a
    trailing CR that silently breaks credential comparisons.

    Args:
        value: Raw environment value (may be None)

    Returns:
        Cleaned string ('' for None/empty)
    """
    if not value:
        return ""
    return _ENV_JUNK.sub("", value).strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Transfer Site API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Backend API for the transfer booking website and its admin panel"

    # development | production
    ENVIRONMENT: str = "production"

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Public site URL used in feeds, sitemaps and IndexNow payloads
    BASE_URL: str = "https://royaltransfer.org"
    # Currency code for route prices in the Google Merchant feed
    FEED_CURRENCY: str = "EUR"

    # Database Configuration
    DATABASE_URL: str = ""
    # Create tables from models on startup (SQLite/dev). Use Alembic in production.
    AUTO_CREATE_TABLES: bool = False

    # Admin credentials. ADMIN_PASSWORD_HASH is a bcrypt hash
    # (generate with generate_password_hash.py)
    ADMIN_USERNAME: str = ""
    ADMIN_PASSWORD_HASH: str = ""

    # JWT Configuration
    JWT_SECRET_KEY: str = ""
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30

    # IndexNow key for search engine notifications
    INDEXNOW_KEY: str = ""

    # Cloudinary Configuration (remote image host for uploads)
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""

    # Local upload storage root (files are served from here by the web server)
    UPLOAD_ROOT: str = "public"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    @field_validator("*", mode="before")
    @classmethod
    def _clean_strings(cls, v):
        if isinstance(v, str):
            return clean_env_value(v)
        return v

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def admin_username(self) -> str:
        if self.ADMIN_USERNAME:
            return self.ADMIN_USERNAME
        return DEV_ADMIN_USERNAME if self.is_development else ""

    @property
    def jwt_secret_key(self) -> str:
        if self.JWT_SECRET_KEY:
            return self.JWT_SECRET_KEY
        return DEV_JWT_SECRET_KEY if self.is_development else ""

    def validate_security(self) -> None:
        """
        Fail fast when admin credentials or the token signing secret are missing.
        Development builds fall back to the DEV_* values instead.

        Raises:
            ValueError: If required security settings are absent outside development
        """
        if self.is_development:
            return

        missing = [
            name for name in ("ADMIN_USERNAME", "ADMIN_PASSWORD_HASH", "JWT_SECRET_KEY")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"Missing required security settings: {', '.join(missing)}. "
                f"Set them in the environment or run with ENVIRONMENT=development."
            )


# Global settings instance
settings = Settings()
