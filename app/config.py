"""Configuration settings for Academy API."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_JWT_SECRET_KEY = "dev-secret-key-change-in-production"


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./academy.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", _DEFAULT_JWT_SECRET_KEY)
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))

    # Passwords
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    RESET_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "60"))

    # Email (SendGrid)
    SENDGRID_API_KEY: str | None = os.getenv("SENDGRID_API_KEY")
    SENDGRID_FROM_EMAIL: str = os.getenv("SENDGRID_FROM_EMAIL", "noreply@academy.local")
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Default admin seed
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@academy.local")
    ADMIN_PASSWORD: str | None = os.getenv("ADMIN_PASSWORD")
    ADMIN_NAME: str = os.getenv("ADMIN_NAME", "Super Admin")

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development").lower()
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        warnings = []
        if self.JWT_SECRET_KEY == _DEFAULT_JWT_SECRET_KEY:
            if self.is_production:
                warnings.append("JWT_SECRET_KEY is using the development fallback in production - set a random secret")
            else:
                warnings.append("JWT_SECRET_KEY is not set - using the development fallback")
        if self.is_production and not self.SENDGRID_API_KEY:
            warnings.append("SENDGRID_API_KEY is not set - password reset emails will not be delivered")
        if not self.FRONTEND_URL.startswith(("http://", "https://")):
            warnings.append("FRONTEND_URL must be an http(s) URL")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
