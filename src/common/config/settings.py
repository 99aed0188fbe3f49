# File: common/config/settings.py

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Calculate base directory for consistent file paths
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
ENV_PATH = BASE_DIR / ".env"


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"  # "production" or "development"

    BASE_DIR: Path = Field(default=BASE_DIR, description="Base directory of the project")

    # Security keys
    JWT_SECRET_KEY: str = Field(..., description="Secret used to sign admin access tokens")
    JWT_ALGORITHM: str = Field("HS256", description="JWT signing algorithm")
    BCRYPT_ROUNDS: int = Field(12, ge=4, le=31, description="bcrypt cost factor for passwords and OTP codes")

    # Token & OTP lifetimes
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, description="Access token expiry in minutes")
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(7, description="Refresh token expiry in days")
    OTP_EXPIRE_MINUTES: int = Field(5, description="OTP session expiry in minutes")
    OTP_MAX_ATTEMPTS: int = Field(5, description="Maximum OTP verification attempts per session")
    MAX_ADMIN_REFRESH_TOKENS: int = Field(5, description="Refresh tokens kept per admin before a reset")

    # MongoDB
    MONGO_URI: str = Field("mongodb://localhost:27017", description="MongoDB connection URI")
    MONGO_DB: str = Field("qv_db", description="MongoDB database name")
    MONGO_TIMEOUT: int = Field(5000, description="MongoDB connection timeout in milliseconds")
    MONGO_USE_TRANSACTIONS: bool = Field(True, description="Wrap atomic steps in Mongo transactions (needs a replica set)")

    # Redis
    REDIS_HOST: str = Field("localhost", description="Redis host")
    REDIS_PORT: int = Field(6379, description="Redis port")
    REDIS_DB: int = Field(0, description="Redis database number")
    REDIS_PASSWORD: Optional[str] = Field(None, description="Redis password")
    CATEGORIES_CACHE_TTL: int = Field(3600, description="TTL of the cached categories dropdown in seconds")

    # Email
    SMTP_HOST: Optional[str] = Field(None, description="SMTP server host")
    SMTP_PORT: int = Field(587, description="SMTP server port")
    SMTP_USER: Optional[str] = Field(None, description="SMTP username")
    SMTP_PASSWORD: Optional[str] = Field(None, description="SMTP password")
    SMTP_USE_TLS: bool = Field(True, description="Use STARTTLS instead of implicit SSL")
    EMAIL_FROM: Optional[str] = Field(None, description="Sender address, defaults to SMTP_USER")
    MOCK_EMAIL: bool = Field(True, description="Log emails instead of sending them")

    # Sentry
    SENTRY_DSN: Optional[str] = Field(None, description="Sentry DSN, empty disables reporting")
    SENTRY_TRACES_SAMPLE_RATE: float = Field(0.0, description="Sentry performance sampling rate")
    SENTRY_SEND_PII: bool = Field(False, description="Send default PII to Sentry")

    # HTTP
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:3000"], description="Allowed CORS origins")

    # Logging
    LOG_TO_FILE: bool = Field(True, description="Write logs to the daily file under logs/")

    # Initial super admin
    SUPER_ADMIN_EMAIL: Optional[str] = Field(None, description="Email of the bootstrap super admin")
    SUPER_ADMIN_PASSWORD: Optional[str] = Field(None, description="Password of the bootstrap super admin")
    SUPER_ADMIN_FIRST_NAME: str = Field("Super", description="First name of the bootstrap super admin")
    SUPER_ADMIN_LAST_NAME: str = Field("Admin", description="Last name of the bootstrap super admin")
    SUPER_ADMIN_PHONE: Optional[str] = Field(None, description="Phone of the bootstrap super admin")
    SUPER_ADMIN_COUNTRY: str = Field("Unknown", description="Country of the bootstrap super admin")
    SUPER_ADMIN_CITY: str = Field("Unknown", description="City of the bootstrap super admin")

    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


# Singleton settings instance
settings = Settings()
