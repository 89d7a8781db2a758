"""
Environment configuration for the front-desk service.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from datetime import time
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application configuration
    APP_NAME: str = Field(default="Front Desk", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="v1", alias="PROJECT_VERSION")
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = Field(default=["*"], alias="BACKEND_CORS_ORIGINS")

    # Hotel
    HOTEL_NAME: str = "Hotel"
    CURRENCY: str = "INR"
    TOTAL_ROOMS: int = 50
    STANDARD_CHECKOUT_TIME: str = "12:00"

    # Database configuration
    DATABASE_URL: Optional[str] = None
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_POOL_OVERFLOW: int = 10

    # Checkout grace period and late fees
    GRACE_PERIOD_ENABLED: bool = True
    GRACE_PERIOD_MINUTES: int = 60
    LATE_FEE_PER_HOUR: Decimal = Decimal("100")
    MAX_LATE_FEE: Decimal = Decimal("500")
    APPROACHING_CHECKOUT_HOURS: int = 2

    # Reports
    HIGH_BALANCE_THRESHOLD: Decimal = Decimal("5000")
    STAFF_LOG_LIMIT: int = 100

    # Email configuration
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = Field(default=None, alias="SMTP_USERNAME")
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TLS: bool = True
    SMTP_TIMEOUT: int = 30
    EMAIL_FROM_NAME: str = "Front Desk"
    EMAIL_FROM_ADDRESS: Optional[str] = Field(default=None, alias="FROM_EMAIL")

    # WhatsApp Cloud API
    WHATSAPP_API_URL: str = "https://graph.facebook.com/v18.0"
    WHATSAPP_PHONE_NUMBER_ID: Optional[str] = None
    WHATSAPP_ACCESS_TOKEN: Optional[str] = None
    WHATSAPP_TIMEOUT: int = 10

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "colored"
    LOG_DIR: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        populate_by_name = True
        extra = "ignore"  # This will ignore extra fields from .env

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS_ORIGINS from string to list"""
        if isinstance(v, str):
            # Handle JSON string format from .env
            if v.startswith('[') and v.endswith(']'):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator('STANDARD_CHECKOUT_TIME')
    @classmethod
    def validate_checkout_time(cls, v: str) -> str:
        """Standard checkout time must be HH:MM"""
        try:
            hours, minutes = (int(part) for part in v.split(":"))
            time(hours, minutes)
        except (TypeError, ValueError) as e:
            raise ValueError(f"STANDARD_CHECKOUT_TIME must be HH:MM, got {v!r}") from e
        return v

    def get_database_url(self) -> str:
        """Use the provided URL or fall back to a local SQLite file"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return "sqlite:///./frontdesk.db"

    def checkout_time(self) -> time:
        """Standard checkout time as a time object"""
        hours, minutes = (int(part) for part in self.STANDARD_CHECKOUT_TIME.split(":"))
        return time(hours, minutes)

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
