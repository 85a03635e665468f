"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/agencyops.log"

    # Affiliate program
    referral_hold_days: int = Field(
        default=14,
        ge=0,
        description="Days a commission stays pending before it is ready to pay",
    )
    promo_trial_extension_days: int = Field(
        default=14,
        ge=0,
        description="Trial days granted to organizations registered by promo code",
    )

    # Automation
    webhook_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for automation webhook POST requests",
    )

    # Payroll
    content_payroll_policy: Literal["direct_assignment", "team_share"] = Field(
        default="direct_assignment",
        description=(
            "How content publications are attributed: directly to the "
            "assignee, or split evenly across the project's SMM members"
        ),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production' and self.debug:
            raise ValueError(
                'DEBUG must be False in production environment. '
                'Set DEBUG=false in your .env file.'
            )
        return self

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql://', 'postgresql+asyncpg://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql:// or postgresql+asyncpg://'
            )
        return v

    @property
    def async_database_url(self) -> str:
        """Database URL with the asyncpg driver."""
        if self.database_url.startswith('postgresql://'):
            return self.database_url.replace(
                'postgresql://', 'postgresql+asyncpg://', 1
            )
        return self.database_url


# Global settings instance
settings = Settings()
