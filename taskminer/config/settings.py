"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
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
    log_file: str = "logs/taskminer.log"

    # Request handling: every ledger operation is one short transaction
    operation_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Timeout for a single ledger operation (seconds)"
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for operations failing with a transient error"
    )
    retry_delay_base: float = Field(
        default=0.2,
        ge=0,
        description="Base delay for exponential retry backoff (seconds)"
    )

    # Task quotas refresh at 00:00 British time
    task_timezone: str = "Europe/London"

    # Deposits
    deposit_wallet_address: str = Field(
        default="TXyz1234567890AbCdEfGhIjKlMnOpQrS",
        description="Company USDT (TRC20) wallet that receives deposits"
    )

    # Invite codes
    invite_code_length: int = Field(
        default=8, ge=6, le=20, description="Length of generated invite codes"
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
        if self.environment == 'production':
            # DEBUG must be False in production
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )

            if self.database_url.startswith('sqlite'):
                logger.warning(
                    'DATABASE_URL points to SQLite in production. '
                    'Row locks are not enforced by SQLite.'
                )

            if self.database_echo:
                logger.warning(
                    'DATABASE_ECHO is enabled in production. '
                    'SQL statements will be written to the log.'
                )

        return self

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(
            ('postgresql://', 'postgresql+asyncpg://', 'sqlite+aiosqlite://')
        ):
            raise ValueError(
                'DATABASE_URL must start with postgresql://, '
                'postgresql+asyncpg:// or sqlite+aiosqlite://'
            )
        if v.startswith('postgresql://'):
            # The async engine needs an async driver
            v = v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return v

    @field_validator('task_timezone')
    @classmethod
    def validate_task_timezone(cls, v: str) -> str:
        """Validate task timezone name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f'Unknown timezone: {v}') from exc
        return v

    @property
    def task_zone(self) -> ZoneInfo:
        """Timezone used to decide the task day."""
        return ZoneInfo(self.task_timezone)


# Global settings instance
settings = Settings()
