"""Configuration settings loaded from environment variables."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    redis_lock_ttl_seconds: int = 5

    # Business hours (wall clock in business_timezone)
    business_timezone: str = "Asia/Ho_Chi_Minh"
    open_hour: int = 6
    close_hour: int = 23

    # Pricing
    default_price_per_hour: int = 100000
    price_rounding_unit: int = 1000
    currency: str = "VND"

    # Booking policy
    pending_payment_timeout_minutes: int = 30
    cancellation_cutoff_minutes: int = 60

    # Background Jobs
    expiration_check_interval_seconds: int = 60

    # Admin account IDs (comma-separated UUIDs)
    admin_account_ids: str = ""

    # Logging
    log_level: str = "INFO"

    # Application
    app_name: str = "field-booking"
    environment: str = "development"

    # HTTP server
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @field_validator("business_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject unknown IANA zone names at startup."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone: {v}")
        return v

    @field_validator("open_hour", "close_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Hours are wall-clock hours of a single day."""
        if not 0 <= v <= 23:
            raise ValueError("hour must be between 0 and 23")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "Settings":
        """Ensure the business opens before it closes."""
        if self.open_hour > self.close_hour:
            raise ValueError("open_hour must not be after close_hour")
        return self

    @property
    def timezone(self) -> ZoneInfo:
        """Business timezone used for every wall-clock conversion."""
        return ZoneInfo(self.business_timezone)

    @property
    def admin_ids(self) -> list[str]:
        """Parse admin account IDs from comma-separated string."""
        if not self.admin_account_ids:
            return []
        return [
            uid.strip().lower()
            for uid in self.admin_account_ids.split(",")
            if uid.strip()
        ]


def load_settings() -> Settings:
    """Load and validate settings from environment."""
    return Settings()  # type: ignore[call-arg]
