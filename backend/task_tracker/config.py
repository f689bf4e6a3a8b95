# backend/task_tracker/config.py
from typing import List, Optional
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./task_tracker.db"  # Default if not in .env

    DEBUG: bool = False

    # Logs
    LOG_PATH: Path = Path("logs")

    # Auth
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12

    # Mail transport
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = False  # Implicit TLS (port 465)
    SMTP_START_TLS: bool = True
    SMTP_FROM: Optional[str] = None
    SMTP_TIMEOUT: float = 30.0

    # Notifications
    NOTIFICATION_FALLBACK_EMAIL: str = "client@example.com"
    REMINDER_TIMEZONE: str = "UTC"
    NOTIFICATION_CLAIM_TTL_SECONDS: int = 300
    # Upper bound on one whole send; must stay well inside the claim TTL
    NOTIFICATION_SEND_TIMEOUT_SECONDS: float = 120.0

    # Periodic sweep
    CRON_SECRET: Optional[str] = None
    ENABLE_SCHEDULER: bool = False
    SCHEDULER_INTERVAL_MINUTES: int = 60

    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @field_validator("REMINDER_TIMEZONE")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone: {value!r}")
        return value

    @model_validator(mode="after")
    def check_notification_timeouts(self) -> "Settings":
        if self.NOTIFICATION_SEND_TIMEOUT_SECONDS < self.SMTP_TIMEOUT:
            raise ValueError("NOTIFICATION_SEND_TIMEOUT_SECONDS must be at least SMTP_TIMEOUT")
        if self.NOTIFICATION_CLAIM_TTL_SECONDS < 2 * self.NOTIFICATION_SEND_TIMEOUT_SECONDS:
            raise ValueError(
                "NOTIFICATION_CLAIM_TTL_SECONDS must be at least twice NOTIFICATION_SEND_TIMEOUT_SECONDS"
            )
        return self

    def model_post_init(self, __context) -> None:
        """Post initialization hook to normalise paths and sender address"""
        if isinstance(self.LOG_PATH, str):
            self.LOG_PATH = Path(self.LOG_PATH)

        if not self.SMTP_FROM:
            self.SMTP_FROM = self.SMTP_USER

        self.create_log_dir()

    def create_log_dir(self) -> None:
        """Create the log directory if it doesn't exist"""
        self.LOG_PATH.mkdir(parents=True, exist_ok=True)

settings = Settings()
