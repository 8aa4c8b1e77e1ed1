"""
Configuration module for the Quick Reminder bot.
Loads environment variables and provides typed configuration.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    bot_token: Optional[str] = None
    telegram_chat_id: Optional[int] = None  # The single chat the bot serves

    # Notifications
    notification_title: str = "Reminder!"
    notification_sound: bool = True
    default_time_unit: str = "minutes"

    # Reconciliation
    sweep_interval_seconds: float = 60.0
    reminder_history_size: int = 100
    max_reminder_text_length: int = 500

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_file: Optional[str] = "reminders.log"

    environment: str = "development"  # development, staging, production

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def validate_all_required(self) -> None:
        """
        Validate that all settings needed to run the bot are present.

        Raises:
            ValueError: If required fields are missing or invalid
        """
        missing = []
        for field in ("bot_token", "telegram_chat_id"):
            value = getattr(self, field, None)
            if value is None or value == "":
                missing.append(field)
                continue

            # Placeholder values copied from .env.example
            if str(value).lower().startswith("your_"):
                missing.append(field)

        if self.sweep_interval_seconds <= 0:
            missing.append("sweep_interval_seconds")

        if missing:
            raise ValueError(
                f"Missing or invalid required configuration: "
                f"{', '.join(missing)}. "
                f"Please check your .env file."
            )


# Global settings instance
settings = Settings()
