"""Configuration management using pydantic-settings."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Database Configuration
    database_path: str = Field(default="./data/chatdesk.db", description="DuckDB database file")

    # Conversation Configuration
    conversations_per_page: int = Field(default=25, description="Page size for conversation listings")
    assignment_max_retries: int = Field(default=5, description="Retries for a conflicting round-robin rotation")

    # Notification Configuration
    smtp_address: Optional[str] = Field(default=None, description="SMTP host, mail delivery disabled when unset")
    smtp_port: int = Field(default=25, description="SMTP port")
    smtp_username: Optional[str] = Field(default=None, description="SMTP login, STARTTLS is used when set with a password")
    smtp_password: Optional[str] = Field(default=None, description="SMTP password")
    mailer_sender: str = Field(default="notifications@chatdesk.local", description="From address of notifications")
    notification_workers: int = Field(default=2, description="Threads delivering notifications")

    # Event Stream Configuration
    event_stream_queue_size: int = Field(default=100, description="Buffered frames per event stream subscriber")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[str] = Field(default="./logs/app.log", description="Log file path")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="logging.Formatter format string"
    )
    log_date_format: str = Field(default="%Y-%m-%d %H:%M:%S", description="Timestamp format of log records")

    def mail_enabled(self) -> bool:
        """Whether outbound mail delivery is configured."""
        return bool(self.smtp_address)


# Global settings instance
settings = Settings()
