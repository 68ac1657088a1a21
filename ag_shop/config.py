"""Configuration management using Pydantic Settings"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "mysql+pymysql://root:@localhost:3306/ag_shop"
    auto_create_schema: bool = False

    # Service
    service_name: str = "ag-shop"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # Purchases
    default_monthly_rate_percent: float = 3.0
    months_decimal_places: int = 2

    # Change notifications (disabled when no URL is configured)
    change_webhook_url: Optional[str] = None
    http_timeout_seconds: float = 5.0
    webhook_max_retries: int = 5
    webhook_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()
