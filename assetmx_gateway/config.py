"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Hosted rate store (Supabase REST); unset = lender sheet defaults
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    load_rates_on_startup: bool = True

    # Pricing
    reference_markup_percent: Decimal = Decimal("2.00")  # Broker comparison margin

    # Lead notifications
    lead_webhook_url: Optional[str] = None
    webhook_max_retries: int = Field(5, ge=1)
    webhook_backoff_base: float = 1.0  # Exponential backoff base in seconds

    # Service
    service_name: str = "assetmx-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    @property
    def rate_store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


settings = Settings()
