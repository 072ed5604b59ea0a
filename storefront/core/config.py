"""Storefront Service Configuration"""

from typing import Literal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Atomic Storefront"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Remote storefront API
    api_base_url: str = "http://localhost:3000"
    api_timeout: float = 10.0

    # Local persistence
    store_backend: Literal["file", "memory"] = "file"
    store_path: str = ".storefront"

    # Pricing
    currency: str = "MKD"
    delivery_fee: float = 150
    tax_rate: float = 0.18  # 18% VAT

    # Checkout
    default_city: str = "Skopje"
    payment_delay_seconds: float = 3.0
    strict_expiry_validation: bool = False
    session_max_age_hours: int = 24


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
