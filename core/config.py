"""
Application settings loaded from environment variables / .env file.

Usage:
    from core.config import settings
    settings.database_url
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Almacen ERP API"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./almacen.db"
    database_echo: bool = False

    # CORS (comma separated)
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Billing
    base_company_id: int = 1
    expiring_days_default: int = 7

    # Base company seed (created on first run)
    base_company_legal_name: str = "Almacen Central S.A."
    base_company_tax_id: str = "30-00000000-0"
    base_company_email: str = "admin@almacen.local"
    base_company_phone: str = "+54 11 0000-0000"
    base_company_country_code: str = "AR"

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
