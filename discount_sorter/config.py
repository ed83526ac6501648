"""
Configuration management.
Environment / .env based config, built once at startup and passed down.
"""

from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .shopify.client import DEFAULT_API_VERSION


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Shopify connection
    shop: str = ""  # e.g., "mystore.myshopify.com"
    admin_token: str = ""  # Admin API token (shpat_...)
    api_version: str = DEFAULT_API_VERSION

    # Access control
    shared_secret: str = Field(
        default="",
        validation_alias=AliasChoices("shared_secret", "wb_secret"),
    )
    secret_header: str = "X-WB-Secret"
    allowed_origins: str = ""  # comma separated, empty allows any origin
    reject_disallowed_origins: bool = False

    # Pipeline
    products_page_size: int = Field(default=50, ge=1, le=250)
    variants_page_size: int = Field(default=15, ge=1, le=250)
    position_base: int = Field(default=0, ge=0, le=1)

    # Logging
    log_level: str = "INFO"

    @property
    def allowed_origin_list(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def is_origin_allowed(self, origin: str) -> bool:
        """Check an Origin header against the allow-list (empty list allows all)."""
        origins = self.allowed_origin_list
        return not origins or origin in origins

    def missing_connection_settings(self) -> List[str]:
        """Names of required Shopify settings that are not set."""
        missing = []
        if not self.shop.strip():
            missing.append("SHOP")
        if not self.admin_token.strip():
            missing.append("ADMIN_TOKEN")
        return missing
