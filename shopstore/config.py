"""
Configuration module for the ShopStore state layer.

Centralized configuration management using Pydantic settings.
All values can be overridden via environment variables or a .env file.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings for the ShopStore state layer.

    Attributes:
        APP_NAME: Display name for the application
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_JSON: Render logs as JSON instead of console output
        PAGE_SIZE: Number of products per catalog page
        MAX_IMAGE_BYTES: Largest accepted product image attachment
        DEFAULT_RATING: Rating assigned to newly created products
        SUPABASE_URL: Supabase project URL (auth and storage)
        SUPABASE_ANON_KEY: Public anon key used by the client
        PRODUCT_IMAGE_BUCKET: Storage bucket holding product images
        PRODUCT_IMAGE_PREFIX: Path prefix for uploaded product images
    """

    APP_NAME: str = Field(
        default="ShopStore",
        description="Display name for the application",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Render logs as JSON lines",
    )

    # Catalog configuration
    PAGE_SIZE: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Number of products per catalog page",
    )
    MAX_IMAGE_BYTES: int = Field(
        default=5 * 1024 * 1024,
        gt=0,
        description="Maximum product image size in bytes",
    )
    DEFAULT_RATING: float = Field(
        default=4.0,
        ge=0.0,
        le=5.0,
        description="Rating assigned to newly created products",
    )

    # Supabase configuration
    SUPABASE_URL: str = Field(default="", description="Supabase project URL")
    SUPABASE_ANON_KEY: str = Field(default="", description="Supabase anon key")
    PRODUCT_IMAGE_BUCKET: str = Field(
        default="product-images",
        description="Storage bucket for product images",
    )
    PRODUCT_IMAGE_PREFIX: str = Field(
        default="product-images",
        description="Path prefix for uploaded product images",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("SUPABASE_URL")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """
        Validate the Supabase URL when one is configured.

        Args:
            value: The URL to validate

        Returns:
            The URL without trailing slash

        Raises:
            ValueError: If the URL has no http(s) scheme
        """
        if not value:
            return value

        value = value.rstrip("/")

        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError(
                f"SUPABASE_URL must start with http:// or https://, got: {value}"
            )

        return value

    @property
    def supabase_configured(self) -> bool:
        """Check if Supabase credentials are present."""
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)


# Global settings instance
settings = Settings()
