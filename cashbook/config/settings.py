"""
Configuration Management for Cashbook

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here so that every external dependency is
visible in one place and required values are validated at startup.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _check_endpoint(url: str) -> str:
    url = url.strip()
    if not url.startswith(("https://", "http://")):
        raise ValueError(
            "Platform URL must start with https:// "
            "(e.g. https://YOUR_PROJECT.supabase.co)"
        )
    return url.rstrip("/")


class SupabaseSettings(BaseSettings):
    """Hosted data platform configuration used by the UI."""
    
    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    url: str = Field(
        ...,
        description="Project URL of the hosted data platform"
    )
    anon_key: str = Field(
        ...,
        min_length=20,
        description="Public (anon) client key"
    )
    
    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _check_endpoint(v)


class CloudinarySettings(BaseSettings):
    """Cloudinary object storage configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="CLOUDINARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    cloud_name: str = Field(
        ...,
        min_length=1,
        description="Cloudinary cloud name"
    )
    api_key: str = Field(
        ...,
        min_length=1,
        description="Cloudinary API key"
    )
    api_secret: str = Field(
        ...,
        min_length=1,
        description="Cloudinary API secret"
    )


class RelaySettings(BaseSettings):
    """
    Upload relay configuration.
    
    The relay needs a storage endpoint and a privileged credential.
    Missing or malformed values make construction fail, which the
    relay entry point turns into a non-zero exit.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    storage_backend: Literal["supabase", "cloudinary"] = Field(
        default="supabase",
        description="Object storage the relay writes to"
    )
    supabase_url: Optional[str] = Field(
        default=None,
        description="Storage endpoint URL"
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Privileged storage credential (service role key)"
    )
    receipts_bucket: str = Field(
        default="receipts",
        min_length=1,
        description="Bucket receipts are stored in"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Interface to listen on"
    )
    port: int = Field(
        default=3001,
        ge=1,
        le=65535,
        description="Port to listen on"
    )
    
    @model_validator(mode="after")
    def require_storage_credentials(self) -> "RelaySettings":
        """Supabase storage needs both the endpoint and the service role key."""
        if self.storage_backend != "supabase":
            return self
        if not self.supabase_url or not self.supabase_service_role_key:
            raise ValueError(
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY in environment"
            )
        self.supabase_url = _check_endpoint(self.supabase_url)
        return self


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (console renderer otherwise)"
    )
    
    # Receipts
    upload_proxy_url: str = Field(
        default="",
        description="Base URL of the upload relay; empty uploads directly to storage"
    )
    receipts_bucket: str = Field(
        default="receipts",
        min_length=1,
        description="Bucket receipts are stored in"
    )
    max_upload_size_mb: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum receipt size accepted by the UI in MB"
    )
    
    # Display
    currency_symbol: str = Field(
        default="₱",
        description="Currency symbol shown next to amounts"
    )
    
    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level
    
    @property
    def max_upload_size_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Sub-settings are loaded lazily so that the UI does not need relay
    # credentials and vice versa.
    
    @property
    def supabase(self) -> SupabaseSettings:
        return SupabaseSettings()
    
    @property
    def cloudinary(self) -> CloudinarySettings:
        return CloudinarySettings()
    
    @property
    def relay(self) -> RelaySettings:
        return RelaySettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid} plus
    {setting_name_error: message} for each invalid group.
    Useful for startup checks.
    """
    results: dict[str, object] = {}
    settings = get_settings()
    
    for name in ("supabase", "relay", "cloudinary", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
