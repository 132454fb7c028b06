"""Application settings using Pydantic Settings."""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: list[str] = Field(default=["http://localhost:5173"])
    public_lead_rate_limit: str = Field(default="20/minute")

    # Supabase Settings (data store, blob storage, auth)
    supabase_url: str = Field(default="")
    supabase_anon_key: str = Field(default="")
    supabase_service_role_key: SecretStr | None = Field(default=None)
    supabase_jwt_secret: SecretStr | None = Field(default=None)

    # Table names
    app_data_table: str = Field(default="app_data")
    public_mirror_table: str = Field(default="public_mirror")
    lead_intake_table: str = Field(default="lead_intake")
    list_page_size: int = Field(default=100, ge=1, le=1000)

    # Blob storage
    storage_bucket: str = Field(default="demo-assets")
    signed_url_ttl_seconds: int = Field(default=3600)

    # Brevo (CRM contacts + transactional email)
    brevo_api_key: SecretStr | None = Field(default=None)
    brevo_list_id: str = Field(default="")
    brevo_timeout_seconds: float = Field(default=5.0)

    # Lead notifications
    notification_email: str = Field(default="notifications@example.com")
    dashboard_url: str = Field(default="http://localhost:5173")

    # Shared secret for database/auth webhooks
    webhook_secret: SecretStr | None = Field(default=None)

    def get_brevo_list_id(self) -> int | None:
        """Parse BREVO_LIST_ID, returning None when unset or not a positive integer."""
        try:
            list_id = int(self.brevo_list_id.strip())
        except (TypeError, ValueError):
            return None
        return list_id if list_id > 0 else None


settings = Settings()
