"""Pydantic models for CharterBox configuration.

These models define the structure of config.toml and secrets.env files.
"""

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 2
    debug: bool = False
    enforce_https: bool = False
    # CORS configuration - empty list means same-origin only
    cors_origins: list[str] = []


class DatabaseConfig(BaseModel):
    """MongoDB database configuration."""

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "charterbox"
    # Connection pool settings
    min_pool_size: int = 10
    max_pool_size: int = 100


class ETLConfig(BaseModel):
    """Booking import and reconciliation settings."""

    lead_id_prefix: str = "DO-"
    # Generated ids start above this number (DO-101 is the first)
    lead_id_floor: int = Field(default=100, ge=0)
    lead_id_width: int = Field(default=3, ge=1)
    max_rows: int = Field(default=5000, ge=1)
    max_upload_mb: int = Field(default=10, ge=1)
    online_agent_id: str = "DO-ONLINE"
    default_yacht_id: str = "DO-yacht-lotus"

    @property
    def max_upload_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_mb * 1024 * 1024


class WebhookConfig(BaseModel):
    """Inbound webhook settings."""

    woocommerce_enabled: bool = True
    wordpress_enabled: bool = True
    rate_limit: str = "60/minute"


class CharterboxConfig(BaseModel):
    """Main CharterBox configuration loaded from config.toml."""

    app_name: str = "CharterBox"
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    etl: ETLConfig = Field(default_factory=ETLConfig)
    webhooks: WebhookConfig = Field(default_factory=WebhookConfig)


class SecretsConfig(BaseModel):
    """Secrets loaded from secrets.env file.

    These are sensitive values that should not be stored in config.toml.
    """

    woocommerce_webhook_secret: str | None = None
