"""Global settings instance for CharterBox.

Combines config.toml, secrets.env and environment overrides behind a flat
interface. The instance is created lazily on first access.
"""

import logging

from charterbox.config.loader import load_config, load_secrets
from charterbox.config.schema import CharterboxConfig, ETLConfig, SecretsConfig

logger = logging.getLogger(__name__)


class Settings:
    """Unified settings object combining config and secrets."""

    def __init__(
        self,
        config: CharterboxConfig | None = None,
        secrets: SecretsConfig | None = None,
    ):
        self._config = config or load_config()
        self._secrets = secrets or load_secrets()

        if not self._secrets.woocommerce_webhook_secret:
            logger.warning(
                "No WooCommerce webhook secret configured; webhook signatures "
                "will not be verified. Set CHARTERBOX_WOOCOMMERCE_SECRET for production use."
            )

    @property
    def config(self) -> CharterboxConfig:
        """Get the full configuration object."""
        return self._config

    @property
    def secrets(self) -> SecretsConfig:
        """Get the secrets configuration object."""
        return self._secrets

    # Application
    @property
    def app_name(self) -> str:
        return self._config.app_name

    @property
    def debug(self) -> bool:
        return self._config.server.debug

    # Server
    @property
    def host(self) -> str:
        return self._config.server.host

    @property
    def port(self) -> int:
        return self._config.server.port

    @property
    def workers(self) -> int:
        return self._config.server.workers

    @property
    def enforce_https(self) -> bool:
        return self._config.server.enforce_https

    @property
    def cors_origins(self) -> list[str]:
        return self._config.server.cors_origins

    # Database
    @property
    def mongodb_url(self) -> str:
        return self._config.database.mongodb_url

    @property
    def mongodb_database(self) -> str:
        return self._config.database.mongodb_database

    @property
    def min_pool_size(self) -> int:
        return self._config.database.min_pool_size

    @property
    def max_pool_size(self) -> int:
        return self._config.database.max_pool_size

    # ETL
    @property
    def etl(self) -> ETLConfig:
        return self._config.etl

    @property
    def max_upload_size_bytes(self) -> int:
        return self._config.etl.max_upload_bytes

    # Webhooks
    @property
    def woocommerce_enabled(self) -> bool:
        return self._config.webhooks.woocommerce_enabled

    @property
    def wordpress_enabled(self) -> bool:
        return self._config.webhooks.wordpress_enabled

    @property
    def webhook_rate_limit(self) -> str:
        return self._config.webhooks.rate_limit

    @property
    def woocommerce_webhook_secret(self) -> str | None:
        return self._secrets.woocommerce_webhook_secret


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance, loading it on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance.

    This is primarily useful for testing to reload configuration.
    """
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy object that lazily loads settings on first access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()
