"""CharterBox configuration module.

TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/charterbox/config.toml (user config)
4. /opt/charterbox/config.toml (production install)
5. /etc/charterbox/config.toml (system config)

Secrets are loaded from secrets.env files in the same directories.
"""

from charterbox.config.schema import (
    CharterboxConfig,
    DatabaseConfig,
    ETLConfig,
    SecretsConfig,
    ServerConfig,
    WebhookConfig,
)
from charterbox.config.settings import Settings, get_settings, reset_settings, settings

__all__ = [
    "CharterboxConfig",
    "DatabaseConfig",
    "ETLConfig",
    "SecretsConfig",
    "ServerConfig",
    "WebhookConfig",
    "Settings",
    "get_settings",
    "reset_settings",
    "settings",
]
