"""Configuration loader for CharterBox.

Loads configuration from TOML files and secrets from .env files.
Environment variables can override any configuration value.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from charterbox.config.schema import CharterboxConfig, SecretsConfig

logger = logging.getLogger(__name__)

APP_DIR_NAME = "charterbox"

# Env var -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    # Server
    "SERVER_HOST": ("server", "host"),
    "SERVER_PORT": ("server", "port"),
    "SERVER_WORKERS": ("server", "workers"),
    "SERVER_DEBUG": ("server", "debug"),
    "DEBUG": ("server", "debug"),  # Shorthand
    "HOST": ("server", "host"),  # Shorthand
    "PORT": ("server", "port"),  # Shorthand
    # Database
    "DATABASE_MONGODB_URL": ("database", "mongodb_url"),
    "DATABASE_MONGODB_DATABASE": ("database", "mongodb_database"),
    "MONGODB_URL": ("database", "mongodb_url"),  # Shorthand
    "MONGODB_DATABASE": ("database", "mongodb_database"),  # Shorthand
    # ETL
    "ETL_LEAD_ID_PREFIX": ("etl", "lead_id_prefix"),
    "ETL_LEAD_ID_FLOOR": ("etl", "lead_id_floor"),
    "ETL_LEAD_ID_WIDTH": ("etl", "lead_id_width"),
    "ETL_MAX_ROWS": ("etl", "max_rows"),
    "ETL_MAX_UPLOAD_MB": ("etl", "max_upload_mb"),
    "ETL_ONLINE_AGENT_ID": ("etl", "online_agent_id"),
    "ETL_DEFAULT_YACHT_ID": ("etl", "default_yacht_id"),
    # Webhooks
    "WEBHOOKS_WOOCOMMERCE_ENABLED": ("webhooks", "woocommerce_enabled"),
    "WEBHOOKS_WORDPRESS_ENABLED": ("webhooks", "wordpress_enabled"),
    "WEBHOOKS_RATE_LIMIT": ("webhooks", "rate_limit"),
}

_INT_KEYS = {"port", "workers", "lead_id_floor", "lead_id_width", "max_rows", "max_upload_mb"}
_BOOL_KEYS = {"debug", "enforce_https", "woocommerce_enabled", "wordpress_enabled"}

# Secrets file / env key -> SecretsConfig field
SECRET_KEYS: dict[str, str] = {
    "CHARTERBOX_WOOCOMMERCE_SECRET": "woocommerce_webhook_secret",
    "WOOCOMMERCE_WEBHOOK_SECRET": "woocommerce_webhook_secret",
}


def _search_paths(filename: str) -> list[Path]:
    """Paths searched for a config file, in priority order (first found wins)."""
    return [
        Path.cwd() / filename,
        Path.home() / ".config" / APP_DIR_NAME / filename,
        Path("/opt") / APP_DIR_NAME / filename,
        Path("/etc") / APP_DIR_NAME / filename,
    ]


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for config.toml."""
    return _search_paths("config.toml")


def get_secrets_search_paths() -> list[Path]:
    """Get the list of paths to search for secrets.env."""
    return _search_paths("secrets.env")


def _first_existing(paths: list[Path]) -> Path | None:
    for path in paths:
        if path.exists() and path.is_file():
            logger.debug("Found file: %s", path)
            return path
    return None


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    return _first_existing(get_config_search_paths())


def find_secrets_file() -> Path | None:
    """Find the first existing secrets file from search paths."""
    return _first_existing(get_secrets_search_paths())


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a simple .env file into a dictionary.

    Supports KEY=value, KEY="quoted value", # comments and empty lines.
    """
    env_vars: dict[str, str] = {}

    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            env_vars[key] = value

    return env_vars


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = "CHARTERBOX") -> None:
    """Apply environment variable overrides to a configuration dictionary in place.

    CHARTERBOX_SERVER_PORT -> config_dict["server"]["port"],
    CHARTERBOX_ETL_LEAD_ID_PREFIX -> config_dict["etl"]["lead_id_prefix"], etc.
    """
    for suffix, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(f"{prefix}_{suffix}")
        if value is None:
            continue

        section_dict = config_dict.setdefault(section, {})
        if key in _INT_KEYS:
            section_dict[key] = int(value)
        elif key in _BOOL_KEYS:
            section_dict[key] = value.lower() in ("true", "1", "yes")
        else:
            section_dict[key] = value


def load_secrets(secrets_file: Path | None = None) -> SecretsConfig:
    """Load secrets from an optional secrets.env file and the environment.

    Environment variables take precedence over file values.
    """
    secrets_dict: dict[str, str] = {}

    if secrets_file is None:
        secrets_file = find_secrets_file()

    if secrets_file and secrets_file.exists():
        logger.info("Loading secrets from: %s", secrets_file)
        file_secrets = parse_env_file(secrets_file)
        for file_key, config_key in SECRET_KEYS.items():
            if file_secrets.get(file_key):
                secrets_dict[config_key] = file_secrets[file_key]

    for env_var, config_key in SECRET_KEYS.items():
        value = os.environ.get(env_var)
        if value:
            secrets_dict[config_key] = value

    return SecretsConfig(**secrets_dict)


def load_config(config_file: Path | None = None) -> CharterboxConfig:
    """Load configuration from a TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        CharterboxConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info("Loading config from: %s", config_file)
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    apply_env_overrides(config_dict)

    return CharterboxConfig(**config_dict)
