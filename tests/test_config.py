"""Tests for the CharterBox configuration system."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from charterbox.config.loader import (
    apply_env_overrides,
    find_config_file,
    find_secrets_file,
    get_config_search_paths,
    get_secrets_search_paths,
    load_config,
    load_secrets,
    load_toml_file,
    parse_env_file,
)
from charterbox.config.schema import (
    CharterboxConfig,
    DatabaseConfig,
    ETLConfig,
    SecretsConfig,
    ServerConfig,
    WebhookConfig,
)
from charterbox.config.settings import Settings, get_settings, reset_settings


class TestSchemaDefaults:
    """Test default values in schema models."""

    def test_server_config_defaults(self):
        """Test ServerConfig has correct defaults."""
        config = ServerConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.workers == 2
        assert config.debug is False
        assert config.enforce_https is False
        assert config.cors_origins == []

    def test_database_config_defaults(self):
        """Test DatabaseConfig has correct defaults."""
        config = DatabaseConfig()
        assert config.mongodb_url == "mongodb://localhost:27017"
        assert config.mongodb_database == "charterbox"

    def test_etl_config_defaults(self):
        """Test ETLConfig has correct defaults."""
        config = ETLConfig()
        assert config.lead_id_prefix == "DO-"
        assert config.lead_id_floor == 100
        assert config.lead_id_width == 3
        assert config.max_rows == 5000
        assert config.max_upload_mb == 10
        assert config.max_upload_bytes == 10 * 1024 * 1024
        assert config.online_agent_id == "DO-ONLINE"
        assert config.default_yacht_id == "DO-yacht-lotus"

    def test_etl_config_rejects_zero_rows(self):
        with pytest.raises(ValidationError):
            ETLConfig(max_rows=0)

    def test_webhook_config_defaults(self):
        """Test WebhookConfig has correct defaults."""
        config = WebhookConfig()
        assert config.woocommerce_enabled is True
        assert config.wordpress_enabled is True
        assert config.rate_limit == "60/minute"

    def test_charterbox_config_defaults(self):
        """Test CharterboxConfig has correct defaults."""
        config = CharterboxConfig()
        assert config.app_name == "CharterBox"
        assert isinstance(config.server, ServerConfig)
        assert isinstance(config.database, DatabaseConfig)
        assert isinstance(config.etl, ETLConfig)
        assert isinstance(config.webhooks, WebhookConfig)

    def test_secrets_config_defaults(self):
        """Test SecretsConfig has correct defaults."""
        assert SecretsConfig().woocommerce_webhook_secret is None


class TestConfigSearchPaths:
    """Test configuration file search paths."""

    def test_config_search_paths_order(self):
        """Test config search paths are in correct priority order."""
        paths = get_config_search_paths()
        assert paths == [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "charterbox" / "config.toml",
            Path("/opt/charterbox/config.toml"),
            Path("/etc/charterbox/config.toml"),
        ]

    def test_secrets_search_paths_order(self):
        """Test secrets search paths are in correct priority order."""
        paths = get_secrets_search_paths()
        assert len(paths) == 4
        assert paths[0] == Path.cwd() / "secrets.env"
        assert paths[-1] == Path("/etc/charterbox/secrets.env")


class TestTomlLoading:
    """Test TOML file loading."""

    def test_load_toml_file(self, tmp_path):
        """Test loading a valid TOML file."""
        toml_content = """
app_name = "TestApp"

[server]
host = "0.0.0.0"
port = 9000
debug = true

[database]
mongodb_url = "mongodb://testhost:27017"
"""
        config_file = tmp_path / "config.toml"
        config_file.write_text(toml_content)

        data = load_toml_file(config_file)
        assert data["app_name"] == "TestApp"
        assert data["server"]["host"] == "0.0.0.0"
        assert data["server"]["port"] == 9000
        assert data["server"]["debug"] is True
        assert data["database"]["mongodb_url"] == "mongodb://testhost:27017"

    def test_load_config_from_file(self, tmp_path):
        """Test load_config with a specific file."""
        toml_content = """
app_name = "CustomApp"

[server]
port = 5000
workers = 4

[etl]
lead_id_prefix = "LY-"
lead_id_floor = 5000

[webhooks]
wordpress_enabled = false
"""
        config_file = tmp_path / "config.toml"
        config_file.write_text(toml_content)

        config = load_config(config_file)
        assert config.app_name == "CustomApp"
        assert config.server.port == 5000
        assert config.server.workers == 4
        assert config.etl.lead_id_prefix == "LY-"
        assert config.etl.lead_id_floor == 5000
        assert config.webhooks.wordpress_enabled is False
        # Defaults should still apply
        assert config.server.host == "127.0.0.1"
        assert config.etl.lead_id_width == 3
        assert config.database.mongodb_url == "mongodb://localhost:27017"


class TestEnvFileParsing:
    """Test .env file parsing."""

    def test_parse_simple_env_file(self, tmp_path):
        """Test parsing a simple .env file."""
        env_content = """
CHARTERBOX_WOOCOMMERCE_SECRET=wc-secret
OTHER_KEY=other
"""
        env_file = tmp_path / "secrets.env"
        env_file.write_text(env_content)

        result = parse_env_file(env_file)
        assert result["CHARTERBOX_WOOCOMMERCE_SECRET"] == "wc-secret"
        assert result["OTHER_KEY"] == "other"

    def test_parse_env_file_with_quotes(self, tmp_path):
        """Test parsing .env file with quoted values."""
        env_content = '''
KEY1="double quoted value"
KEY2='single quoted value'
KEY3=unquoted value
'''
        env_file = tmp_path / "test.env"
        env_file.write_text(env_content)

        result = parse_env_file(env_file)
        assert result["KEY1"] == "double quoted value"
        assert result["KEY2"] == "single quoted value"
        assert result["KEY3"] == "unquoted value"

    def test_parse_env_file_skips_comments_and_empty_lines(self, tmp_path):
        """Test that comments and empty lines are skipped."""
        env_content = """
# This is a comment
KEY1=value1

# Another comment
KEY2=value2
not a pair
"""
        env_file = tmp_path / "test.env"
        env_file.write_text(env_content)

        result = parse_env_file(env_file)
        assert result == {"KEY1": "value1", "KEY2": "value2"}


class TestEnvOverrides:
    """Test environment variable overrides."""

    def test_apply_server_overrides(self):
        """Test server configuration overrides."""
        config_dict = {}

        with patch.dict(os.environ, {"CHARTERBOX_HOST": "0.0.0.0", "CHARTERBOX_PORT": "3000"}):
            apply_env_overrides(config_dict)

        assert config_dict["server"]["host"] == "0.0.0.0"
        assert config_dict["server"]["port"] == 3000

    def test_apply_database_overrides(self):
        """Test database configuration overrides."""
        config_dict = {}

        with patch.dict(
            os.environ,
            {
                "CHARTERBOX_MONGODB_URL": "mongodb://custom:27017",
                "CHARTERBOX_MONGODB_DATABASE": "custom_db",
            },
        ):
            apply_env_overrides(config_dict)

        assert config_dict["database"]["mongodb_url"] == "mongodb://custom:27017"
        assert config_dict["database"]["mongodb_database"] == "custom_db"

    def test_apply_etl_overrides(self):
        """Test ETL configuration overrides."""
        config_dict = {}

        with patch.dict(
            os.environ,
            {"CHARTERBOX_ETL_LEAD_ID_PREFIX": "WC-", "CHARTERBOX_ETL_MAX_ROWS": "250"},
        ):
            apply_env_overrides(config_dict)

        assert config_dict["etl"]["lead_id_prefix"] == "WC-"
        assert config_dict["etl"]["max_rows"] == 250

    def test_apply_lead_id_overrides(self):
        """Test every lead id setting can be overridden."""
        config_dict = {}

        with patch.dict(
            os.environ,
            {"CHARTERBOX_ETL_LEAD_ID_FLOOR": "5000", "CHARTERBOX_ETL_LEAD_ID_WIDTH": "5"},
        ):
            apply_env_overrides(config_dict)

        assert config_dict["etl"]["lead_id_floor"] == 5000
        assert config_dict["etl"]["lead_id_width"] == 5
        assert CharterboxConfig(**config_dict).etl.lead_id_width == 5

    def test_apply_boolean_override_true(self):
        """Test boolean overrides with 'true' value."""
        config_dict = {}

        with patch.dict(os.environ, {"CHARTERBOX_DEBUG": "true"}):
            apply_env_overrides(config_dict)

        assert config_dict["server"]["debug"] is True

    def test_apply_boolean_override_false(self):
        """Test boolean overrides with 'false' value."""
        config_dict = {"webhooks": {"woocommerce_enabled": True}}

        with patch.dict(os.environ, {"CHARTERBOX_WEBHOOKS_WOOCOMMERCE_ENABLED": "false"}):
            apply_env_overrides(config_dict)

        assert config_dict["webhooks"]["woocommerce_enabled"] is False


class TestSecretsLoading:
    """Test secrets loading."""

    def test_load_secrets_from_file(self, tmp_path):
        """Test loading secrets from a file."""
        secrets_file = tmp_path / "secrets.env"
        secrets_file.write_text("CHARTERBOX_WOOCOMMERCE_SECRET=file-secret\n")

        secrets = load_secrets(secrets_file)
        assert secrets.woocommerce_webhook_secret == "file-secret"

    def test_load_secrets_env_override(self, tmp_path):
        """Test environment variables override file secrets."""
        secrets_file = tmp_path / "secrets.env"
        secrets_file.write_text("CHARTERBOX_WOOCOMMERCE_SECRET=file-secret\n")

        with patch.dict(os.environ, {"CHARTERBOX_WOOCOMMERCE_SECRET": "env-secret"}):
            secrets = load_secrets(secrets_file)

        assert secrets.woocommerce_webhook_secret == "env-secret"

    def test_load_secrets_common_name_alias(self, tmp_path):
        """Test WOOCOMMERCE_WEBHOOK_SECRET is also checked."""
        with patch.dict(os.environ, {"WOOCOMMERCE_WEBHOOK_SECRET": "common-name"}):
            secrets = load_secrets(tmp_path / "nonexistent.env")

        assert secrets.woocommerce_webhook_secret == "common-name"


class TestSettings:
    """Test the Settings class."""

    def setup_method(self):
        """Reset settings before each test."""
        reset_settings()

    def test_settings_defaults(self, tmp_path, monkeypatch):
        """Test Settings with default configuration."""
        monkeypatch.chdir(tmp_path)
        settings = Settings()
        assert settings.app_name == "CharterBox"
        assert settings.host == "127.0.0.1"
        assert settings.port == 8000
        assert settings.mongodb_url == "mongodb://localhost:27017"
        assert settings.woocommerce_webhook_secret is None

    def test_settings_property_accessors(self):
        """Test all property accessors work correctly."""
        config = CharterboxConfig(
            app_name="TestApp",
            server=ServerConfig(host="0.0.0.0", port=9000),
            database=DatabaseConfig(mongodb_database="testdb"),
            etl=ETLConfig(max_upload_mb=2),
            webhooks=WebhookConfig(rate_limit="10/minute", wordpress_enabled=False),
        )
        secrets = SecretsConfig(woocommerce_webhook_secret="wc-secret")
        settings = Settings(config=config, secrets=secrets)

        # Test flat properties
        assert settings.app_name == "TestApp"
        assert settings.host == "0.0.0.0"
        assert settings.port == 9000
        assert settings.mongodb_database == "testdb"
        assert settings.webhook_rate_limit == "10/minute"
        assert settings.woocommerce_enabled is True
        assert settings.wordpress_enabled is False
        assert settings.woocommerce_webhook_secret == "wc-secret"

        # Test computed properties
        assert settings.max_upload_size_bytes == 2 * 1024 * 1024
        assert settings.etl is config.etl

    def test_get_settings_singleton(self):
        """Test get_settings returns same instance."""
        reset_settings()
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2

    def test_reset_settings_clears_cache(self):
        """Test reset_settings clears the cached instance."""
        reset_settings()
        s1 = get_settings()
        reset_settings()
        s2 = get_settings()
        assert s1 is not s2


class TestFindConfigFile:
    """Test find_config_file function."""

    def test_find_config_file_in_cwd(self, tmp_path, monkeypatch):
        """Test finding config file in current directory."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("[server]\nport = 8000\n")

        monkeypatch.chdir(tmp_path)
        found = find_config_file()
        assert found == config_file

    def test_find_secrets_file_in_cwd(self, tmp_path, monkeypatch):
        """Test finding secrets file in current directory."""
        secrets_file = tmp_path / "secrets.env"
        secrets_file.write_text("CHARTERBOX_WOOCOMMERCE_SECRET=x\n")

        monkeypatch.chdir(tmp_path)
        found = find_secrets_file()
        assert found == secrets_file
