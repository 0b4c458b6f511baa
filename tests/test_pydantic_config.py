"""
Tests for the pydantic configuration system.
"""

import json
import warnings
from pathlib import Path

import pytest
import toml
from pydantic import ValidationError

from arc_archiver.config.pydantic_config import (
    ENV_DATABASE,
    ENV_SHARE_ORIGIN,
    ENV_TIMEOUT,
    ArchiverConfig,
    ConfigurationManager,
    NetworkConfig,
    ShareConfig,
    StorageConfig,
    format_config_error,
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user config files and environment variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in (ENV_DATABASE, ENV_SHARE_ORIGIN, ENV_TIMEOUT):
        monkeypatch.delenv(name, raising=False)


class TestConfigModels:
    """Test cases for the configuration models."""

    def test_defaults(self):
        config = ArchiverConfig()

        assert config.network.timeout == 30
        assert config.share.origin == "https://arc.net"
        assert config.share.data_element_id == "__NEXT_DATA__"
        assert config.storage.database_path == Path(".arc_archive.db")
        assert config.storage.default_retention_days == 30
        assert config.output.format == "json"
        assert config.output.sort_keys is False
        assert config.output.compact is False

    def test_origin_trailing_slash_removed(self):
        assert ShareConfig(origin="http://localhost:3000/").origin == "http://localhost:3000"

    def test_origin_requires_scheme(self):
        with pytest.raises(ValidationError):
            ShareConfig(origin="arc.net")

    @pytest.mark.parametrize("timeout", [0, 301])
    def test_timeout_range(self, timeout):
        with pytest.raises(ValidationError):
            NetworkConfig(timeout=timeout)

    def test_short_timeout_warns(self):
        with pytest.warns(UserWarning, match="Short timeout"):
            NetworkConfig(timeout=2)

    def test_normal_timeout_does_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            NetworkConfig(timeout=15)

    def test_database_path_from_string(self):
        assert StorageConfig(database_path="data/a.db").database_path == Path("data/a.db")

    def test_retention_range(self):
        with pytest.raises(ValidationError):
            StorageConfig(default_retention_days=0)

    def test_output_format_literal(self):
        with pytest.raises(ValidationError):
            ArchiverConfig(output={"format": "opml"})


class TestConfigurationManager:
    """Test cases for ConfigurationManager."""

    def test_defaults_without_file(self):
        manager = ConfigurationManager()
        assert manager.config == ArchiverConfig()

    def test_load_toml(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            '[network]\ntimeout = 10\n\n[storage]\ndatabase_path = "x.db"\n',
            encoding="utf-8",
        )

        config = ConfigurationManager(path).config

        assert config.network.timeout == 10
        assert config.storage.database_path == Path("x.db")

    def test_load_json(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"output": {"format": "markdown"}}), encoding="utf-8")

        assert ConfigurationManager(path).config.output.format == "markdown"

    def test_default_location_in_cwd(self, tmp_path):
        (tmp_path / "arc_archiver.toml").write_text(
            '[share]\norigin = "http://localhost:8080"\n', encoding="utf-8"
        )

        assert ConfigurationManager().config.share.origin == "http://localhost:8080"

    def test_default_location_in_home(self, tmp_path):
        config_dir = tmp_path / ".config" / "arc-archiver"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text(
            "[storage]\ndefault_retention_days = 5\n", encoding="utf-8"
        )

        assert ConfigurationManager().config.storage.default_retention_days == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigurationManager(tmp_path / "nope.toml")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("network: {}", encoding="utf-8")

        with pytest.raises(ValueError, match="Unsupported configuration file format"):
            ConfigurationManager(path)

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[network\ntimeout = ", encoding="utf-8")

        with pytest.raises(ValueError, match="Failed to load configuration"):
            ConfigurationManager(path)

    def test_invalid_values_formatted(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[network]\ntimeout = 999\n", encoding="utf-8")

        with pytest.raises(ValueError) as exc_info:
            ConfigurationManager(path)

        message = str(exc_info.value)
        assert "Configuration Validation Failed" in message
        assert "network.timeout" in message
        assert "<= 300" in message

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text('[storage]\ndatabase_path = "file.db"\n', encoding="utf-8")
        monkeypatch.setenv(ENV_DATABASE, "env.db")
        monkeypatch.setenv(ENV_SHARE_ORIGIN, "http://localhost:9000/")
        monkeypatch.setenv(ENV_TIMEOUT, "12")

        config = ConfigurationManager(path).config

        assert config.storage.database_path == Path("env.db")
        assert config.share.origin == "http://localhost:9000"
        assert config.network.timeout == 12

    def test_update_from_cli_args(self):
        manager = ConfigurationManager()
        manager.update_from_cli_args(
            {"database": "cli.db", "format": "html", "timeout": 20, "verbose": True}
        )

        config = manager.config
        assert config.storage.database_path == Path("cli.db")
        assert config.output.format == "html"
        assert config.network.timeout == 20

    def test_update_from_cli_args_ignores_none(self):
        manager = ConfigurationManager()
        manager.update_from_cli_args({"database": None, "format": None, "timeout": None})

        assert manager.config == ArchiverConfig()

    def test_update_from_cli_args_invalid(self):
        manager = ConfigurationManager()

        with pytest.raises(ValueError, match="Configuration Validation Failed"):
            manager.update_from_cli_args({"timeout": 1000})

    def test_create_sample_toml(self, tmp_path):
        path = tmp_path / "sample.toml"
        ConfigurationManager().create_sample_config(path, "toml")

        data = toml.load(path)
        assert data["share"]["origin"] == "https://arc.net"
        assert ConfigurationManager(path).config == ArchiverConfig()

    def test_create_sample_json(self, tmp_path):
        path = tmp_path / "sample.json"
        ConfigurationManager().create_sample_config(path, "json")

        assert json.loads(path.read_text(encoding="utf-8"))["output"]["format"] == "json"

    def test_create_sample_unknown_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported format"):
            ConfigurationManager().create_sample_config(tmp_path / "x.ini", "ini")


class TestFormatConfigError:
    """Test cases for configuration error formatting."""

    def test_literal_error(self):
        with pytest.raises(ValidationError) as exc_info:
            ArchiverConfig(output={"format": "opml"})

        message = format_config_error(exc_info.value)
        assert "output.format" in message
        assert "opml" in message

    def test_file_not_found(self):
        message = format_config_error(FileNotFoundError("cfg.toml"))

        assert message.startswith("Configuration File Not Found:")
        assert "--create-config" in message

    def test_other_error(self):
        assert format_config_error(RuntimeError("boom")) == "Configuration Error:\nx boom"
