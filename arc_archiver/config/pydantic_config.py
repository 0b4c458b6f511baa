"""
Pydantic-based configuration system for the Arc Folder Archiver.

Configuration is read from a TOML or JSON file (explicit path or default
locations), overlaid with environment variables and validated by pydantic.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import toml
from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
)

from ..core.share_client import (
    DEFAULT_DATA_ELEMENT_ID,
    DEFAULT_SHARE_ORIGIN,
    DEFAULT_USER_AGENT,
)

ENV_DATABASE = "ARC_ARCHIVER_DATABASE"
ENV_SHARE_ORIGIN = "ARC_ARCHIVER_SHARE_ORIGIN"
ENV_TIMEOUT = "ARC_ARCHIVER_TIMEOUT"


class NetworkConfig(BaseModel):
    """Network settings for fetching share pages."""

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Request timeout in seconds",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent header sent to the share service",
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v):
        """Warn about timeouts likely to fail on slow share pages."""
        if v < 5:
            import warnings

            warnings.warn(
                f"Short timeout ({v}s) may cause share pages to fail to load. "
                "Consider using 15-30 seconds.",
                UserWarning,
            )
        return v


class ShareConfig(BaseModel):
    """Share service settings."""

    origin: str = Field(
        default=DEFAULT_SHARE_ORIGIN,
        description="Share service origin (scheme and host)",
    )
    data_element_id: str = Field(
        default=DEFAULT_DATA_ELEMENT_ID,
        min_length=1,
        description="Id of the script element carrying the page data",
    )

    @field_validator("origin")
    @classmethod
    def validate_origin(cls, v: str) -> str:
        """Require an http(s) origin and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Share origin must start with http:// or https://")
        return v.rstrip("/")


class StorageConfig(BaseModel):
    """Archive storage settings."""

    database_path: Path = Field(
        default=Path(".arc_archive.db"),
        description="SQLite database file",
    )
    default_retention_days: int = Field(
        default=30,
        ge=1,
        le=3650,
        description="Days an archived folder is kept before it may be purged",
    )

    @field_validator("database_path", mode="before")
    @classmethod
    def validate_database_path(cls, v):
        """Ensure database path is a Path object."""
        if isinstance(v, str):
            return Path(v)
        return v


class OutputConfig(BaseModel):
    """Output format settings."""

    format: Literal["json", "html", "markdown"] = Field(
        default="json",
        description="Default render format",
    )
    indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="JSON indentation",
    )
    sort_keys: bool = Field(
        default=False,
        description="Sort object keys in JSON output",
    )
    compact: bool = Field(
        default=False,
        description="Write JSON on a single line without spaces (overrides indent)",
    )


class ArchiverConfig(BaseModel):
    """Main configuration model."""

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    share: ShareConfig = Field(default_factory=ShareConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


class ConfigurationManager:
    """Manages loading and validation of configuration from multiple sources."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file (TOML or JSON)
        """
        self._config: Optional[ArchiverConfig] = None
        self._load_configuration(config_path)

    def _get_default_config_paths(self) -> list[Path]:
        """Get list of default configuration file paths to try."""
        if getattr(sys, "frozen", False):
            app_dir = Path(sys.executable).parent
        else:
            app_dir = Path.cwd()

        return [
            app_dir / "arc_archiver.toml",
            app_dir / "arc_archiver.json",
            Path.home() / ".config" / "arc-archiver" / "config.toml",
        ]

    def _load_configuration(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file or use defaults."""
        config_data: Dict[str, Any] = {}

        if config_path:
            config_data = self._load_config_file(Path(config_path))
        else:
            for path in self._get_default_config_paths():
                if path.exists():
                    config_data = self._load_config_file(path)
                    break

        self._apply_env_overrides(config_data)

        try:
            self._config = ArchiverConfig(**config_data)
        except ValidationError as e:
            raise ValueError(format_config_error(e))

    def _load_config_file(self, config_path: Path) -> Dict:
        """Load configuration from TOML or JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()
        if suffix not in (".toml", ".json"):
            raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        try:
            if suffix == ".toml":
                return toml.load(config_path)
            with open(config_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (toml.TomlDecodeError, json.JSONDecodeError, OSError) as e:
            raise ValueError(f"Failed to load configuration from {config_path}: {e}")

    def _apply_env_overrides(self, config_data: Dict) -> None:
        """Overlay environment variables on file settings."""
        database = os.getenv(ENV_DATABASE)
        if database:
            config_data.setdefault("storage", {})["database_path"] = database

        origin = os.getenv(ENV_SHARE_ORIGIN)
        if origin:
            config_data.setdefault("share", {})["origin"] = origin

        timeout = os.getenv(ENV_TIMEOUT)
        if timeout:
            config_data.setdefault("network", {})["timeout"] = timeout

    def update_from_cli_args(self, args: Dict) -> None:
        """Update configuration from command-line arguments."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")

        config_dict = self._config.model_dump()

        if args.get("database"):
            config_dict["storage"]["database_path"] = args["database"]

        if args.get("format"):
            config_dict["output"]["format"] = args["format"]

        if args.get("timeout"):
            config_dict["network"]["timeout"] = args["timeout"]

        try:
            self._config = ArchiverConfig(**config_dict)
        except ValidationError as e:
            raise ValueError(format_config_error(e))

    @property
    def config(self) -> ArchiverConfig:
        """Get the current configuration."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")
        return self._config

    def create_sample_config(self, output_path: Path, format: str = "toml") -> None:
        """Create a sample configuration file."""
        sample_config = {
            "network": {"timeout": 30},
            "share": {
                "origin": DEFAULT_SHARE_ORIGIN,
                "data_element_id": DEFAULT_DATA_ELEMENT_ID,
            },
            "storage": {
                "database_path": ".arc_archive.db",
                "default_retention_days": 30,
            },
            "output": {"format": "json", "indent": 2, "sort_keys": False, "compact": False},
        }

        if format.lower() == "toml":
            with open(output_path, "w", encoding="utf-8") as f:
                toml.dump(sample_config, f)
        elif format.lower() == "json":
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(sample_config, f, indent=2)
        else:
            raise ValueError(f"Unsupported format: {format}")


class ConfigurationErrorFormatter:
    """Formats Pydantic validation errors into user-friendly messages."""

    @staticmethod
    def format_validation_error(error: ValidationError) -> str:
        """
        Convert Pydantic ValidationError into a user-friendly error message.

        Args:
            error: Pydantic ValidationError instance

        Returns:
            Formatted error message with helpful guidance
        """
        error_messages = []

        for error_detail in error.errors():
            location = ConfigurationErrorFormatter._format_error_location(
                error_detail["loc"]
            )
            error_messages.append(
                ConfigurationErrorFormatter._format_by_error_type(
                    location,
                    error_detail["type"],
                    error_detail,
                    error_detail.get("input", "N/A"),
                )
            )

        header = "Configuration Validation Failed:\n"
        separator = "-" * 60 + "\n"
        footer = (
            "\n\nTips:\n"
            "* Check the configuration file format (TOML or JSON)\n"
            "* Ensure numeric values are within the allowed ranges\n"
            "* Use 'arc-archiver --create-config toml' to generate a sample file"
        )

        return header + separator + "\n".join(error_messages) + footer

    @staticmethod
    def _format_error_location(location: tuple) -> str:
        """Format the error location path."""
        if not location:
            return "Configuration"

        path_parts = []
        for part in location:
            if isinstance(part, str):
                path_parts.append(part)
            else:
                path_parts.append(f"[{part}]")

        return ".".join(path_parts)

    @staticmethod
    def _format_by_error_type(
        location: str, error_type: str, error_detail: dict, input_value
    ) -> str:
        """Format error message based on Pydantic error type."""

        if error_type == "missing":
            return f"x {location}: Required field is missing"

        elif error_type in [
            "greater_than_equal",
            "less_than_equal",
            "greater_than",
            "less_than",
        ]:
            ctx = error_detail.get("ctx", {})
            limit = next(iter(ctx.values()), "limit")
            operator = {
                "greater_than_equal": ">=",
                "less_than_equal": "<=",
                "greater_than": ">",
                "less_than": "<",
            }[error_type]
            return f"x {location}: Value must be {operator} {limit} (got: {input_value})"

        elif error_type == "literal_error":
            expected = error_detail.get("ctx", {}).get("expected", "valid option")
            return f"x {location}: Must be one of {expected} (got: {input_value})"

        else:
            msg = error_detail.get("msg", "Invalid configuration value")
            return f"x {location}: {msg} (got: {input_value})"


def format_config_error(error: Exception) -> str:
    """
    Format any configuration-related error into a user-friendly message.

    Args:
        error: Exception that occurred during configuration

    Returns:
        Formatted error message
    """
    if isinstance(error, ValidationError):
        return ConfigurationErrorFormatter.format_validation_error(error)

    elif isinstance(error, FileNotFoundError):
        return (
            f"Configuration File Not Found:\n"
            f"x {error}\n\n"
            f"Solutions:\n"
            f"* Create a configuration file using: arc-archiver --create-config toml\n"
            f"* Use default configuration by omitting the --config parameter"
        )

    else:
        return f"Configuration Error:\nx {error}"
