"""Configuration management for tinypaste.

This module handles loading configuration from command-line overrides,
environment variables and config files, with sensible defaults for every
value.
"""

import logging
import os
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Mapping, Optional
from typing import TypedDict

# Configure logging
logger = logging.getLogger(__name__)

# Handle tomllib/tomli for Python 3.11+ vs earlier versions
tomllib: ModuleType
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Maximum paste size: 1MB
DEFAULT_MAX_PASTE_SIZE = 1024 * 1024

TRUE_VALUES = {"1", "true", "yes", "on"}


class _ConfigValues(TypedDict):
    database_path: str
    listen_address: str
    listen_port: int
    public_host: str | None
    max_paste_size: int
    highlight: bool


def _defaults() -> _ConfigValues:
    return {
        "database_path": "pastes.db",
        "listen_address": "0.0.0.0",  # nosec B104
        "listen_port": 3400,
        "public_host": None,
        "max_paste_size": DEFAULT_MAX_PASTE_SIZE,
        "highlight": True,
    }


class ConfigError(Exception):
    """Raised when configuration is invalid."""

    pass


class Config:
    """Configuration for tinypaste.

    Configuration is loaded with the following priority:
    1. Explicit overrides, e.g. command-line flags (highest priority)
    2. Environment variables
    3. Configuration file (TOML format)
    4. Default values (lowest priority)

    Options:
    - database_path: SQLite database file (default: pastes.db)
    - listen_address: Address for HTTP server (default: 0.0.0.0)
    - listen_port: Port for HTTP server (default: 3400)
    - public_host: Host used in paste URLs (default: request Host header)
    - max_paste_size: Largest accepted paste in bytes (default: 1MB)
    - highlight: Render highlighted HTML for browsers (default: true)
    """

    def __init__(
        self,
        database_path: str = "pastes.db",
        listen_address: str = "0.0.0.0",  # nosec B104
        listen_port: int = 3400,
        public_host: Optional[str] = None,
        max_paste_size: int = DEFAULT_MAX_PASTE_SIZE,
        highlight: bool = True,
    ):
        self.database_path = database_path
        self.listen_address = listen_address
        self.listen_port = listen_port
        self.public_host = public_host
        self.max_paste_size = max_paste_size
        self.highlight = highlight

    @classmethod
    def from_env_and_file(
        cls,
        config_file: Optional[str] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "Config":
        """Load configuration from overrides, environment and config file.

        Environment variables:
        - DATABASE_PATH: SQLite database file
        - LISTEN_ADDRESS: HTTP server address
        - LISTEN_PORT: HTTP server port
        - PUBLIC_HOST: Host used in paste URLs
        - MAX_PASTE_SIZE: Largest accepted paste in bytes
        - HIGHLIGHT: Enable HTML highlighting for browsers

        Args:
            config_file: Path to TOML config file (optional)
            overrides: Values that take precedence over everything else;
                None values are ignored

        Returns:
            Config instance with loaded values

        Raises:
            ConfigError: If configuration is invalid
        """
        config_values = _defaults()

        # Load from config file if provided
        if config_file:
            config_values.update(cls._load_from_file(config_file))

        # Override with environment variables
        if "DATABASE_PATH" in os.environ:
            config_values["database_path"] = os.environ["DATABASE_PATH"]
        if "LISTEN_ADDRESS" in os.environ:
            config_values["listen_address"] = os.environ["LISTEN_ADDRESS"]
        if "LISTEN_PORT" in os.environ:
            try:
                config_values["listen_port"] = int(os.environ["LISTEN_PORT"])
            except ValueError:
                raise ConfigError("Invalid LISTEN_PORT: must be an integer")
        if "PUBLIC_HOST" in os.environ:
            config_values["public_host"] = os.environ["PUBLIC_HOST"] or None
        if "MAX_PASTE_SIZE" in os.environ:
            try:
                config_values["max_paste_size"] = int(os.environ["MAX_PASTE_SIZE"])
            except ValueError:
                raise ConfigError("Invalid MAX_PASTE_SIZE: must be an integer")
        if "HIGHLIGHT" in os.environ:
            config_values["highlight"] = os.environ["HIGHLIGHT"].lower() in TRUE_VALUES

        # Apply explicit overrides
        for key, value in (overrides or {}).items():
            if key not in config_values:
                raise ConfigError(f"Unknown configuration option: {key}")
            if value is not None:
                config_values[key] = value  # type: ignore[literal-required]

        cls._validate(config_values)

        logger.info(
            f"Configuration loaded: database_path={config_values['database_path']}, "
            f"listen_address={config_values['listen_address']}, "
            f"listen_port={config_values['listen_port']}"
        )

        return cls(**config_values)

    @staticmethod
    def _load_from_file(config_file: str) -> dict:
        """Load configuration from TOML file.

        Only keys that are present in the file are returned.

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        try:
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {config_file}")
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to parse config file: {e}")

        config = {}
        for key in _defaults():
            if key in data:
                config[key] = data[key]
        if "highlight" in config and not isinstance(config["highlight"], bool):
            logger.error(f"Invalid highlight value: {config['highlight']!r}")
            raise ConfigError("Invalid highlight: must be true or false")
        return config

    @classmethod
    def _validate(cls, values: _ConfigValues) -> None:
        """Validate loaded configuration values.

        Raises:
            ConfigError: If any value is invalid
        """
        if not values["database_path"]:
            logger.error("Database path cannot be empty")
            raise ConfigError("database_path cannot be empty")

        port = values["listen_port"]
        if not isinstance(port, int) or not (1 <= port <= 65535):
            logger.error(f"Invalid listen_port: {port}")
            raise ConfigError("Invalid listen_port: must be between 1 and 65535")

        size = values["max_paste_size"]
        if not isinstance(size, int) or size < 1:
            logger.error(f"Invalid max_paste_size: {size}")
            raise ConfigError("Invalid max_paste_size: must be a positive integer")

        if values["public_host"]:
            cls._validate_public_host(values["public_host"])

    @staticmethod
    def _validate_public_host(host: str) -> None:
        """Validate public host format.

        Args:
            host: Host name to validate

        Raises:
            ConfigError: If host format is invalid
        """
        # Basic validation: no protocol, no path, no port
        if "://" in host:
            logger.error(f"Invalid public host (contains protocol): {host}")
            raise ConfigError(
                "Public host should not include protocol (http:// or https://)"
            )
        if "/" in host:
            logger.error(f"Invalid public host (contains path): {host}")
            raise ConfigError("Public host should not include path")
        if ":" in host:
            logger.error(f"Invalid public host (contains port): {host}")
            raise ConfigError("Public host should not include port")

        if not all(c.isalnum() or c in ".-" for c in host):
            logger.error(f"Invalid public host (invalid characters): {host}")
            raise ConfigError("Public host contains invalid characters")

        logger.debug(f"Public host validated: {host}")

    def validate_database_path(self) -> None:
        """Validate that the database directory exists and is writable.

        Creates the directory if it does not exist yet.

        Raises:
            ConfigError: If the directory cannot be created or is not writable
        """
        directory = Path(self.database_path).resolve().parent

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create database directory: {e}")
            raise ConfigError(f"Cannot create database directory: {e}")

        if not os.access(directory, os.W_OK):
            logger.error(f"Database directory is not writable: {directory}")
            raise ConfigError(f"Database directory is not writable: {directory}")

        logger.info(f"Database path validated: {self.database_path}")

    def __repr__(self) -> str:
        """String representation of configuration."""
        return (
            f"Config(database_path={self.database_path!r}, "
            f"listen_address={self.listen_address!r}, "
            f"listen_port={self.listen_port}, "
            f"public_host={self.public_host!r}, "
            f"max_paste_size={self.max_paste_size}, "
            f"highlight={self.highlight})"
        )
