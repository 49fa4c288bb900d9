#!/usr/bin/env python3
"""Main entry point for tinypaste.

This module parses command-line flags, initializes all components and starts
the HTTP server.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from tinypaste.app import run_server
from tinypaste.config import Config, ConfigError
from tinypaste.id_generator import IDGenerator
from tinypaste.paste_handler import PasteHandler
from tinypaste.renderer import Renderer
from tinypaste.storage import Storage, StorageError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line flags. Unset flags are None."""
    parser = argparse.ArgumentParser(description="Minimal pastebin server")
    parser.add_argument("-a", "--address", help="Address to listen on")
    parser.add_argument("-p", "--port", type=int, help="Port to listen on")
    parser.add_argument("-d", "--db", help="Path to the SQLite database file")
    parser.add_argument("-c", "--config", help="Path to TOML configuration file")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """Build the configuration from flags, environment and config file."""
    config_file = args.config
    if config_file is None and Path("config.toml").exists():
        config_file = "config.toml"

    return Config.from_env_and_file(
        config_file,
        overrides={
            "listen_address": args.address,
            "listen_port": args.port,
            "database_path": args.db,
        },
    )


def main(argv: Optional[list[str]] = None):
    """Main entry point for the application."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logger.info("Starting tinypaste...")

    try:
        config = load_config(parse_args(argv))
        logger.info(f"Configuration loaded: {config}")

        config.validate_database_path()
        storage = Storage(config.database_path)

        paste_handler = PasteHandler(storage, IDGenerator(), config)
        renderer = Renderer(highlight_enabled=config.highlight)

        logger.info(f"Public host: {config.public_host or 'request Host header'}")
        logger.info("Service is ready to accept requests")

        run_server(config, paste_handler, renderer)

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        logger.error("Please check your configuration and try again")
        sys.exit(1)
    except StorageError as e:
        logger.error(f"Storage initialization error: {e}")
        logger.error("Please check your database path and permissions")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unexpected error during startup: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
