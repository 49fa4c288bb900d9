"""SQLite database storage for pastes.

This module handles persistence of paste contents to a SQLite database. It
exposes exactly the operations the service needs: idempotent schema
initialization, insert-if-absent and fetch-by-id.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

# Configure logging
logger = logging.getLogger(__name__)

# Seconds a connection waits on a locked database before failing
BUSY_TIMEOUT = 30


class StorageError(Exception):
    """Raised when storage operations fail."""

    pass


class DuplicatePasteError(StorageError):
    """Raised when inserting a paste whose ID already exists."""

    def __init__(self, paste_id: str):
        super().__init__(f"Paste with ID {paste_id} already exists")
        self.paste_id = paste_id


class Storage:
    """SQLite database storage for pastes.

    Stores paste contents in a SQLite database with schema:
    CREATE TABLE pastes (
        id TEXT PRIMARY KEY NOT NULL UNIQUE,
        contents TEXT NOT NULL
    )

    A connection is opened for each operation and closed before returning,
    so a Storage instance can be shared between request threads.
    """

    def __init__(self, database_path: str):
        """Initialize storage with database path.

        Args:
            database_path: Path to SQLite database file

        Raises:
            StorageError: If database initialization fails
        """
        self.database_path = Path(database_path)

        # Ensure parent directory exists
        try:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create database directory: {e}")
            raise StorageError(f"Failed to create database directory: {e}")

        self.initialize()
        logger.info(f"Storage initialized at: {self.database_path}")

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.database_path), timeout=BUSY_TIMEOUT)

    def initialize(self) -> None:
        """Create database and schema if not exists.

        Safe to call any number of times.

        Raises:
            StorageError: If schema initialization fails
        """
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            logger.error(f"Failed to open database {self.database_path}: {e}")
            raise StorageError(f"Failed to open database: {e}")

        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS pastes (
                    id TEXT PRIMARY KEY NOT NULL UNIQUE,
                    contents TEXT NOT NULL
                )
            """)
            conn.commit()
            logger.debug("Database schema initialized successfully")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize database schema: {e}")
            raise StorageError(f"Failed to initialize database schema: {e}")
        finally:
            conn.close()

    def insert(self, paste_id: str, contents: str) -> None:
        """Insert a new paste.

        Never overwrites: an existing ID is reported as DuplicatePasteError
        so the caller can retry with a fresh ID.

        Args:
            paste_id: Unique paste identifier
            contents: Paste contents, stored verbatim

        Raises:
            DuplicatePasteError: If a paste with this ID already exists
            StorageError: If the insert fails for any other reason
        """
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            logger.error(f"Failed to open database {self.database_path}: {e}")
            raise StorageError(f"Failed to open database: {e}")

        try:
            conn.execute(
                "INSERT INTO pastes (id, contents) VALUES (?, ?)",
                (paste_id, contents),
            )
            conn.commit()
            logger.debug(f"Paste saved to database: {paste_id}")
        except sqlite3.IntegrityError as e:
            logger.warning(f"Attempted to save duplicate paste ID: {paste_id}")
            raise DuplicatePasteError(paste_id) from e
        except sqlite3.Error as e:
            logger.error(f"Database error saving paste {paste_id}: {e}")
            raise StorageError(f"Failed to save paste {paste_id}: {e}")
        finally:
            conn.close()

    def fetch(self, paste_id: str) -> Optional[str]:
        """Fetch a paste's contents by ID.

        Args:
            paste_id: Unique paste identifier

        Returns:
            The stored contents, or None if no paste has this ID

        Raises:
            StorageError: If the query fails
        """
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            logger.error(f"Failed to open database {self.database_path}: {e}")
            raise StorageError(f"Failed to open database: {e}")

        try:
            row = conn.execute(
                "SELECT contents FROM pastes WHERE id = ?", (paste_id,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Database error loading paste {paste_id}: {e}")
            raise StorageError(f"Failed to load paste {paste_id}: {e}")
        finally:
            conn.close()

        if row is None:
            logger.debug(f"Paste not found in database: {paste_id}")
            return None

        logger.debug(f"Paste loaded from database: {paste_id}")
        return row[0]
