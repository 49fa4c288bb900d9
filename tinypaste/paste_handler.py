"""Paste creation and retrieval handler.

This module handles the core logic for creating and retrieving pastes,
including size validation, ID generation with retry on collision, and URL
generation.
"""

import logging
from typing import Optional

from tinypaste.config import Config
from tinypaste.id_generator import IDGenerator
from tinypaste.storage import DuplicatePasteError, Storage

# Configure logging
logger = logging.getLogger(__name__)

# Insert attempts before giving up on finding an unused ID
MAX_INSERT_ATTEMPTS = 5

DEFAULT_HOST = "localhost"


class PasteHandlerError(Exception):
    """Raised when paste operations fail."""

    pass


class PasteTooLargeError(PasteHandlerError):
    """Raised when paste contents exceed the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Paste is {size} bytes, maximum is {limit} bytes")
        self.size = size
        self.limit = limit


class PasteHandler:
    """Handles paste creation and retrieval operations.

    This class coordinates between ID generation, storage, and URL construction
    to provide a high-level interface for paste operations.
    """

    def __init__(self, storage: Storage, id_generator: IDGenerator, config: Config):
        """Initialize paste handler with dependencies.

        Args:
            storage: Storage instance for persisting pastes
            id_generator: ID generator for creating paste IDs
            config: Configuration containing size limit and public host
        """
        self.storage = storage
        self.id_generator = id_generator
        self.config = config

    def check_size(self, size: int) -> None:
        """Reject a paste of `size` bytes if it exceeds the limit.

        Raises:
            PasteTooLargeError: If size is over config.max_paste_size
        """
        if size > self.config.max_paste_size:
            raise PasteTooLargeError(size, self.config.max_paste_size)

    def create_paste(
        self, contents: str, host: Optional[str] = None
    ) -> tuple[str, str]:
        """Create a new paste.

        Validates the size, generates an ID and inserts the paste. A colliding
        ID is retried with a fresh one, up to MAX_INSERT_ATTEMPTS in total.

        Args:
            contents: The paste contents, stored verbatim
            host: Host the request was addressed to, used for the URL when
                no public host is configured

        Returns:
            Tuple of (paste_id, paste_url)

        Raises:
            PasteTooLargeError: If contents exceed the size limit
            PasteHandlerError: If no unused ID was found
            StorageError: If the insert fails
        """
        self.check_size(len(contents.encode("utf-8")))

        for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
            paste_id = self.id_generator.generate()
            try:
                self.storage.insert(paste_id, contents)
            except DuplicatePasteError:
                logger.warning(
                    f"Paste ID collision on {paste_id} "
                    f"(attempt {attempt}/{MAX_INSERT_ATTEMPTS})"
                )
                continue

            logger.info(f"Paste saved: {paste_id} ({len(contents)} chars)")
            return paste_id, self.paste_url(paste_id, host)

        raise PasteHandlerError(
            f"Failed to generate unique ID after {MAX_INSERT_ATTEMPTS} attempts"
        )

    def get_paste(self, paste_id: str) -> Optional[str]:
        """Retrieve a paste's contents by ID.

        Returns:
            The contents, or None if the paste does not exist

        Raises:
            StorageError: If the lookup fails
        """
        return self.storage.fetch(paste_id)

    def paste_url(self, paste_id: str, host: Optional[str] = None) -> str:
        """Generate public URL for a paste.

        Uses the configured public host if set, otherwise the host the
        request was addressed to.

        Args:
            paste_id: Unique paste identifier
            host: Request Host header (optional)

        Returns:
            Full HTTPS URL to access the paste
        """
        domain = self.config.public_host or host or DEFAULT_HOST
        return f"https://{domain}/{paste_id}"
