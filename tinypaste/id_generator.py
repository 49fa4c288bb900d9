"""Paste ID generation.

Generates short, URL-safe paste IDs from a lowercase alphanumeric alphabet
(a-z0-9).
"""

import secrets
import string


class IDGenerator:
    """Generates random paste IDs.

    IDs are 6 characters long using a-z0-9, giving 36^6 (~2.2 billion)
    possible values. The generator does not check for collisions; the
    storage layer rejects duplicate IDs and the caller retries.
    """

    ALPHABET = string.ascii_lowercase + string.digits

    def __init__(self, id_length: int = 6):
        """Initialize ID generator.

        Args:
            id_length: Length of generated IDs (default: 6)
        """
        if id_length < 1:
            raise ValueError("id_length must be at least 1")
        self.id_length = id_length

    def generate(self) -> str:
        """Generate a random paste ID.

        Each character is drawn independently and uniformly from ALPHABET.

        Returns:
            Random ID string of the configured length
        """
        return "".join(secrets.choice(self.ALPHABET) for _ in range(self.id_length))
