"""tinypaste: a minimal pastebin service."""
