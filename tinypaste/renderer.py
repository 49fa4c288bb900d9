"""Response rendering for paste contents.

This module decides how a paste is returned: plain text for command-line
clients, or syntax-highlighted HTML for web browsers when the language can
be detected from the first line of the paste.
"""

import logging
from typing import Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import guess_lexer
from pygments.util import ClassNotFound

# Configure logging
logger = logging.getLogger(__name__)

PLAIN_TEXT = "text/plain; charset=utf-8"
HTML = "text/html; charset=utf-8"

# Substrings of User-Agent headers sent by browser engines
BROWSER_TOKENS = ("Mozilla", "AppleWebKit", "Gecko", "Trident", "Presto")

# Minimum lexer confidence (0.0 - 1.0) to accept a detected syntax
MIN_CONFIDENCE = 0.5

# Light Pygments color theme used for every highlighted paste
STYLE = "default"


def is_browser(user_agent: Optional[str]) -> bool:
    """Classify a requester as a web browser from its User-Agent header.

    This is a best-effort heuristic, not a security check.
    """
    if not user_agent:
        return False
    return any(token in user_agent for token in BROWSER_TOKENS)


def detect_lexer(contents: str) -> Optional[Lexer]:
    """Detect the syntax of a paste from its first line.

    Returns:
        A Pygments lexer, or None if no syntax matched with enough confidence
    """
    first_line = contents.split("\n", 1)[0]
    if not first_line.strip():
        return None

    try:
        lexer = guess_lexer(first_line)
    except ClassNotFound:
        return None

    if lexer.analyse_text(first_line) < MIN_CONFIDENCE:
        return None
    return lexer


class Renderer:
    """Renders paste contents for HTTP responses.

    Each render method returns a (body, content_type) tuple.
    """

    def __init__(self, highlight_enabled: bool = True):
        """Initialize renderer.

        Args:
            highlight_enabled: Render HTML for browsers (default: True).
                When False every paste is returned as plain text.
        """
        self.highlight_enabled = highlight_enabled
        self.formatter_options = {"full": True, "style": STYLE}

    def render_plain_text(self, contents: str) -> tuple[str, str]:
        """Render paste contents verbatim as plain text."""
        return contents, PLAIN_TEXT

    def render_html(self, paste_id: str, contents: str) -> Optional[tuple[str, str]]:
        """Render paste contents as a self-contained highlighted HTML page.

        Args:
            paste_id: Paste identifier, used as the page title
            contents: Paste contents

        Returns:
            Tuple of (html_content, content_type), or None if the syntax
            could not be detected
        """
        lexer = detect_lexer(contents)
        if lexer is None:
            logger.debug(f"No syntax detected for paste {paste_id}")
            return None

        formatter = HtmlFormatter(title=paste_id, **self.formatter_options)
        return highlight(contents, lexer, formatter), HTML

    def render(
        self, paste_id: str, contents: str, user_agent: Optional[str]
    ) -> tuple[str, str]:
        """Choose and produce the representation for a read request.

        Browsers get highlighted HTML when possible. Anything else, including
        a highlighting failure, falls back to plain text; rendering problems
        are never raised to the caller.

        Args:
            paste_id: Paste identifier
            contents: Paste contents
            user_agent: Value of the request's User-Agent header (or None)

        Returns:
            Tuple of (content, content_type)
        """
        if not self.highlight_enabled or not is_browser(user_agent):
            return self.render_plain_text(contents)

        try:
            rendered = self.render_html(paste_id, contents)
        except Exception as e:
            logger.info(f"Highlighting failed for paste {paste_id}: {e}")
            rendered = None

        if rendered is None:
            return self.render_plain_text(contents)
        return rendered
