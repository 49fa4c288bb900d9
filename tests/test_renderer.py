"""Tests for browser detection, syntax detection and response rendering."""

import pytest

from tinypaste import renderer as renderer_module
from tinypaste.renderer import HTML, PLAIN_TEXT, Renderer, detect_lexer, is_browser

FIREFOX = (
    "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
)
CHROME = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
CURL = "curl/8.5.0"

SHELL_SCRIPT = "#!/bin/sh\necho hello world\n"
PLAIN_NOTES = "meeting notes\nbuy milk and eggs\n"


class TestIsBrowser:
    """User-Agent classification."""

    @pytest.mark.parametrize("user_agent", [FIREFOX, CHROME, "Opera/9.80 Presto/2.12"])
    def test_browsers(self, user_agent):
        assert is_browser(user_agent) is True

    @pytest.mark.parametrize(
        "user_agent", [CURL, "Wget/1.21.4", "python-requests/2.31.0", "", None]
    )
    def test_non_browsers(self, user_agent):
        assert is_browser(user_agent) is False


class TestDetectLexer:
    """Syntax detection from the first line."""

    @pytest.mark.parametrize(
        "contents",
        [SHELL_SCRIPT, "#!/bin/bash\nls\n", "#!/usr/bin/env python3\nprint(1)\n"],
    )
    def test_shebang_is_detected(self, contents):
        assert detect_lexer(contents) is not None

    def test_plain_text_is_not_detected(self):
        assert detect_lexer(PLAIN_NOTES) is None

    def test_empty_first_line_is_not_detected(self):
        assert detect_lexer("\n#!/bin/sh\n") is None
        assert detect_lexer("") is None

    def test_only_first_line_is_considered(self):
        assert detect_lexer("hello there\n#!/bin/sh\necho hi\n") is None


class TestRenderer:
    """Representation chosen for read requests."""

    @pytest.fixture
    def renderer(self):
        return Renderer()

    def test_plain_text_for_non_browser(self, renderer):
        body, content_type = renderer.render("abc123", SHELL_SCRIPT, CURL)

        assert body == SHELL_SCRIPT
        assert content_type == PLAIN_TEXT

    def test_plain_text_without_user_agent(self, renderer):
        body, content_type = renderer.render("abc123", SHELL_SCRIPT, None)

        assert body == SHELL_SCRIPT
        assert content_type == PLAIN_TEXT

    def test_html_for_browser_with_known_syntax(self, renderer):
        body, content_type = renderer.render("abc123", SHELL_SCRIPT, FIREFOX)

        assert content_type == HTML
        assert body.lstrip().startswith("<!DOCTYPE html")
        assert "<span" in body
        assert "<style" in body
        assert "abc123" in body

    def test_html_escapes_contents(self, renderer):
        contents = "#!/bin/sh\necho '<script>alert(1)</script>'\n"

        body, content_type = renderer.render("xss123", contents, CHROME)

        assert content_type == HTML
        assert "<script>alert(1)</script>" not in body
        assert "&lt;" in body

    def test_plain_text_for_browser_without_known_syntax(self, renderer):
        body, content_type = renderer.render("abc123", PLAIN_NOTES, FIREFOX)

        assert body == PLAIN_NOTES
        assert content_type == PLAIN_TEXT

    def test_highlighting_failure_falls_back_to_plain_text(
        self, renderer, monkeypatch
    ):
        def broken_highlight(*args, **kwargs):
            raise RuntimeError("lexer exploded")

        monkeypatch.setattr(renderer_module, "highlight", broken_highlight)

        body, content_type = renderer.render("abc123", SHELL_SCRIPT, FIREFOX)

        assert body == SHELL_SCRIPT
        assert content_type == PLAIN_TEXT

    def test_highlighting_disabled(self):
        renderer = Renderer(highlight_enabled=False)

        body, content_type = renderer.render("abc123", SHELL_SCRIPT, FIREFOX)

        assert body == SHELL_SCRIPT
        assert content_type == PLAIN_TEXT

    def test_render_html_returns_none_without_syntax(self, renderer):
        assert renderer.render_html("abc123", PLAIN_NOTES) is None

    def test_render_plain_text(self, renderer):
        assert renderer.render_plain_text("a\r\nb") == ("a\r\nb", PLAIN_TEXT)
