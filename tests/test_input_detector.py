"""Tests for input mode detection (first-match rules)."""

from Listing_Engine.core.models import InputMode
from Listing_Engine.processors.extraction import detect_input_mode


class TestDetectInputMode:
    """HTML, then URL, then text."""

    def test_html_by_doctype(self):
        assert detect_input_mode("<!DOCTYPE html><html><body>x</body></html>") is InputMode.HTML

    def test_html_case_insensitive(self):
        assert detect_input_mode("<HTML><body>widget</body></HTML>") is InputMode.HTML

    def test_url(self):
        assert detect_input_mode("https://shop.example.com/p/123") is InputMode.URL
        assert detect_input_mode("  http://shop.example.com/p/123\n") is InputMode.URL

    def test_url_with_trailing_text_is_text(self):
        assert detect_input_mode("https://shop.example.com/p/123 is great") is InputMode.TEXT

    def test_html_marker_wins_over_url(self):
        assert detect_input_mode("https://shop.example.com/<html") is InputMode.HTML

    def test_plain_text(self):
        assert detect_input_mode("Ultra Light Widget, weighs 5 g.") is InputMode.TEXT

    def test_empty_is_text(self):
        assert detect_input_mode("") is InputMode.TEXT
