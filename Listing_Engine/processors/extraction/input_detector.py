"""
Input Detector — classifies pasted input by first-match rule.

Each rule is checked in order; first match wins:
    HTML  — contains an <html tag or a doctype marker
    URL   — a single http(s) token with no embedded whitespace
    TEXT  — anything else
"""

import re

from Listing_Engine.core.models import InputMode

_HTML_RE = re.compile(r"<html|<!doctype", re.IGNORECASE)
_URL_RE = re.compile(r"^https?://\S+$", re.IGNORECASE)


def detect_input_mode(raw_input: str) -> InputMode:
    """Return the extraction mode for a raw user input string."""
    trimmed = (raw_input or "").strip()
    if _HTML_RE.search(trimmed):
        return InputMode.HTML
    if _URL_RE.match(trimmed):
        return InputMode.URL
    return InputMode.TEXT
