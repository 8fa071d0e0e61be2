"""
Page Fetcher — downloads a product page and slims its HTML for the parser.

Keeps what the extraction prompt needs (JSON-LD Product scripts, <head> meta
tags, visible markup) and drops everything else (other scripts, styles,
inline SVG, comments) before truncating to a character budget.
"""

from __future__ import annotations

import logging
import re

import requests
from bs4 import BeautifulSoup, Comment

from Listing_Engine.core.exceptions import ExtractionFailure

logger = logging.getLogger(__name__)

_TIMEOUT = 15  # seconds
_MAX_CHARS = 200_000
_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "en-US,en;q=0.9,he;q=0.8",
}

_NOISE_TAGS = ["style", "svg", "noscript", "iframe"]
_LD_JSON = "application/ld+json"
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


def slim_html(html: str, max_chars: int = _MAX_CHARS) -> str:
    """Drop non-content markup, keep JSON-LD scripts, truncate to max_chars."""
    soup = BeautifulSoup(html or "", "html.parser")

    for element in soup.find_all(_NOISE_TAGS):
        element.decompose()
    for script in soup.find_all("script"):
        if (script.get("type") or "").strip().lower() != _LD_JSON:
            script.decompose()
    for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
        comment.extract()

    slim = _BLANK_LINES_RE.sub("\n", str(soup)).strip()
    return slim[:max_chars]


def fetch_page(url: str, *, timeout: int = _TIMEOUT, max_chars: int = _MAX_CHARS) -> str:
    """
    GET a product page and return its slimmed HTML.

    Raises:
        ExtractionFailure if the page cannot be fetched or is empty.
    """
    try:
        resp = requests.get(url, timeout=timeout, headers=_HEADERS)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Failed to fetch %s: %s", url, e)
        raise ExtractionFailure(
            f"Could not load the product page ({e}). "
            "The site may be blocking access. Try pasting the page HTML instead."
        ) from e

    html = slim_html(resp.text or "", max_chars=max_chars)
    if not html:
        raise ExtractionFailure("The product page returned no content.")
    logger.info("Fetched %s (%d chars after slimming)", url, len(html))
    return html
