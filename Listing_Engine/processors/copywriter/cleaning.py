"""
Output cleaning — strips the boilerplate models wrap around copy.

Rules (applied to every text the AI returns):
    1. Drop markdown heading lines ("### Features").
    2. Drop a conversational lead-in at the very start
       ("Here is the description:", "להלן התיאור:").
    3. Normalize "-" / "*" list markers to the bullet glyph "•".
    4. Lines emptied by rule 1 disappear instead of leaving gaps.
"""

from __future__ import annotations

import re

BULLET = "•"

_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s.*$")

# Lead-ins are only removed at the start of the response.
_INTRO_RES = [
    re.compile(r"^Here is the\b[^\n]*?:\s*", re.IGNORECASE),
    re.compile(r"^Here's (?:a|an|the|your)\b[^\n]*?:\s*", re.IGNORECASE),
    re.compile(r"^Sure[,!][^\n]*?:\s*", re.IGNORECASE),
    re.compile(r"^להלן[^\n]*?:\s*"),
]

_MARKER_RE = re.compile(r"^(\s*)[-*](?=\s)\s*")
_LOOSE_MARKER_RE = re.compile(r"^[-*](?!\*)\s*")
_EXCESS_BLANKS_RE = re.compile(r"\n{3,}")


def strip_intro(text: str) -> str:
    cleaned = text.lstrip()
    for pattern in _INTRO_RES:
        cleaned = pattern.sub("", cleaned, count=1)
    return cleaned


def normalize_bullets(text: str) -> str:
    """Replace a leading '-' or '*' list marker on each line with '• '."""
    return "\n".join(_MARKER_RE.sub(rf"\g<1>{BULLET} ", line) for line in text.split("\n"))


def clean_ai_output(text: str | None) -> str:
    """Apply all cleaning rules; returns '' for empty input."""
    if not text:
        return ""
    kept = [line for line in text.strip().split("\n") if not _HEADING_RE.match(line)]
    cleaned = strip_intro("\n".join(kept))
    cleaned = normalize_bullets(cleaned)
    cleaned = _EXCESS_BLANKS_RE.sub("\n\n", cleaned)
    return cleaned.strip()


def clean_feature_list(text: str | None) -> str:
    """
    Clean a bulleted feature list: one feature per line, each starting
    with '•', no blank lines.
    """
    lines = []
    for line in clean_ai_output(text).split("\n"):
        line = _LOOSE_MARKER_RE.sub(f"{BULLET} ", line.strip()).strip()
        if line:
            lines.append(line)
    return "\n".join(lines)
