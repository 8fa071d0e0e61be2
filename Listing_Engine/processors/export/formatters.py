"""
Export Formatters — Markdown / HTML renderings of the current sections.

Pure functions of a SectionContent: same input, byte-identical output.
Fixed order: photo, header, description, features, reviews (when present).
"""

from __future__ import annotations

import re
from html import escape

from Listing_Engine.core.models import Language, Section, SectionContent
from Listing_Engine.processors.copywriter.cleaning import BULLET

_FEATURES_TITLE = "Features & Specs"
_REVIEWS_TITLE = "Reviews"

_DOCUMENT_STYLE = (
    "body { font-family: sans-serif; line-height: 1.6; max-width: 800px; "
    "margin: 20px auto; padding: 0 20px; } "
    "img { max-width: 100%; height: auto; border-radius: 8px; } "
    "ul { padding-left: 20px; }"
)

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|]+')


def _text(content: SectionContent, section: Section) -> str:
    return content.get(section) or ""


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------
def to_markdown(content: SectionContent | None) -> str:
    """Markdown rendering, ready for the clipboard. The image embed always leads."""
    if content is None:
        return ""

    parts = [f"![Product Photo]({_text(content, Section.PHOTO)})"]
    parts.append(f"## {_text(content, Section.HEADER)}")
    parts.append(_text(content, Section.DESCRIPTION).strip())
    parts.append(f"### {_FEATURES_TITLE}\n{_text(content, Section.FEATURES)}")
    if Section.REVIEWS in content:
        parts.append(f"### {_REVIEWS_TITLE}\n{_text(content, Section.REVIEWS)}")
    return "\n\n".join(parts)


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------
def _feature_items(features: str) -> str:
    items = []
    for line in features.split("\n"):
        item = line.strip()
        if item.startswith(BULLET):
            item = item[len(BULLET):].strip()
        if item:
            items.append(f"<li>{escape(item)}</li>")
    return "".join(items)


def to_html(content: SectionContent | None) -> str:
    """
    HTML fragment rendering (text is HTML-escaped).

    An empty photo yields no <img>: an empty src would make the browser
    request the page itself.
    """
    if content is None:
        return ""

    lines = []
    photo = _text(content, Section.PHOTO)
    if photo:
        lines.append(
            f'<img src="{escape(photo)}" alt="Product Photo" '
            'style="max-width: 100%; height: auto; border-radius: 8px;" />'
        )
    lines.append(f"<h2>{escape(_text(content, Section.HEADER))}</h2>")
    description = escape(_text(content, Section.DESCRIPTION).strip()).replace("\n", "<br />")
    lines.append(f"<p>{description}</p>")
    lines.append(f"<h3>{escape(_FEATURES_TITLE)}</h3>")
    lines.append(f"<ul>{_feature_items(_text(content, Section.FEATURES))}</ul>")
    if Section.REVIEWS in content:
        lines.append(f"<h3>{_REVIEWS_TITLE}</h3>")
        lines.append(
            '<div style="white-space: pre-wrap;">'
            f"{escape(_text(content, Section.REVIEWS))}</div>"
        )
    return "\n".join(lines)


def to_html_document(content: SectionContent | None) -> str:
    """Standalone page: the HTML fragment in a minimal shell, header as title."""
    if content is None:
        return ""

    header = escape(_text(content, Section.HEADER))
    is_hebrew = content.language_of(Section.HEADER) is Language.HEBREW
    lang_attrs = 'lang="he" dir="rtl"' if is_hebrew else 'lang="en"'
    body = "\n".join(f"    {line}" for line in to_html(content).split("\n"))
    return (
        "<!DOCTYPE html>\n"
        f"<html {lang_attrs}>\n"
        "<head>\n"
        '    <meta charset="UTF-8">\n'
        '    <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"    <title>{header}</title>\n"
        f"    <style>{_DOCUMENT_STYLE}</style>\n"
        "</head>\n"
        "<body>\n"
        f"    <h1>{header}</h1>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


def suggested_filename(header: str) -> str:
    """
    Lowercase the header and collapse whitespace runs into single hyphens.

    Example: "Ultra  Light Widget" -> "ultra-light-widget.html"
    """
    slug = _WHITESPACE_RE.sub("-", _UNSAFE_FILENAME_RE.sub("", header or "").strip().lower())
    return f"{slug or 'product'}.html"


def document_bytes(content: SectionContent | None) -> bytes:
    return to_html_document(content).encode("utf-8")
