"""
Extractor — turns a URL, pasted HTML or pasted text into a ProductRecord.

Every mode makes exactly one AI call (URL mode fetches the page first and then
parses it as HTML). Any failure aborts the generation cycle with an
ExtractionFailure carrying a user-facing message; nothing is retried.

Usage:
    from Listing_Engine.processors.extraction import extract
    product = await extract(user_input, gateway, log)
"""

from __future__ import annotations

import asyncio
import json
from typing import Optional, Union

from pydantic import BaseModel, Field

from Listing_Engine.connectors.page_fetcher import fetch_page
from Listing_Engine.core.debug_log import DebugLog
from Listing_Engine.core.exceptions import (
    ExtractionFailure,
    GatewayError,
    GenerationFormatError,
)
from Listing_Engine.core.models import InputMode, Language, ProductRecord
from Listing_Engine.processors.extraction.input_detector import detect_input_mode
from Listing_Engine.processors.extraction.prompts import (
    HTML_PARSE_PROMPT,
    TEXT_PARSE_PROMPT,
    hydrate,
)
from Listing_Engine.saas_core.llm.gateway import parse_json_response

MANUAL_INPUT_URL = "manual-input"


# ---------------------------------------------------------------------------
# Response schema
# ---------------------------------------------------------------------------
class ExtractedProduct(BaseModel):
    """Expected shape of an extraction response."""

    title: str = Field("", description="The full product title")
    description: str = Field("", description="The main product description")
    features: Union[list[str], str] = Field(
        default_factory=list, description="An array of key features or specifications"
    )
    reviews: list[str] = Field(
        default_factory=list, description="An array of key review snippets, if found"
    )
    image: str = Field("", description="The absolute URL to the main product image")
    price: Optional[Union[str, float, int]] = Field(None, description="The product's price, if found")
    language: str = Field("en", description="The detected two-letter language code")


def _to_record(data: ExtractedProduct, source_url: str, *, keep_image: bool = True) -> ProductRecord:
    if not data.title.strip():
        raise ExtractionFailure("AI failed to extract the product title.")

    if isinstance(data.features, str):
        features = [data.features] if data.features.strip() else []
    else:
        features = [f for f in data.features if f and f.strip()]

    return ProductRecord(
        source_url=source_url,
        image=(data.image or "").strip() if keep_image else "",
        title=data.title,
        description=data.description or "",
        features=features,
        reviews=[r for r in data.reviews if r and r.strip()],
        price=str(data.price) if data.price not in (None, "") else None,
        detected_language=Language.from_code(data.language),
    )


async def _parse(
    prompt: str,
    source_url: str,
    gateway,
    log: DebugLog,
    *,
    tag: str,
    failure_message: str,
    keep_image: bool,
    model: str | None,
) -> ProductRecord:
    try:
        raw = await gateway.call(prompt, ExtractedProduct, model=model)
        log.add(tag, f"Received raw JSON response:\n{raw}")
        data = parse_json_response(raw, ExtractedProduct)
        record = _to_record(data, source_url, keep_image=keep_image)
    except ExtractionFailure as e:
        log.add(f"{tag}-ERROR", str(e))
        raise
    except (GatewayError, GenerationFormatError) as e:
        log.add(f"{tag}-ERROR", f"Error during parsing: {e}")
        raise ExtractionFailure(f"{failure_message} ({e})") from e

    log.add(tag, "Successfully parsed JSON data.")
    return record


# ---------------------------------------------------------------------------
# Public mode functions
# ---------------------------------------------------------------------------
async def parse_html_content(
    html: str,
    source_url: str,
    gateway,
    log: DebugLog,
    model: str | None = None,
) -> ProductRecord:
    """Extract a ProductRecord from raw page HTML (one AI call)."""
    if not html or not html.strip():
        raise ExtractionFailure("No HTML content provided.")

    prompt = hydrate(HTML_PARSE_PROMPT, source_url=source_url, content=html)
    log.add("PARSE-HTML", "Sending prompt to parse provided HTML...")
    return await _parse(
        prompt, source_url, gateway, log,
        tag="PARSE-HTML",
        failure_message="AI failed to extract product data from the provided HTML.",
        keep_image=True,
        model=model,
    )


async def parse_text_content(
    text: str,
    source_url: str,
    gateway,
    log: DebugLog,
    model: str | None = None,
) -> ProductRecord:
    """Extract a ProductRecord from plain text. The image is always empty."""
    if not text or not text.strip():
        raise ExtractionFailure("No text content provided.")

    prompt = hydrate(TEXT_PARSE_PROMPT, content=text)
    log.add("PARSE-TEXT", "Sending prompt to parse provided text...")
    return await _parse(
        prompt, source_url, gateway, log,
        tag="PARSE-TEXT",
        failure_message="AI failed to extract product data from the provided text.",
        keep_image=False,
        model=model,
    )


async def scrape_url(
    url: str,
    gateway,
    log: DebugLog,
    model: str | None = None,
    *,
    timeout: int = 15,
    max_chars: int = 200_000,
) -> ProductRecord:
    """Fetch a product page, then parse its HTML with the page URL as source."""
    url = (url or "").strip()
    if not url.startswith("http"):
        raise ExtractionFailure(
            "Invalid URL provided. Please enter a full URL starting with http:// or https://."
        )

    log.add("SCRAPE", f"Fetching {url} ...")
    try:
        html = await asyncio.to_thread(fetch_page, url, timeout=timeout, max_chars=max_chars)
    except ExtractionFailure as e:
        log.add("SCRAPE-ERROR", str(e))
        raise
    log.add("SCRAPE-DEBUG", f"Retrieved {len(html)} chars of HTML from {url}")

    return await parse_html_content(html, url, gateway, log, model=model)


async def extract(
    raw_input: str,
    gateway,
    log: DebugLog,
    *,
    model: str | None = None,
    timeout: int = 15,
    max_chars: int = 200_000,
) -> ProductRecord:
    """
    Detect the input mode and run the matching extractor.

    Raises:
        ExtractionFailure for any problem with the source or the AI parse.
    """
    mode = detect_input_mode(raw_input)
    log.system(f"Detected input type: {mode.value}")

    if mode is InputMode.HTML:
        record = await parse_html_content(raw_input, MANUAL_INPUT_URL, gateway, log, model=model)
    elif mode is InputMode.TEXT:
        record = await parse_text_content(raw_input, MANUAL_INPUT_URL, gateway, log, model=model)
    else:
        record = await scrape_url(
            raw_input, gateway, log, model=model, timeout=timeout, max_chars=max_chars,
        )

    log.system(
        "Scraped and processed data:\n"
        + json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False)
    )
    return record
