"""
Generator — issues the copywriting AI calls and cleans what comes back.

One AI call per batch:
    generate_all        — every text section in one JSON response
    regenerate_section  — one section (the photo only gets a cache-busting URL)
    translate_section   — one section's current text into another language

Errors are GatewayError (call failed) or GenerationFormatError (unusable
response). Callers decide what a failure means; nothing here retries.
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, Field

from Listing_Engine.core.debug_log import DebugLog
from Listing_Engine.core.exceptions import GatewayError, GenerationFormatError
from Listing_Engine.core.models import (
    CustomizationOptions,
    Language,
    ProductRecord,
    Section,
)
from Listing_Engine.processors.copywriter.cleaning import clean_ai_output, clean_feature_list
from Listing_Engine.processors.copywriter.prompts import (
    SECTION_KIND_HINTS,
    build_generation_prompt,
    build_translation_prompt,
)
from Listing_Engine.saas_core.llm.gateway import parse_json_response


# ---------------------------------------------------------------------------
# Response schema
# ---------------------------------------------------------------------------
class GeneratedSections(BaseModel):
    """Expected shape of a generate_all response."""

    model_config = {"strict": True}

    header: str = Field(..., description="The generated SEO-friendly header.")
    description: str = Field(..., description="The generated product description.")
    features: str = Field(..., description="The bulleted list of features as a single string.")
    reviews: Optional[str] = Field(None, description="The summary of customer reviews, if requested.")


def _clean_section(section: Section, text: str) -> str:
    if section is Section.FEATURES:
        return clean_feature_list(text)
    return clean_ai_output(text)


def cache_busted_url(image_url: str) -> str:
    """Append a fresh t=<token> query parameter; empty URLs stay empty."""
    if not image_url:
        return ""
    separator = "&" if "?" in image_url else "?"
    return f"{image_url}{separator}t={uuid.uuid4().hex[:12]}"


# ---------------------------------------------------------------------------
# Bulk generation
# ---------------------------------------------------------------------------
async def generate_all(
    product: ProductRecord,
    options: CustomizationOptions,
    language: Language,
    gateway,
    log: DebugLog,
) -> dict[Section, str]:
    """
    Generate header, description, features (and reviews when the product
    has any) in a single AI call.

    Returns:
        {Section: cleaned text} — never contains PHOTO.
    Raises:
        GatewayError, GenerationFormatError
    """
    wanted = [Section.HEADER, Section.DESCRIPTION, Section.FEATURES]
    if product.has_reviews:
        wanted.append(Section.REVIEWS)

    prompt = build_generation_prompt(product, options, [(s, language) for s in wanted])
    log.add("GENERATE-ALL", f"Sending prompt in {language.value}...\nPrompt: {prompt}")

    raw = await gateway.call(prompt, GeneratedSections)
    log.add("GENERATE-ALL", f"Received raw JSON response:\n{raw}")

    try:
        parsed = parse_json_response(raw, GeneratedSections)
        if Section.REVIEWS in wanted and parsed.reviews is None:
            raise GenerationFormatError("The AI response is missing the requested reviews summary.")
    except GenerationFormatError as e:
        log.add("GENERATE-ALL-ERROR", f"Failed to parse JSON response: {e}")
        raise

    result = {
        section: _clean_section(section, getattr(parsed, section.value))
        for section in wanted
    }
    log.add("GENERATE-ALL", "Successfully parsed and cleaned JSON response.")
    return result


# ---------------------------------------------------------------------------
# Single-section operations
# ---------------------------------------------------------------------------
async def regenerate_section(
    section: Section,
    product: ProductRecord,
    options: CustomizationOptions,
    language: Language,
    gateway,
    log: DebugLog,
) -> str:
    """
    Produce fresh content for one section.

    The photo never reaches the model: it gets the product image URL with a
    new cache-busting token.
    """
    if section is Section.PHOTO:
        new_url = cache_busted_url(product.image)
        log.add("REGENERATE-PHOTO", f"Returning new URL: {new_url}")
        return new_url

    prompt = build_generation_prompt(product, options, [(section, language)])
    log.add(
        "REGENERATE-SECTION",
        f'Sending prompt for section "{section.value}" in {language.value}...\nPrompt: {prompt}',
    )

    raw = await gateway.call(prompt)
    content = _clean_section(section, raw)
    log.add("REGENERATE-SECTION", f'Received and cleaned response for section "{section.value}":\n{content}')

    if not content:
        log.add("REGENERATE-SECTION-ERROR", f'Empty response for section "{section.value}".')
        raise GenerationFormatError(f"The AI returned no content for the {section.value}.")
    return content


async def translate_section(
    text: str,
    target_language: Language,
    section_kind: str,
    gateway,
    log: DebugLog,
) -> str:
    """
    Translate one section's text, keeping its formatting.

    Empty input short-circuits to '' without an AI call. An empty
    translation of non-empty input is a GenerationFormatError.
    """
    if not text:
        return ""

    prompt = build_translation_prompt(text, target_language, section_kind)
    log.add("TRANSLATE", f"Sending translation prompt for {section_kind} to {target_language.value}...")

    try:
        raw = await gateway.call(prompt)
    except GatewayError as e:
        log.add("TRANSLATE-ERROR", f"Failed to translate: {e}")
        raise

    if section_kind == SECTION_KIND_HINTS[Section.FEATURES]:
        translated = clean_feature_list(raw)
    else:
        translated = clean_ai_output(raw)

    if not translated:
        log.add("TRANSLATE-ERROR", f"Empty translation for {section_kind}.")
        raise GenerationFormatError(f"AI returned an empty translation for {section_kind}.")

    log.add("TRANSLATE", f"Received translated text:\n{translated}")
    return translated
