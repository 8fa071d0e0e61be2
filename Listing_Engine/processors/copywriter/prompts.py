"""
Copywriter prompts — deterministic prompt builders.

The same (product, options, sections) always yields the same prompt text.
Tone, length, emoji and language settings become plain-language instructions;
"Auto" length hands the bracket decision to the model.
"""

from __future__ import annotations

from Listing_Engine.config import LENGTH_WORD_RANGES
from Listing_Engine.core.models import (
    CustomizationOptions,
    Emojis,
    Language,
    Length,
    ProductRecord,
    Section,
    Tone,
)

# ---------------------------------------------------------------------------
# Instruction fragments
# ---------------------------------------------------------------------------
_RAW_OUTPUT_RULE = (
    "IMPORTANT: For all sections, provide ONLY the raw text content requested. "
    "Do NOT add any extra headers, titles (like '### Header'), markdown formatting, "
    "or introductory sentences (like 'Here is the description:'). "
    "The output must be ready to be directly copied and pasted."
)

_AUTO_LENGTH = (
    "be an optimal length based on the provided product data. Analyze the detail "
    "level of the source description and features to decide if a short, medium, "
    "or long description is most appropriate to be comprehensive without being "
    "repetitive"
)

_TONE_INSTRUCTIONS: dict[Tone, str] = {
    Tone.FORMAL: (
        "in a strict, formal, and objective{lang} tone. Avoid all superlatives "
        "(like 'amazing', 'breakthrough'), marketing jargon, and exaggerated claims. "
        "Focus purely on the product's specifications and practical applications in "
        "a direct, factual manner, similar to a technical sheet but in prose"
    ),
    Tone.CASUAL: (
        "in a friendly, relaxed, and conversational{lang} tone. While being "
        "approachable, ground the description in facts about the product's features "
        "and benefits. Avoid excessive hype"
    ),
    Tone.PERSUASIVE: (
        "in an engaging and persuasive{lang} tone. Focus on the product's key "
        "benefits and how it solves the customer's problems. Use compelling language "
        "to create desire, but base all claims on the provided product data. Tell a "
        "story about the value of the product"
    ),
}

_HEBREW_STYLE = (
    " IMPORTANT FOR HEBREW: Write in a natural, descriptive style. Avoid addressing "
    "the reader directly in the second person (using words like 'you', 'your', "
    "'אתם', 'לכם'). Instead, describe the product and its benefits from a more "
    "neutral perspective, as if presenting facts."
)

# Hints passed to the translator so it keeps each section's structure
SECTION_KIND_HINTS: dict[Section, str] = {
    Section.HEADER:      "a product header",
    Section.DESCRIPTION: "a product description",
    Section.FEATURES:    "a bulleted list of product features",
    Section.REVIEWS:     "a summary of customer reviews",
}


def length_instruction(length: Length) -> str:
    if length is Length.AUTO:
        return _AUTO_LENGTH
    return f"be approximately {LENGTH_WORD_RANGES[length]} long"


def emoji_instruction(emojis: Emojis) -> str:
    return "use a few relevant emojis sparingly" if emojis is Emojis.YES else "not use any emojis"


def tone_instruction(tone: Tone, language: Language) -> str:
    lang = " Hebrew" if language is Language.HEBREW else ""
    return _TONE_INSTRUCTIONS[tone].format(lang=lang)


def _section_line(section: Section, options: CustomizationOptions, language: Language) -> str:
    if section is Section.HEADER:
        return f"- A catchy, SEO-friendly header in {language.value}.\n"

    if section is Section.DESCRIPTION:
        hebrew = _HEBREW_STYLE if language is Language.HEBREW else ""
        return (
            f"- An engaging product description in {language.value}. It should be "
            f"{tone_instruction(options.tone, language)}, "
            f"{length_instruction(options.length)}, and "
            f"{emoji_instruction(options.emojis)}.{hebrew}\n"
        )

    if section is Section.FEATURES:
        return (
            f"- A clean, bulleted list of the product's key features and specifications "
            f"in {language.value}. Format as a single string with each feature on a new "
            f"line starting with a bullet point (e.g., '• Feature 1\\n• Feature 2').\n"
        )

    if section is Section.REVIEWS:
        return (
            f"- A summary of the main points from customer reviews in {language.value}. "
            "If there are both positive and negative points, divide them clearly. Format "
            'it with subheadings like "Positive Feedback" and "Areas for Improvement". '
            "If reviews are overwhelmingly one-sided, a single summary is fine. Format as "
            "a single string with newlines for structure.\n"
        )

    return ""


# ---------------------------------------------------------------------------
# Public builders
# ---------------------------------------------------------------------------
def build_generation_prompt(
    product: ProductRecord,
    options: CustomizationOptions,
    sections: list[tuple[Section, Language]],
) -> str:
    """
    Build the copy prompt for the requested (section, language) pairs.

    Photo entries are ignored: the photo never goes through the model.
    """
    prompt = "Analyze the following product data:\n"
    prompt += f"- Title: {product.title}\n"
    prompt += f"- Description: {product.description}\n"
    prompt += f"- Features: {', '.join(product.features)}\n"
    if product.has_reviews:
        prompt += f"- Customer Reviews: {'; '.join(product.reviews)}\n"

    prompt += (
        "\nBased on this data, generate the following sections for an eCommerce blog post.\n"
        f"{_RAW_OUTPUT_RULE}\n"
    )
    for section, language in sections:
        prompt += _section_line(section, options, language)
    return prompt


def build_translation_prompt(text: str, target_language: Language, section_kind: str) -> str:
    return (
        f"Translate the following text into {target_language.value}.\n"
        f"The text is {section_kind}.\n"
        "Maintain the original tone, formatting (like bullet points), and meaning.\n"
        "IMPORTANT: Provide ONLY the translated text. Do not add any introductory "
        'phrases like "Here is the translation:".\n'
        "\n"
        "--- TEXT TO TRANSLATE ---\n"
        f"{text}\n"
    )
