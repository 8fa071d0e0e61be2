"""
Data model — product record, customization options and the section store.

ProductRecord and SectionContent are created together at the start of a
generation cycle and replaced wholesale by the next one. CustomizationOptions
outlive cycles until the user resets them.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class Section(str, Enum):
    """The five content slots, in display / shortcut order."""

    PHOTO = "photo"
    HEADER = "header"
    DESCRIPTION = "description"
    FEATURES = "features"
    REVIEWS = "reviews"


TEXT_SECTIONS: tuple[Section, ...] = (
    Section.HEADER,
    Section.DESCRIPTION,
    Section.FEATURES,
    Section.REVIEWS,
)


class Tone(str, Enum):
    FORMAL = "Formal"
    CASUAL = "Casual"
    PERSUASIVE = "Persuasive"


class Length(str, Enum):
    AUTO = "Auto"
    SHORT = "Short"
    MEDIUM = "Medium"
    LONG = "Long"


class Emojis(str, Enum):
    YES = "Yes"
    NO = "No"


class Language(str, Enum):
    ENGLISH = "English"
    HEBREW = "Hebrew"

    @classmethod
    def from_code(cls, code: str | None) -> "Language":
        """Two-letter code -> Language. Unknown / missing codes fall back to English."""
        return _LANGUAGE_CODES.get((code or "").strip().lower()[:2], cls.ENGLISH)


_LANGUAGE_CODES: dict[str, Language] = {
    "en": Language.ENGLISH,
    "he": Language.HEBREW,
    "iw": Language.HEBREW,  # legacy ISO code still emitted by some models
}


class OutputLanguage(str, Enum):
    """Target language setting: follow the detected origin, or force one."""

    AUTO = "auto"
    ENGLISH = "English"
    HEBREW = "Hebrew"

    def resolve(self, origin: Language) -> Language:
        if self is OutputLanguage.AUTO:
            return origin
        return Language(self.value)


class InputMode(str, Enum):
    URL = "url"
    HTML = "html"
    TEXT = "text"


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------
class CustomizationOptions(BaseModel):
    """Always fully populated; the defaults are the reset state."""

    model_config = {"frozen": True}

    tone: Tone = Tone.FORMAL
    length: Length = Length.AUTO
    emojis: Emojis = Emojis.NO

    def differs_from(self, other: "CustomizationOptions | None") -> bool:
        """True when any field that shapes the description changed."""
        if other is None:
            return True
        return (
            self.tone != other.tone
            or self.length != other.length
            or self.emojis != other.emojis
        )


# ---------------------------------------------------------------------------
# Product record
# ---------------------------------------------------------------------------
class ProductRecord(BaseModel):
    """Normalized product data produced by the extraction pipeline."""

    source_url: str = Field("", description="Page URL, or 'manual-input' for pasted HTML/text")
    image: str = Field("", description="Absolute image URL (may be empty)")
    title: str = Field(..., description="Product title (required)")
    description: str = ""
    features: list[str] = Field(default_factory=list)
    reviews: list[str] = Field(default_factory=list)
    price: Optional[str] = None
    detected_language: Language = Language.ENGLISH

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("title must be non-empty")
        return value

    @property
    def has_reviews(self) -> bool:
        return any(r.strip() for r in self.reviews)


# ---------------------------------------------------------------------------
# Section store
# ---------------------------------------------------------------------------
class SectionContent:
    """
    Mutable Section -> str map plus a per-text-section language tag.

    Tags are independent of one another: the header may be in Hebrew while
    the description is still English. `reviews` can only exist when the
    source product had reviews.
    """

    def __init__(
        self,
        values: dict[Section, str],
        language: Language,
        allow_reviews: bool,
    ):
        self._allow_reviews = allow_reviews
        self._values: dict[Section, str] = {}
        self._languages: dict[Section, Language] = {}
        for section, text in values.items():
            self.set(section, text)
            if section is not Section.PHOTO:
                self._languages[section] = language

    # -- reads ---------------------------------------------------------------
    def __contains__(self, section: object) -> bool:
        return section in self._values

    def get(self, section: Section) -> str | None:
        return self._values.get(section)

    def sections(self) -> list[Section]:
        """Present sections in canonical order."""
        return [s for s in Section if s in self._values]

    def text_sections(self) -> list[Section]:
        return [s for s in self.sections() if s in TEXT_SECTIONS]

    def language_of(self, section: Section) -> Language | None:
        return self._languages.get(section)

    def language_tags(self) -> dict[Section, Language]:
        return dict(self._languages)

    def as_dict(self) -> dict[str, str]:
        return {s.value: self._values[s] for s in self.sections()}

    # -- writes --------------------------------------------------------------
    def set(self, section: Section, text: str) -> None:
        section = Section(section)
        if section is Section.REVIEWS and not self._allow_reviews:
            raise KeyError("reviews section is not available for this product")
        self._values[section] = text

    def set_language(self, section: Section, language: Language) -> None:
        if section not in self._values or section is Section.PHOTO:
            raise KeyError(f"no text section '{section.value}' to tag")
        self._languages[section] = language

    def __repr__(self) -> str:
        return f"SectionContent({self.as_dict()!r})"
