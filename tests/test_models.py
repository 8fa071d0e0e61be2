"""Tests for the data model: languages, options, product record, section store."""

import pytest
from pydantic import ValidationError

from Listing_Engine.core.models import (
    CustomizationOptions,
    Language,
    OutputLanguage,
    ProductRecord,
    Section,
    SectionContent,
    Tone,
)


class TestLanguages:

    def test_from_code(self):
        assert Language.from_code("he") is Language.HEBREW
        assert Language.from_code("iw") is Language.HEBREW
        assert Language.from_code("HE-il") is Language.HEBREW
        assert Language.from_code("en") is Language.ENGLISH

    def test_unknown_code_falls_back_to_english(self):
        assert Language.from_code("fr") is Language.ENGLISH
        assert Language.from_code(None) is Language.ENGLISH

    def test_auto_resolves_to_origin(self):
        assert OutputLanguage.AUTO.resolve(Language.HEBREW) is Language.HEBREW
        assert OutputLanguage.AUTO.resolve(Language.ENGLISH) is Language.ENGLISH

    def test_explicit_language_ignores_origin(self):
        assert OutputLanguage.ENGLISH.resolve(Language.HEBREW) is Language.ENGLISH
        assert OutputLanguage.HEBREW.resolve(Language.ENGLISH) is Language.HEBREW


class TestCustomizationOptions:

    def test_defaults(self):
        opts = CustomizationOptions()
        assert (opts.tone.value, opts.length.value, opts.emojis.value) == ("Formal", "Auto", "No")

    def test_differs_from(self):
        base = CustomizationOptions()
        assert base.differs_from(None)
        assert not base.differs_from(CustomizationOptions())
        assert base.differs_from(CustomizationOptions(tone=Tone.CASUAL))

    def test_frozen(self):
        with pytest.raises(ValidationError):
            CustomizationOptions().tone = Tone.CASUAL


class TestProductRecord:

    def test_title_required(self):
        with pytest.raises(ValidationError):
            ProductRecord(title="   ")

    def test_title_is_stripped(self):
        assert ProductRecord(title="  Widget ").title == "Widget"

    def test_blank_reviews_do_not_count(self):
        assert not ProductRecord(title="Widget", reviews=["  "]).has_reviews
        assert ProductRecord(title="Widget", reviews=["Nice"]).has_reviews


class TestSectionContent:

    def _content(self, allow_reviews=False):
        values = {
            Section.PHOTO: "https://img",
            Section.HEADER: "H",
            Section.DESCRIPTION: "D",
            Section.FEATURES: "F",
        }
        return SectionContent(values, Language.ENGLISH, allow_reviews=allow_reviews)

    def test_canonical_order_and_tags(self):
        content = self._content()
        assert content.sections() == [Section.PHOTO, Section.HEADER, Section.DESCRIPTION, Section.FEATURES]
        assert content.language_of(Section.PHOTO) is None
        assert set(content.language_tags().values()) == {Language.ENGLISH}

    def test_reviews_rejected_without_source_reviews(self):
        content = self._content()
        with pytest.raises(KeyError):
            content.set(Section.REVIEWS, "summary")
        assert Section.REVIEWS not in content

    def test_reviews_allowed(self):
        content = self._content(allow_reviews=True)
        content.set(Section.REVIEWS, "summary")
        assert content.sections()[-1] is Section.REVIEWS

    def test_tags_are_independent(self):
        content = self._content()
        content.set_language(Section.HEADER, Language.HEBREW)
        assert content.language_of(Section.HEADER) is Language.HEBREW
        assert content.language_of(Section.DESCRIPTION) is Language.ENGLISH

    def test_photo_cannot_be_tagged(self):
        with pytest.raises(KeyError):
            self._content().set_language(Section.PHOTO, Language.HEBREW)

    def test_as_dict(self):
        assert self._content().as_dict()["header"] == "H"
