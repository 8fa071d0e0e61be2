"""
Tests for the ReconciliationController state machine.

The gateway is scripted: generation consumes one queued JSON response,
every section regenerate / translate consumes one queued text response.
Holding the gateway gate keeps calls in flight so busy-state rules can be
observed.
"""

import asyncio

import pytest
from conftest import FakeGateway, make_product, sections_json

from Listing_Engine.config import DEFAULT_OPTIONS
from Listing_Engine.core.exceptions import ExtractionFailure, GatewayError
from Listing_Engine.core.models import CustomizationOptions, Language, OutputLanguage, Section, Tone
from Listing_Engine.session import SessionState

TEXT_SECTIONS = {Section.HEADER, Section.DESCRIPTION, Section.FEATURES}


async def ready_controller(make_controller, product=None, reviews=False):
    """A controller that has completed one successful generation."""
    product = product or make_product(reviews=reviews)
    gw = FakeGateway(sections_json(reviews=product.has_reviews))
    controller = make_controller(product, gw)
    assert await controller.generate("Ultra Light Widget, weighs 5 g")
    gw.calls.clear()
    return controller, gw


class TestGenerate:

    @pytest.mark.asyncio
    async def test_sections_without_reviews(self, make_controller):
        controller, _ = await ready_controller(make_controller)
        content = controller.session.content
        assert set(content.sections()) == {Section.PHOTO} | TEXT_SECTIONS
        assert content.get(Section.PHOTO) == "https://shop.example.com/img/widget.jpg"
        assert controller.state is SessionState.READY

    @pytest.mark.asyncio
    async def test_sections_with_reviews(self, make_controller):
        controller, _ = await ready_controller(make_controller, reviews=True)
        assert Section.REVIEWS in controller.session.content

    @pytest.mark.asyncio
    async def test_snapshots_taken(self, make_controller):
        controller, _ = await ready_controller(make_controller)
        s = controller.session
        assert s.last_used_options == DEFAULT_OPTIONS
        assert s.last_used_output_language is OutputLanguage.AUTO

    @pytest.mark.asyncio
    async def test_auto_follows_hebrew_origin(self, make_controller):
        product = make_product(language=Language.HEBREW)
        controller, _ = await ready_controller(make_controller, product=product)
        s = controller.session
        assert s.origin_language is Language.HEBREW
        assert set(s.content.language_tags().values()) == {Language.HEBREW}

    @pytest.mark.asyncio
    async def test_explicit_output_language(self, make_controller):
        gw = FakeGateway(sections_json())
        controller = make_controller(make_product(language=Language.HEBREW), gw)
        controller.session.output_language = OutputLanguage.ENGLISH
        await controller.generate("text")
        assert set(controller.session.content.language_tags().values()) == {Language.ENGLISH}
        assert "in English" in gw.prompts[0]

    @pytest.mark.asyncio
    async def test_malformed_json_clears_content(self, make_controller):
        gw = FakeGateway('{"header": ')
        controller = make_controller(make_product(), gw)
        assert not await controller.generate("text")
        s = controller.session
        assert controller.state is SessionState.NO_CONTENT
        assert s.content is None and s.product is None
        assert s.error
        assert any("[ERROR]" in line for line in s.log.lines)

    @pytest.mark.asyncio
    async def test_extraction_failure(self, make_controller):
        gw = FakeGateway()
        controller = make_controller(ExtractionFailure("AI failed to extract the product title."), gw)
        assert not await controller.generate("text")
        assert controller.session.error == "AI failed to extract the product title."
        assert gw.calls == []

    @pytest.mark.asyncio
    async def test_blank_input_is_ignored(self, make_controller):
        controller = make_controller()
        assert not await controller.generate("   ")
        assert controller.session.log.lines == []

    @pytest.mark.asyncio
    async def test_new_generation_resets_log(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gw.queue(sections_json())
        await controller.generate()
        assert controller.session.log.lines[0].endswith("[START] Starting new generation process...")


class TestSectionOperations:

    @pytest.mark.asyncio
    async def test_photo_regenerate_without_ai(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        content = controller.session.content
        await controller.regenerate_section(Section.PHOTO)
        first = content.get(Section.PHOTO)
        await controller.regenerate_section(Section.PHOTO)
        second = content.get(Section.PHOTO)
        assert first != second
        assert first.startswith("https://shop.example.com/img/widget.jpg?t=")
        assert gw.calls == []

    @pytest.mark.asyncio
    async def test_regenerate_keeps_language_tag(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        content = controller.session.content
        content.set_language(Section.HEADER, Language.HEBREW)
        gw.queue("כותרת חדשה")
        assert await controller.regenerate_section(Section.HEADER)
        assert content.get(Section.HEADER) == "כותרת חדשה"
        assert content.language_of(Section.HEADER) is Language.HEBREW
        assert "header in Hebrew" in gw.prompts[0]

    @pytest.mark.asyncio
    async def test_busy_section_drops_second_request(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gate = gw.hold()
        gw.queue("Fresh description")

        first = asyncio.create_task(controller.regenerate_section(Section.DESCRIPTION))
        await asyncio.sleep(0)
        assert controller.state is SessionState.SECTION_BUSY
        assert controller.session.is_pending(Section.DESCRIPTION)

        assert not await controller.regenerate_section(Section.DESCRIPTION)
        assert not await controller.translate_section(Section.DESCRIPTION, Language.HEBREW)

        gate.set()
        assert await first
        assert len(gw.calls) == 1
        assert controller.session.content.get(Section.DESCRIPTION) == "Fresh description"
        assert controller.state is SessionState.READY

    @pytest.mark.asyncio
    async def test_other_sections_run_concurrently(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gate = gw.hold()
        gw.queue("New header", "New features")

        header = asyncio.create_task(controller.regenerate_section(Section.HEADER))
        features = asyncio.create_task(controller.regenerate_section(Section.FEATURES))
        await asyncio.sleep(0)
        assert controller.session.pending == {Section.HEADER, Section.FEATURES}

        gate.set()
        assert await header and await features
        assert len(gw.calls) == 2

    @pytest.mark.asyncio
    async def test_regenerate_failure_keeps_content(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        s = controller.session
        before = s.content.get(Section.HEADER)
        gw.queue(GatewayError("quota exceeded"))
        assert not await controller.regenerate_section(Section.HEADER)
        assert s.content.get(Section.HEADER) == before
        assert "quota exceeded" in s.toast
        assert s.pending == set()
        assert controller.state is SessionState.READY

    @pytest.mark.asyncio
    async def test_translate_sets_tag(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        content = controller.session.content
        gw.queue("ווידג'ט קל במיוחד")
        assert await controller.translate_section(Section.HEADER, Language.HEBREW)
        assert content.get(Section.HEADER) == "ווידג'ט קל במיוחד"
        assert content.language_of(Section.HEADER) is Language.HEBREW
        assert content.language_of(Section.DESCRIPTION) is Language.ENGLISH

    @pytest.mark.asyncio
    async def test_translate_failure_keeps_text_and_tag(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        content = controller.session.content
        before = content.get(Section.FEATURES)
        gw.queue(GatewayError("timeout"))
        assert not await controller.translate_section(Section.FEATURES, Language.HEBREW)
        assert content.get(Section.FEATURES) == before
        assert content.language_of(Section.FEATURES) is Language.ENGLISH
        assert controller.session.toast

    @pytest.mark.asyncio
    async def test_photo_cannot_be_translated(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        assert not await controller.translate_section(Section.PHOTO, Language.HEBREW)
        assert gw.calls == []

    @pytest.mark.asyncio
    async def test_missing_reviews_section(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        assert not await controller.regenerate_section(Section.REVIEWS)
        assert not controller.edit_section(Section.REVIEWS, "x")
        assert gw.calls == []

    @pytest.mark.asyncio
    async def test_edit_is_local(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        content = controller.session.content
        content.set_language(Section.HEADER, Language.HEBREW)
        assert controller.edit_section(Section.HEADER, "My own header")
        assert content.get(Section.HEADER) == "My own header"
        assert content.language_of(Section.HEADER) is Language.HEBREW
        assert gw.calls == []

    @pytest.mark.asyncio
    async def test_stale_result_not_applied_after_clear(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gate = gw.hold()
        gw.queue("Late header")
        task = asyncio.create_task(controller.regenerate_section(Section.HEADER))
        await asyncio.sleep(0)
        controller.clear()
        gate.set()
        assert not await task
        assert controller.session.content is None


class TestShortcuts:

    @pytest.mark.asyncio
    async def test_index_maps_to_section(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gw.queue("Shortcut description")
        assert await controller.regenerate_by_index(3)
        assert controller.session.content.get(Section.DESCRIPTION) == "Shortcut description"

    @pytest.mark.asyncio
    async def test_reviews_shortcut_needs_reviews(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        assert not await controller.regenerate_by_index(5)
        assert not await controller.regenerate_by_index(0)
        assert not await controller.regenerate_by_index(6)
        assert gw.calls == []

    @pytest.mark.asyncio
    async def test_reviews_shortcut_with_reviews(self, make_controller):
        controller, gw = await ready_controller(make_controller, reviews=True)
        gw.queue("Positive Feedback\nLight.")
        assert await controller.regenerate_by_index(5)


class TestOptionReconciliation:

    @pytest.mark.asyncio
    async def test_tone_change_regenerates_description_only(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        s = controller.session
        header, features = s.content.get(Section.HEADER), s.content.get(Section.FEATURES)
        gw.queue("A persuasive description.")

        await controller.set_options(tone=Tone.PERSUASIVE)

        assert len(gw.calls) == 1
        assert "An engaging product description" in gw.prompts[0]
        assert "persuasive" in gw.prompts[0]
        assert s.content.get(Section.DESCRIPTION) == "A persuasive description."
        assert (s.content.get(Section.HEADER), s.content.get(Section.FEATURES)) == (header, features)
        assert s.last_used_options.tone is Tone.PERSUASIVE

    @pytest.mark.asyncio
    async def test_same_options_no_call(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        await controller.set_options(tone=Tone.FORMAL)
        await controller.reconcile()
        assert gw.calls == []

    @pytest.mark.asyncio
    async def test_options_before_generation_do_nothing(self, make_controller):
        gw = FakeGateway()
        controller = make_controller(make_product(), gw)
        await controller.set_options(tone=Tone.CASUAL)
        assert gw.calls == []

    @pytest.mark.asyncio
    async def test_deferred_while_busy_latest_wins(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gate = gw.hold()
        gw.queue("New header", "Casual then persuasive")

        task = asyncio.create_task(controller.regenerate_section(Section.HEADER))
        await asyncio.sleep(0)
        await controller.set_options(tone=Tone.CASUAL)
        await controller.set_options(tone=Tone.PERSUASIVE)
        assert len(gw.calls) == 1

        gate.set()
        await task
        assert len(gw.calls) == 2
        assert "persuasive" in gw.prompts[1]
        assert controller.session.last_used_options.tone is Tone.PERSUASIVE

    @pytest.mark.asyncio
    async def test_hebrew_origin_keeps_tags(self, make_controller):
        product = make_product(language=Language.HEBREW)
        controller, gw = await ready_controller(make_controller, product=product)
        gw.queue("תיאור חדש")
        await controller.set_options(tone=Tone.CASUAL)
        content = controller.session.content
        assert set(content.language_tags().values()) == {Language.HEBREW}
        assert "An engaging product description in Hebrew" in gw.prompts[0]


class TestLanguageReconciliation:

    @pytest.mark.asyncio
    async def test_translates_every_mismatched_section(self, make_controller):
        controller, gw = await ready_controller(make_controller, reviews=True)
        gw.queue(*["תרגום"] * 4)

        await controller.set_output_language(OutputLanguage.HEBREW)

        s = controller.session
        assert len(gw.calls) == 4
        assert set(s.content.language_tags().values()) == {Language.HEBREW}
        assert s.last_used_output_language is OutputLanguage.HEBREW
        assert s.log.lines[-1].endswith("[SUCCESS] All sections updated to Hebrew.")
        assert controller.state is SessionState.READY

    @pytest.mark.asyncio
    async def test_matching_sections_are_skipped(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        controller.session.content.set_language(Section.HEADER, Language.HEBREW)
        gw.queue("תרגום", "תרגום")
        await controller.set_output_language(OutputLanguage.HEBREW)
        assert len(gw.calls) == 2

    @pytest.mark.asyncio
    async def test_round_trip_keeps_sections(self, make_controller):
        controller, gw = await ready_controller(make_controller, reviews=True)
        content = controller.session.content
        keys = content.sections()
        gw.queue(*["תרגום"] * 4, *["Translated"] * 4)

        await controller.set_output_language(OutputLanguage.HEBREW)
        await controller.set_output_language(OutputLanguage.ENGLISH)

        assert content.sections() == keys
        assert set(content.language_tags().values()) == {Language.ENGLISH}

    @pytest.mark.asyncio
    async def test_auto_resolves_to_origin(self, make_controller):
        product = make_product(language=Language.HEBREW)
        gw = FakeGateway(sections_json())
        controller = make_controller(product, gw)
        controller.session.output_language = OutputLanguage.ENGLISH
        await controller.generate("text")
        gw.calls.clear()

        gw.queue(*["תרגום"] * 3)
        await controller.set_output_language(OutputLanguage.AUTO)
        assert set(controller.session.content.language_tags().values()) == {Language.HEBREW}

    @pytest.mark.asyncio
    async def test_failed_translation_leaves_section(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gw.queue("תרגום", GatewayError("boom"), "תרגום")
        await controller.set_output_language(OutputLanguage.HEBREW)
        tags = controller.session.content.language_tags()
        assert tags[Section.DESCRIPTION] is Language.ENGLISH
        assert tags[Section.HEADER] is Language.HEBREW
        assert controller.session.toast

    @pytest.mark.asyncio
    async def test_description_translated_after_option_pass(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gate = gw.hold()
        gw.queue("New header", "Regenerated description", "תרגום", "תרגום", "תיאור מחודש")

        task = asyncio.create_task(controller.regenerate_section(Section.HEADER))
        await asyncio.sleep(0)
        await controller.set_options(tone=Tone.CASUAL)
        await controller.set_output_language(OutputLanguage.HEBREW)
        gate.set()
        await task

        s = controller.session
        assert len(gw.calls) == 5
        assert "conversational" in gw.prompts[1]
        assert s.content.get(Section.DESCRIPTION) == "תיאור מחודש"
        assert set(s.content.language_tags().values()) == {Language.HEBREW}
        assert s.last_used_output_language is OutputLanguage.HEBREW
        assert s.log.lines[-1].endswith("[SUCCESS] All sections updated to Hebrew.")
        assert controller.state is SessionState.READY

    @pytest.mark.asyncio
    async def test_both_passes_in_one_reconcile(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        s = controller.session
        s.options = CustomizationOptions(tone=Tone.CASUAL)
        s.output_language = OutputLanguage.HEBREW
        gw.queue("Regenerated description", "תרגום", "תרגום", "תיאור")

        await controller.reconcile()

        assert s.content.language_of(Section.DESCRIPTION) is Language.HEBREW
        assert s.content.get(Section.DESCRIPTION) == "תיאור"
        assert len(gw.calls) == 4


class TestClearResetExport:

    @pytest.mark.asyncio
    async def test_clear(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gw.queue("casual")
        await controller.set_options(tone=Tone.CASUAL)
        controller.clear()
        s = controller.session
        assert controller.state is SessionState.NO_CONTENT
        assert s.user_input == "" and s.error is None
        assert s.log.lines[-1].endswith("[SYSTEM] Cleared input and all generated content.")
        assert len(s.log) == 1
        assert s.options.tone is Tone.CASUAL

    @pytest.mark.asyncio
    async def test_clear_abandons_running_generation(self, make_controller):
        gw = FakeGateway(sections_json())
        gate = gw.hold()
        controller = make_controller(make_product(), gw)

        task = asyncio.create_task(controller.generate("Ultra Light Widget"))
        await asyncio.sleep(0)
        assert controller.state is SessionState.GENERATING

        controller.clear()
        assert controller.state is SessionState.NO_CONTENT

        gate.set()
        assert not await task
        s = controller.session
        assert s.content is None and s.product is None and s.error is None
        assert controller.state is SessionState.NO_CONTENT

        gw.queue(sections_json())
        assert await controller.generate("Ultra Light Widget")
        assert controller.state is SessionState.READY

    @pytest.mark.asyncio
    async def test_reset_restores_defaults(self, make_controller):
        controller, gw = await ready_controller(make_controller)
        gw.queue("casual")
        await controller.set_options(tone=Tone.CASUAL)
        controller.session.output_language = OutputLanguage.HEBREW
        assert controller.can_reset
        controller.reset()
        s = controller.session
        assert s.options == DEFAULT_OPTIONS
        assert s.output_language is OutputLanguage.AUTO
        assert not controller.can_reset

    @pytest.mark.asyncio
    async def test_copy_sets_toast(self, make_controller):
        controller, _ = await ready_controller(make_controller)
        md = controller.copy_as_markdown()
        assert md.startswith("![Product Photo](")
        assert controller.session.pop_toast() == "Copied as MARKDOWN!"
        assert controller.copy_as_html().startswith("<img")
        assert controller.session.pop_toast() == "Copied as HTML!"

    @pytest.mark.asyncio
    async def test_download(self, make_controller):
        controller, _ = await ready_controller(make_controller)
        filename, payload = controller.download_document()
        assert filename == "ultra-light-widget.html"
        assert payload.startswith(b"<!DOCTYPE html>")

    def test_nothing_to_export(self, make_controller):
        controller = make_controller()
        assert controller.copy_as_markdown() == ""
        assert controller.session.toast is None
        assert controller.download_document() is None
