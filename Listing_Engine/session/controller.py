"""
Reconciliation Controller — the session's state machine.

Global states (SessionContext.state):
    NoContent  --generate-->  Generating  --ok-->  Ready  |  --fail-->  NoContent
    Ready      --regenerate / translate S-->  SectionBusy (S pending)  -->  Ready

Rules:
    - A section has at most one AI call in flight. The pending set is the only
      admission gate; membership is claimed synchronously before the first
      await, so single-threaded asyncio makes check-then-set atomic.
      Requests on a busy section are dropped, never queued.
    - After every operation completes (and after options / output language
      change), reconcile() runs two independent passes, but only in Ready:
        options pass   — {tone, length, emojis} changed -> regenerate description
        language pass  — output language changed -> translate every text
                         section whose tag differs from the resolved target
      The options pass updates its snapshot before dispatching, so a change
      is applied once. The language pass advances its snapshot only once
      every off-target section was claimed; otherwise a later pass finishes
      it. While busy the passes are deferred, not queued: the next Ready
      reconcile compares the latest settings against the stale snapshot.
    - Failures: generation failure clears content and sets `error`; a section
      failure leaves that section untouched and sets `toast`. No retries.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from Listing_Engine.config import DEFAULT_OPTIONS, DEFAULT_OUTPUT_LANGUAGE, get_settings
from Listing_Engine.core.exceptions import ListingEngineError
from Listing_Engine.core.models import (
    CustomizationOptions,
    Language,
    OutputLanguage,
    ProductRecord,
    Section,
    SectionContent,
)
from Listing_Engine.processors.copywriter import generator
from Listing_Engine.processors.copywriter.prompts import SECTION_KIND_HINTS
from Listing_Engine.processors.export import formatters
from Listing_Engine.processors.extraction import extract
from Listing_Engine.saas_core.llm.gateway import LLMGateway
from Listing_Engine.session.state import SessionContext, SessionState

logger = logging.getLogger(__name__)

# Ctrl+1..5 shortcut order
SECTION_SHORTCUTS: tuple[Section, ...] = (
    Section.PHOTO,
    Section.HEADER,
    Section.DESCRIPTION,
    Section.FEATURES,
    Section.REVIEWS,
)

Extractor = Callable[..., Awaitable[ProductRecord]]


class ReconciliationController:
    """Drives one SessionContext: user actions in, AI calls out."""

    def __init__(
        self,
        gateway,
        session: SessionContext | None = None,
        *,
        extractor: Extractor = extract,
        extraction_model: str | None = None,
        fetch_timeout: int = 15,
        max_html_chars: int = 200_000,
    ):
        self.gateway = gateway
        self.session = session or SessionContext()
        self._extractor = extractor
        # Model override for extraction calls; only valid for the gateway's provider
        self.extraction_model = extraction_model
        self.fetch_timeout = fetch_timeout
        self.max_html_chars = max_html_chars
        # Bumped per generation and on clear; a stale cycle drops its result
        self._cycle = 0

    @classmethod
    def from_settings(cls, settings=None, session: SessionContext | None = None) -> "ReconciliationController":
        settings = settings or get_settings()
        return cls(
            LLMGateway.from_settings(settings),
            session,
            extraction_model=settings.EXTRACTION_MODEL,
            fetch_timeout=settings.FETCH_TIMEOUT_SEC,
            max_html_chars=settings.MAX_HTML_CHARS,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def log(self):
        return self.session.log

    @property
    def can_clear(self) -> bool:
        s = self.session
        return bool(s.user_input.strip()) or s.content is not None

    @property
    def can_reset(self) -> bool:
        s = self.session
        return (
            self.can_clear
            or s.options != DEFAULT_OPTIONS
            or s.output_language is not DEFAULT_OUTPUT_LANGUAGE
        )

    # ==================================================================
    #  T1  FULL GENERATION
    # ==================================================================

    async def generate(self, raw_input: str | None = None) -> bool:
        """
        Run one generation cycle: extract -> generate_all -> populate.

        Returns True on success. Blank input (or a generation already
        running) is ignored and returns False.
        """
        s = self.session
        if raw_input is not None:
            s.user_input = raw_input
        if not s.user_input.strip() or s.is_loading:
            return False

        s.log.clear()
        s.log.start("Starting new generation process...")
        s.is_loading = True
        s.error = None
        s.clear_cycle()
        self._cycle += 1
        cycle = self._cycle

        # Settings as they were when the cycle started become the snapshot
        options = s.options
        output_language = s.output_language

        try:
            product = await self._extractor(
                s.user_input,
                self.gateway,
                s.log,
                model=self.extraction_model,
                timeout=self.fetch_timeout,
                max_chars=self.max_html_chars,
            )
            if cycle != self._cycle:
                return False

            s.origin_language = product.detected_language
            s.log.system(f"Detected origin language: {s.origin_language.value}.")
            generation_language = output_language.resolve(s.origin_language)
            s.log.system(f"Setting initial generation language to: {generation_language.value}.")

            sections = await generator.generate_all(
                product, options, generation_language, self.gateway, s.log,
            )
            # Cleared (or superseded) while the AI call was in flight
            if cycle != self._cycle:
                return False
            s.product = product
            s.content = SectionContent(
                {Section.PHOTO: product.image, **sections},
                language=generation_language,
                allow_reviews=product.has_reviews,
            )
            s.last_used_options = options
            s.last_used_output_language = output_language
            s.log.success("Generation process completed successfully.")
        except ListingEngineError as e:
            if cycle != self._cycle:
                return False
            s.clear_cycle()
            s.error = str(e) or "An unexpected error occurred."
            s.log.error(f"Generation failed: {s.error}")
            return False
        finally:
            if cycle == self._cycle:
                s.is_loading = False

        await self.reconcile()
        return True

    # ==================================================================
    #  T2  LOCAL EDIT
    # ==================================================================

    def edit_section(self, section: Section, text: str) -> bool:
        """Replace a section's text in place. No AI call, tag unchanged."""
        s = self.session
        section = Section(section)
        if s.content is None or section not in s.content:
            return False
        s.content.set(section, text)
        return True

    # ==================================================================
    #  T3 / T4  SECTION OPERATIONS
    # ==================================================================

    def _claim(self, section: Section) -> bool:
        """Admission gate: check-then-set on the pending set (no await inside)."""
        s = self.session
        if s.product is None or s.content is None or section not in s.content:
            return False
        if section in s.pending:
            logger.debug("Section %s busy; request dropped", section.value)
            return False
        s.pending.add(section)
        return True

    async def _run_regenerate(self, section: Section) -> bool:
        s = self.session
        content, product = s.content, s.product
        language = content.language_of(section) or Language.ENGLISH
        s.log.start(f"Regenerating section: {section.value} in {language.value}...")
        try:
            new_text = await generator.regenerate_section(
                section, product, s.options, language, self.gateway, s.log,
            )
        except ListingEngineError as e:
            message = f"Failed to regenerate {section.value}: {e}"
            s.log.error(message)
            s.toast = message
            return False
        finally:
            s.pending.discard(section)

        # A newer generation cycle (or a clear) owns the store now
        if s.content is not content:
            return False
        content.set(section, new_text)
        s.log.success(f"Section {section.value} regenerated.")
        return True

    async def _run_translate(self, section: Section, language: Language) -> bool:
        s = self.session
        content = s.content
        s.log.start(f"Translating section: {section.value} to {language.value}...")
        try:
            new_text = await generator.translate_section(
                content.get(section) or "",
                language,
                SECTION_KIND_HINTS.get(section, "text"),
                self.gateway,
                s.log,
            )
        except ListingEngineError as e:
            message = f"Failed to translate {section.value}: {e}"
            s.log.error(message)
            s.toast = message
            return False
        finally:
            s.pending.discard(section)

        if s.content is not content:
            return False
        content.set(section, new_text)
        content.set_language(section, language)
        s.log.success(f"Section {section.value} translated.")
        return True

    async def regenerate_section(self, section: Section) -> bool:
        """
        Regenerate one section in its current language.

        Returns False when the request was dropped (busy / absent section)
        or the AI call failed.
        """
        section = Section(section)
        if not self._claim(section):
            return False
        ok = await self._run_regenerate(section)
        await self.reconcile()
        return ok

    async def translate_section(self, section: Section, language: Language) -> bool:
        """Translate one text section and retag it on success."""
        section = Section(section)
        language = Language(language)
        if section is Section.PHOTO or not self._claim(section):
            return False
        ok = await self._run_translate(section, language)
        await self.reconcile()
        return ok

    async def regenerate_by_index(self, n: int) -> bool:
        """Shortcut N (1..5) -> photo / header / description / features / reviews."""
        if not 1 <= n <= len(SECTION_SHORTCUTS):
            return False
        content = self.session.content
        section = SECTION_SHORTCUTS[n - 1]
        if section is Section.REVIEWS and (content is None or Section.REVIEWS not in content):
            return False
        return await self.regenerate_section(section)

    # ==================================================================
    #  T5 / T6  SETTINGS + RECONCILIATION
    # ==================================================================

    async def set_options(self, options: CustomizationOptions | None = None, **changes) -> None:
        """Replace (or patch) the customization options, then reconcile."""
        s = self.session
        if options is None:
            options = CustomizationOptions(**{**s.options.model_dump(), **changes})
        s.options = options
        await self.reconcile()

    async def set_output_language(self, language: OutputLanguage | str) -> None:
        self.session.output_language = OutputLanguage(language)
        await self.reconcile()

    def _can_reconcile(self) -> bool:
        s = self.session
        return (
            s.content is not None
            and s.last_used_options is not None
            and not s.is_loading
            and not s.pending
        )

    async def _translate_all(self, jobs: list, target: Language, *, complete: bool = True) -> None:
        await asyncio.gather(*jobs)
        if complete:
            self.session.log.success(f"All sections updated to {target.value}.")

    async def reconcile(self) -> None:
        """
        Run the options pass and the language pass once, if Ready.

        Sections are claimed synchronously here; the AI calls then run
        concurrently. Reconciles again afterwards so settings changed while
        the calls were in flight are picked up.
        """
        if not self._can_reconcile():
            return

        s = self.session
        jobs = []

        # Options pass: only the description depends on tone/length/emojis
        if s.options.differs_from(s.last_used_options):
            s.last_used_options = s.options
            s.log.system("Customization options changed. Updating description...")
            if self._claim(Section.DESCRIPTION):
                jobs.append(self._run_regenerate(Section.DESCRIPTION))

        # Language pass
        if (
            s.last_used_output_language is not None
            and s.output_language is not s.last_used_output_language
        ):
            target = s.target_language()
            s.log.system(f"Output language changed to: {s.output_language.value}. Updating content...")
            off_target = [
                section for section in s.content.text_sections()
                if s.content.language_of(section) is not target
            ]
            claimed = [section for section in off_target if self._claim(section)]
            translations = [self._run_translate(section, target) for section in claimed]
            # A section held by the options pass is translated on the next pass
            complete = len(claimed) == len(off_target)
            if complete:
                s.last_used_output_language = s.output_language
            jobs.append(self._translate_all(translations, target, complete=complete))

        if not jobs:
            return
        await asyncio.gather(*jobs)
        await self.reconcile()

    # ==================================================================
    #  T7  CLEAR / RESET
    # ==================================================================

    def clear(self) -> None:
        """Back to NoContent from any state; an in-flight generation is abandoned."""
        s = self.session
        self._cycle += 1
        s.is_loading = False
        s.user_input = ""
        s.clear_cycle()
        s.error = None
        s.toast = None
        s.log.clear()
        s.log.system("Cleared input and all generated content.")

    def reset(self) -> None:
        self.clear()
        self.session.options = DEFAULT_OPTIONS
        self.session.output_language = DEFAULT_OUTPUT_LANGUAGE
        self.session.log.system("Application state has been reset to defaults.")

    # ==================================================================
    #  EXPORT ACTIONS
    # ==================================================================

    def copy_as_markdown(self) -> str:
        text = formatters.to_markdown(self.session.content)
        if text:
            self.session.toast = "Copied as MARKDOWN!"
        return text

    def copy_as_html(self) -> str:
        text = formatters.to_html(self.session.content)
        if text:
            self.session.toast = "Copied as HTML!"
        return text

    def download_document(self) -> tuple[str, bytes] | None:
        """(suggested file name, UTF-8 HTML page) or None without content."""
        content = self.session.content
        if content is None:
            return None
        filename = formatters.suggested_filename(content.get(Section.HEADER) or "")
        return filename, formatters.document_bytes(content)
