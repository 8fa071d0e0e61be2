"""
Session state — the explicit context object the controller owns.

Single writer: only ReconciliationController mutates a SessionContext.
"""

from __future__ import annotations

from enum import Enum

from Listing_Engine.config import DEFAULT_OPTIONS, DEFAULT_OUTPUT_LANGUAGE
from Listing_Engine.core.debug_log import DebugLog
from Listing_Engine.core.models import (
    CustomizationOptions,
    Language,
    OutputLanguage,
    ProductRecord,
    Section,
    SectionContent,
)


class SessionState(str, Enum):
    NO_CONTENT = "NoContent"
    GENERATING = "Generating"
    READY = "Ready"
    SECTION_BUSY = "SectionBusy"


class SessionContext:
    """Everything one editing session knows."""

    def __init__(self, log: DebugLog | None = None):
        self.log = log if log is not None else DebugLog()
        self.user_input: str = ""

        # Generation cycle (replaced wholesale on every full generation)
        self.product: ProductRecord | None = None
        self.content: SectionContent | None = None
        self.origin_language: Language = Language.ENGLISH

        # User settings (persist across cycles until reset)
        self.options: CustomizationOptions = DEFAULT_OPTIONS
        self.output_language: OutputLanguage = DEFAULT_OUTPUT_LANGUAGE

        # Snapshots the reconciliation passes compare against
        self.last_used_options: CustomizationOptions | None = None
        self.last_used_output_language: OutputLanguage | None = None

        # Sections with an AI call in flight
        self.pending: set[Section] = set()
        self.is_loading: bool = False

        # User-visible feedback
        self.error: str | None = None
        self.toast: str | None = None

    @property
    def state(self) -> SessionState:
        if self.is_loading:
            return SessionState.GENERATING
        if self.content is None:
            return SessionState.NO_CONTENT
        if self.pending:
            return SessionState.SECTION_BUSY
        return SessionState.READY

    def is_pending(self, section: Section) -> bool:
        return section in self.pending

    def target_language(self) -> Language:
        """Language sections are driven toward under the current setting."""
        return self.output_language.resolve(self.origin_language)

    def pop_toast(self) -> str | None:
        toast, self.toast = self.toast, None
        return toast

    def clear_cycle(self) -> None:
        self.product = None
        self.content = None
        self.last_used_options = None
        self.last_used_output_language = None
        self.origin_language = Language.ENGLISH
