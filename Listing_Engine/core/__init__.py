"""Core — data model, error taxonomy and the debug log sink."""
from .exceptions import (
    ExtractionFailure,
    GatewayError,
    GenerationFormatError,
    ListingEngineError,
)
from .models import (
    TEXT_SECTIONS,
    CustomizationOptions,
    Emojis,
    InputMode,
    Language,
    Length,
    OutputLanguage,
    ProductRecord,
    Section,
    SectionContent,
    Tone,
)
from .debug_log import DebugLog

__all__ = [
    "ListingEngineError", "ExtractionFailure", "GatewayError", "GenerationFormatError",
    "Section", "TEXT_SECTIONS", "Tone", "Length", "Emojis", "Language",
    "OutputLanguage", "InputMode",
    "CustomizationOptions", "ProductRecord", "SectionContent",
    "DebugLog",
]
