"""
SaaS Core — AI Gateway.

The single async boundary between the engine and a generative-AI provider:

    await gateway.call(prompt, response_schema=None) -> str

One call, one attempt. Every failure (unknown provider, missing key, missing
LangChain package, network / auth / quota error) surfaces as GatewayError.
The chat model is built through the registry on every call, so nothing
bound to an event loop survives between calls.

When a pydantic `response_schema` is given, its JSON schema is sent as a
system instruction; `parse_json_response()` validates what comes back.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TypeVar

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel, ValidationError

from Listing_Engine.core.exceptions import GatewayError, GenerationFormatError
from Listing_Engine.saas_core.llm.registry import build_llm, requires_api_key

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_JSON_INSTRUCTION = (
    "Respond with a single valid JSON object and nothing else. "
    "No markdown fences, no commentary. The object must match this JSON schema:\n"
)


def message_text(content) -> str:
    """Flatten a LangChain message content (str or list of blocks) into text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return "" if content is None else str(content)


class LLMGateway:
    """Single-shot async caller for one provider / default model pair."""

    def __init__(
        self,
        provider: str,
        api_key: str | None,
        model: str | None = None,
        temperature: float = 0.7,
    ):
        self.provider = provider
        self.api_key = api_key
        self.model = model
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings, model: str | None = None) -> "LLMGateway":
        return cls(
            provider=settings.LLM_PROVIDER,
            api_key=settings.api_key_for(settings.LLM_PROVIDER),
            model=model or settings.GENERATION_MODEL,
            temperature=settings.LLM_TEMPERATURE,
        )

    def _build(self, model: str | None):
        if requires_api_key(self.provider) and not self.api_key:
            raise GatewayError(
                f"No API key configured for provider '{self.provider}'."
            )
        try:
            return build_llm(
                self.provider,
                self.api_key,
                model or self.model,
                temperature=self.temperature,
            )
        except Exception as exc:
            raise GatewayError(f"Cannot initialise {self.provider} model: {exc}") from exc

    async def call(
        self,
        prompt: str,
        response_schema: type[BaseModel] | None = None,
        *,
        model: str | None = None,
    ) -> str:
        """
        Send one prompt and return the raw response text.

        Args:
            prompt:          The user prompt.
            response_schema: Optional pydantic model describing the expected JSON.
            model:           Per-call model override (e.g. the extraction model).

        Raises:
            GatewayError on any failure to obtain a response.
        """
        llm = self._build(model)

        messages = []
        if response_schema is not None:
            schema = json.dumps(response_schema.model_json_schema(), ensure_ascii=False)
            messages.append(SystemMessage(content=_JSON_INSTRUCTION + schema))
        messages.append(HumanMessage(content=prompt))

        logger.debug("Gateway call -> %s/%s (%d chars)", self.provider, model or self.model, len(prompt))
        try:
            response = await llm.ainvoke(messages)
        except Exception as exc:
            raise GatewayError(f"{self.provider} request failed: {exc}") from exc

        return message_text(getattr(response, "content", ""))


# ---------------------------------------------------------------------------
# Response-shape validation
# ---------------------------------------------------------------------------
_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _extract_json_block(raw_text: str) -> str:
    """Pull the JSON payload out of a fenced block or surrounding prose."""
    cleaned = (raw_text or "").strip()
    fenced = _FENCE_RE.search(cleaned)
    if fenced:
        return fenced.group(1)
    if cleaned.startswith("{"):
        return cleaned
    match = _OBJECT_RE.search(cleaned)
    if match:
        return match.group(0)
    raise GenerationFormatError(
        "The AI did not return a recognizable data format (no JSON block found)."
    )


def parse_json_response(raw_text: str, schema: type[SchemaT]) -> SchemaT:
    """
    Parse and validate an AI JSON response against `schema`.

    Raises:
        GenerationFormatError if the text is not JSON, is not an object,
        or does not satisfy the schema (wrong type, missing required key).
    """
    payload = _extract_json_block(raw_text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise GenerationFormatError(
            f"The AI returned an invalid data format (not valid JSON): {exc}"
        ) from exc

    if not isinstance(data, dict):
        raise GenerationFormatError(
            f"The AI returned {type(data).__name__} where a JSON object was expected."
        )

    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise GenerationFormatError(
            f"The AI response did not match the expected shape ({fields})."
        ) from exc
