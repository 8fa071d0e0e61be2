"""Shared fixtures: a scripted AI gateway, a fixed-clock log, sample products."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime

import pytest

from Listing_Engine.core.debug_log import DebugLog
from Listing_Engine.core.exceptions import GatewayError
from Listing_Engine.core.models import Language, ProductRecord
from Listing_Engine.session import ReconciliationController, SessionContext


class FakeGateway:
    """
    Stand-in for LLMGateway.

    Responses are queued and consumed one per call; a queued Exception is
    raised instead of returned. Every call is recorded. When `gate` is set,
    calls wait on it so tests can observe in-flight state.
    """

    def __init__(self, *responses):
        self.responses: list = list(responses)
        self.calls: list[dict] = []
        self.gate: asyncio.Event | None = None
        self.provider = "fake"

    def queue(self, *responses) -> "FakeGateway":
        self.responses.extend(responses)
        return self

    def hold(self) -> asyncio.Event:
        self.gate = asyncio.Event()
        return self.gate

    async def call(self, prompt, response_schema=None, *, model=None) -> str:
        self.calls.append({"prompt": prompt, "schema": response_schema, "model": model})
        if self.gate is not None:
            await self.gate.wait()
        if not self.responses:
            raise GatewayError("FakeGateway: no response queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def prompts(self) -> list[str]:
        return [c["prompt"] for c in self.calls]


def sections_json(reviews: bool = False, **overrides) -> str:
    payload = {
        "header": "Ultra Light Widget",
        "description": "A widget that weighs almost nothing.",
        "features": "- Weighs 5 g\n- Fits in any pocket",
    }
    if reviews:
        payload["reviews"] = "Positive Feedback\nBuyers love the weight."
    payload.update(overrides)
    return json.dumps(payload)


def make_product(reviews: bool = False, language: Language = Language.ENGLISH, **overrides) -> ProductRecord:
    data = {
        "source_url": "manual-input",
        "image": "https://shop.example.com/img/widget.jpg",
        "title": "Ultra Light Widget",
        "description": "The lightest widget we have ever made.",
        "features": ["Weighs 5 g", "Fits in any pocket"],
        "reviews": ["Great, so light!", "Broke after a month."] if reviews else [],
        "detected_language": language,
    }
    data.update(overrides)
    return ProductRecord(**data)


class FakeExtractor:
    """Returns a fixed ProductRecord (or raises) without touching the gateway."""

    def __init__(self, result):
        self.result = result
        self.calls: list[str] = []

    async def __call__(self, raw_input, gateway, log, **kwargs):
        self.calls.append(raw_input)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def log() -> DebugLog:
    return DebugLog(clock=lambda: datetime(2026, 1, 1, 12, 30, 45))


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def make_controller(log):
    """Build a controller over a FakeGateway and FakeExtractor."""

    def _make(product=None, gateway: FakeGateway | None = None) -> ReconciliationController:
        return ReconciliationController(
            gateway or FakeGateway(),
            SessionContext(log=log),
            extractor=FakeExtractor(product if product is not None else make_product()),
        )

    return _make
