"""SaaS Core — LLM module (registry + gateway)."""
from .registry import PROVIDER_SPECS, build_llm, get_all_models_flat, requires_api_key
from .gateway import LLMGateway, message_text, parse_json_response

__all__ = [
    "PROVIDER_SPECS", "build_llm", "get_all_models_flat", "requires_api_key",
    "LLMGateway", "message_text", "parse_json_response",
]
