"""
SaaS Core — Provider Catalog & Chat Model Factory

PROVIDER_SPECS: every provider the copywriter can talk to, with its env var,
                default model and the models offered in the sidebar.
build_llm():    constructs a LangChain chat model for a provider key.
                Client packages are imported lazily, so only the provider in
                use has to be installed.

Routing:
  - google     -> ChatGoogleGenerativeAI (default; flash writes, pro extracts)
  - openai     -> ChatOpenAI
  - anthropic  -> ChatAnthropic
  - deepseek   -> ChatOpenAI at the DeepSeek OpenAI-compatible endpoint
  - alibaba    -> ChatOpenAI at DashScope; temperature floored at 0.6 for Qwen
  - local_ollama -> ChatOllama, no key
"""

from __future__ import annotations

import importlib

PROVIDER_SPECS: dict[str, dict] = {
    "google": {
        "label":         "Google (Gemini)",
        "env_var":       "GOOGLE_API_KEY",
        "default_model": "gemini-2.5-flash",
        "models":        ["gemini-2.5-flash", "gemini-2.5-pro"],
    },
    "openai": {
        "label":         "OpenAI",
        "env_var":       "OPENAI_API_KEY",
        "default_model": "gpt-5-mini",
        "models":        ["gpt-5-mini", "gpt-5-nano", "gpt-5.2"],
    },
    "anthropic": {
        "label":         "Anthropic (Claude)",
        "env_var":       "ANTHROPIC_API_KEY",
        "default_model": "claude-sonnet-4.5",
        "models":        ["claude-sonnet-4.5", "claude-opus-4.5"],
    },
    "deepseek": {
        "label":         "DeepSeek",
        "env_var":       "DEEPSEEK_API_KEY",
        "default_model": "deepseek-chat",
        "base_url":      "https://api.deepseek.com/v1",
        "models":        ["deepseek-chat"],
    },
    "alibaba": {
        "label":         "Alibaba (Qwen)",
        "env_var":       "DASHSCOPE_API_KEY",
        "default_model": "qwen-max",
        "base_url":      "https://dashscope-intl.aliyuncs.com/compatible-mode/v1",
        "min_temperature": 0.6,
        "models":        ["qwen-max", "qwen-plus"],
    },
    "local_ollama": {
        "label":         "Local / Ollama",
        "env_var":       None,
        "default_model": "llama3",
        "models":        ["llama3", "mistral", "gemma2"],
    },
}

# provider -> (module, class, keyword the client takes the key under, pip name)
_CLIENTS: dict[str, tuple[str, str, str | None, str]] = {
    "google":       ("langchain_google_genai", "ChatGoogleGenerativeAI", "google_api_key", "langchain-google-genai"),
    "openai":       ("langchain_openai", "ChatOpenAI", "api_key", "langchain-openai"),
    "anthropic":    ("langchain_anthropic", "ChatAnthropic", "api_key", "langchain-anthropic"),
    "deepseek":     ("langchain_openai", "ChatOpenAI", "api_key", "langchain-openai"),
    "alibaba":      ("langchain_openai", "ChatOpenAI", "api_key", "langchain-openai"),
    "local_ollama": ("langchain_ollama", "ChatOllama", None, "langchain-ollama"),
}


def requires_api_key(provider: str) -> bool:
    spec = PROVIDER_SPECS.get(provider)
    return spec is None or spec["env_var"] is not None


def get_all_models_flat(providers: set[str] | None = None) -> list[dict]:
    """
    [{provider, model, label}] for the sidebar model picker.

    With `providers`, only those keys are listed (keyless providers always are).
    """
    result = []
    for key, spec in PROVIDER_SPECS.items():
        if providers is not None and key not in providers and requires_api_key(key):
            continue
        result.extend(
            {"provider": key, "model": model, "label": f"{spec['label']} — {model}"}
            for model in spec["models"]
        )
    return result


def _client_class(provider: str):
    module_name, class_name, _, package = _CLIENTS[provider]
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        raise ImportError(f"pip install {package}")
    return getattr(module, class_name)


def build_llm(
    provider: str,
    api_key: str | None,
    model: str | None = None,
    temperature: float = 0.7,
    **kwargs,
):
    """
    Construct the chat model for `provider`.

    Args:
        provider:    PROVIDER_SPECS key.
        api_key:     Provider key; not passed to keyless providers.
        model:       Model id, defaults to the provider's default_model.
        temperature: Sampling temperature (raised to the provider floor if any).

    Raises:
        ValueError:  unknown provider key.
        ImportError: the provider's LangChain package is missing.
    """
    spec = PROVIDER_SPECS.get(provider)
    if spec is None:
        raise ValueError(
            f"Unknown provider: '{provider}'. Valid keys: {list(PROVIDER_SPECS)}"
        )

    params = {
        "model": model or spec["default_model"],
        "temperature": max(temperature, spec.get("min_temperature", temperature)),
        **kwargs,
    }
    key_kwarg = _CLIENTS[provider][2]
    if key_kwarg:
        params[key_kwarg] = api_key
    if spec.get("base_url"):
        params["base_url"] = spec["base_url"]

    return _client_class(provider)(**params)
