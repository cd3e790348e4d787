"""Provider settings: where base URLs, keys and model ids come from.

``get_provider_config(provider)`` folds four layers into one dict, each
overriding the previous:

1. ``DEFAULTS`` below (public endpoints and a default model per provider);
2. the provider's section of the file named by ``PROVIDERS_CONFIG_FILE``
   (``.json`` is read as JSON, anything else as YAML);
3. ``<PROVIDER>_MODEL`` / ``_API_KEY`` / ``_BASE_URL`` / ``_API_TYPE``
   environment variables, placeholder values ignored;
4. explicit overrides (``None`` values skipped).

Before the first lookup the ``.env`` file named by ``DOTENV_FILE`` (default
``.env``) is loaded without touching variables the process already has.
``load_provider_config`` validates the result into a frozen
:class:`ProviderConfig`.

A config file section may also carry per-model capabilities::

    openai:
      model_id: gpt-4o-mini
      models:
        - id: o3-mini
          capabilities:
            max_tokens_param: max_completion_tokens
"""
from __future__ import annotations

import functools
import json
import os
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional

import yaml
from dotenv import load_dotenv

from ..base.models import ProviderConfig
from .defaults import (
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODEL,
)
from .env import is_placeholder, resolve_provider_key


def _defaults(base_url: str, model_id: str, api_type: str) -> Dict[str, Any]:
    return {"base_url": base_url, "model_id": model_id, "api_type": api_type}


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": _defaults(OPENAI_DEFAULT_BASE_URL, OPENAI_DEFAULT_MODEL, "openai"),
    "openrouter": _defaults(OPENROUTER_DEFAULT_BASE_URL, OPENROUTER_DEFAULT_MODEL, "openai"),
    "gemini": _defaults(GEMINI_DEFAULT_BASE_URL, GEMINI_DEFAULT_MODEL, "gemini"),
}

# config key -> environment variable suffix (``<PROVIDER>_<SUFFIX>``)
_ENV_SUFFIXES = (
    ("model_id", "MODEL"),
    ("api_key", "API_KEY"),  # pragma: allowlist secret
    ("base_url", "BASE_URL"),
    ("api_type", "API_TYPE"),
)


@functools.lru_cache(maxsize=None)
def _apply_dotenv(path: str) -> bool:
    """Load ``path`` into ``os.environ`` once; existing variables win."""
    return Path(path).is_file() and load_dotenv(path, override=False)


@functools.lru_cache(maxsize=None)
def _read_config_file(path: str) -> Dict[str, Any]:
    file = Path(path)
    if not file.is_file():
        return {}
    text = file.read_text(encoding="utf-8")
    document = json.loads(text) if file.suffix.lower() == ".json" else yaml.safe_load(text)
    return document if isinstance(document, dict) else {}


def reset_config_cache() -> None:
    """Forget the loaded ``.env`` and config file so the next lookup re-reads them."""
    _apply_dotenv.cache_clear()
    _read_config_file.cache_clear()


def _file_layer(name: str) -> Mapping[str, Any]:
    path = os.getenv("PROVIDERS_CONFIG_FILE")
    section = _read_config_file(path).get(name) if path else None
    return section if isinstance(section, dict) else {}


def _env_layer(name: str) -> Dict[str, Any]:
    prefix = name.upper().replace("-", "_")
    layer: Dict[str, Any] = {}
    for key, suffix in _ENV_SUFFIXES:
        value = os.getenv(f"{prefix}_{suffix}")
        if value is not None and not is_placeholder(value):
            layer[key] = value
    return layer


def _layers(name: str, overrides: Optional[Dict[str, Any]]) -> Iterator[Mapping[str, Any]]:
    yield DEFAULTS.get(name, {})
    yield _file_layer(name)
    yield _env_layer(name)
    yield {k: v for k, v in (overrides or {}).items() if v is not None}


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged settings dict for ``provider`` (later layers win).

    When no layer supplies ``api_key`` the provider's credential variables
    (including aliases such as ``GOOGLE_API_KEY``) are consulted.
    """
    _apply_dotenv(os.getenv("DOTENV_FILE", ".env"))
    name = (provider or "").strip().lower()
    merged: Dict[str, Any] = {}
    for layer in _layers(name, overrides):
        merged.update(layer)
    if not merged.get("api_key"):
        key, _variable = resolve_provider_key(name)
        if key:
            merged["api_key"] = key
    return merged


def load_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> ProviderConfig:
    """Return a validated, immutable :class:`ProviderConfig` for ``provider``."""
    merged = get_provider_config(provider, overrides)
    return ProviderConfig.model_validate(
        {
            "base_url": merged.get("base_url", ""),
            "api_key": merged.get("api_key", ""),
            "model_id": merged.get("model_id", ""),
            "models": merged.get("models") or [],
            "api_type": merged.get("api_type", "openai"),
        }
    )


__all__ = [
    "DEFAULTS",
    "get_provider_config",
    "load_provider_config",
    "reset_config_cache",
]
