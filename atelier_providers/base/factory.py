"""Provider factory.

Purpose
-------
Dispatch once, at construction, from a configured ``api_type`` to the one
adapter (or drawing service) class that serves it. Adapters are imported
lazily with ``importlib`` so importing the factory pulls in no adapter code.

Failure modes
-------------
- Unknown ``api_type``, a missing module or class: :class:`UnknownProviderError`.
- Constructor errors are wrapped in :class:`UnknownProviderError` with the
  original exception chained.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Optional, Tuple, Type

from .models import ProviderConfig, ModelConfig


class UnknownProviderError(Exception):
    """Raised when an ``api_type`` cannot be resolved or its adapter built."""


def _load(spec: Dict[str, str], api_type: str) -> Type:
    module_path, class_name = spec["module"], spec["class"]
    try:
        mod = import_module(module_path)
    except ImportError as exc:  # pragma: no cover - import failure path
        raise UnknownProviderError(f"Failed to import module '{module_path}' for '{api_type}': {exc}") from exc
    try:
        return getattr(mod, class_name)
    except AttributeError as exc:
        raise UnknownProviderError(f"Adapter class '{class_name}' not found in '{module_path}'") from exc


def _construct(klass: Type, api_type: str, config: ProviderConfig, model_id: Optional[str]) -> Any:
    try:
        return klass(config, model_id)
    except TypeError as exc:
        raise UnknownProviderError(f"Invalid arguments for '{api_type}' adapter constructor: {exc}") from exc


class ProviderFactory:
    """Create chat adapters from a :class:`ProviderConfig`."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "atelier_providers.openai.client", "class": "OpenAICompletionsProvider"},
        "openai-responses": {"module": "atelier_providers.openai_responses.client", "class": "OpenAIResponsesProvider"},
        "gemini": {"module": "atelier_providers.gemini.client", "class": "GeminiProvider"},
    }
    _ALIASES: Dict[str, str] = {"google": "gemini", "openrouter": "openai", "responses": "openai-responses"}

    @classmethod
    def normalize_api_type(cls, api_type: Optional[str]) -> str:
        name = (api_type or "openai").lower().strip()
        return cls._ALIASES.get(name, name)

    @classmethod
    def create(cls, config: ProviderConfig, model_id: Optional[str] = None) -> Any:
        """Return the adapter for the model's ``api_type`` (or the config's)."""
        model: Optional[ModelConfig] = config.find_model(model_id or config.model_id)
        api_type = cls.normalize_api_type((model.api_type if model else None) or config.api_type)
        spec = cls._PROVIDERS.get(api_type)
        if not spec:
            raise UnknownProviderError(f"Unknown provider api_type '{api_type}'")
        return _construct(_load(spec, api_type), api_type, config, model_id)

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        return tuple(cls._PROVIDERS.keys())


_DRAWING_SERVICES: Dict[str, Dict[str, str]] = {
    "openai": {"module": "atelier_providers.openai.drawing", "class": "OpenAIDrawingService"},
    "gemini": {"module": "atelier_providers.gemini.drawing", "class": "GeminiDrawingService"},
}


def create_provider(config: ProviderConfig, model_id: Optional[str] = None) -> Any:
    """Shortcut for :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(config, model_id)


def create_drawing_service(config: ProviderConfig, model_id: Optional[str] = None) -> Any:
    """Return the drawing service for ``api_type``: ``openai`` or Gemini otherwise."""
    model = config.find_model(model_id or config.model_id)
    api_type = ((model.api_type if model else None) or config.api_type or "gemini").lower().strip()
    key = "openai" if api_type == "openai" else "gemini"
    return _construct(_load(_DRAWING_SERVICES[key], key), key, config, model_id)


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider", "create_drawing_service"]
