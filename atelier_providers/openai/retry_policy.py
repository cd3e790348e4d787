"""Recognizers for the two upstream rejections an adapter can repair.

Both recognizers match lowercase substrings of ``error.message`` in the
vendor error body. The match conditions are kept exactly as observed from
vendors; widening or narrowing them changes which calls get retried.

- Token-parameter correction: the model rejects ``max_tokens`` and asks for
  ``max_completion_tokens``.
- System-role correction: the endpoint rejects the ``system`` role
  (Completions) or ``instructions`` (Responses); the system text is merged
  into the first user turn instead.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..base.models import ChatMessage, ModelConfig
from ..base.utils.messages import has_system_message
from ..config.defaults import (
    COMPLETION_TOKENS_MODEL_KEYWORDS,
    MAX_COMPLETION_TOKENS_PARAM,
    MAX_TOKENS_PARAM,
)

_REJECTION_WORDS = ("unsupported", "not supported", "not allowed", "invalid")


def requires_completion_tokens(model_id: str) -> bool:
    normalized = model_id.lower()
    return any(keyword in normalized for keyword in COMPLETION_TOKENS_MODEL_KEYWORDS)


def initial_max_tokens_param(model_id: str, model_config: Optional[ModelConfig]) -> str:
    """Explicit model capability first, then the model-id heuristic."""
    if model_config is not None and model_config.capabilities is not None:
        configured = model_config.capabilities.max_tokens_param
        if configured:
            return configured
    return MAX_COMPLETION_TOKENS_PARAM if requires_completion_tokens(model_id) else MAX_TOKENS_PARAM


def _error_info(error_data: Dict[str, Any]) -> Dict[str, Any]:
    info = error_data.get("error") if isinstance(error_data, dict) else None
    return info if isinstance(info, dict) else {}


def _error_message(error_data: Dict[str, Any]) -> str:
    message = _error_info(error_data).get("message")
    return message.lower() if isinstance(message, str) else ""


def should_retry_with_completion_tokens(error_data: Dict[str, Any], current_param: str) -> bool:
    if current_param == MAX_COMPLETION_TOKENS_PARAM:
        return False
    info = _error_info(error_data)
    message = _error_message(error_data)
    if not message:
        return False
    unsupported = info.get("code") == "unsupported_parameter" or "unsupported parameter" in message
    names_both = MAX_TOKENS_PARAM in message and MAX_COMPLETION_TOKENS_PARAM in message
    param = info.get("param")
    about_max_tokens = not param or param == MAX_TOKENS_PARAM
    return unsupported and names_both and about_max_tokens


def should_retry_without_system_role(error_data: Dict[str, Any], messages: Sequence[ChatMessage]) -> bool:
    if not has_system_message(messages):
        return False
    message = _error_message(error_data)
    if not message:
        return False
    return "system" in message and (any(w in message for w in _REJECTION_WORDS) or "role" in message)


def should_retry_without_instructions(error_data: Dict[str, Any], messages: Sequence[ChatMessage]) -> bool:
    if not has_system_message(messages):
        return False
    message = _error_message(error_data)
    if not message:
        return False
    return "instruction" in message or ("system" in message and any(w in message for w in _REJECTION_WORDS))


__all__ = [
    "requires_completion_tokens",
    "initial_max_tokens_param",
    "should_retry_with_completion_tokens",
    "should_retry_without_system_role",
    "should_retry_without_instructions",
]
