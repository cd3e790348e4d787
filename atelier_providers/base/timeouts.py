"""Request timeout policy for provider adapters.

Timeouts are wall-clock per attempt: every retry of a logical call receives a
fresh budget. Reasoning ("thinking") models get the long budget because they
may spend minutes before the first byte.

get_timeout_config()
    Returns a process-cached configuration, re-reading the environment only
    when an override variable changes. Supported variables (optional):
        PT_TIMEOUT_HTTP_SECONDS       standard models (default 300)
        PT_TIMEOUT_THINKING_SECONDS   reasoning models (default 600)

resolve_request_timeout(model_id)
    Picks the budget for one attempt by substring match of the model id
    against the thinking keyword set.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from ..config.defaults import (
    STANDARD_TIMEOUT_SECONDS,
    THINKING_MODEL_KEYWORDS,
    THINKING_TIMEOUT_SECONDS,
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values (seconds)."""

    http_timeout_seconds: float = STANDARD_TIMEOUT_SECONDS
    thinking_timeout_seconds: float = THINKING_TIMEOUT_SECONDS


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from ``name``; fall back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - module cache
    guard = "/".join(
        [os.getenv("PT_TIMEOUT_HTTP_SECONDS", ""), os.getenv("PT_TIMEOUT_THINKING_SECONDS", "")]
    )
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float("PT_TIMEOUT_HTTP_SECONDS", STANDARD_TIMEOUT_SECONDS),
        thinking_timeout_seconds=_parse_env_float("PT_TIMEOUT_THINKING_SECONDS", THINKING_TIMEOUT_SECONDS),
    )
    _ENV_GUARD = guard
    return _CACHED


def is_thinking_model(model_id: str) -> bool:
    return any(keyword in model_id for keyword in THINKING_MODEL_KEYWORDS)


def resolve_request_timeout(model_id: str) -> float:
    """Return the per-attempt timeout in seconds for ``model_id``."""
    cfg = get_timeout_config()
    return cfg.thinking_timeout_seconds if is_thinking_model(model_id) else cfg.http_timeout_seconds


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "is_thinking_model",
    "resolve_request_timeout",
]
