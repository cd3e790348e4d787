"""Structured logging utilities for the provider layer.

All adapters obtain loggers through :func:`get_logger`, which attaches a
single stderr handler to the shared ``providers`` logger; child loggers
propagate to it. Events are emitted as one JSON object per line via
:func:`log_event`, and :func:`normalized_log_event` guarantees the canonical
keys (``phase``, ``attempt``, ``error_code``, ``emitted``) are present so
request lifecycles can be filtered uniformly across providers.

Environment:
    ``PROVIDERS_LOG_LEVEL``: level name for the shared logger (default INFO).
    ``PROVIDERS_LOG_FORMAT``: ``json`` (default) or ``plain``.

Credentials are never logged; callers pass only provider, model, endpoint
and outcome fields.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Dict

from .log_support import JsonFormatter, LogContext

ROOT_LOGGER_NAME = "providers"
_CONSOLE_HANDLER_ATTR = "_providers_console_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a level name case-insensitively, falling back to ``default``."""
    if not value:
        return default
    return _LEVELS.get(value.strip().upper(), default)


def _make_formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _ensure_root_logger() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = _parse_level(os.getenv("PROVIDERS_LOG_LEVEL"))
    json_mode = os.getenv("PROVIDERS_LOG_FORMAT", "json").strip().lower() != "plain"
    logger.setLevel(level)
    managed = [h for h in logger.handlers if getattr(h, _CONSOLE_HANDLER_ATTR, False)]
    if managed:
        for handler in managed:
            handler.setLevel(level)
            handler.setFormatter(_make_formatter(json_mode))
        return logger
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_make_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger under the shared ``providers`` hierarchy.

    Names without the root prefix are nested beneath it, so
    ``get_logger("openai")`` yields ``providers.openai``.
    """
    root = _ensure_root_logger()
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit a structured event as a single JSON message.

    Keys whose value is ``None`` are dropped unless ``keep_none`` is set.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = ("structured", "phase", "attempt", "emitted")


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit an event carrying the canonical lifecycle keys.

    ``error_code`` is omitted when ``None``; the remaining required keys are
    always present. Extra fields never overwrite the normalized values.
    """
    base_fields: Dict[str, Any] = {
        "structured": True,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
    }
    if error_code is not None:
        base_fields["error_code"] = error_code
    for k, v in extra_fields.items():
        if v is None or k in base_fields:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "LogContext",
    "get_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
    "ROOT_LOGGER_NAME",
]
