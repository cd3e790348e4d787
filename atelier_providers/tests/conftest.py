"""Pytest configuration for the providers test suite.

Keeps configuration lookups hermetic (no ambient ``.env`` or config file) and
offers a log capture attached to the ``providers`` logger, which does not
propagate to the root logger.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Callable, Iterator, List

import pytest

from atelier_providers.base.logging import ROOT_LOGGER_NAME
from atelier_providers.base.models import ProviderConfig
from atelier_providers.config import reset_config_cache

OPENAI_BASE = "https://api.test/v1"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Point config sources at empty locations for the duration of a test."""
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.delenv("PROVIDERS_CONFIG_FILE", raising=False)
    for name in ("OPENAI", "OPENROUTER", "GEMINI"):
        for suffix in ("API_KEY", "BASE_URL", "MODEL", "API_TYPE"):
            monkeypatch.delenv(f"{name}_{suffix}", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture(autouse=True)
def console_handler_to_current_stderr() -> Iterator[None]:
    """Re-point the providers console handler at the stderr active for this test."""
    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        if isinstance(handler, logging.StreamHandler) and getattr(handler, "_providers_console_handler", False):
            handler.setStream(sys.stderr)
    yield


@pytest.fixture()
def make_config() -> Callable[..., ProviderConfig]:
    """Build a ``ProviderConfig`` with test defaults for any omitted field."""

    def _make(**overrides) -> ProviderConfig:
        data = {"base_url": OPENAI_BASE, "api_key": "sk-test", "model_id": "gpt-4o-mini", "api_type": "openai"}
        data.update(overrides)
        return ProviderConfig.model_validate(data)

    return _make


@pytest.fixture()
def log_capture() -> Iterator[List[logging.LogRecord]]:
    records: List[logging.LogRecord] = []
    handler = logging.Handler()
    handler.emit = lambda record: records.append(record)  # type: ignore
    handler.setLevel(logging.DEBUG)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.addHandler(handler)
    try:
        yield records
    finally:
        logger.removeHandler(handler)


def events(records: List[logging.LogRecord]) -> List[dict]:
    """Decode structured log messages; non-JSON records are skipped."""
    out = []
    for record in records:
        try:
            out.append(json.loads(record.getMessage()))
        except ValueError:
            continue
    return out


@pytest.fixture()
def log_events() -> Callable[[List[logging.LogRecord]], List[dict]]:
    return events
