from __future__ import annotations

from atelier_providers.base.timeouts import get_timeout_config, is_thinking_model, resolve_request_timeout


def test_defaults(monkeypatch):
    monkeypatch.delenv("PT_TIMEOUT_HTTP_SECONDS", raising=False)
    monkeypatch.delenv("PT_TIMEOUT_THINKING_SECONDS", raising=False)
    cfg = get_timeout_config()
    assert cfg.http_timeout_seconds == 300.0
    assert cfg.thinking_timeout_seconds == 600.0


def test_thinking_models_get_longer_budget(monkeypatch):
    monkeypatch.delenv("PT_TIMEOUT_HTTP_SECONDS", raising=False)
    monkeypatch.delenv("PT_TIMEOUT_THINKING_SECONDS", raising=False)
    assert is_thinking_model("gpt-5-mini")
    assert is_thinking_model("o1-preview")
    assert is_thinking_model("gemini-2.0-flash-thinking-exp")
    assert not is_thinking_model("gpt-4o-mini")
    assert resolve_request_timeout("gpt-5") == 600.0
    assert resolve_request_timeout("gpt-4o") == 300.0


def test_env_overrides_are_picked_up(monkeypatch):
    monkeypatch.setenv("PT_TIMEOUT_HTTP_SECONDS", "12.5")
    monkeypatch.setenv("PT_TIMEOUT_THINKING_SECONDS", "not-a-number")
    cfg = get_timeout_config()
    assert cfg.http_timeout_seconds == 12.5
    assert cfg.thinking_timeout_seconds == 600.0
    monkeypatch.setenv("PT_TIMEOUT_HTTP_SECONDS", "-1")
    assert get_timeout_config().http_timeout_seconds == 300.0
