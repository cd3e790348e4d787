from __future__ import annotations

import json
import os

import pytest
from pydantic import ValidationError

from atelier_providers.base.models import APICallParams, ProviderConfig
from atelier_providers.config import get_provider_config, load_provider_config, reset_config_cache
from atelier_providers.config.env import is_placeholder, resolve_provider_key


def test_defaults_are_used_without_other_sources():
    cfg = get_provider_config("openai")
    assert cfg["base_url"] == "https://api.openai.com/v1"
    assert cfg["api_type"] == "openai"
    assert "api_key" not in cfg


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or")
    monkeypatch.setenv("OPENROUTER_MODEL", "anthropic/claude-3.5")
    cfg = load_provider_config("openrouter")
    assert cfg.api_key == "sk-or"
    assert cfg.model_id == "anthropic/claude-3.5"
    assert cfg.base_url == "https://openrouter.ai/api/v1"


def test_placeholder_env_values_are_ignored(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "your-key-here")
    assert load_provider_config("openai").api_key == ""
    assert is_placeholder("CHANGEME")
    assert not is_placeholder("sk-real")


def test_gemini_key_alias(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "g-alias")
    assert resolve_provider_key("gemini") == ("g-alias", "GOOGLE_API_KEY")
    assert load_provider_config("gemini").api_key == "g-alias"


def test_yaml_file_layer_with_model_capabilities(monkeypatch, tmp_path):
    path = tmp_path / "providers.yaml"
    path.write_text(
        "openai:\n"
        "  base_url: https://proxy.test/v1\n"
        "  models:\n"
        "    - id: o3-mini\n"
        "      capabilities:\n"
        "        max_tokens_param: max_completion_tokens\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("PROVIDERS_CONFIG_FILE", str(path))
    reset_config_cache()
    cfg = load_provider_config("openai")
    assert cfg.base_url == "https://proxy.test/v1"
    model = cfg.find_model("o3-mini")
    assert model is not None
    assert model.capabilities.max_tokens_param == "max_completion_tokens"


def test_json_file_layer_and_override_precedence(monkeypatch, tmp_path):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"gemini": {"model_id": "from-file"}}), encoding="utf-8")
    monkeypatch.setenv("PROVIDERS_CONFIG_FILE", str(path))
    monkeypatch.setenv("GEMINI_MODEL", "from-env")
    reset_config_cache()
    assert get_provider_config("gemini")["model_id"] == "from-env"
    assert get_provider_config("gemini", {"model_id": "from-code", "api_key": None})["model_id"] == "from-code"


def test_dotenv_does_not_override_process_env(monkeypatch, tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text("GEMINI_API_KEY=from-dotenv\nOPENAI_API_KEY=dot-openai\n", encoding="utf-8")
    monkeypatch.setenv("DOTENV_FILE", str(dotenv))
    monkeypatch.setenv("OPENAI_API_KEY", "from-process")
    reset_config_cache()
    try:
        assert load_provider_config("openai").api_key == "from-process"
        assert load_provider_config("gemini").api_key == "from-dotenv"
    finally:
        os.environ.pop("GEMINI_API_KEY", None)


def test_provider_config_is_frozen_and_accepts_camel_case():
    cfg = ProviderConfig.model_validate({"baseUrl": "https://x", "apiKey": "k", "modelId": "m"})
    assert cfg.base_url == "https://x"
    with pytest.raises(ValidationError):
        cfg.api_key = "other"  # type: ignore[misc]


def test_call_params_validation():
    assert APICallParams(maxTokens=10).max_tokens == 10
    with pytest.raises(ValidationError):
        APICallParams(temperature=3.5)
    with pytest.raises(ValidationError):
        APICallParams(max_tokens=0)
    with pytest.raises(ValidationError):
        APICallParams(reasoning_effort="extreme")
