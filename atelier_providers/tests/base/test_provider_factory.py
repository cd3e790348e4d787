from __future__ import annotations

import pytest

from atelier_providers.base.factory import ProviderFactory, UnknownProviderError, create_drawing_service
from atelier_providers.gemini import GeminiDrawingService, GeminiProvider
from atelier_providers.openai import OpenAICompletionsProvider, OpenAIDrawingService
from atelier_providers.openai_responses import OpenAIResponsesProvider


@pytest.mark.parametrize(
    "api_type, klass",
    [
        ("openai", OpenAICompletionsProvider),
        ("openrouter", OpenAICompletionsProvider),
        ("openai-responses", OpenAIResponsesProvider),
        ("gemini", GeminiProvider),
        ("google", GeminiProvider),
    ],
)
def test_create_dispatches_on_api_type(make_config, api_type, klass):
    assert isinstance(ProviderFactory.create(make_config(api_type=api_type)), klass)


def test_model_level_api_type_wins(make_config):
    config = make_config(models=[{"id": "gemini-pro", "apiType": "gemini"}])
    provider = ProviderFactory.create(config, "gemini-pro")
    assert isinstance(provider, GeminiProvider)
    assert provider.model_id == "gemini-pro"


def test_unknown_api_type(make_config):
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create(make_config(api_type="carrier-pigeon"))


def test_supported_lists_canonical_types():
    assert set(ProviderFactory.supported()) == {"openai", "openai-responses", "gemini"}


def test_drawing_service_selection(make_config):
    assert isinstance(create_drawing_service(make_config(api_type="openai")), OpenAIDrawingService)
    assert isinstance(create_drawing_service(make_config(api_type="gemini")), GeminiDrawingService)
