from __future__ import annotations

import httpx
import pytest
import respx

from atelier_providers.base.errors import ConfigError, ErrorCode, UpstreamError
from atelier_providers.base.model_listing import filter_models, is_image_generation_model, list_models, models_url


def test_models_url_variants():
    assert models_url("https://api.test/v1", "openai") == "https://api.test/v1/models"
    assert models_url("https://api.test/v1/chat/completions", "openai") == "https://api.test/v1/models"
    assert models_url("https://api.test", "openai") == "https://api.test/v1/models"
    assert models_url("https://g.test/", "gemini") == "https://g.test/v1beta/models"


@pytest.mark.asyncio
@respx.mock
async def test_list_openai_models_sorted_and_deduplicated(make_config):
    route = respx.get("https://api.test/v1/models").mock(
        return_value=httpx.Response(200, json={"data": [{"id": "b"}, {"id": "a"}, {"id": "b"}, {"object": "x"}]})
    )
    assert await list_models(make_config()) == ["a", "b"]
    assert route.calls.last.request.headers["Authorization"] == "Bearer sk-test"


@pytest.mark.asyncio
@respx.mock
async def test_list_gemini_models_strips_prefix(make_config):
    route = respx.get("https://gemini.test/v1beta/models").mock(
        return_value=httpx.Response(
            200, json={"models": [{"name": "models/gemini-2.5-flash"}, {"name": "models/imagen-3"}]}
        )
    )
    ids = await list_models(make_config(base_url="https://gemini.test", api_type="gemini"))
    assert ids == ["gemini-2.5-flash", "imagen-3"]
    assert route.calls.last.request.headers["x-goog-api-key"] == "sk-test"


@pytest.mark.asyncio
@respx.mock
async def test_list_models_error_status(make_config):
    respx.get("https://api.test/v1/models").mock(return_value=httpx.Response(401, json={"error": "nope"}))
    with pytest.raises(UpstreamError) as info:
        await list_models(make_config())
    assert info.value.code is ErrorCode.AUTH


@pytest.mark.asyncio
async def test_list_models_requires_key(make_config):
    with pytest.raises(ConfigError):
        await list_models(make_config(api_key=""))


def test_filter_models():
    ids = ["gemini-2.5-flash-image-preview", "gpt-image-1", "gpt-4o", "image-text-only"]
    assert is_image_generation_model("imagen-3.0")
    assert not is_image_generation_model("image-text-only")
    assert filter_models(ids, image_only=True) == ["gemini-2.5-flash-image-preview", "gpt-image-1"]
    assert filter_models(ids, keyword="GPT image") == ["gpt-image-1"]
    assert filter_models(ids) == ids
