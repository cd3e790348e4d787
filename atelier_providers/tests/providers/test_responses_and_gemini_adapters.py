from __future__ import annotations

import json

import httpx
import pytest
import respx

from atelier_providers.base.errors import EmptyResponseError, UpstreamError
from atelier_providers.base.models import APICallParams, ChatMessage
from atelier_providers.gemini import GeminiProvider
from atelier_providers.gemini.gemini_chat import build_chat_body, model_url, parse_gemini_chunk
from atelier_providers.openai_responses import OpenAIResponsesProvider
from atelier_providers.openai_responses.client import build_request_body, extract_response_text

GEMINI_URL = "https://gemini.test/v1beta/models/gemini-2.5-flash:generateContent"


def test_responses_body_keeps_system_in_input():
    body = build_request_body(
        "gpt-4.1",
        [ChatMessage("system", "rules"), ChatMessage("user", "hi")],
        stream=True,
        params=APICallParams(temperature=1.0, max_tokens=50),
    )
    assert body["input"] == [{"role": "system", "content": "rules"}, {"role": "user", "content": "hi"}]
    assert body["max_output_tokens"] == 50
    assert body["stream"] is True
    assert "instructions" not in body


def test_responses_text_extraction_order():
    assert extract_response_text({"output_text": "a", "choices": [{"message": {"content": "b"}}]}) == "a"
    assert (
        extract_response_text(
            {"output": [{"content": [{"type": "output_text", "text": "x"}, {"type": "output_text", "text": "y"}]}]}
        )
        == "xy"
    )
    assert extract_response_text({"choices": [{"message": {"content": "c"}}]}) == "c"
    assert extract_response_text(None) == ""


@pytest.mark.asyncio
@respx.mock
async def test_responses_adapter_round_trip(make_config):
    route = respx.post("https://api.test/v1/responses").mock(
        return_value=httpx.Response(200, json={"output_text": "<think>x</think>done"})
    )
    provider = OpenAIResponsesProvider(make_config(api_type="openai-responses"))
    result = await provider.call_api([ChatMessage("user", "hi")])
    assert result.content == "done"
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_responses_adapter_has_no_corrections(make_config):
    route = respx.post("https://api.test/v1/responses").mock(
        return_value=httpx.Response(400, json={"error": {"message": "System role is not supported"}})
    )
    provider = OpenAIResponsesProvider(make_config())
    with pytest.raises(UpstreamError):
        await provider.call_api([ChatMessage("system", "s"), ChatMessage("user", "u")])
    assert route.call_count == 1


def test_gemini_model_url():
    assert model_url("https://gemini.test", "gemini-2.5-flash", stream=False) == GEMINI_URL
    assert (
        model_url("https://gemini.test/v1beta/", "models/gemini-2.5-flash", stream=True)
        == "https://gemini.test/v1beta/models/gemini-2.5-flash:streamGenerateContent?alt=sse"
    )


def test_gemini_chat_body():
    body = build_chat_body(
        [ChatMessage("system", "rules"), ChatMessage("user", "hi"), ChatMessage("assistant", "hello")],
        APICallParams(temperature=0.3, max_tokens=20, top_p=0.5),
    )
    assert body["systemInstruction"] == {"parts": [{"text": "rules"}]}
    assert body["contents"] == [
        {"role": "user", "parts": [{"text": "hi"}]},
        {"role": "model", "parts": [{"text": "hello"}]},
    ]
    assert body["generationConfig"] == {"temperature": 0.3, "topP": 0.5, "maxOutputTokens": 20}


def test_parse_gemini_chunk_skips_thoughts():
    frame = json.dumps(
        {"candidates": [{"content": {"parts": [{"text": "hmm", "thought": True}, {"text": "Hi"}]}}]}
    )
    chunk = parse_gemini_chunk(frame)
    assert chunk.content == "Hi"
    assert chunk.done is False
    final = parse_gemini_chunk(json.dumps({"candidates": [{"content": {"parts": []}, "finishReason": "STOP"}]}))
    assert final.done is True
    assert parse_gemini_chunk("not json") is None
    assert parse_gemini_chunk(json.dumps({"candidates": [{"content": {"parts": [{"text": "x", "thought": True}]}}]})) is None


@pytest.mark.asyncio
@respx.mock
async def test_gemini_provider_non_stream(make_config):
    route = respx.post(GEMINI_URL).mock(
        return_value=httpx.Response(
            200,
            json={
                "candidates": [
                    {
                        "content": {"parts": [{"text": "plan", "thought": True}, {"text": "Answer"}]},
                        "finishReason": "STOP",
                    }
                ]
            },
        )
    )
    provider = GeminiProvider(make_config(base_url="https://gemini.test", api_type="gemini"), "gemini-2.5-flash")
    result = await provider.call_api([ChatMessage("user", "hi")])
    assert result.content == "Answer"
    assert result.finish_reason == "STOP"
    assert route.calls.last.request.headers["x-goog-api-key"] == "sk-test"


@pytest.mark.asyncio
@respx.mock
async def test_gemini_blocked_prompt_is_empty_response(make_config):
    respx.post(GEMINI_URL).mock(
        return_value=httpx.Response(200, json={"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}})
    )
    provider = GeminiProvider(make_config(base_url="https://gemini.test", api_type="gemini"), "gemini-2.5-flash")
    with pytest.raises(EmptyResponseError, match="Content blocked: SAFETY"):
        await provider.call_api([ChatMessage("user", "hi")])
