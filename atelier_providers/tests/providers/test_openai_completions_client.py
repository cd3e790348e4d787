from __future__ import annotations

import json

import httpx
import pytest
import respx

from atelier_providers.base.errors import (
    ConfigError,
    EmptyResponseError,
    ErrorCode,
    ProviderError,
    RequestTimeoutError,
    UpstreamError,
)
from atelier_providers.base.models import APICallParams, ChatMessage
from atelier_providers.openai import OpenAICompletionsProvider

URL = "https://api.test/v1/chat/completions"

TOKEN_ERROR = {
    "error": {
        "message": "Unsupported parameter: 'max_tokens' is not supported with this model. "
        "Use 'max_completion_tokens' instead.",
        "param": "max_tokens",
        "code": "unsupported_parameter",
    }
}
SYSTEM_ERROR = {"error": {"message": "System role is not supported for this model."}}


def ok(text: str = "Hello there") -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": text}, "finish_reason": "stop"}]})


def sent_body(call) -> dict:
    return json.loads(call.request.content)


@pytest.mark.asyncio
@respx.mock
async def test_non_stream_success(make_config):
    route = respx.post(URL).mock(return_value=ok())
    provider = OpenAICompletionsProvider(make_config())
    result = await provider.call_api([ChatMessage("user", "hi")], False, APICallParams(temperature=0.5))
    assert result.content == "Hello there"
    assert result.finish_reason == "stop"
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert sent_body(route.calls.last) == {
        "model": "gpt-4o-mini",
        "messages": [{"role": "user", "content": "hi"}],
        "temperature": 0.5,
    }


@pytest.mark.asyncio
@respx.mock
async def test_max_tokens_correction_retries_once_and_sticks(make_config, log_capture, log_events):
    route = respx.post(URL).mock(side_effect=[httpx.Response(400, json=TOKEN_ERROR), ok(), ok("again")])
    provider = OpenAICompletionsProvider(make_config(model_id="gpt-4.1"))
    params = APICallParams(max_tokens=256)

    result = await provider.call_api([ChatMessage("user", "hi")], False, params)

    assert result.content == "Hello there"
    assert route.call_count == 2
    first, second = (sent_body(c) for c in route.calls)
    assert first["max_tokens"] == 256
    assert "max_tokens" not in second
    assert second["max_completion_tokens"] == 256
    assert provider.max_tokens_param == "max_completion_tokens"

    await provider.call_api([ChatMessage("user", "again")], False, params)
    assert route.call_count == 3
    assert sent_body(route.calls.last)["max_completion_tokens"] == 256

    retries = [e for e in log_events(log_capture) if e["event"] == "retry.attempt"]
    assert len(retries) == 1
    assert retries[0]["correction"] == "max_completion_tokens"


@pytest.mark.asyncio
@respx.mock
async def test_system_role_correction_merges_into_first_user_turn(make_config):
    route = respx.post(URL).mock(side_effect=[httpx.Response(400, json=SYSTEM_ERROR), ok()])
    provider = OpenAICompletionsProvider(make_config())
    await provider.call_api([ChatMessage("system", "Be terse."), ChatMessage("user", "hi")])
    assert route.call_count == 2
    retried = sent_body(route.calls.last)["messages"]
    assert retried == [{"role": "user", "content": "System:\nBe terse.\n\nhi"}]


@pytest.mark.asyncio
@respx.mock
async def test_both_corrections_then_success(make_config):
    route = respx.post(URL).mock(
        side_effect=[httpx.Response(400, json=TOKEN_ERROR), httpx.Response(400, json=SYSTEM_ERROR), ok()]
    )
    provider = OpenAICompletionsProvider(make_config())
    await provider.call_api(
        [ChatMessage("system", "s"), ChatMessage("user", "u")], False, APICallParams(max_tokens=10)
    )
    assert route.call_count == 3
    final = sent_body(route.calls.last)
    assert final["max_completion_tokens"] == 10
    assert all(m["role"] != "system" for m in final["messages"])


@pytest.mark.asyncio
@respx.mock
async def test_repeated_system_rejection_is_not_retried_forever(make_config):
    route = respx.post(URL).mock(return_value=httpx.Response(400, json=SYSTEM_ERROR))
    provider = OpenAICompletionsProvider(make_config())
    with pytest.raises(UpstreamError) as info:
        await provider.call_api([ChatMessage("system", "s"), ChatMessage("user", "u")])
    assert route.call_count == 2
    assert info.value.status == 400


@pytest.mark.asyncio
@respx.mock
async def test_unrecognized_error_is_raised_with_body(make_config):
    route = respx.post(URL).mock(return_value=httpx.Response(429, text="slow down"))
    provider = OpenAICompletionsProvider(make_config())
    with pytest.raises(UpstreamError) as info:
        await provider.call_api([ChatMessage("user", "hi")])
    assert route.call_count == 1
    assert info.value.code is ErrorCode.RATE_LIMIT
    assert info.value.body == "slow down"
    assert info.value.error_data == {}


@pytest.mark.asyncio
@respx.mock
async def test_empty_success_body(make_config):
    respx.post(URL).mock(return_value=httpx.Response(200, json={"choices": [{"message": {"content": ""}}]}))
    with pytest.raises(EmptyResponseError):
        await OpenAICompletionsProvider(make_config()).call_api([ChatMessage("user", "hi")])


@pytest.mark.asyncio
async def test_missing_config_fails_before_io(make_config):
    with pytest.raises(ConfigError):
        await OpenAICompletionsProvider(make_config(api_key="  ")).call_api([ChatMessage("user", "hi")])
    with pytest.raises(ConfigError):
        await OpenAICompletionsProvider(make_config(base_url="")).call_api([ChatMessage("user", "hi")])


@pytest.mark.asyncio
async def test_empty_message_list_is_rejected(make_config):
    with pytest.raises(ProviderError) as info:
        await OpenAICompletionsProvider(make_config()).call_api([])
    assert info.value.code is ErrorCode.VALIDATION


@pytest.mark.asyncio
@respx.mock
async def test_message_without_text_or_attachments_is_rejected_before_sending(make_config):
    route = respx.post(URL).mock(return_value=ok())
    messages = [ChatMessage("user", "hi"), ChatMessage("assistant", "   "), ChatMessage("user", "again")]
    with pytest.raises(ProviderError, match="message 1") as info:
        await OpenAICompletionsProvider(make_config()).call_api(messages)
    assert info.value.code is ErrorCode.VALIDATION
    assert not route.called


@pytest.mark.asyncio
@respx.mock
async def test_timeout_and_transport_errors(make_config):
    route = respx.post(URL)
    provider = OpenAICompletionsProvider(make_config())
    route.side_effect = httpx.ReadTimeout("slow")
    with pytest.raises(RequestTimeoutError):
        await provider.call_api([ChatMessage("user", "hi")])
    route.side_effect = httpx.ConnectError("refused")
    with pytest.raises(ProviderError) as info:
        await provider.call_api([ChatMessage("user", "hi")])
    assert info.value.code is ErrorCode.UNAVAILABLE


@pytest.mark.asyncio
@respx.mock
async def test_responses_mode_url_uses_responses_body(make_config):
    route = respx.post("https://api.test/v1/responses").mock(
        return_value=httpx.Response(200, json={"output_text": "from responses"})
    )
    provider = OpenAICompletionsProvider(make_config(base_url="https://api.test/v1/responses"))
    result = await provider.call_api([ChatMessage("system", "rules"), ChatMessage("user", "hi")])
    assert result.content == "from responses"
    body = sent_body(route.calls.last)
    assert body["instructions"] == "rules"
    assert "messages" not in body


@pytest.mark.asyncio
@respx.mock
async def test_responses_mode_instruction_rejection_merges_system(make_config):
    route = respx.post("https://api.test/v1/responses").mock(
        side_effect=[
            httpx.Response(400, json={"error": {"message": "instructions are not supported"}}),
            httpx.Response(200, json={"output_text": "ok"}),
        ]
    )
    provider = OpenAICompletionsProvider(make_config(base_url="https://api.test/v1/responses"))
    await provider.call_api([ChatMessage("system", "rules"), ChatMessage("user", "hi")])
    body = sent_body(route.calls.last)
    assert "instructions" not in body
    assert body["input"] == [{"role": "user", "content": "System:\nrules\n\nhi"}]
