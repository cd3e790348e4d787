from __future__ import annotations

import pytest

from atelier_providers.base.errors import EmptyResponseError
from atelier_providers.base.models import APICallParams, Attachment, ChatMessage, ModelConfig
from atelier_providers.openai.openai_chat import (
    build_ai_response,
    build_completions_body,
    build_responses_body,
    resolve_chat_url,
    resolve_responses_url,
)
from atelier_providers.openai.retry_policy import (
    initial_max_tokens_param,
    should_retry_with_completion_tokens,
    should_retry_without_instructions,
    should_retry_without_system_role,
)


@pytest.mark.parametrize(
    "base, expected",
    [
        ("https://api.openai.com", ("https://api.openai.com/v1/chat/completions", False)),
        ("https://api.openai.com/", ("https://api.openai.com/v1/chat/completions", False)),
        ("https://openrouter.ai/api/v1", ("https://openrouter.ai/api/v1/chat/completions", False)),
        ("https://proxy.test/v1/chat/completions", ("https://proxy.test/v1/chat/completions", False)),
        ("https://api.openai.com/v1/responses/", ("https://api.openai.com/v1/responses", True)),
    ],
)
def test_resolve_chat_url(base, expected):
    assert resolve_chat_url(base) == expected


def test_resolve_responses_url():
    assert resolve_responses_url("https://api.openai.com") == "https://api.openai.com/v1/responses"
    assert resolve_responses_url("https://api.openai.com/v1") == "https://api.openai.com/v1/responses"


def test_completions_body_omits_absent_params():
    body = build_completions_body(
        "gpt-4o", [ChatMessage("user", "hi")], stream=False, params=None, max_tokens_param="max_tokens"
    )
    assert body == {"model": "gpt-4o", "messages": [{"role": "user", "content": "hi"}]}


def test_completions_body_with_params_and_model_role():
    params = APICallParams(temperature=0.2, top_p=0.9, max_tokens=64, reasoning_effort="low")
    body = build_completions_body(
        "o3-mini",
        [ChatMessage("system", "rules"), ChatMessage("model", "earlier")],
        stream=True,
        params=params,
        max_tokens_param="max_completion_tokens",
    )
    assert body["messages"] == [{"role": "system", "content": "rules"}, {"role": "assistant", "content": "earlier"}]
    assert body["max_completion_tokens"] == 64
    assert "max_tokens" not in body
    assert body["temperature"] == 0.2
    assert body["top_p"] == 0.9
    assert body["reasoning_effort"] == "low"
    assert body["stream"] is True


def test_attachment_only_message_encodes_non_empty_content():
    message = ChatMessage("user", "", attachments=[Attachment(mime_type="image/jpeg", data="/9j/4AAQ")])
    body = build_completions_body("gpt-4o", [message], stream=False, params=None, max_tokens_param="max_tokens")
    content = body["messages"][0]["content"]
    assert content == [{"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,/9j/4AAQ"}}]


def test_responses_body_moves_system_to_instructions():
    params = APICallParams(max_tokens=100, reasoning_effort="high")
    body = build_responses_body(
        "gpt-5", [ChatMessage("system", "be brief"), ChatMessage("user", "hi")], stream=False, params=params
    )
    assert body["instructions"] == "be brief"
    assert body["input"] == [{"role": "user", "content": "hi"}]
    assert body["max_output_tokens"] == 100
    assert body["reasoning"] == {"effort": "high"}


def test_initial_param_prefers_model_capability():
    model = ModelConfig.model_validate({"id": "custom", "capabilities": {"maxTokensParam": "max_completion_tokens"}})
    assert initial_max_tokens_param("custom", model) == "max_completion_tokens"
    assert initial_max_tokens_param("gpt-4o", None) == "max_tokens"
    assert initial_max_tokens_param("o3-mini", None) == "max_completion_tokens"


TOKEN_ERROR = {
    "error": {
        "message": "Unsupported parameter: 'max_tokens' is not supported with this model. "
        "Use 'max_completion_tokens' instead.",
        "param": "max_tokens",
        "code": "unsupported_parameter",
    }
}


def test_token_correction_recognizer():
    assert should_retry_with_completion_tokens(TOKEN_ERROR, "max_tokens")
    assert not should_retry_with_completion_tokens(TOKEN_ERROR, "max_completion_tokens")
    other_param = {"error": dict(TOKEN_ERROR["error"], param="temperature")}
    assert not should_retry_with_completion_tokens(other_param, "max_tokens")
    assert not should_retry_with_completion_tokens({"error": {"message": "rate limited"}}, "max_tokens")
    assert not should_retry_with_completion_tokens({}, "max_tokens")


def test_system_correction_recognizers():
    with_system = [ChatMessage("system", "s"), ChatMessage("user", "u")]
    rejected = {"error": {"message": "System role is not supported for this model"}}
    assert should_retry_without_system_role(rejected, with_system)
    assert not should_retry_without_system_role(rejected, [ChatMessage("user", "u")])
    assert not should_retry_without_system_role({"error": {"message": "quota exceeded"}}, with_system)
    assert should_retry_without_instructions({"error": {"message": "Instructions are not allowed"}}, with_system)


def test_build_ai_response_extraction_chain():
    assert build_ai_response(
        {"choices": [{"message": {"content": "Assistant: hi"}, "finish_reason": "stop"}]}, provider="p", model="m"
    ).content == "hi"
    assert build_ai_response({"output_text": "direct"}, provider="p", model="m").content == "direct"
    assert (
        build_ai_response({"output": [{"content": [{"type": "output_text", "text": "nested"}]}]}, provider="p", model="m").content
        == "nested"
    )
    gemini_shaped = {"candidates": [{"content": {"parts": [{"text": "hm", "thought": True}, {"text": "ans"}]}}]}
    assert build_ai_response(gemini_shaped, provider="p", model="m").content == "ans"
    assert build_ai_response({"text": "plain"}, provider="p", model="m").content == "plain"


def test_build_ai_response_finish_reason_and_empty():
    result = build_ai_response({"choices": [{"message": {"content": "x"}, "finish_reason": "length"}]}, provider="p", model="m")
    assert result.finish_reason == "length"
    with pytest.raises(EmptyResponseError):
        build_ai_response({"choices": [{"message": {"content": "   "}}]}, provider="p", model="m")
    with pytest.raises(EmptyResponseError):
        build_ai_response(["not", "a", "dict"], provider="p", model="m")
