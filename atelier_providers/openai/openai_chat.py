"""OpenAI-style request construction and buffered response extraction.

URL resolution (``resolve_chat_url``):
    - base URL mentioning ``/responses``: Responses mode, used verbatim
      (trailing slashes stripped);
    - base URL already ending in a completions path: used verbatim;
    - base URL with a ``/v1`` segment: completions path appended;
    - otherwise ``/v1`` plus the completions path is appended.

Body builders never substitute vendor defaults: absent ``APICallParams``
fields are left out of the body.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..base.errors import EmptyResponseError
from ..base.models import AIResponse, APICallParams, ChatMessage
from ..base.utils.attachments import openai_content_parts, responses_content_parts
from ..base.utils.messages import has_multimodal_content, split_system_messages, stringify_message_content
from ..base.utils.response_cleaner import clean_response, clean_think_tags
from ..config.defaults import COMPLETIONS_PATH, RESPONSES_PATH, VERSION_SEGMENT


def is_responses_url(base_url: str) -> bool:
    return RESPONSES_PATH in base_url


def resolve_chat_url(base_url: str) -> Tuple[str, bool]:
    """Return ``(url, responses_mode)`` for a configured base URL."""
    url = base_url.strip()
    if is_responses_url(url):
        return url.rstrip("/"), True
    if COMPLETIONS_PATH in url:
        return url, False
    if VERSION_SEGMENT in url:
        return url.rstrip("/") + COMPLETIONS_PATH, False
    return url.rstrip("/") + VERSION_SEGMENT + COMPLETIONS_PATH, False


def resolve_responses_url(base_url: str) -> str:
    """URL for the Responses-only adapter (same pattern, Responses path)."""
    url = base_url.strip()
    if is_responses_url(url):
        return url.rstrip("/")
    if VERSION_SEGMENT in url:
        return url.rstrip("/") + RESPONSES_PATH
    return url.rstrip("/") + VERSION_SEGMENT + RESPONSES_PATH


def _common_controls(params: Optional[APICallParams]) -> Dict[str, Any]:
    if params is None:
        return {}
    out: Dict[str, Any] = {}
    if params.temperature is not None:
        out["temperature"] = params.temperature
    if params.top_p is not None:
        out["top_p"] = params.top_p
    if params.frequency_penalty is not None:
        out["frequency_penalty"] = params.frequency_penalty
    if params.presence_penalty is not None:
        out["presence_penalty"] = params.presence_penalty
    return out


def encode_completions_message(message: ChatMessage) -> Dict[str, Any]:
    if has_multimodal_content(message):
        return {"role": message.wire_role, "content": openai_content_parts(message)}
    if isinstance(message.content, str):
        content = message.content
    else:
        content = next((p.text for p in message.content if p.type == "text" and p.text), "")
    return {"role": message.wire_role, "content": content}


def build_completions_body(
    model: str,
    messages: Sequence[ChatMessage],
    *,
    stream: bool,
    params: Optional[APICallParams],
    max_tokens_param: str,
) -> Dict[str, Any]:
    """Chat Completions body with the current max-tokens field name."""
    body: Dict[str, Any] = {"model": model, "messages": [encode_completions_message(m) for m in messages]}
    body.update(_common_controls(params))
    if params is not None and params.reasoning_effort is not None:
        body["reasoning_effort"] = params.reasoning_effort
    if params is not None and params.max_tokens is not None:
        body[max_tokens_param] = params.max_tokens
    if stream:
        body["stream"] = True
    return body


def build_responses_input(messages: Sequence[ChatMessage]) -> Tuple[str, List[Dict[str, Any]]]:
    """Split messages into Responses ``instructions`` and ``input`` items."""
    instructions, rest = split_system_messages(messages)
    items: List[Dict[str, Any]] = []
    for message in rest:
        if has_multimodal_content(message):
            items.append({"role": message.wire_role, "content": responses_content_parts(message)})
        else:
            items.append({"role": message.wire_role, "content": stringify_message_content(message)})
    return instructions, items


def build_responses_body(
    model: str,
    messages: Sequence[ChatMessage],
    *,
    stream: bool,
    params: Optional[APICallParams],
) -> Dict[str, Any]:
    """Responses API body; system messages go to ``instructions``."""
    instructions, items = build_responses_input(messages)
    body: Dict[str, Any] = {"model": model, "input": items}
    body.update(_common_controls(params))
    if instructions:
        body["instructions"] = instructions
    if params is not None and params.max_tokens is not None:
        body["max_output_tokens"] = params.max_tokens
    if params is not None and params.reasoning_effort is not None:
        body["reasoning"] = {"effort": params.reasoning_effort}
    if stream:
        body["stream"] = True
    return body


def _non_blank(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first(seq: Any) -> Any:
    return seq[0] if isinstance(seq, list) and seq else None


def _choices_text(data: Dict[str, Any]) -> Optional[str]:
    choice = _first(data.get("choices"))
    if not isinstance(choice, dict):
        return None
    message = choice.get("message")
    return _non_blank(message.get("content")) if isinstance(message, dict) else None


def _output_items_text(data: Dict[str, Any]) -> Optional[str]:
    output = data.get("output")
    if not isinstance(output, list):
        return None
    for item in output:
        contents = item.get("content") if isinstance(item, dict) else None
        if not isinstance(contents, list):
            continue
        for content in contents:
            if not isinstance(content, dict):
                continue
            found = _non_blank(content.get("text")) or _non_blank(content.get("output_text"))
            if found:
                return found
    return None


def candidate_parts_text(data: Dict[str, Any]) -> Optional[str]:
    """First non-thought text part of ``candidates[0].content.parts``."""
    candidate = _first(data.get("candidates"))
    if not isinstance(candidate, dict):
        return None
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return None
    for part in parts:
        if isinstance(part, dict) and part.get("text") and not part.get("thought"):
            return part["text"] if isinstance(part["text"], str) else None
    return None


def extract_response_text(data: Dict[str, Any]) -> Optional[str]:
    """Try every known buffered response shape in order; first hit wins."""
    return (
        _choices_text(data)
        or _non_blank(data.get("output_text"))
        or _output_items_text(data)
        or candidate_parts_text(data)
        or _non_blank(data.get("content"))
        or _non_blank(data.get("text"))
    )


def build_ai_response(data: Any, *, provider: str, model: str) -> AIResponse:
    """Normalize a decoded JSON body into :class:`AIResponse`.

    Raises ``EmptyResponseError`` when no shape yields text.
    """
    if not isinstance(data, dict):
        raise EmptyResponseError("response body is not a JSON object", provider=provider, model=model)
    text = extract_response_text(data)
    if not text:
        raise EmptyResponseError("response contained no extractable text", provider=provider, model=model)
    choice = _first(data.get("choices"))
    finish_reason = choice.get("finish_reason") if isinstance(choice, dict) else None
    return AIResponse(content=clean_think_tags(clean_response(text)), finish_reason=finish_reason)


__all__ = [
    "is_responses_url",
    "resolve_chat_url",
    "resolve_responses_url",
    "encode_completions_message",
    "build_completions_body",
    "build_responses_input",
    "build_responses_body",
    "candidate_parts_text",
    "extract_response_text",
    "build_ai_response",
]
