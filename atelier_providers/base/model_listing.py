"""Model discovery for selection UIs.

``list_models`` performs one GET against the provider's model index:

- OpenAI-style: ``<base>/models`` (``data[].id``), with the version segment
  added when the base URL lacks one and any chat/responses suffix removed;
- Gemini: ``<base>/v1beta/models`` (``models[].name`` without ``models/``).

The image-capability filter is a keyword guess on the model id, meant for
narrowing a picker. Adapters never consult it.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional

import httpx

from ..config.defaults import (
    COMPLETIONS_PATH,
    GEMINI_API_VERSION,
    IMAGE_MODEL_KEYWORDS,
    NON_IMAGE_MODEL_KEYWORDS,
    RESPONSES_PATH,
    VERSION_SEGMENT,
)
from .cancellation import CancellationToken, await_cancellable
from .errors import ConfigError, ErrorCode, ProviderError, UpstreamError, classify_status
from .http import json_headers, open_client
from .logging import LogContext, get_logger, normalized_log_event
from .models import ProviderConfig
from .timeouts import get_timeout_config

_logger = get_logger("models")


def models_url(base_url: str, api_type: str) -> str:
    root = base_url.strip().rstrip("/")
    if api_type == "gemini":
        if "/v1" not in root:
            root = f"{root}/{GEMINI_API_VERSION}"
        return f"{root}/models"
    for suffix in (COMPLETIONS_PATH, RESPONSES_PATH):
        if root.endswith(suffix):
            root = root[: -len(suffix)]
    if VERSION_SEGMENT not in root:
        root = root + VERSION_SEGMENT
    return f"{root}/models"


def _parse_ids(data: object, api_type: str) -> List[str]:
    if not isinstance(data, dict):
        return []
    ids: List[str] = []
    if api_type == "gemini":
        for item in data.get("models") or []:
            name = item.get("name") if isinstance(item, dict) else None
            if isinstance(name, str) and name:
                ids.append(name[len("models/"):] if name.startswith("models/") else name)
    else:
        for item in data.get("data") or []:
            model_id = item.get("id") if isinstance(item, dict) else None
            if isinstance(model_id, str) and model_id:
                ids.append(model_id)
    return sorted(set(ids))


async def list_models(
    config: ProviderConfig,
    api_type: Optional[str] = None,
    *,
    cancel_token: Optional[CancellationToken] = None,
) -> List[str]:
    """Return the sorted, de-duplicated model ids a provider advertises."""
    kind = (api_type or config.api_type or "openai").lower()
    kind = "gemini" if kind in ("gemini", "google") else "openai"
    if not config.base_url.strip():
        raise ConfigError("API base URL is not configured", provider=kind)
    if not config.api_key.strip():
        raise ConfigError("API key is not configured", provider=kind)
    url = models_url(config.base_url, kind)
    if kind == "gemini":
        headers = {"x-goog-api-key": config.api_key}
    else:
        headers = json_headers(config.api_key)
    ctx = LogContext(provider=kind, endpoint=url)
    async with open_client(get_timeout_config().http_timeout_seconds) as client:
        try:
            response = await await_cancellable(client.get(url, headers=headers), cancel_token)
        except httpx.TimeoutException as exc:
            raise ProviderError(f"model listing timed out: {exc}", code=ErrorCode.TIMEOUT, provider=kind) from exc
        except httpx.TransportError as exc:
            raise ProviderError(f"transport error: {exc}", code=ErrorCode.UNAVAILABLE, provider=kind) from exc
    if not response.is_success:
        normalized_log_event(
            _logger, "models.list", ctx, phase="finalize", emitted=False, error_code=classify_status(response.status_code).value
        )
        raise UpstreamError(
            f"model listing failed: {response.status_code}",
            status=response.status_code,
            body=response.text,
            code=classify_status(response.status_code),
            provider=kind,
        )
    try:
        data = response.json()
    except ValueError:
        data = None
    ids = _parse_ids(data, kind)
    normalized_log_event(_logger, "models.list", ctx, phase="finalize", emitted=True, count=len(ids))
    return ids


def is_image_generation_model(model_id: str) -> bool:
    lowered = model_id.lower()
    if not any(keyword in lowered for keyword in IMAGE_MODEL_KEYWORDS):
        return False
    return not any(keyword in lowered for keyword in NON_IMAGE_MODEL_KEYWORDS)


def filter_models(model_ids: Iterable[str], *, image_only: bool = False, keyword: str = "") -> List[str]:
    """Filter ids by image capability and space-separated search keywords.

    Every keyword must appear in the id (case-insensitive).
    """
    result = list(model_ids)
    if image_only:
        result = [m for m in result if is_image_generation_model(m)]
    keywords = [k for k in re.split(r"\s+", keyword.lower().strip()) if k]
    if keywords:
        result = [m for m in result if all(k in m.lower() for k in keywords)]
    return result


__all__ = ["list_models", "models_url", "is_image_generation_model", "filter_models"]
