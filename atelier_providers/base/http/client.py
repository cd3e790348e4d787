"""Async HTTP client construction for providers.

Purpose:
    Build ``httpx.AsyncClient`` instances with a per-attempt timeout budget.
    Each attempt of a logical call gets its own client so its timeout is
    fresh; a streamed attempt hands its client to the ``ProviderStream`` that
    owns the open response and closes both together.

External dependencies:
    - ``httpx`` for the asynchronous HTTP client.

Design notes:
    - No numeric timeout literals live here; callers pass the budget from
      :func:`atelier_providers.base.timeouts.resolve_request_timeout`.
    - ``json_headers`` centralizes the bearer-token header shape shared by
      every OpenAI-style endpoint.
"""

from __future__ import annotations

from typing import Dict, Optional

import httpx


def open_client(timeout_seconds: float, *, base_url: Optional[str] = None) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` bounded by ``timeout_seconds``.

    The same budget applies to connect, read and pool acquisition so a slow
    first byte from a reasoning model is covered by the per-attempt budget.
    """
    timeout = httpx.Timeout(timeout_seconds)
    if base_url:
        return httpx.AsyncClient(base_url=base_url, timeout=timeout)
    return httpx.AsyncClient(timeout=timeout)


def json_headers(api_key: Optional[str] = None, *, bearer: bool = True) -> Dict[str, str]:
    """Return JSON request headers, adding ``Authorization`` when keyed."""
    headers = {"Content-Type": "application/json"}
    if api_key and bearer:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


__all__ = ["open_client", "json_headers"]
