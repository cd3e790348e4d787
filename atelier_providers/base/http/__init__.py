"""HTTP utilities for providers (async client construction)."""

from .client import json_headers, open_client

__all__ = ["open_client", "json_headers"]
