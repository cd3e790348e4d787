"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `atelier_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import (
    ConfigError,
    EmptyResponseError,
    ParseError,
    ProviderError,
    RequestTimeoutError,
    StreamInterruptedError,
    UpstreamError,
)
from .classification import classify_status

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigError",
    "UpstreamError",
    "EmptyResponseError",
    "ParseError",
    "StreamInterruptedError",
    "RequestTimeoutError",
    "classify_status",
]
