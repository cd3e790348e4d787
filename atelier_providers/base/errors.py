"""Provider error taxonomy (public API facade).

The concrete implementations live under ``errors_parts``; this module is the
stable import path used by adapters and consumers.
"""

from .errors_parts import (
    ConfigError,
    EmptyResponseError,
    ErrorCode,
    ParseError,
    ProviderError,
    RequestTimeoutError,
    StreamInterruptedError,
    UpstreamError,
    classify_status,
)
from .cancellation import CancelledError

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigError",
    "UpstreamError",
    "EmptyResponseError",
    "ParseError",
    "StreamInterruptedError",
    "RequestTimeoutError",
    "CancelledError",
    "classify_status",
]
