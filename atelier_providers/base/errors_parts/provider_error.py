"""
Structured provider error exception types.

``ProviderError`` carries a normalized :class:`ErrorCode` for consistent
handling and structured logging. The subclasses form the failure taxonomy
surfaced by adapters:

- ``ConfigError``: base URL or API key missing; fatal, never retried.
- ``UpstreamError``: non-success HTTP status after the known correction
  retries are exhausted; carries the status and raw body for diagnostics.
- ``EmptyResponseError``: success status but no extractable text.
- ``ParseError``: malformed stream frame. Decoders swallow it into ``None``.
- ``StreamInterruptedError``: the transport failed while a stream was open.
- ``RequestTimeoutError``: a single attempt exceeded its wall-clock budget.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .error_code import ErrorCode


class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider key where the error originated (e.g., ``"openai"``).
        model: Optional model name associated with the failure.
    """

    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        code: Optional[ErrorCode] = None,
        provider: str = "unknown",
        model: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.provider = provider
        self.model = model

    def __str__(self) -> str:
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


class ConfigError(ProviderError):
    default_code = ErrorCode.CONFIG


class UpstreamError(ProviderError):
    """Non-success HTTP status returned by the provider.

    Attributes:
        status: HTTP status code of the final attempt.
        body: Raw response body text (may be empty).
        error_data: Parsed JSON error payload, ``{}`` when the body is not JSON.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int,
        body: str = "",
        error_data: Optional[Dict[str, Any]] = None,
        code: Optional[ErrorCode] = None,
        provider: str = "unknown",
        model: Optional[str] = None,
    ) -> None:
        super().__init__(message, code=code, provider=provider, model=model)
        self.status = status
        self.body = body
        self.error_data = error_data or {}


class EmptyResponseError(ProviderError):
    default_code = ErrorCode.EMPTY_RESPONSE


class ParseError(ProviderError):
    default_code = ErrorCode.VALIDATION


class StreamInterruptedError(ProviderError):
    default_code = ErrorCode.TRANSIENT


class RequestTimeoutError(ProviderError):
    default_code = ErrorCode.TIMEOUT


__all__ = [
    "ProviderError",
    "ConfigError",
    "UpstreamError",
    "EmptyResponseError",
    "ParseError",
    "StreamInterruptedError",
    "RequestTimeoutError",
]
