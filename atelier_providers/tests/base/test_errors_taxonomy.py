from __future__ import annotations

import pytest

from atelier_providers.base.errors import (
    CancelledError,
    ConfigError,
    EmptyResponseError,
    ErrorCode,
    ProviderError,
    StreamInterruptedError,
    UpstreamError,
    classify_status,
)


@pytest.mark.parametrize(
    "status, code",
    [
        (400, ErrorCode.VALIDATION),
        (401, ErrorCode.AUTH),
        (403, ErrorCode.AUTH),
        (404, ErrorCode.NOT_FOUND),
        (408, ErrorCode.TIMEOUT),
        (409, ErrorCode.CONFLICT),
        (422, ErrorCode.VALIDATION),
        (429, ErrorCode.RATE_LIMIT),
        (500, ErrorCode.SERVER_ERROR),
        (502, ErrorCode.TRANSIENT),
        (503, ErrorCode.UNAVAILABLE),
        (504, ErrorCode.TIMEOUT),
        (599, ErrorCode.SERVER_ERROR),
        (302, ErrorCode.UNKNOWN),
    ],
)
def test_classify_status(status, code):
    assert classify_status(status) is code


def test_subclasses_carry_default_codes():
    assert ConfigError("missing").code is ErrorCode.CONFIG
    assert EmptyResponseError("blank").code is ErrorCode.EMPTY_RESPONSE
    assert StreamInterruptedError("dropped").code is ErrorCode.TRANSIENT
    assert isinstance(StreamInterruptedError("x"), ProviderError)


def test_upstream_error_keeps_status_and_body():
    err = UpstreamError(
        "openai API error: 400",
        status=400,
        body='{"error": {"message": "bad"}}',
        error_data={"error": {"message": "bad"}},
        code=classify_status(400),
        provider="openai",
        model="gpt-4o-mini",
    )
    assert err.status == 400
    assert err.error_data["error"]["message"] == "bad"
    assert str(err) == "openai:gpt-4o-mini validation: openai API error: 400"


def test_cancelled_error_is_not_a_provider_error():
    assert not issubclass(CancelledError, ProviderError)
