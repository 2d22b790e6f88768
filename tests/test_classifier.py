import asyncio

import aiohttp
import pytest

from imagegen_hub.core.classifier import classify
from imagegen_hub.core.errors import (
    ClassifiedError,
    ErrorKind,
    InvalidParameterError,
    MalformedResponseError,
    ProviderNotFoundError,
    ProviderRejectedError,
    UnsupportedParameterError,
)


def test_validation_kind_preserved():
    error = InvalidParameterError("提示词不能为空", field="prompt")
    classified = classify(error, "zhipu")
    assert classified.kind is ErrorKind.VALIDATION
    assert classified.provider_id == "zhipu"
    assert classified.cause is error
    assert classified.retryable is False


def test_unsupported_kind_preserved():
    classified = classify(UnsupportedParameterError("x", field="unknown_field"), "zhipu")
    assert classified.kind is ErrorKind.UNSUPPORTED_PARAMETER


def test_unknown_provider():
    classified = classify(ProviderNotFoundError("nowhere"), "nowhere")
    assert classified.kind is ErrorKind.UNKNOWN_PROVIDER
    assert "nowhere" in classified.message


def test_upstream_keeps_provider_message():
    error = ProviderRejectedError("内容安全审核未通过", status=400)
    classified = classify(error, "zhipu")
    assert classified.kind is ErrorKind.UPSTREAM
    assert "内容安全审核未通过" in classified.message
    assert classified.retryable is False


@pytest.mark.parametrize("status", [429, 500, 503])
def test_upstream_overload_is_retryable(status):
    classified = classify(ProviderRejectedError("busy", status=status), "openai")
    assert classified.retryable is True


@pytest.mark.parametrize(
    "error",
    [
        asyncio.TimeoutError(),
        TimeoutError("read timed out"),
        aiohttp.ClientConnectionError("connection refused"),
        ConnectionRefusedError(),
        MalformedResponseError("not json"),
        KeyError("data"),
    ],
)
def test_transport_failures(error):
    classified = classify(error, "openai")
    assert classified.kind is ErrorKind.TRANSPORT
    assert classified.cause is error
    assert classified.retryable is True


def test_already_classified_passes_through():
    classified = classify(ProviderNotFoundError("x"), "x")
    assert classify(classified, "other") is classified


def test_classified_error_string_has_kind():
    classified = classify(InvalidParameterError("bad"), "zhipu")
    assert isinstance(classified, Exception)
    assert str(classified).startswith("[ValidationError] zhipu")
    assert classified.kind == "ValidationError"
