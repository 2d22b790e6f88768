"""
Error classifier
将任意适配器层错误包装为统一的 ClassifiedError。
"""

from __future__ import annotations

import asyncio

import aiohttp

from .errors import (
    ClassifiedError,
    ErrorKind,
    MalformedResponseError,
    ParameterError,
    ProviderNotFoundError,
    ProviderRejectedError,
)

_RETRYABLE_STATUS = frozenset({408, 429, 500, 502, 503, 504})


def _describe(error: BaseException) -> str:
    text = str(error)
    return text or error.__class__.__name__


def classify(error: BaseException, provider_id: str) -> ClassifiedError:
    """根据错误来源确定 kind，并保留原始异常。"""
    if isinstance(error, ClassifiedError):
        return error

    if isinstance(error, ParameterError):
        return ClassifiedError(error.kind, provider_id, _describe(error), cause=error)

    if isinstance(error, ProviderNotFoundError):
        return ClassifiedError(
            ErrorKind.UNKNOWN_PROVIDER, provider_id, _describe(error), cause=error
        )

    if isinstance(error, ProviderRejectedError):
        status = f" ({error.status})" if error.status is not None else ""
        return ClassifiedError(
            ErrorKind.UPSTREAM,
            provider_id,
            f"供应商拒绝请求{status}: {error.message}",
            cause=error,
            retryable=error.status in _RETRYABLE_STATUS,
        )

    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        message = "请求超时"
    elif isinstance(error, MalformedResponseError):
        message = f"响应格式错误: {_describe(error)}"
    elif isinstance(error, (aiohttp.ClientError, OSError)):
        message = f"网络请求失败: {_describe(error)}"
    else:
        # 适配器转换过程中的其他异常同样视为无法解读的响应
        message = f"{error.__class__.__name__}: {_describe(error)}"

    return ClassifiedError(
        ErrorKind.TRANSPORT, provider_id, message, cause=error, retryable=True
    )
