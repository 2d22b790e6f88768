"""
Error taxonomy for image generation gateway
图像生成网关的错误类型

内部组件抛出“原始”错误，由 classifier 统一包装为 ClassifiedError，
调用方只需要按 kind 分支。
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """对调用方可见的错误种类"""

    VALIDATION = "ValidationError"
    UNSUPPORTED_PARAMETER = "UnsupportedParameter"
    UPSTREAM = "UpstreamError"
    TRANSPORT = "TransportError"
    UNKNOWN_PROVIDER = "UnknownProviderError"


class ParameterError(ValueError):
    """参数解析阶段的错误基类。"""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidParameterError(ParameterError):
    """参数缺失或取值不合法。"""


class UnsupportedParameterError(ParameterError):
    """模型不支持的参数。"""

    kind = ErrorKind.UNSUPPORTED_PARAMETER


class ProviderNotFoundError(LookupError):
    """没有为该供应商注册适配器。"""

    def __init__(self, provider_id: str):
        super().__init__(f"未注册的供应商: {provider_id}")
        self.provider_id = provider_id


class ProviderRejectedError(Exception):
    """供应商返回了可解析的错误响应。"""

    def __init__(self, message: str, status: int | None = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


class MalformedResponseError(Exception):
    """供应商响应无法解析为图像结果。"""


class ClassifiedError(Exception):
    """穿过网关边界的唯一错误类型。

    只应由 ``classify`` 创建。
    """

    def __init__(
        self,
        kind: ErrorKind,
        provider_id: str,
        message: str,
        cause: BaseException | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.kind = kind
        self.provider_id = provider_id
        self.message = message
        self.cause = cause
        self.retryable = retryable

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.provider_id}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"ClassifiedError(kind={self.kind.value!r}, "
            f"provider_id={self.provider_id!r}, message={self.message!r})"
        )
