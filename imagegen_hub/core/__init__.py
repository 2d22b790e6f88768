"""
Core module for image generation gateway
图像生成网关的核心模块
"""

from .types import (
    AdapterType,
    GeneratedImage,
    ImageGenerationRequest,
    ImageGenerationResponse,
    ModelCapability,
    ParameterConstraint,
    ProviderConfig,
    ResolvedRequest,
    SemanticType,
    StandardParameterSpec,
)
from .errors import (
    ClassifiedError,
    ErrorKind,
    InvalidParameterError,
    MalformedResponseError,
    ParameterError,
    ProviderNotFoundError,
    ProviderRejectedError,
    UnsupportedParameterError,
)
from .schema import DEFAULT_SCHEMA, STANDARD_PARAMETERS, ParameterSchema
from .resolver import ParameterResolver
from .classifier import classify
from .transport import AiohttpTransport, NativeRequest, NativeResponse, Transport
from .base_adapter import BaseImageAdapter
from .catalog import ModelCatalog
from .registry import ADAPTER_FACTORIES, AdapterRegistry, create_adapter
from .config import (
    GatewayConfig,
    GatewaySettings,
    ModelSettings,
    ProviderSettings,
    load_settings,
)
from .generator import ImageGenerator

__all__ = [
    # 基类和核心组件
    "BaseImageAdapter",
    "ImageGenerator",
    "ParameterResolver",
    "ParameterSchema",
    "ModelCatalog",
    "AdapterRegistry",
    "AiohttpTransport",
    "Transport",
    "classify",
    "create_adapter",
    # 数据类型
    "AdapterType",
    "GeneratedImage",
    "ImageGenerationRequest",
    "ImageGenerationResponse",
    "ModelCapability",
    "NativeRequest",
    "NativeResponse",
    "ParameterConstraint",
    "ProviderConfig",
    "ResolvedRequest",
    "SemanticType",
    "StandardParameterSpec",
    # 错误
    "ClassifiedError",
    "ErrorKind",
    "InvalidParameterError",
    "MalformedResponseError",
    "ParameterError",
    "ProviderNotFoundError",
    "ProviderRejectedError",
    "UnsupportedParameterError",
    # 配置
    "GatewayConfig",
    "GatewaySettings",
    "ModelSettings",
    "ProviderSettings",
    "load_settings",
    # 常量
    "ADAPTER_FACTORIES",
    "DEFAULT_SCHEMA",
    "STANDARD_PARAMETERS",
]
