"""
Unified image generation gateway
统一的图像生成网关：标准参数 -> 供应商适配器 -> 统一结果 / 统一错误
"""

from .core import (
    ClassifiedError,
    ErrorKind,
    GatewayConfig,
    GatewaySettings,
    GeneratedImage,
    ImageGenerationRequest,
    ImageGenerationResponse,
    ImageGenerator,
    ModelCapability,
    ParameterSchema,
    StandardParameterSpec,
)
from .main import ImageGenGateway, create_gateway

__version__ = "0.1.0"

__all__ = [
    "ClassifiedError",
    "ErrorKind",
    "GatewayConfig",
    "GatewaySettings",
    "GeneratedImage",
    "ImageGenGateway",
    "ImageGenerationRequest",
    "ImageGenerationResponse",
    "ImageGenerator",
    "ModelCapability",
    "ParameterSchema",
    "StandardParameterSpec",
    "create_gateway",
]
