"""
Adapter module for image generation gateway
图像生成网关的适配器模块
"""

from .cogview_adapter import convert_cogview_request, create_cogview_adapter
from .gemini_adapter import GeminiAdapter
from .openai_adapter import (
    OpenAICompatibleAdapter,
    convert_openai_request,
    convert_openai_response,
    create_openai_compatible_adapter,
)
from .siliconflow_adapter import SiliconFlowAdapter
from .z_image_adapter import convert_z_image_request, create_z_image_adapter

__all__ = [
    "GeminiAdapter",
    "OpenAICompatibleAdapter",
    "SiliconFlowAdapter",
    "convert_cogview_request",
    "convert_openai_request",
    "convert_openai_response",
    "convert_z_image_request",
    "create_cogview_adapter",
    "create_openai_compatible_adapter",
    "create_z_image_adapter",
]
