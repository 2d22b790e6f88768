from __future__ import annotations

from typing import Any

from ..core.constants import GITEE_AI_DEFAULT_BASE_URL
from ..core.log import logger
from ..core.transport import Transport
from ..core.types import ProviderConfig, ResolvedRequest
from ..core.utils import resolve_size, size_for_aspect_ratio
from .openai_adapter import OpenAICompatibleAdapter, create_openai_compatible_adapter

DEFAULT_MODEL = "z-image-turbo"
DEFAULT_STEPS = 9


def convert_z_image_request(request: ResolvedRequest, config: ProviderConfig) -> dict:
    """Gitee AI (z-image) 请求转换。

    尺寸按宽高比和分辨率档位查表，未知宽高比回退到 1:1。
    """
    fallback = size_for_aspect_ratio("1:1", request.get("resolution"))
    size = resolve_size(request, fallback)

    payload: dict[str, Any] = {
        "model": request.model_id or DEFAULT_MODEL,
        "prompt": request.prompt,
        "size": size,
        "num_inference_steps": request.get("steps", DEFAULT_STEPS),
    }
    if request.get("negative_prompt"):
        payload["negative_prompt"] = request.get("negative_prompt")
    if request.get("seed") is not None:
        payload["seed"] = request.get("seed")
    if request.get("cfg") is not None:
        payload["guidance_scale"] = request.get("cfg")

    logger.debug(
        f"[ImageGen] [ZImage] 参数: size={size}, aspect_ratio={request.get('aspect_ratio')}, resolution={request.get('resolution') or '1K'}"
    )
    return payload


def create_z_image_adapter(
    config: ProviderConfig, transport: Transport | None = None
) -> OpenAICompatibleAdapter:
    """Gitee AI 的响应格式遵循 OpenAI 规范，只需替换请求转换。"""
    return create_openai_compatible_adapter(
        config,
        transport,
        request_converter=convert_z_image_request,
        default_base_url=GITEE_AI_DEFAULT_BASE_URL,
        extra_headers={"X-Failover-Enabled": "true"},
    )
