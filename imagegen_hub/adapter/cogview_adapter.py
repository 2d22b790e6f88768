"""智谱 CogView 适配器：复用 OpenAI 兼容适配器，仅替换请求转换与端点。"""

from __future__ import annotations

from typing import Any

from ..core.constants import DEFAULT_SIZE, ZHIPU_DEFAULT_BASE_URL
from ..core.transport import Transport
from ..core.types import ProviderConfig, ResolvedRequest
from ..core.utils import resolve_size
from .openai_adapter import OpenAICompatibleAdapter, create_openai_compatible_adapter

COGVIEW_ENDPOINT = "/api/paas/v4/images/generations"


def convert_cogview_request(request: ResolvedRequest, config: ProviderConfig) -> dict:
    """CogView 不接受 n / response_format，画质仅支持 standard 与 hd。"""
    payload: dict[str, Any] = {
        "model": request.model_id,
        "prompt": request.prompt,
        "size": resolve_size(request, DEFAULT_SIZE),
    }
    quality = request.get("quality")
    if quality in ("standard", "hd"):
        payload["quality"] = quality
    user_id = config.extra_config.get("user_id")
    if user_id:
        payload["user_id"] = user_id
    return payload


def create_cogview_adapter(
    config: ProviderConfig, transport: Transport | None = None
) -> OpenAICompatibleAdapter:
    return create_openai_compatible_adapter(
        config,
        transport,
        request_converter=convert_cogview_request,
        endpoint=COGVIEW_ENDPOINT,
        default_base_url=ZHIPU_DEFAULT_BASE_URL,
    )
