from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from ..core.base_adapter import BaseImageAdapter
from ..core.constants import DEFAULT_SIZE, OPENAI_DEFAULT_BASE_URL
from ..core.errors import MalformedResponseError
from ..core.log import logger
from ..core.transport import NativeRequest, Transport
from ..core.types import (
    GeneratedImage,
    ImageGenerationResponse,
    ProviderConfig,
    ResolvedRequest,
)
from ..core.utils import created_at_from, image_from_base64, image_from_url, resolve_size

RequestConverter = Callable[[ResolvedRequest, ProviderConfig], dict]
ResponseConverter = Callable[
    [dict, ResolvedRequest], Awaitable[ImageGenerationResponse]
]

# 标准参数名 -> OpenAI 字段名，直接透传
_PASSTHROUGH_FIELDS = {
    "n": "n",
    "quality": "quality",
    "style": "style",
    "response_format": "response_format",
    "seed": "seed",
    "negative_prompt": "negative_prompt",
}


def convert_openai_request(request: ResolvedRequest, config: ProviderConfig) -> dict:
    """构建 OpenAI 兼容的请求载荷。"""
    payload: dict[str, Any] = {
        "model": request.model_id,
        "prompt": request.prompt,
        "size": resolve_size(request, DEFAULT_SIZE),
    }
    for name, target in _PASSTHROUGH_FIELDS.items():
        value = request.get(name)
        if value is not None:
            payload[target] = value
    return payload


async def convert_openai_response(
    response: dict, request: ResolvedRequest
) -> ImageGenerationResponse:
    """解析 ``{created, data: [{url | b64_json}]}`` 形式的响应。"""
    data = response.get("data")
    if not isinstance(data, list):
        raise MalformedResponseError(f"响应中未找到 data 字段: {str(response)[:200]}")

    size = resolve_size(request)
    images: list[GeneratedImage] = []
    for item in data:
        if not isinstance(item, dict):
            raise MalformedResponseError(f"无法从响应项中提取图像: {item!r}")
        if item.get("b64_json"):
            images.append(await image_from_base64(item["b64_json"]))
        elif item.get("url"):
            images.append(image_from_url(item["url"], size))
        else:
            raise MalformedResponseError(f"无法从响应项中提取图像: {item}")

    return ImageGenerationResponse(
        created_at=created_at_from(response.get("created")), images=images
    )


class OpenAICompatibleAdapter(BaseImageAdapter):
    """OpenAI 兼容接口的通用适配器。

    请求与响应转换默认使用 OpenAI Images API 的格式，可按供应商替换。
    """

    DEFAULT_BASE_URL = OPENAI_DEFAULT_BASE_URL
    ENDPOINT = "/v1/images/generations"

    def __init__(
        self,
        config: ProviderConfig,
        transport: Transport | None = None,
        request_converter: RequestConverter | None = None,
        response_converter: ResponseConverter | None = None,
        endpoint: str | None = None,
        default_base_url: str | None = None,
        extra_headers: dict[str, str] | None = None,
    ):
        super().__init__(config, transport)
        if default_base_url and not config.base_url:
            self.base_url = default_base_url.rstrip("/")
        self.request_converter = request_converter or convert_openai_request
        self.response_converter = response_converter or convert_openai_response
        self.endpoint = endpoint or self.ENDPOINT
        self.extra_headers = dict(extra_headers or {})

    def build_request(self, request: ResolvedRequest) -> NativeRequest:
        payload = self.request_converter(request, self.config)
        logger.debug(f"{self._get_log_prefix(request.model_id)} 参数: {payload}")
        return NativeRequest(
            url=f"{self.base_url}{self.endpoint}",
            payload=payload,
            headers={**self._build_headers(), **self.extra_headers},
        )

    async def parse_response(
        self, payload: dict, request: ResolvedRequest
    ) -> ImageGenerationResponse:
        return await self.response_converter(payload, request)


def create_openai_compatible_adapter(
    config: ProviderConfig,
    transport: Transport | None = None,
    *,
    request_converter: RequestConverter | None = None,
    response_converter: ResponseConverter | None = None,
    endpoint: str | None = None,
    default_base_url: str | None = None,
    extra_headers: dict[str, str] | None = None,
) -> OpenAICompatibleAdapter:
    """根据连接配置和可选的自定义转换函数创建通用适配器。"""
    return OpenAICompatibleAdapter(
        config,
        transport,
        request_converter=request_converter,
        response_converter=response_converter,
        endpoint=endpoint or config.extra_config.get("endpoint"),
        default_base_url=default_base_url,
        extra_headers=extra_headers,
    )
