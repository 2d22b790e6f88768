from __future__ import annotations

import abc
import time
from typing import Any

from .errors import MalformedResponseError, ProviderRejectedError
from .log import logger
from .transport import AiohttpTransport, NativeRequest, Transport
from .types import ImageGenerationResponse, ProviderConfig, ResolvedRequest
from .utils import extract_error_message


class BaseImageAdapter(abc.ABC):
    """图像生成适配器基类。

    子类只负责两件事：``build_request`` 把标准请求转换为供应商原生请求，
    ``parse_response`` 把原生响应转换为统一结果。每次 ``generate`` 只发起
    一次网络请求，失败直接抛出，不做重试。
    """

    DEFAULT_BASE_URL = ""

    def __init__(self, config: ProviderConfig, transport: Transport | None = None):
        self.config = config
        self.provider_id = config.provider_id
        self.api_key = config.api_key
        self.base_url = (config.base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.safety_settings = config.safety_settings
        self._owns_transport = transport is None
        self.transport: Transport = transport or AiohttpTransport(
            timeout=config.timeout, proxy=config.proxy
        )

    async def close(self) -> None:
        """关闭自行创建的传输客户端。"""
        if self._owns_transport:
            await self.transport.close()

    def _get_log_prefix(self, model_id: str | None = None) -> str:
        """获取统一的日志前缀。"""
        adapter_name = self.__class__.__name__.replace("Adapter", "")
        prefix = f"[ImageGen] [{adapter_name}] [{self.provider_id}]"
        if model_id:
            prefix += f" [{model_id}]"
        return prefix

    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def generate(self, request: ResolvedRequest) -> ImageGenerationResponse:
        """转换请求 -> 调用传输客户端 -> 转换响应。"""
        prefix = self._get_log_prefix(request.model_id)
        native_request = self.build_request(request)
        logger.info(f"{prefix} 开始生成: prompt='{request.prompt[:50]}...'")
        logger.debug(f"{prefix} 请求 URL: {native_request.url}, Payload 字段: {list(native_request.payload.keys())}")

        start_time = time.time()
        response = await self.transport.call(native_request)
        duration = time.time() - start_time

        if not response.ok:
            message = (
                extract_error_message(response.payload)
                or response.text[:200]
                or f"HTTP {response.status}"
            )
            logger.error(f"{prefix} API 错误 ({response.status}, 耗时: {duration:.2f}s): {message}")
            raise ProviderRejectedError(message, status=response.status, payload=response.payload)

        if not isinstance(response.payload, dict):
            preview = response.text[:200]
            logger.error(f"{prefix} 响应不是 JSON 对象 (耗时: {duration:.2f}s): {preview}")
            raise MalformedResponseError(f"响应不是有效的 JSON 对象: {preview}")

        self._check_payload(response.payload, response.status)
        result = await self.parse_response(response.payload, request)
        if not result.images:
            raise MalformedResponseError("未生成任何图像")

        logger.info(f"{prefix} 生成成功: {result.image_count} 张 (耗时: {duration:.2f}s)")
        return result

    def _check_payload(self, payload: dict, status: int) -> None:
        """部分供应商在 2xx 响应中返回错误体。"""
        if payload.get("error"):
            message = extract_error_message(payload) or str(payload["error"])
            raise ProviderRejectedError(message, status=status, payload=payload)

    @abc.abstractmethod
    def build_request(self, request: ResolvedRequest) -> NativeRequest:
        """构建供应商原生请求。"""

    @abc.abstractmethod
    async def parse_response(
        self, payload: dict[str, Any], request: ResolvedRequest
    ) -> ImageGenerationResponse:
        """从原生响应中提取图像。

        任意一项无法转换时整体失败（MalformedResponseError）。
        """
