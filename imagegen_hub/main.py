from __future__ import annotations

import os
from typing import Any

from .core.config import GatewayConfig, GatewaySettings, load_settings
from .core.generator import ImageGenerator
from .core.log import logger
from .core.registry import TransportFactory
from .core.schema import DEFAULT_SCHEMA, ParameterSchema
from .core.types import ImageGenerationRequest, ImageGenerationResponse


class ImageGenGateway:
    """图像生成网关。

    持有启动时构建的只读配置包，对外只暴露 ``generate_image``。
    可作为异步上下文管理器使用，退出时关闭底层 HTTP 会话。
    """

    def __init__(self, config: GatewayConfig):
        self.config = config
        self.generator = ImageGenerator(config)

    @classmethod
    def from_settings(
        cls,
        settings: GatewaySettings,
        schema: ParameterSchema = DEFAULT_SCHEMA,
        transport_factory: TransportFactory | None = None,
    ) -> ImageGenGateway:
        config = GatewayConfig.from_settings(
            settings, schema=schema, transport_factory=transport_factory
        )
        return cls(config)

    async def generate_image(
        self,
        provider_id: str,
        model_id: str,
        request: ImageGenerationRequest,
        timeout: float | None = None,
    ) -> ImageGenerationResponse:
        return await self.generator.generate_image(
            provider_id, model_id, request, timeout=timeout
        )

    async def generate(
        self,
        provider_id: str,
        model_id: str,
        prompt: str,
        timeout: float | None = None,
        **parameters: Any,
    ) -> ImageGenerationResponse:
        """``generate_image`` 的快捷方式，参数以关键字形式传入。"""
        request = ImageGenerationRequest(
            model_id=model_id, prompt=prompt, parameters=parameters
        )
        return await self.generate_image(provider_id, model_id, request, timeout)

    async def close(self) -> None:
        await self.generator.close()
        logger.info("[ImageGen] 网关已关闭")

    async def __aenter__(self) -> ImageGenGateway:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def create_gateway(
    source: str | os.PathLike | dict | GatewaySettings,
    transport_factory: TransportFactory | None = None,
) -> ImageGenGateway:
    """从 JSON 文件路径、字典或已解析的配置创建网关。"""
    if isinstance(source, GatewaySettings):
        settings = source
    elif isinstance(source, dict):
        settings = GatewaySettings.model_validate(source)
    else:
        settings = load_settings(source)
    return ImageGenGateway.from_settings(settings, transport_factory=transport_factory)
