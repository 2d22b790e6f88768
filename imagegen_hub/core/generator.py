from __future__ import annotations

import asyncio

from .classifier import classify
from .config import GatewayConfig
from .errors import ClassifiedError, ErrorKind, InvalidParameterError
from .log import logger
from .resolver import ParameterResolver
from .types import ImageGenerationRequest, ImageGenerationResponse


class ImageGenerator:
    """适配器编排器，负责分发生图请求。

    流程：选择适配器 -> 查找模型能力 -> 解析参数 -> 调用适配器。
    任何失败都会以 ClassifiedError 抛出，原始异常保存在 ``cause`` 中。
    """

    def __init__(self, config: GatewayConfig):
        self.config = config
        self.resolver = ParameterResolver(config.schema)

    async def generate_image(
        self,
        provider_id: str,
        model_id: str,
        request: ImageGenerationRequest,
        timeout: float | None = None,
    ) -> ImageGenerationResponse:
        """执行生图逻辑。

        Args:
            provider_id: 供应商 ID
            model_id: 模型 ID，需与 request.model_id 一致
            request: 标准请求
            timeout: 可选的整体超时（秒），超时按 TransportError 处理

        Raises:
            ClassifiedError: 所有失败
        """
        try:
            adapter = self.config.registry.get_adapter(provider_id)
            capability = self.config.catalog.get(model_id)
            if capability.provider_id != provider_id:
                raise InvalidParameterError(
                    f"模型 {model_id} 不属于供应商 {provider_id}",
                    field="model_id",
                    value=model_id,
                )
            if request.model_id != model_id:
                raise InvalidParameterError(
                    f"请求的模型 {request.model_id} 与目标模型 {model_id} 不一致",
                    field="model_id",
                    value=request.model_id,
                )

            resolved = self.resolver.resolve(request, capability)
            if timeout is not None:
                return await asyncio.wait_for(adapter.generate(resolved), timeout)
            return await adapter.generate(resolved)
        except ClassifiedError:
            raise
        except Exception as exc:
            error = classify(exc, provider_id)
            if error.kind in (ErrorKind.VALIDATION, ErrorKind.UNSUPPORTED_PARAMETER):
                logger.warning(f"[ImageGen] 请求参数无效: {error}")
            else:
                logger.error(f"[ImageGen] 生成失败: {error}")
            raise error from exc

    async def close(self) -> None:
        """关闭所有适配器。"""
        await self.config.registry.close()
