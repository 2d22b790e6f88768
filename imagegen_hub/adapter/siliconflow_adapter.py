from __future__ import annotations

from typing import Any

from ..core.base_adapter import BaseImageAdapter
from ..core.constants import DEFAULT_SIZE, SILICONFLOW_DEFAULT_BASE_URL
from ..core.errors import MalformedResponseError, ProviderRejectedError
from ..core.log import logger
from ..core.transport import NativeRequest
from ..core.types import GeneratedImage, ImageGenerationResponse, ResolvedRequest
from ..core.utils import created_at_from, image_from_url, resolve_size


class SiliconFlowAdapter(BaseImageAdapter):
    """SiliconFlow 图像生成适配器。

    请求字段与响应包络（``images`` 而非 ``data``）都与 OpenAI 格式不同，
    因此单独实现。
    """

    DEFAULT_BASE_URL = SILICONFLOW_DEFAULT_BASE_URL
    ENDPOINT = "/v1/images/generations"

    def build_request(self, request: ResolvedRequest) -> NativeRequest:
        payload: dict[str, Any] = {
            "model": request.model_id,
            "prompt": request.prompt,
            "image_size": resolve_size(request, DEFAULT_SIZE),
            "batch_size": request.get("n", 1),
        }
        if request.get("negative_prompt"):
            payload["negative_prompt"] = request.get("negative_prompt")
        if request.get("seed") is not None:
            payload["seed"] = request.get("seed")
        if request.get("steps") is not None:
            payload["num_inference_steps"] = request.get("steps")
        if request.get("cfg") is not None:
            payload["guidance_scale"] = request.get("cfg")

        logger.debug(
            f"{self._get_log_prefix(request.model_id)} 参数: image_size={payload['image_size']}, batch_size={payload['batch_size']}"
        )
        return NativeRequest(
            url=f"{self.base_url}{self.ENDPOINT}",
            payload=payload,
            headers=self._build_headers(),
        )

    def _check_payload(self, payload: dict, status: int) -> None:
        # 业务错误以 {"code": ..., "message": ...} 的形式返回
        if "images" not in payload and payload.get("code") and payload.get("message"):
            raise ProviderRejectedError(
                f"{payload['message']} (code={payload['code']})",
                status=status,
                payload=payload,
            )
        super()._check_payload(payload, status)

    async def parse_response(
        self, payload: dict, request: ResolvedRequest
    ) -> ImageGenerationResponse:
        items = payload.get("images")
        if not isinstance(items, list):
            raise MalformedResponseError(f"响应中未找到 images 字段: {str(payload)[:200]}")

        size = resolve_size(request, DEFAULT_SIZE)
        images: list[GeneratedImage] = []
        for item in items:
            url = item.get("url") if isinstance(item, dict) else None
            if not url:
                raise MalformedResponseError(f"无法从响应项中提取图像: {item!r}")
            images.append(image_from_url(url, size))

        timings = payload.get("timings") or {}
        logger.debug(
            f"{self._get_log_prefix(request.model_id)} seed={payload.get('seed')}, inference={timings.get('inference')}"
        )
        return ImageGenerationResponse(
            created_at=created_at_from(payload.get("created")), images=images
        )
