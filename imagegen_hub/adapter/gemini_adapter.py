from __future__ import annotations

from ..core.base_adapter import BaseImageAdapter
from ..core.constants import GEMINI_DEFAULT_BASE_URL, GEMINI_SAFETY_CATEGORIES
from ..core.errors import MalformedResponseError, ProviderRejectedError
from ..core.log import logger
from ..core.transport import NativeRequest
from ..core.types import GeneratedImage, ImageGenerationResponse, ResolvedRequest
from ..core.utils import created_at_from, image_from_base64, mask_api_key


class GeminiAdapter(BaseImageAdapter):
    """Gemini 原生图像生成适配器。"""

    DEFAULT_BASE_URL = GEMINI_DEFAULT_BASE_URL

    def _build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }

    def build_request(self, request: ResolvedRequest) -> NativeRequest:
        """构建请求载荷。"""
        generation_config: dict = {"responseModalities": ["IMAGE"]}
        image_config: dict = {}

        if request.get("aspect_ratio"):
            image_config["aspectRatio"] = request.get("aspect_ratio")

        if request.get("resolution") and "gemini-3" in request.model_id.lower():
            image_config["imageSize"] = request.get("resolution")

        if image_config:
            generation_config["imageConfig"] = image_config

        if request.get("n"):
            generation_config["candidateCount"] = request.get("n")
        if request.get("seed") is not None:
            generation_config["seed"] = request.get("seed")

        safety_settings = []
        if self.safety_settings:
            for category in GEMINI_SAFETY_CATEGORIES:
                safety_settings.append(
                    {"category": category, "threshold": self.safety_settings}
                )

        payload: dict = {
            "contents": [{"parts": [{"text": request.prompt}]}],
            "generationConfig": generation_config,
        }

        if safety_settings:
            payload["safetySettings"] = safety_settings

        url = f"{self.base_url}/v1beta/models/{request.model_id}:generateContent"
        logger.debug(
            f"{self._get_log_prefix(request.model_id)} 请求 -> {url}, key={mask_api_key(self.api_key)}"
        )
        return NativeRequest(url=url, payload=payload, headers=self._build_headers())

    async def parse_response(
        self, payload: dict, request: ResolvedRequest
    ) -> ImageGenerationResponse:
        """从响应中提取图像数据。"""
        prefix = self._get_log_prefix(request.model_id)
        candidates = payload.get("candidates") or []
        logger.debug(f"{prefix} 候选结果: {len(candidates)}")
        if not candidates:
            block_reason = (payload.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                raise ProviderRejectedError(f"提示词被拦截: {block_reason}", payload=payload)
            raise MalformedResponseError("响应中未找到 candidates")

        images: list[GeneratedImage] = []
        for candidate in candidates:
            parts = (candidate.get("content") or {}).get("parts") or []
            for part in parts:
                inline_data = part.get("inline_data") or part.get("inlineData")
                if inline_data and inline_data.get("data"):
                    mime_type = inline_data.get("mime_type") or inline_data.get("mimeType")
                    images.append(await image_from_base64(inline_data["data"], mime_type))

        if not images:
            finish_reason = candidates[0].get("finishReason")
            if finish_reason and finish_reason != "STOP":
                raise ProviderRejectedError(f"生成被终止: {finish_reason}", payload=payload)
            raise MalformedResponseError("响应中未找到图片数据")

        return ImageGenerationResponse(created_at=created_at_from(None), images=images)
