"""
Utility functions for image generation gateway
图像生成网关的工具函数
"""

from __future__ import annotations

import asyncio
import base64
import binascii
from datetime import datetime, timezone
from io import BytesIO
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from PIL import Image, UnidentifiedImageError

from .constants import DEFAULT_RESOLUTION, RESOLUTION_1K_MAP, RESOLUTION_2K_MAP
from .errors import MalformedResponseError
from .log import logger
from .types import GeneratedImage, ResolvedRequest


def detect_mime_type(data: bytes) -> str:
    """
    检测图片 MIME 类型

    Args:
        data: 图片二进制数据

    Returns:
        str: MIME 类型
    """
    mime = "application/octet-stream"
    if data.startswith(b"\xff\xd8"):
        mime = "image/jpeg"
    elif data.startswith(b"\x89PNG\r\n\x1a\n"):
        mime = "image/png"
    elif data.startswith(b"GIF87a") or data.startswith(b"GIF89a"):
        mime = "image/gif"
    elif data.startswith(b"RIFF") and data[8:12] == b"WEBP":
        mime = "image/webp"
    elif len(data) > 12 and data[4:8] == b"ftyp":
        brand = data[8:12]
        if brand in (b"heic", b"heix", b"heim", b"heis"):
            mime = "image/heic"
        elif brand in (b"mif1", b"msf1", b"heif"):
            mime = "image/heif"

    logger.debug(f"[Image Utils] Detected MIME type: {mime}")
    return mime


def parse_size(size: str) -> tuple[int, int]:
    """将 "1024x768" 解析为 (1024, 768)。"""
    width, _, height = size.lower().partition("x")
    return int(width), int(height)


def format_size(width: int, height: int) -> str:
    return f"{width}x{height}"


def size_for_aspect_ratio(
    aspect_ratio: str | None, resolution: str | None = None
) -> str | None:
    """
    根据宽高比和分辨率档位查表得到尺寸

    Args:
        aspect_ratio: 宽高比，例如 16:9
        resolution: 分辨率档位，4K 暂时沿用 2K 的映射

    Returns:
        str | None: 尺寸字符串，宽高比不在映射表中时返回 None
    """
    if not aspect_ratio:
        return None
    if (resolution or DEFAULT_RESOLUTION) in ("2K", "4K"):
        return RESOLUTION_2K_MAP.get(aspect_ratio)
    return RESOLUTION_1K_MAP.get(aspect_ratio)


def resolve_size(request: ResolvedRequest, default: str | None = None) -> str | None:
    """
    从标准参数推导尺寸

    优先级：size > width/height > aspect_ratio + resolution > default
    """
    size = request.get("size")
    if size:
        return size
    width, height = request.get("width"), request.get("height")
    if width and height:
        return format_size(width, height)
    mapped = size_for_aspect_ratio(request.get("aspect_ratio"), request.get("resolution"))
    return mapped or default


def to_data_url(data: bytes, mime_type: str | None = None) -> str:
    """将图片二进制编码为 data URL。"""
    mime = mime_type or detect_mime_type(data)
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def _sync_read_dimensions(data: bytes) -> tuple[int, int]:
    """同步读取图片尺寸（在线程池中执行）"""
    with Image.open(BytesIO(data)) as img:
        return img.size


async def image_from_base64(
    b64_data: str, mime_type: str | None = None
) -> GeneratedImage:
    """
    将 base64 图片转换为带尺寸信息的结果项

    Raises:
        MalformedResponseError: base64 或图片数据无法解析
    """
    try:
        data = base64.b64decode(b64_data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedResponseError(f"无效的 base64 图片数据: {exc}") from exc

    try:
        width, height = await asyncio.to_thread(_sync_read_dimensions, data)
    except (UnidentifiedImageError, OSError) as exc:
        raise MalformedResponseError(f"无法识别的图片数据: {exc}") from exc

    return GeneratedImage(url=to_data_url(data, mime_type), width=width, height=height)


def image_from_url(url: str, size: str | None = None) -> GeneratedImage:
    """根据 URL 构建结果项，已知尺寸时一并带上。"""
    if size:
        width, height = parse_size(size)
        return GeneratedImage(url=url, width=width, height=height)
    return GeneratedImage(url=url)


def extract_error_message(payload: Any) -> str | None:
    """从常见的供应商错误响应中提取错误信息。"""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message") or error.get("msg") or error.get("code")
        if message:
            return str(message)
    elif isinstance(error, str) and error:
        return error
    for key in ("message", "msg", "detail", "error_message"):
        value = payload.get(key)
        if value:
            return str(value)
    return None


def mask_api_key(api_key: str) -> str:
    """日志中隐藏 API Key。"""
    return api_key[:4] + "****" + api_key[-4:] if len(api_key) > 8 else "****"


def clean_base_url(url: str | None) -> str:
    """清理 Base URL，移除末尾的 /v1*"""
    if not url:
        return ""
    parts = urlsplit(url.strip())
    segments = [s for s in parts.path.split("/") if s]
    for index, segment in enumerate(segments):
        if segment.startswith("v1"):
            segments = segments[:index]
            break
    path = "/" + "/".join(segments) if segments else ""
    return urlunsplit((parts.scheme, parts.netloc, path, "", "")).rstrip("/")


def created_at_from(value: Any) -> datetime:
    """将供应商返回的 Unix 时间戳转为 UTC 时间，缺失时使用当前时间。"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return datetime.now(timezone.utc)
