"""常量定义模块。

集中管理项目中使用的常量，避免魔法字符串分散在代码中。
"""

from __future__ import annotations

# ========================== 日志常量 ==========================

LOG_PREFIX = "[ImageGen]"
"""统一的日志前缀。"""


# ========================== 安全设置 ==========================

GEMINI_SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_CIVIC_INTEGRITY",
)
"""Gemini API 支持的安全类别列表。"""


# ========================== 默认配置值 ==========================

DEFAULT_TIMEOUT = 180
"""默认请求超时时间（秒）。"""

DEFAULT_SIZE = "1024x1024"
"""默认图片尺寸。"""

DEFAULT_RESOLUTION = "1K"
"""默认分辨率。"""

MAX_PROMPT_LENGTH = 4000
"""提示词最大长度。"""


# ========================== 分辨率映射 ==========================

# 1K 分辨率映射（适用于多种适配器）
RESOLUTION_1K_MAP = {
    "1:1": "1024x1024",
    "4:3": "1024x768",
    "3:4": "768x1024",
    "16:9": "1024x576",
    "9:16": "576x1024",
    "3:2": "1024x640",
    "2:3": "640x1024",
}

# 2K 分辨率映射
RESOLUTION_2K_MAP = {
    "1:1": "2048x2048",
    "4:3": "2048x1536",
    "3:4": "1536x2048",
    "3:2": "2048x1360",
    "2:3": "1360x2048",
    "16:9": "2048x1152",
    "9:16": "1152x2048",
}


# ========================== 支持的枚举值 ==========================

SUPPORTED_RESOLUTIONS = ("1K", "2K", "4K")
"""支持的分辨率列表。"""

SUPPORTED_QUALITIES = ("standard", "hd", "auto", "low", "medium", "high")
"""支持的画质取值。"""

SUPPORTED_STYLES = ("vivid", "natural")
"""支持的风格取值。"""

SUPPORTED_RESPONSE_FORMATS = ("url", "b64_json")
"""支持的返回格式。"""

SIZE_PATTERN = r"^[1-9]\d*x[1-9]\d*$"
"""尺寸字符串格式，例如 1024x1024。"""

ASPECT_RATIO_PATTERN = r"^[1-9]\d*:[1-9]\d*$"
"""宽高比字符串格式，例如 16:9。"""


# ========================== API 端点 ==========================

GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
"""Gemini API 默认 Base URL。"""

OPENAI_DEFAULT_BASE_URL = "https://api.openai.com"
"""OpenAI API 默认 Base URL。"""

GITEE_AI_DEFAULT_BASE_URL = "https://ai.gitee.com"
"""Gitee AI 默认 Base URL。"""

ZHIPU_DEFAULT_BASE_URL = "https://open.bigmodel.cn"
"""智谱 CogView 默认 Base URL。"""

SILICONFLOW_DEFAULT_BASE_URL = "https://api.siliconflow.cn"
"""SiliconFlow 默认 Base URL。"""
