"""
Core type definitions for image generation gateway
定义图像生成网关的核心数据类型
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from .constants import DEFAULT_TIMEOUT


def _freeze(mapping: Mapping | None) -> Mapping:
    """复制并冻结映射，避免构造后被修改。"""
    return MappingProxyType(dict(mapping or {}))


class AdapterType(str, Enum):
    """适配器类型枚举"""

    OPENAI = "openai"
    COGVIEW = "cogview"
    Z_IMAGE = "z_image"
    SILICONFLOW = "siliconflow"
    GEMINI = "gemini"


class SemanticType(str, Enum):
    """标准参数的语义类型"""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    ENUM = "enum"
    ASPECT_RATIO = "aspect_ratio"


@dataclass(frozen=True)
class ParameterConstraint:
    """参数约束（纯数据，由统一校验器解释）"""

    minimum: float | None = None
    maximum: float | None = None
    choices: tuple[Any, ...] | None = None
    pattern: str | None = None
    max_length: int | None = None

    def __post_init__(self):
        if self.choices is not None and not isinstance(self.choices, tuple):
            object.__setattr__(self, "choices", tuple(self.choices))


@dataclass(frozen=True)
class StandardParameterSpec:
    """标准参数定义"""

    name: str
    semantic_type: SemanticType
    constraint: ParameterConstraint = field(default_factory=ParameterConstraint)
    required: bool = False
    description: str = ""


@dataclass(frozen=True)
class ModelCapability:
    """模型能力描述：支持的参数、默认值以及收窄后的约束"""

    model_id: str
    provider_id: str
    supported_parameters: frozenset[str] = frozenset()
    defaults: Mapping[str, Any] = field(default_factory=dict)
    overrides: Mapping[str, ParameterConstraint] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self, "supported_parameters", frozenset(self.supported_parameters)
        )
        object.__setattr__(self, "defaults", _freeze(self.defaults))
        object.__setattr__(self, "overrides", _freeze(self.overrides))

    def supports(self, name: str) -> bool:
        """模型是否支持该参数"""
        return name in self.supported_parameters


@dataclass(frozen=True)
class ImageGenerationRequest:
    """图像生成请求"""

    model_id: str
    prompt: str
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "parameters", _freeze(self.parameters))


@dataclass(frozen=True)
class ResolvedRequest:
    """经过默认值填充与校验后的请求"""

    model_id: str
    prompt: str
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "parameters", _freeze(self.parameters))

    def get(self, name: str, default: Any = None) -> Any:
        return self.parameters.get(name, default)


@dataclass(frozen=True)
class GeneratedImage:
    """单张生成结果"""

    url: str
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class ImageGenerationResponse:
    """统一的图像生成结果，与具体供应商无关"""

    created_at: datetime
    images: tuple[GeneratedImage, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "images", tuple(self.images))

    @property
    def image_count(self) -> int:
        """生成的图片数量"""
        return len(self.images)


@dataclass
class ProviderConfig:
    """供应商连接配置"""

    adapter_type: AdapterType
    provider_id: str
    api_key: str = ""
    base_url: str = ""
    timeout: float = DEFAULT_TIMEOUT
    proxy: str | None = None
    safety_settings: str | None = None

    # 适配器特定配置
    extra_config: dict = field(default_factory=dict)

    @property
    def has_api_key(self) -> bool:
        """是否配置了API密钥"""
        return bool(self.api_key)
