"""
Standard parameter schema
标准参数词表：每个参数的语义类型与约束，进程内只读共享。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from .constants import (
    ASPECT_RATIO_PATTERN,
    MAX_PROMPT_LENGTH,
    SIZE_PATTERN,
    SUPPORTED_QUALITIES,
    SUPPORTED_RESOLUTIONS,
    SUPPORTED_RESPONSE_FORMATS,
    SUPPORTED_STYLES,
)
from .types import ParameterConstraint, SemanticType, StandardParameterSpec

STANDARD_PARAMETERS: tuple[StandardParameterSpec, ...] = (
    StandardParameterSpec(
        "prompt",
        SemanticType.STRING,
        ParameterConstraint(max_length=MAX_PROMPT_LENGTH),
        required=True,
        description="提示词",
    ),
    StandardParameterSpec(
        "negative_prompt",
        SemanticType.STRING,
        ParameterConstraint(max_length=MAX_PROMPT_LENGTH),
        description="反向提示词",
    ),
    StandardParameterSpec(
        "aspect_ratio",
        SemanticType.ASPECT_RATIO,
        ParameterConstraint(pattern=ASPECT_RATIO_PATTERN),
        description="宽高比，例如 16:9",
    ),
    StandardParameterSpec(
        "resolution",
        SemanticType.ENUM,
        ParameterConstraint(choices=SUPPORTED_RESOLUTIONS),
        description="分辨率档位",
    ),
    StandardParameterSpec(
        "size",
        SemanticType.STRING,
        ParameterConstraint(pattern=SIZE_PATTERN),
        description="图片尺寸，例如 1024x1024",
    ),
    StandardParameterSpec(
        "width", SemanticType.INTEGER, ParameterConstraint(minimum=64, maximum=8192)
    ),
    StandardParameterSpec(
        "height", SemanticType.INTEGER, ParameterConstraint(minimum=64, maximum=8192)
    ),
    StandardParameterSpec(
        "n",
        SemanticType.INTEGER,
        ParameterConstraint(minimum=1, maximum=10),
        description="生成数量",
    ),
    StandardParameterSpec(
        "seed", SemanticType.INTEGER, ParameterConstraint(minimum=0, maximum=2**32 - 1)
    ),
    StandardParameterSpec(
        "steps",
        SemanticType.INTEGER,
        ParameterConstraint(minimum=1, maximum=150),
        description="推理步数",
    ),
    StandardParameterSpec(
        "cfg",
        SemanticType.NUMBER,
        ParameterConstraint(minimum=0, maximum=30),
        description="引导系数 (guidance scale)",
    ),
    StandardParameterSpec(
        "quality", SemanticType.ENUM, ParameterConstraint(choices=SUPPORTED_QUALITIES)
    ),
    StandardParameterSpec(
        "style", SemanticType.ENUM, ParameterConstraint(choices=SUPPORTED_STYLES)
    ),
    StandardParameterSpec(
        "response_format",
        SemanticType.ENUM,
        ParameterConstraint(choices=SUPPORTED_RESPONSE_FORMATS),
    ),
)


class ParameterSchema:
    """标准参数的只读查询表。"""

    def __init__(self, specs: Iterable[StandardParameterSpec] = STANDARD_PARAMETERS):
        table: dict[str, StandardParameterSpec] = {}
        for spec in specs:
            if spec.name in table:
                raise ValueError(f"重复定义的标准参数: {spec.name}")
            table[spec.name] = spec
        self._specs = MappingProxyType(table)

    def describe(self, name: str) -> StandardParameterSpec | None:
        """查询参数定义，未知参数返回 None。"""
        return self._specs.get(name)

    def extend(self, specs: Iterable[StandardParameterSpec]) -> ParameterSchema:
        """返回追加了新参数的新 schema；已有参数不可被重新定义。"""
        return ParameterSchema([*self._specs.values(), *specs])

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[StandardParameterSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


DEFAULT_SCHEMA = ParameterSchema()
