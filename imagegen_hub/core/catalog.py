"""
Model catalog
模型能力描述的只读集合，按模型 ID 索引。
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from .errors import InvalidParameterError
from .resolver import check_constraint, check_type
from .schema import DEFAULT_SCHEMA, ParameterSchema
from .types import ModelCapability, ParameterConstraint, SemanticType, StandardParameterSpec

_NUMERIC_TYPES = frozenset({SemanticType.INTEGER, SemanticType.NUMBER})
_TEXT_TYPES = frozenset({SemanticType.STRING, SemanticType.ASPECT_RATIO})


def _validate_override(
    model_id: str, spec: StandardParameterSpec, constraint: ParameterConstraint
) -> None:
    """约束种类必须与参数的语义类型匹配。"""
    name = spec.name
    has_range = constraint.minimum is not None or constraint.maximum is not None
    if has_range and spec.semantic_type not in _NUMERIC_TYPES:
        raise ValueError(
            f"模型 {model_id} 的约束 {name}: {spec.semantic_type.value} 类型不支持 minimum/maximum"
        )
    has_text = constraint.pattern is not None or constraint.max_length is not None
    if has_text and spec.semantic_type not in _TEXT_TYPES:
        raise ValueError(
            f"模型 {model_id} 的约束 {name}: {spec.semantic_type.value} 类型不支持 pattern/max_length"
        )
    if constraint.pattern is not None:
        try:
            re.compile(constraint.pattern)
        except re.error as exc:
            raise ValueError(f"模型 {model_id} 的约束 {name} 正则无效: {exc}") from exc
    for choice in constraint.choices or ():
        try:
            check_type(spec, choice)
        except InvalidParameterError as exc:
            raise ValueError(f"模型 {model_id} 的约束 {name} 可选值无效: {exc}") from exc


def validate_capability(capability: ModelCapability, schema: ParameterSchema) -> None:
    """加载时校验能力描述与 schema 是否一致。"""
    model_id = capability.model_id
    unknown = sorted(capability.supported_parameters - schema.names)
    if unknown:
        raise ValueError(f"模型 {model_id} 声明了未知的标准参数: {unknown}")
    for name, constraint in capability.overrides.items():
        if name not in capability.supported_parameters:
            raise ValueError(f"模型 {model_id} 的约束 {name} 不在支持的参数中")
        _validate_override(model_id, schema.describe(name), constraint)
    for name, value in capability.defaults.items():
        if name not in capability.supported_parameters:
            raise ValueError(f"模型 {model_id} 的默认值 {name} 不在支持的参数中")
        if value is None:
            continue
        spec = schema.describe(name)
        try:
            check_type(spec, value)
            check_constraint(name, spec.constraint, value)
            override = capability.overrides.get(name)
            if override is not None:
                check_constraint(name, override, value)
        except InvalidParameterError as exc:
            raise ValueError(f"模型 {model_id} 的默认值无效: {exc}") from exc


class ModelCatalog:
    """模型目录。"""

    def __init__(
        self,
        capabilities: Iterable[ModelCapability] = (),
        schema: ParameterSchema = DEFAULT_SCHEMA,
    ):
        table: dict[str, ModelCapability] = {}
        for capability in capabilities:
            if capability.model_id in table:
                raise ValueError(f"重复的模型 ID: {capability.model_id}")
            validate_capability(capability, schema)
            table[capability.model_id] = capability
        self._models = MappingProxyType(table)

    def get(self, model_id: str) -> ModelCapability:
        """
        Raises:
            InvalidParameterError: 目录中没有该模型
        """
        capability = self._models.get(model_id)
        if capability is None:
            raise InvalidParameterError(
                f"未知模型: {model_id}", field="model_id", value=model_id
            )
        return capability

    def models_for(self, provider_id: str) -> list[ModelCapability]:
        return [m for m in self._models.values() if m.provider_id == provider_id]

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._models

    def __iter__(self) -> Iterator[ModelCapability]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)
