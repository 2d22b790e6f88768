"""
Parameter resolver
将调用方请求与模型能力描述合并：填充默认值、拒绝不支持的参数、校验约束。
"""

from __future__ import annotations

import math
import re
from typing import Any

from .errors import InvalidParameterError, UnsupportedParameterError
from .schema import DEFAULT_SCHEMA, ParameterSchema
from .types import (
    ImageGenerationRequest,
    ModelCapability,
    ParameterConstraint,
    ResolvedRequest,
    SemanticType,
    StandardParameterSpec,
)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


_TYPE_CHECKS = {
    SemanticType.STRING: lambda v: isinstance(v, str),
    SemanticType.ASPECT_RATIO: lambda v: isinstance(v, str),
    SemanticType.INTEGER: _is_integer,
    SemanticType.NUMBER: _is_number,
    SemanticType.ENUM: lambda v: v is not None,
}


def check_type(spec: StandardParameterSpec, value: Any) -> None:
    """校验取值是否符合参数的语义类型。"""
    if not _TYPE_CHECKS[spec.semantic_type](value):
        raise InvalidParameterError(
            f"参数 {spec.name} 类型错误，期望 {spec.semantic_type.value}，实际为 {value!r}",
            field=spec.name,
            value=value,
        )


def check_constraint(name: str, constraint: ParameterConstraint, value: Any) -> None:
    """按声明式约束校验单个取值，第一个不满足的条件即失败。"""

    def fail(reason: str) -> None:
        raise InvalidParameterError(
            f"参数 {name} 的取值 {value!r} 无效: {reason}", field=name, value=value
        )

    if constraint.choices is not None and value not in constraint.choices:
        fail(f"可选值为 {list(constraint.choices)}")
    if constraint.minimum is not None and value < constraint.minimum:
        fail(f"不能小于 {constraint.minimum}")
    if constraint.maximum is not None and value > constraint.maximum:
        fail(f"不能大于 {constraint.maximum}")
    if constraint.pattern is not None and not re.fullmatch(constraint.pattern, value):
        fail(f"格式应匹配 {constraint.pattern}")
    if constraint.max_length is not None and len(value) > constraint.max_length:
        fail(f"长度不能超过 {constraint.max_length}")


class ParameterResolver:
    """参数解析器。

    ``resolve`` 是其两个输入的纯函数：相同输入总是得到相同的
    ResolvedRequest 或相同的错误。
    """

    def __init__(self, schema: ParameterSchema = DEFAULT_SCHEMA):
        self.schema = schema

    def resolve(
        self, request: ImageGenerationRequest, capability: ModelCapability
    ) -> ResolvedRequest:
        """解析并校验请求。

        Raises:
            InvalidParameterError: 缺少提示词或参数取值不合法
            UnsupportedParameterError: 请求中包含模型不支持的参数
        """
        prompt = request.prompt
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidParameterError("提示词不能为空", field="prompt", value=prompt)

        for name, value in request.parameters.items():
            if name == "prompt":
                raise InvalidParameterError(
                    "prompt 应通过请求的 prompt 字段传入", field=name, value=value
                )
            if not capability.supports(name):
                raise UnsupportedParameterError(
                    f"模型 {capability.model_id} 不支持参数: {name}",
                    field=name,
                    value=value,
                )

        # 显式传入 None 视为未传，按默认值处理
        resolved = {k: v for k, v in request.parameters.items() if v is not None}
        for name in sorted(capability.supported_parameters - resolved.keys()):
            default = capability.defaults.get(name)
            if default is not None:
                resolved[name] = default

        self._validate("prompt", prompt, capability)
        for name, value in resolved.items():
            self._validate(name, value, capability)

        # 宽高只能成对出现
        if ("width" in resolved) != ("height" in resolved):
            missing = "height" if "width" in resolved else "width"
            raise InvalidParameterError(
                "width 与 height 必须同时提供", field=missing, value=None
            )

        return ResolvedRequest(
            model_id=request.model_id, prompt=prompt, parameters=resolved
        )

    def _validate(self, name: str, value: Any, capability: ModelCapability) -> None:
        spec = self.schema.describe(name)
        if spec is None:
            # capability 引用了 schema 中不存在的参数
            raise UnsupportedParameterError(
                f"未知的标准参数: {name}", field=name, value=value
            )
        check_type(spec, value)
        check_constraint(name, spec.constraint, value)
        override = capability.overrides.get(name)
        if override is not None:
            check_constraint(name, override, value)
