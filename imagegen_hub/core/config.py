"""
Gateway configuration
解析外部配置（供应商连接信息 + 模型目录），并构建进程级只读的配置包。
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .catalog import ModelCatalog
from .constants import DEFAULT_TIMEOUT
from .log import logger
from .registry import AdapterRegistry, TransportFactory
from .schema import DEFAULT_SCHEMA, ParameterSchema
from .types import AdapterType, ModelCapability, ParameterConstraint, ProviderConfig
from .utils import clean_base_url


class ConstraintSettings(BaseModel):
    minimum: float | None = None
    maximum: float | None = None
    choices: list[Any] | None = None
    pattern: str | None = None
    max_length: int | None = Field(default=None, ge=0)

    def to_constraint(self) -> ParameterConstraint:
        return ParameterConstraint(
            minimum=self.minimum,
            maximum=self.maximum,
            choices=tuple(self.choices) if self.choices is not None else None,
            pattern=self.pattern,
            max_length=self.max_length,
        )


class ProviderSettings(BaseModel):
    """单个供应商的连接配置。"""

    id: str = Field(min_length=1)
    type: AdapterType
    api_key: str = ""
    api_key_env: str | None = None
    base_url: str = ""
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    proxy: str | None = None
    safety_settings: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("base_url")
    @classmethod
    def _clean_base_url(cls, value: str) -> str:
        return clean_base_url(value)

    @field_validator("proxy")
    @classmethod
    def _blank_proxy(cls, value: str | None) -> str | None:
        return (value or "").strip() or None

    def to_provider_config(self) -> ProviderConfig:
        api_key = self.api_key
        if not api_key and self.api_key_env:
            api_key = os.environ.get(self.api_key_env, "")
            if not api_key:
                logger.warning(f"[ImageGen] 环境变量 {self.api_key_env} 未设置 (供应商: {self.id})")
        return ProviderConfig(
            adapter_type=self.type,
            provider_id=self.id,
            api_key=api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            proxy=self.proxy,
            safety_settings=self.safety_settings,
            extra_config=dict(self.extra),
        )


class ModelSettings(BaseModel):
    """单个模型的能力描述。"""

    id: str = Field(min_length=1)
    provider: str = Field(min_length=1)
    supported_parameters: list[str] = Field(default_factory=list)
    defaults: dict[str, Any] = Field(default_factory=dict)
    overrides: dict[str, ConstraintSettings] = Field(default_factory=dict)

    def to_capability(self) -> ModelCapability:
        return ModelCapability(
            model_id=self.id,
            provider_id=self.provider,
            supported_parameters=frozenset(self.supported_parameters),
            defaults=self.defaults,
            overrides={k: v.to_constraint() for k, v in self.overrides.items()},
        )


class GatewaySettings(BaseModel):
    providers: list[ProviderSettings] = Field(default_factory=list)
    models: list[ModelSettings] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self) -> GatewaySettings:
        provider_ids = [p.id for p in self.providers]
        if len(set(provider_ids)) != len(provider_ids):
            raise ValueError("供应商 ID 重复")
        model_ids = [m.id for m in self.models]
        if len(set(model_ids)) != len(model_ids):
            raise ValueError("模型 ID 重复")
        for model in self.models:
            if model.provider not in provider_ids:
                raise ValueError(f"模型 {model.id} 引用了未配置的供应商 {model.provider}")
        return self


def load_settings(path: str | os.PathLike) -> GatewaySettings:
    """从 JSON 文件加载配置。"""
    with open(Path(path), encoding="utf-8") as f:
        data = json.load(f)
    return GatewaySettings.model_validate(data)


@dataclass(frozen=True)
class GatewayConfig:
    """进程级只读配置包：标准参数 schema、模型目录与适配器注册表。"""

    schema: ParameterSchema
    catalog: ModelCatalog
    registry: AdapterRegistry

    @classmethod
    def from_settings(
        cls,
        settings: GatewaySettings,
        schema: ParameterSchema = DEFAULT_SCHEMA,
        transport_factory: TransportFactory | None = None,
    ) -> GatewayConfig:
        catalog = ModelCatalog((m.to_capability() for m in settings.models), schema)
        registry = AdapterRegistry.from_configs(
            (p.to_provider_config() for p in settings.providers),
            transport_factory=transport_factory,
        )
        logger.info(
            f"[ImageGen] 配置加载完成: {len(registry)} 个供应商, {len(catalog)} 个模型"
        )
        return cls(schema=schema, catalog=catalog, registry=registry)
