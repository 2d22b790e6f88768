"""
Adapter registry / factory
供应商 ID -> 适配器实例的静态绑定，启动时构建，运行期只读。
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType

from ..adapter.cogview_adapter import create_cogview_adapter
from ..adapter.gemini_adapter import GeminiAdapter
from ..adapter.openai_adapter import create_openai_compatible_adapter
from ..adapter.siliconflow_adapter import SiliconFlowAdapter
from ..adapter.z_image_adapter import create_z_image_adapter
from .base_adapter import BaseImageAdapter
from .errors import ProviderNotFoundError
from .log import logger
from .transport import Transport
from .types import AdapterType, ProviderConfig

AdapterFactory = Callable[[ProviderConfig, "Transport | None"], BaseImageAdapter]
TransportFactory = Callable[[ProviderConfig], Transport]

ADAPTER_FACTORIES: Mapping[AdapterType, AdapterFactory] = MappingProxyType(
    {
        AdapterType.OPENAI: create_openai_compatible_adapter,
        AdapterType.COGVIEW: create_cogview_adapter,
        AdapterType.Z_IMAGE: create_z_image_adapter,
        AdapterType.SILICONFLOW: SiliconFlowAdapter,
        AdapterType.GEMINI: GeminiAdapter,
    }
)


def create_adapter(
    config: ProviderConfig,
    transport: Transport | None = None,
    factories: Mapping[AdapterType, AdapterFactory] = ADAPTER_FACTORIES,
) -> BaseImageAdapter:
    """根据配置创建对应的适配器。"""
    factory = factories.get(config.adapter_type)
    if factory is None:
        raise ValueError(f"不支持的适配器类型: {config.adapter_type}")
    return factory(config, transport)


class AdapterRegistry:
    """适配器注册表。"""

    def __init__(self, adapters: Mapping[str, BaseImageAdapter]):
        self._adapters = MappingProxyType(dict(adapters))

    @classmethod
    def from_configs(
        cls,
        configs: Iterable[ProviderConfig],
        transport_factory: TransportFactory | None = None,
        factories: Mapping[AdapterType, AdapterFactory] = ADAPTER_FACTORIES,
    ) -> AdapterRegistry:
        adapters: dict[str, BaseImageAdapter] = {}
        for config in configs:
            if config.provider_id in adapters:
                raise ValueError(f"重复的供应商 ID: {config.provider_id}")
            transport = transport_factory(config) if transport_factory else None
            adapters[config.provider_id] = create_adapter(config, transport, factories)
            logger.info(
                f"[ImageGen] 已注册供应商 {config.provider_id} ({config.adapter_type.value})"
            )
        return cls(adapters)

    def get_adapter(self, provider_id: str) -> BaseImageAdapter:
        """
        Raises:
            ProviderNotFoundError: 未注册该供应商
        """
        adapter = self._adapters.get(provider_id)
        if adapter is None:
            raise ProviderNotFoundError(provider_id)
        return adapter

    @property
    def provider_ids(self) -> tuple[str, ...]:
        return tuple(self._adapters)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)

    async def close(self) -> None:
        """关闭所有适配器，单个适配器关闭失败不影响其余适配器。"""
        for provider_id, adapter in self._adapters.items():
            try:
                await adapter.close()
            except Exception as exc:
                logger.error(f"[ImageGen] 关闭供应商 {provider_id} 失败: {exc}")
