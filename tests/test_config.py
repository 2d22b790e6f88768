import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from imagegen_hub.adapter import GeminiAdapter, OpenAICompatibleAdapter, SiliconFlowAdapter
from imagegen_hub.core.catalog import ModelCatalog
from imagegen_hub.core.config import GatewayConfig, GatewaySettings, ProviderSettings, load_settings
from imagegen_hub.core.errors import InvalidParameterError, ProviderNotFoundError
from imagegen_hub.core.registry import AdapterRegistry, create_adapter
from imagegen_hub.core.transport import AiohttpTransport
from imagegen_hub.core.types import AdapterType, ModelCapability, ParameterConstraint

from .fakes import FakeTransport


class TestSettings:
    def test_parse_full_document(self, settings_dict):
        settings = GatewaySettings.model_validate(settings_dict)
        assert [p.id for p in settings.providers] == ["zhipu", "openai", "silicon", "gitee", "gemini"]
        cogview = settings.models[0].to_capability()
        assert cogview.provider_id == "zhipu"
        assert cogview.overrides["size"].choices[0] == "1024x1024"

    def test_load_from_file(self, tmp_path, settings_dict):
        path = tmp_path / "gateway.json"
        path.write_text(json.dumps(settings_dict), encoding="utf-8")
        assert load_settings(path) == GatewaySettings.model_validate(settings_dict)

    def test_unknown_adapter_type(self):
        with pytest.raises(ValidationError):
            ProviderSettings.model_validate({"id": "x", "type": "midjourney"})

    def test_model_must_reference_configured_provider(self, settings_dict):
        settings_dict["models"][0]["provider"] = "missing"
        with pytest.raises(ValidationError):
            GatewaySettings.model_validate(settings_dict)

    def test_duplicate_provider_ids(self, settings_dict):
        settings_dict["providers"].append({"id": "zhipu", "type": "openai"})
        with pytest.raises(ValidationError):
            GatewaySettings.model_validate(settings_dict)

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("https://api.example.com/v1/", "https://api.example.com"),
            ("https://api.example.com/v1beta", "https://api.example.com"),
            ("https://host/proxy/v1/images", "https://host/proxy"),
            ("https://v1.example.com", "https://v1.example.com"),
            ("", ""),
        ],
    )
    def test_base_url_is_cleaned(self, raw, expected):
        settings = ProviderSettings.model_validate({"id": "x", "type": "openai", "base_url": raw})
        assert settings.base_url == expected

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("TEST_IMAGE_KEY", "env-secret")
        settings = ProviderSettings.model_validate(
            {"id": "x", "type": "openai", "api_key_env": "TEST_IMAGE_KEY"}
        )
        assert settings.to_provider_config().api_key == "env-secret"

    def test_blank_proxy_is_none(self):
        settings = ProviderSettings.model_validate({"id": "x", "type": "openai", "proxy": "  "})
        assert settings.proxy is None


class TestCatalog:
    def test_unknown_parameter_rejected_at_load(self):
        capability = ModelCapability("m", "p", frozenset({"size", "warp_factor"}))
        with pytest.raises(ValueError):
            ModelCatalog([capability])

    def test_default_for_unsupported_parameter_rejected(self):
        capability = ModelCapability("m", "p", frozenset({"size"}), defaults={"seed": 1})
        with pytest.raises(ValueError):
            ModelCatalog([capability])

    def test_override_for_unsupported_parameter_rejected(self):
        capability = ModelCapability(
            "m", "p", frozenset({"size"}), overrides={"n": ParameterConstraint(maximum=1)}
        )
        with pytest.raises(ValueError):
            ModelCatalog([capability])

    @pytest.mark.parametrize(
        "name, constraint",
        [
            ("size", ParameterConstraint(minimum=64)),
            ("quality", ParameterConstraint(maximum=2)),
            ("steps", ParameterConstraint(pattern=r"\d+")),
            ("cfg", ParameterConstraint(max_length=3)),
            ("size", ParameterConstraint(pattern="(")),
            ("steps", ParameterConstraint(choices=("10", "20"))),
        ],
    )
    def test_override_kind_must_fit_parameter_type(self, name, constraint):
        capability = ModelCapability("m", "p", frozenset({name}), overrides={name: constraint})
        with pytest.raises(ValueError):
            ModelCatalog([capability])

    def test_range_override_on_numeric_parameter_loads(self):
        capability = ModelCapability(
            "m", "p", frozenset({"n", "cfg"}),
            overrides={"n": ParameterConstraint(maximum=4), "cfg": ParameterConstraint(minimum=1.5)},
        )
        assert "m" in ModelCatalog([capability])

    @pytest.mark.parametrize(
        "defaults",
        [
            {"quality": "ultra"},
            {"steps": "20"},
            {"steps": 0},
            {"size": "512x512"},
        ],
    )
    def test_invalid_default_rejected_at_load(self, defaults):
        capability = ModelCapability(
            "m", "p", frozenset({"size", "quality", "steps"}),
            defaults=defaults,
            overrides={"size": ParameterConstraint(choices=("1024x1024",))},
        )
        with pytest.raises(ValueError):
            ModelCatalog([capability])

    def test_bad_override_in_settings_fails_at_startup(self, settings_dict):
        settings_dict["models"][0]["overrides"]["size"] = {"minimum": 64}
        with pytest.raises(ValueError):
            GatewayConfig.from_settings(
                GatewaySettings.model_validate(settings_dict),
                transport_factory=lambda config: FakeTransport(),
            )

    def test_unknown_model_lookup(self):
        catalog = ModelCatalog([ModelCapability("m", "p", frozenset({"size"}))])
        assert "m" in catalog
        with pytest.raises(InvalidParameterError):
            catalog.get("other")

    def test_models_for_provider(self, settings_dict):
        config = GatewayConfig.from_settings(
            GatewaySettings.model_validate(settings_dict),
            transport_factory=lambda config: FakeTransport(),
        )
        assert [m.model_id for m in config.catalog.models_for("zhipu")] == ["cogview-4"]


class TestRegistry:
    def test_strategy_per_adapter_type(self, settings_dict):
        config = GatewayConfig.from_settings(GatewaySettings.model_validate(settings_dict))
        registry = config.registry

        assert isinstance(registry.get_adapter("zhipu"), OpenAICompatibleAdapter)
        assert isinstance(registry.get_adapter("openai"), OpenAICompatibleAdapter)
        assert isinstance(registry.get_adapter("gitee"), OpenAICompatibleAdapter)
        assert isinstance(registry.get_adapter("silicon"), SiliconFlowAdapter)
        assert isinstance(registry.get_adapter("gemini"), GeminiAdapter)
        assert isinstance(registry.get_adapter("gemini").transport, AiohttpTransport)

    def test_unknown_provider(self):
        registry = AdapterRegistry({})
        with pytest.raises(ProviderNotFoundError) as exc_info:
            registry.get_adapter("nonexistent-provider")
        assert exc_info.value.provider_id == "nonexistent-provider"

    def test_registry_is_read_only(self, provider_config):
        adapter = create_adapter(provider_config(AdapterType.OPENAI), FakeTransport())
        registry = AdapterRegistry({"p": adapter})
        with pytest.raises(TypeError):
            registry._adapters["q"] = adapter

    def test_duplicate_provider_rejected(self, provider_config):
        with pytest.raises(ValueError):
            AdapterRegistry.from_configs(
                [provider_config(AdapterType.OPENAI), provider_config(AdapterType.GEMINI)]
            )

    def test_custom_factories(self, provider_config):
        built = []

        def factory(config, transport):
            adapter = create_adapter(config, transport)
            built.append(config.provider_id)
            return adapter

        registry = AdapterRegistry.from_configs(
            [provider_config(AdapterType.OPENAI, provider_id="custom")],
            factories={AdapterType.OPENAI: factory},
        )
        assert built == ["custom"]
        assert "custom" in registry

    @pytest.mark.asyncio
    async def test_close_continues_after_failure(self, provider_config, caplog):
        class BrokenAdapter:
            async def close(self):
                raise RuntimeError("session already gone")

        healthy = create_adapter(provider_config(AdapterType.OPENAI), FakeTransport())
        healthy._owns_transport = True
        registry = AdapterRegistry({"broken": BrokenAdapter(), "healthy": healthy})

        await registry.close()

        assert healthy.transport.closed
        assert "broken" in caplog.text

    def test_missing_factory(self, provider_config):
        with pytest.raises(ValueError):
            create_adapter(provider_config(AdapterType.GEMINI), factories={})


def test_bundled_example_config_loads():
    path = Path(__file__).resolve().parent.parent / "examples_config" / "gateway.json"
    config = GatewayConfig.from_settings(
        load_settings(path), transport_factory=lambda config: FakeTransport()
    )
    capability = config.catalog.get("cogview-4")
    assert "1024x1024" in capability.overrides["size"].choices
    assert set(config.registry.provider_ids) == {"zhipu", "openai", "silicon", "gitee", "gemini"}
