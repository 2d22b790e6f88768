from __future__ import annotations

import copy

import pytest

from imagegen_hub import create_gateway
from imagegen_hub.core.types import AdapterType, ProviderConfig

from .fakes import FakeTransport

COGVIEW_SIZES = [
    "1024x1024",
    "768x1344",
    "864x1152",
    "1344x768",
    "1152x864",
    "1440x720",
    "720x1440",
]

SETTINGS = {
    "providers": [
        {"id": "zhipu", "type": "cogview", "api_key": "zhipu-test-key"},
        {"id": "openai", "type": "openai", "api_key": "sk-test"},
        {"id": "silicon", "type": "siliconflow", "api_key": "sf-test"},
        {"id": "gitee", "type": "z_image", "api_key": "gitee-test"},
        {"id": "gemini", "type": "gemini", "api_key": "gm-test-key-123"},
    ],
    "models": [
        {
            "id": "cogview-4",
            "provider": "zhipu",
            "supported_parameters": ["size", "quality"],
            "defaults": {"quality": "standard"},
            "overrides": {
                "size": {"choices": COGVIEW_SIZES},
                "quality": {"choices": ["standard", "hd"]},
            },
        },
        {
            "id": "dall-e-3",
            "provider": "openai",
            "supported_parameters": ["size", "quality", "style", "n", "response_format"],
            "defaults": {"size": "1024x1024", "n": 1},
            "overrides": {"size": {"choices": ["1024x1024", "1024x1792", "1792x1024"]}},
        },
        {
            "id": "Kwai-Kolors/Kolors",
            "provider": "silicon",
            "supported_parameters": ["size", "n", "seed", "steps", "cfg", "negative_prompt"],
            "defaults": {"size": "1024x1024", "n": 1, "steps": 20, "cfg": 7.5},
            "overrides": {"n": {"maximum": 4}},
        },
        {
            "id": "z-image-turbo",
            "provider": "gitee",
            "supported_parameters": ["aspect_ratio", "resolution", "steps"],
            "defaults": {"aspect_ratio": "1:1", "resolution": "1K"},
        },
        {
            "id": "gemini-2.5-flash-image",
            "provider": "gemini",
            "supported_parameters": ["aspect_ratio"],
        },
    ],
}


@pytest.fixture
def settings_dict():
    return copy.deepcopy(SETTINGS)


@pytest.fixture
def transports():
    """供应商 ID -> FakeTransport"""
    return {}


@pytest.fixture
def transport_factory(transports):
    def factory(config):
        return transports.setdefault(config.provider_id, FakeTransport())

    return factory


@pytest.fixture
def gateway(settings_dict, transport_factory):
    return create_gateway(settings_dict, transport_factory=transport_factory)


@pytest.fixture
def provider_config():
    def build(adapter_type: AdapterType, provider_id: str = "p", **kwargs):
        return ProviderConfig(
            adapter_type=adapter_type, provider_id=provider_id, api_key="key-123456789", **kwargs
        )

    return build
