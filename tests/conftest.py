"""Shared fixtures for emulated Hue bridge tests."""
from __future__ import annotations

import pytest

from emulated_hue_bridge.bridge import create_app
from emulated_hue_bridge.hue_light_registry import LightRegistry


@pytest.fixture
def registry() -> LightRegistry:
    """Registry populated with two default lights."""
    registry = LightRegistry()
    registry.populate(2)
    return registry


@pytest.fixture
async def client(aiohttp_client, registry):
    """Test client for an app with both APIs enabled."""
    return await aiohttp_client(create_app(registry))


@pytest.fixture
async def v1_only_client(aiohttp_client, registry):
    """Test client for an app with the CLIP v2 API disabled."""
    return await aiohttp_client(create_app(registry, enable_v2=False))
