"""Tests for configuration, bridge lifecycle and the command line."""
from __future__ import annotations

import logging

import aiohttp
import pytest
import voluptuous as vol

from emulated_hue_bridge.__main__ import (
    _log_light_colour,
    build_parser,
    config_from_args,
)
from emulated_hue_bridge.bridge import EmulatedHueBridge
from emulated_hue_bridge.config import BridgeConfig
from emulated_hue_bridge.hue_light import StateUpdate


class TestBridgeConfig:
    """Tests for configuration validation."""

    def test_defaults(self):
        """An empty config takes the defaults."""
        config = BridgeConfig.from_dict({})

        assert config == BridgeConfig()
        assert config.lights == 3
        assert config.listen_port == 8043
        assert config.location_port == 8043

    def test_coercion(self):
        """Numbers given as strings are coerced."""
        config = BridgeConfig.from_dict({"lights": "5", "listen_port": "8080"})
        assert (config.lights, config.listen_port) == (5, 8080)

    def test_advertise_port(self):
        """The advertised port overrides the listen port in SSDP replies."""
        config = BridgeConfig.from_dict({"listen_port": 8080, "advertise_port": 80})
        assert config.location_port == 80

    @pytest.mark.parametrize(
        "data",
        [
            {"listen_port": 70000},
            {"listen_port": 0},
            {"lights": 0},
            {"lights": "many"},
            {"unknown": True},
            {"ssl_certfile": "server.crt"},
            {"ssl_keyfile": "server.key"},
        ],
    )
    def test_invalid(self, data):
        """Invalid settings are rejected."""
        with pytest.raises(vol.Invalid):
            BridgeConfig.from_dict(data)

    def test_frozen(self):
        """Config cannot change after startup."""
        config = BridgeConfig()
        with pytest.raises(AttributeError):
            config.lights = 10


class TestCommandLine:
    """Tests for argument handling."""

    def test_defaults(self):
        """No arguments gives the default config."""
        args = build_parser().parse_args([])
        assert config_from_args(args) == BridgeConfig()

    def test_flags(self):
        """Flags map onto config fields."""
        args = build_parser().parse_args(
            [
                "--lights", "7",
                "--port", "9000",
                "--advertise-ip", "10.0.0.5",
                "--no-v2",
                "--no-discovery",
                "--bind-host-only",
            ]
        )
        config = config_from_args(args)

        assert config.lights == 7
        assert config.listen_port == 9000
        assert config.advertise_ip == "10.0.0.5"
        assert config.enable_v2 is False
        assert config.enable_discovery is False
        assert config.upnp_bind_multicast is False

    def test_monitor_logs_colour(self, registry, caplog):
        """The monitor listener logs the rendered colour."""
        registry.apply_update("1", StateUpdate(on=True, hue=0, sat=254))
        with caplog.at_level(logging.INFO):
            _log_light_colour(registry.get("1"))
        assert "Fake Hue Light 1: on #ff0000 (mode hs)" in caplog.text


class TestEmulatedHueBridge:
    """Tests for starting and stopping the bridge."""

    async def test_start_serve_stop(self, unused_tcp_port_factory):
        """The bridge serves the API on its port until stopped."""
        port = unused_tcp_port_factory()
        bridge = EmulatedHueBridge(
            BridgeConfig(
                lights=2,
                listen_host="127.0.0.1",
                listen_port=port,
                enable_discovery=False,
            )
        )
        await bridge.async_start()
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    f"http://127.0.0.1:{port}/api/user/lights"
                ) as resp:
                    assert resp.status == 200
                    assert list(await resp.json()) == ["1", "2"]
        finally:
            await bridge.async_stop()

    async def test_port_in_use(self, unused_tcp_port_factory):
        """A second bridge on the same port fails to start."""
        config = BridgeConfig(
            listen_host="127.0.0.1",
            listen_port=unused_tcp_port_factory(),
            enable_discovery=False,
        )
        first = EmulatedHueBridge(config)
        await first.async_start()
        try:
            with pytest.raises(OSError):
                await EmulatedHueBridge(config).async_start()
        finally:
            await first.async_stop()

    def test_uses_given_registry(self, registry):
        """A supplied registry is used as is."""
        bridge = EmulatedHueBridge(BridgeConfig(lights=5), registry=registry)
        assert bridge.registry is registry
        assert len(bridge.registry.list_all()) == 2
