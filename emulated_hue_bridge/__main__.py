"""Command line entry point for the emulated Hue bridge."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import voluptuous as vol

from .bridge import EmulatedHueBridge
from .color_math import light_state_to_rgb
from .config import BridgeConfig
from .const import (
    CONF_ADVERTISE_IP,
    CONF_ADVERTISE_PORT,
    CONF_ENABLE_DISCOVERY,
    CONF_ENABLE_V2,
    CONF_LIGHTS,
    CONF_LISTEN_HOST,
    CONF_LISTEN_PORT,
    CONF_SSL_CERTFILE,
    CONF_SSL_KEYFILE,
    CONF_UPNP_BIND_MULTICAST,
    DEFAULT_LIGHTS,
    DEFAULT_LISTEN_HOST,
    DEFAULT_LISTEN_PORT,
)
from .hue_light import Light

_LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="emulated-hue-bridge",
        description="Emulate a Philips Hue bridge with virtual lights.",
    )
    parser.add_argument(
        "--lights", type=int, default=DEFAULT_LIGHTS,
        help=f"number of virtual lights to create (default: {DEFAULT_LIGHTS})",
    )
    parser.add_argument(
        "--host", default=DEFAULT_LISTEN_HOST,
        help=f"address to bind the API server to (default: {DEFAULT_LISTEN_HOST})",
    )
    parser.add_argument(
        "--port", type=int, default=DEFAULT_LISTEN_PORT,
        help=f"port for the Hue API server (default: {DEFAULT_LISTEN_PORT})",
    )
    parser.add_argument("--advertise-ip", help="address to announce over SSDP")
    parser.add_argument("--advertise-port", type=int, help="port to announce over SSDP")
    parser.add_argument("--no-v2", action="store_true", help="disable the CLIP v2 API")
    parser.add_argument(
        "--no-discovery", action="store_true", help="disable the SSDP responder"
    )
    parser.add_argument(
        "--bind-host-only", action="store_true",
        help="bind the SSDP socket to --host instead of all interfaces",
    )
    parser.add_argument("--certfile", help="TLS certificate (enables HTTPS)")
    parser.add_argument("--keyfile", help="TLS private key")
    parser.add_argument(
        "--monitor", action="store_true",
        help="log the display colour of each light when it changes",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> BridgeConfig:
    """Validate parsed arguments into a BridgeConfig."""
    return BridgeConfig.from_dict(
        {
            CONF_LIGHTS: args.lights,
            CONF_LISTEN_HOST: args.host,
            CONF_LISTEN_PORT: args.port,
            CONF_ADVERTISE_IP: args.advertise_ip,
            CONF_ADVERTISE_PORT: args.advertise_port,
            CONF_ENABLE_V2: not args.no_v2,
            CONF_ENABLE_DISCOVERY: not args.no_discovery,
            CONF_UPNP_BIND_MULTICAST: not args.bind_host_only,
            CONF_SSL_CERTFILE: args.certfile,
            CONF_SSL_KEYFILE: args.keyfile,
        }
    )


def _log_light_colour(light: Light) -> None:
    state = light.snapshot()
    r, g, b = light_state_to_rgb(state)
    _LOGGER.info(
        "%s: %s #%02x%02x%02x (mode %s)",
        light.name,
        "on" if state.on else "off",
        r,
        g,
        b,
        state.colormode.value,
    )


async def async_run(config: BridgeConfig, monitor: bool = False) -> None:
    """Run the bridge until cancelled."""
    bridge = EmulatedHueBridge(config)
    if monitor:
        bridge.registry.subscribe(_log_light_colour)

    await bridge.async_start()
    try:
        await asyncio.Event().wait()
    finally:
        await bridge.async_stop()


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the bridge."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except vol.Invalid as err:
        parser.error(str(err))

    try:
        asyncio.run(async_run(config, monitor=args.monitor))
    except KeyboardInterrupt:
        pass
    except OSError as err:
        _LOGGER.error("Bridge stopped: %s", err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
