"""Configuration for the emulated Hue bridge."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import voluptuous as vol

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

_PORT = vol.All(vol.Coerce(int), vol.Range(min=1, max=65535))


def _ssl_files_paired(config: dict[str, Any]) -> dict[str, Any]:
    """Require the certificate and key together."""
    if bool(config.get(CONF_SSL_CERTFILE)) != bool(config.get(CONF_SSL_KEYFILE)):
        raise vol.Invalid(
            f"{CONF_SSL_CERTFILE} and {CONF_SSL_KEYFILE} must be given together"
        )
    return config


CONFIG_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Optional(CONF_LIGHTS, default=DEFAULT_LIGHTS): vol.All(
                vol.Coerce(int), vol.Range(min=1)
            ),
            vol.Optional(CONF_LISTEN_HOST, default=DEFAULT_LISTEN_HOST): str,
            vol.Optional(CONF_LISTEN_PORT, default=DEFAULT_LISTEN_PORT): _PORT,
            vol.Optional(CONF_ADVERTISE_IP): vol.Any(None, str),
            vol.Optional(CONF_ADVERTISE_PORT): vol.Any(None, _PORT),
            vol.Optional(CONF_ENABLE_V2, default=True): vol.Boolean(),
            vol.Optional(CONF_ENABLE_DISCOVERY, default=True): vol.Boolean(),
            vol.Optional(CONF_UPNP_BIND_MULTICAST, default=True): vol.Boolean(),
            vol.Optional(CONF_SSL_CERTFILE): vol.Any(None, str),
            vol.Optional(CONF_SSL_KEYFILE): vol.Any(None, str),
        }
    ),
    _ssl_files_paired,
)


@dataclass(frozen=True)
class BridgeConfig:
    """Validated bridge settings, fixed for the life of the process."""

    lights: int = DEFAULT_LIGHTS
    listen_host: str = DEFAULT_LISTEN_HOST
    listen_port: int = DEFAULT_LISTEN_PORT
    advertise_ip: str | None = None
    advertise_port: int | None = None
    enable_v2: bool = True
    enable_discovery: bool = True
    upnp_bind_multicast: bool = True
    ssl_certfile: str | None = None
    ssl_keyfile: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BridgeConfig:
        """Validate ``data`` and build a config. Raises ``vol.Invalid``."""
        config = CONFIG_SCHEMA(data)
        return cls(
            lights=config[CONF_LIGHTS],
            listen_host=config[CONF_LISTEN_HOST],
            listen_port=config[CONF_LISTEN_PORT],
            advertise_ip=config.get(CONF_ADVERTISE_IP),
            advertise_port=config.get(CONF_ADVERTISE_PORT),
            enable_v2=config[CONF_ENABLE_V2],
            enable_discovery=config[CONF_ENABLE_DISCOVERY],
            upnp_bind_multicast=config[CONF_UPNP_BIND_MULTICAST],
            ssl_certfile=config.get(CONF_SSL_CERTFILE),
            ssl_keyfile=config.get(CONF_SSL_KEYFILE),
        )

    @property
    def location_port(self) -> int:
        """Port advertised in SSDP replies."""
        return self.advertise_port or self.listen_port
