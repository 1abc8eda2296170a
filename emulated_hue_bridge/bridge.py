"""Assembly and lifecycle of the emulated Hue bridge.

Runs a standalone aiohttp server for the Hue APIs plus an SSDP responder,
both backed by one LightRegistry.
"""
from __future__ import annotations

import logging
import ssl

from aiohttp import web

from .config import BridgeConfig
from .hue_api import KEY_LIGHT_REGISTRY, V1_VIEWS, V2_VIEWS
from .hue_light_registry import LightRegistry
from .upnp import (
    DescriptionXmlView,
    UPNPResponderProtocol,
    async_create_upnp_datagram_endpoint,
)

_LOGGER = logging.getLogger(__name__)


def create_app(registry: LightRegistry, enable_v2: bool = True) -> web.Application:
    """Build the aiohttp application serving the Hue APIs for ``registry``."""
    app = web.Application()
    app[KEY_LIGHT_REGISTRY] = registry

    DescriptionXmlView().register(app.router)
    for view in V1_VIEWS:
        view().register(app.router)
    if enable_v2:
        for view in V2_VIEWS:
            view().register(app.router)

    return app


def create_ssl_context(certfile: str, keyfile: str) -> ssl.SSLContext:
    """Create the server TLS context from a certificate and key file."""
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    context.load_cert_chain(certfile, keyfile)
    return context


class EmulatedHueBridge:
    """The HTTP site and SSDP responder of one emulated bridge."""

    def __init__(
        self, config: BridgeConfig, registry: LightRegistry | None = None
    ) -> None:
        """Initialize the bridge and create its lights."""
        self.config = config
        if registry is None:
            registry = LightRegistry()
            registry.populate(config.lights)
        self.registry = registry
        self.app = create_app(registry, enable_v2=config.enable_v2)
        self._runner: web.AppRunner | None = None
        self._protocol: UPNPResponderProtocol | None = None

    async def async_start(self) -> None:
        """Start the SSDP responder and the HTTP server.

        Raises OSError if the HTTP port cannot be bound. A failure to start
        discovery is logged and the API keeps running.
        """
        config = self.config
        host_ip = None if config.listen_host == "0.0.0.0" else config.listen_host
        _LOGGER.info(
            "Starting emulated Hue bridge on %s:%s with %d lights",
            config.listen_host,
            config.listen_port,
            len(self.registry.list_all()),
        )

        if config.enable_discovery:
            try:
                self._protocol = await async_create_upnp_datagram_endpoint(
                    host_ip,
                    config.upnp_bind_multicast,
                    config.advertise_ip,
                    config.location_port,
                )
            except OSError as error:
                _LOGGER.error("Failed to create SSDP responder: %s", error)
                self._protocol = None

        ssl_context = None
        if config.ssl_certfile and config.ssl_keyfile:
            ssl_context = create_ssl_context(config.ssl_certfile, config.ssl_keyfile)

        runner = web.AppRunner(self.app)
        await runner.setup()
        site = web.TCPSite(
            runner, config.listen_host, config.listen_port, ssl_context=ssl_context
        )

        try:
            await site.start()
        except OSError as error:
            _LOGGER.error(
                "Failed to start HTTP server on port %d: %s", config.listen_port, error
            )
            await runner.cleanup()
            if self._protocol:
                self._protocol.close()
                self._protocol = None
            raise

        self._runner = runner
        _LOGGER.info("Emulated Hue bridge is running")

    async def async_stop(self) -> None:
        """Stop the HTTP server and SSDP responder."""
        _LOGGER.info("Stopping emulated Hue bridge")
        if self._protocol:
            self._protocol.close()
            self._protocol = None
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
