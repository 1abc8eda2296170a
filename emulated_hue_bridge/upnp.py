"""UPnP description document and SSDP discovery responder."""
from __future__ import annotations

import asyncio
from contextlib import suppress
import logging
import socket

from aiohttp import web

from .const import (
    HUE_FRIENDLY_NAME,
    HUE_SERIAL_NUMBER,
    HUE_SERVER_BANNER,
    HUE_UUID,
    SOURCE_IP_PROBE,
    SSDP_MULTICAST_ADDR,
    SSDP_PORT,
    SSDP_ROOT_DEVICE,
    SSDP_SEARCH_METHOD,
)
from .hue_api import HueView

_LOGGER = logging.getLogger(__name__)

DESCRIPTION_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
  <specVersion>
    <major>1</major>
    <minor>0</minor>
  </specVersion>
  <device>
    <deviceType>urn:schemas-upnp-org:device:Basic:1</deviceType>
    <friendlyName>{HUE_FRIENDLY_NAME}</friendlyName>
    <manufacturer>Royal Philips Electronics</manufacturer>
    <manufacturerURL>http://www.philips.com</manufacturerURL>
    <modelDescription>Philips hue Personal Wireless Lighting</modelDescription>
    <modelName>Philips hue bridge 2012</modelName>
    <modelNumber>929000226503</modelNumber>
    <modelURL>http://www.meethue.com</modelURL>
    <serialNumber>{HUE_SERIAL_NUMBER}</serialNumber>
    <UDN>uuid:{HUE_UUID}</UDN>
  </device>
</root>"""

SSDP_RESPONSE_TEMPLATE = (
    "HTTP/1.1 200 OK\r\n"
    "CACHE-CONTROL: max-age=100\r\n"
    "EXT:\r\n"
    "LOCATION: http://{ip}:{port}/description.xml\r\n"
    f"SERVER: {HUE_SERVER_BANNER}\r\n"
    f"ST: {SSDP_ROOT_DEVICE}\r\n"
    f"USN: uuid:{HUE_UUID}::{SSDP_ROOT_DEVICE}\r\n"
    "\r\n"
)


class DescriptionXmlView(HueView):
    """Handles requests for the description.xml file."""

    url = "/description.xml"
    name = "description:xml"

    async def get(self, request: web.Request) -> web.Response:
        """Handle a GET request."""
        return web.Response(text=DESCRIPTION_XML, content_type="application/xml")


def get_source_ip(target: tuple[str, int] = SOURCE_IP_PROBE) -> str:
    """Return the local address used to reach ``target``.

    Connecting a UDP socket sends nothing; it only selects a route. Raises
    OSError when there is no route.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.connect(target)
        return sock.getsockname()[0]


def create_ssdp_response(ip: str, port: int) -> bytes:
    """Build the unicast reply to an M-SEARCH for the root device."""
    return SSDP_RESPONSE_TEMPLATE.format(ip=ip, port=port).encode()


def is_root_device_search(data: bytes) -> bool:
    """Return True if ``data`` is an M-SEARCH for ``upnp:rootdevice``."""
    message = data.decode("utf-8", errors="ignore")
    return SSDP_SEARCH_METHOD in message and SSDP_ROOT_DEVICE in message


class UPNPResponderProtocol(asyncio.DatagramProtocol):
    """Answer SSDP root device searches with the bridge location.

    Every matching query gets its own reply task, independent of the
    receive side and of other replies.
    """

    def __init__(self, advertise_ip: str | None, advertise_port: int) -> None:
        """Initialize the responder."""
        self.advertise_ip = advertise_ip
        self.advertise_port = advertise_port
        self.transport: asyncio.DatagramTransport | None = None
        self._reply_tasks: set[asyncio.Task[None]] = set()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        """Set the transport."""
        self.transport = transport  # type: ignore[assignment]
        _LOGGER.info("SSDP discovery service started")

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        """Handle an incoming datagram."""
        if not is_root_device_search(data):
            return

        _LOGGER.debug("Received M-SEARCH from %s:%s", *addr[:2])
        task = asyncio.get_running_loop().create_task(self._async_reply(addr))
        self._reply_tasks.add(task)
        task.add_done_callback(self._reply_tasks.discard)

    def error_received(self, exc: Exception) -> None:
        """Log a receive error and keep listening."""
        _LOGGER.debug("SSDP receive error: %s", exc)

    def close(self) -> None:
        """Stop listening and cancel replies still in flight."""
        for task in self._reply_tasks:
            task.cancel()
        if self.transport:
            self.transport.close()

    async def _async_reply(self, addr: tuple[str, int]) -> None:
        """Send one unicast reply to ``addr``, dropping it on network errors."""
        loop = asyncio.get_running_loop()
        try:
            ip = self.advertise_ip or get_source_ip()
            transport, _ = await loop.create_datagram_endpoint(
                asyncio.DatagramProtocol, remote_addr=addr[:2]
            )
        except OSError as err:
            _LOGGER.debug("Dropping SSDP reply to %s:%s: %s", addr[0], addr[1], err)
            return

        try:
            transport.sendto(create_ssdp_response(ip, self.advertise_port))
            _LOGGER.debug("Sent SSDP reply to %s:%s", addr[0], addr[1])
        finally:
            transport.close()


async def async_create_upnp_datagram_endpoint(
    host_ip_addr: str | None,
    upnp_bind_multicast: bool,
    advertise_ip: str | None,
    advertise_port: int,
) -> UPNPResponderProtocol:
    """Join the SSDP multicast group and start answering searches."""
    ssdp_socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        ssdp_socket.setblocking(False)

        # Required for receiving multicast
        ssdp_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        with suppress(AttributeError, OSError):
            ssdp_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)

        interface = socket.inet_aton(host_ip_addr or "0.0.0.0")
        if host_ip_addr:
            ssdp_socket.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, interface)
        ssdp_socket.setsockopt(
            socket.IPPROTO_IP,
            socket.IP_ADD_MEMBERSHIP,
            socket.inet_aton(SSDP_MULTICAST_ADDR) + interface,
        )

        bind_addr = "" if upnp_bind_multicast or not host_ip_addr else host_ip_addr
        ssdp_socket.bind((bind_addr, SSDP_PORT))
    except OSError:
        ssdp_socket.close()
        raise

    loop = asyncio.get_running_loop()
    _, protocol = await loop.create_datagram_endpoint(
        lambda: UPNPResponderProtocol(advertise_ip, advertise_port),
        sock=ssdp_socket,
    )
    return protocol
