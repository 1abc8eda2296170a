"""Hue REST API endpoints for the emulated bridge.

Implements the Philips Hue v1 API and the CLIP v2 light resource so that
Hue clients can discover and control the lights held by a LightRegistry.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from http import HTTPStatus
import logging
from typing import Any

from aiohttp import web
import voluptuous as vol

from .const import HUE_API_USERNAME
from .hue_light import Light, StateUpdate
from .hue_light_registry import LightRegistry
from .state_translator import (
    light_to_v1,
    light_to_v2,
    state_update_from_v1,
    state_update_from_v2,
    v2_envelope,
)

_LOGGER = logging.getLogger(__name__)

KEY_LIGHT_REGISTRY = web.AppKey("emulated_hue_bridge_light_registry", LightRegistry)

PAIRING_RESPONSE = [{"success": {"username": HUE_API_USERNAME}}]

_HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")


def _hue_api_error(
    error_type: int, address: str, description: str
) -> list[dict[str, Any]]:
    """Build a Hue API error response array.

    Error types from the Hue API spec:
      1 = unauthorized user
      3 = resource not available
      4 = method not available
      5 = missing parameters
      6 = parameter not available
      7 = invalid value
    """
    return [{"error": {"type": error_type, "address": address, "description": description}}]


def _light_not_available(light_id: str) -> list[dict[str, Any]]:
    return _hue_api_error(
        3,
        f"/lights/{light_id}",
        f"resource, /lights/{light_id}, not available",
    )


def _v2_error(description: str) -> dict[str, Any]:
    return v2_envelope(errors=[{"description": description}])


# ---------------------------------------------------------------------------
# View base class
# ---------------------------------------------------------------------------


class HueView:
    """Base class for bridge endpoints.

    Subclasses set ``url`` (plus optional ``extra_urls``) and ``name`` and
    implement one coroutine per HTTP method (``get``, ``put``, ...). URL
    match info is passed to the handler as keyword arguments. A view with
    ``any_method`` set implements ``handle`` and answers every method.
    """

    url: str
    extra_urls: list[str] = []
    name: str | None = None
    any_method = False

    @staticmethod
    def json(
        result: Any,
        status_code: HTTPStatus | int = HTTPStatus.OK,
        headers: dict[str, str] | None = None,
    ) -> web.Response:
        """Return a JSON response."""
        return web.json_response(result, status=int(status_code), headers=headers)

    def json_message(
        self,
        message: str,
        status_code: HTTPStatus | int = HTTPStatus.OK,
    ) -> web.Response:
        """Return a JSON message response."""
        return self.json({"message": message}, status_code)

    def register(self, router: web.UrlDispatcher) -> None:
        """Register the view's handlers on ``router``."""
        routes: list[tuple[str, Callable[..., Awaitable[web.StreamResponse]]]] = []
        if self.any_method:
            if type(self).handle is HueView.handle:
                raise TypeError(
                    f"{type(self).__name__} sets any_method but does not implement handle"
                )
            routes.append(("*", self.handle))
        else:
            for method in _HTTP_METHODS:
                if (handler := getattr(self, method, None)) is not None:
                    routes.append((method.upper(), handler))

        for index, url in enumerate([self.url, *self.extra_urls]):
            resource = router.add_resource(url, name=self.name if index == 0 else None)
            for method, handler in routes:
                resource.add_route(method, _request_handler_factory(handler))

    async def handle(self, request: web.Request, **kwargs: str) -> web.StreamResponse:
        """Handle a request with any method.

        Views with ``any_method`` set must override this; ``register``
        rejects them otherwise.
        """
        raise NotImplementedError


def _request_handler_factory(
    handler: Callable[..., Awaitable[web.StreamResponse]],
) -> Callable[[web.Request], Awaitable[web.StreamResponse]]:
    """Wrap a view method so URL match info arrives as keyword arguments."""

    async def _handle(request: web.Request) -> web.StreamResponse:
        _LOGGER.debug("Received API request: %s %s", request.method, request.path)
        return await handler(request, **request.match_info)

    return _handle


def resolve_light(registry: LightRegistry, identifier: str) -> Light | None:
    """Find a light by v1 id, falling back to its v2 resource id."""
    if (light := registry.get(identifier)) is not None:
        return light
    for light in registry.list_all():
        if light.uuid == identifier:
            return light
    return None


# ---------------------------------------------------------------------------
# v1 views
# ---------------------------------------------------------------------------


class HuePairingView(HueView):
    """Answer any other ``/api`` request with the pairing acknowledgement.

    Clients expect to press the link button before ``POST /api`` succeeds;
    the emulated bridge always behaves as if it had been pressed.
    """

    url = "/api"
    extra_urls = ["/api/{tail:.*}"]
    name = "emulated_hue_bridge:api:pairing"
    any_method = True

    async def handle(self, request: web.Request, **kwargs: str) -> web.Response:
        """Handle a request with any method."""
        return self.json(PAIRING_RESPONSE)


class HueAllLightsStateView(HueView):
    """Handle GET /api/{username}/lights — list all lights."""

    url = "/api/{username}/lights"
    name = "emulated_hue_bridge:lights:state"

    async def get(self, request: web.Request, username: str) -> web.Response:
        """Handle a GET request."""
        registry = request.app[KEY_LIGHT_REGISTRY]
        return self.json(
            {light.light_id: light_to_v1(light) for light in registry.list_all()}
        )


class HueOneLightStateView(HueView):
    """Handle GET /api/{username}/lights/{light_id} — single light state."""

    url = "/api/{username}/lights/{light_id}"
    name = "emulated_hue_bridge:light:state"

    async def get(
        self, request: web.Request, username: str, light_id: str
    ) -> web.Response:
        """Handle a GET request."""
        registry = request.app[KEY_LIGHT_REGISTRY]

        light = registry.get(light_id)
        if light is None:
            _LOGGER.debug("Unknown light number: %s", light_id)
            return self.json(
                _light_not_available(light_id), status_code=HTTPStatus.NOT_FOUND
            )

        return self.json(light_to_v1(light))


class HueOneLightChangeView(HueView):
    """Handle PUT /api/{username}/lights/{light_id}/state — control a light."""

    url = "/api/{username}/lights/{light_id}/state"
    name = "emulated_hue_bridge:light:change"

    async def put(
        self, request: web.Request, username: str, light_id: str
    ) -> web.Response:
        """Process a request to set the state of an individual light."""
        registry = request.app[KEY_LIGHT_REGISTRY]

        try:
            request_json = await request.json()
        except ValueError:
            _LOGGER.warning("Received invalid json")
            return self.json_message("Invalid JSON", HTTPStatus.BAD_REQUEST)

        try:
            update = state_update_from_v1(request_json)
        except vol.Invalid as err:
            _LOGGER.warning("Unable to parse data: %s (%s)", request_json, err)
            return self.json(
                _hue_api_error(
                    7,
                    f"/lights/{light_id}/state",
                    f"invalid value, {err}, for parameter, state",
                ),
                status_code=HTTPStatus.BAD_REQUEST,
            )

        if not registry.apply_update(light_id, update):
            _LOGGER.debug("Unknown light number: %s", light_id)
            return self.json(
                _light_not_available(light_id), status_code=HTTPStatus.NOT_FOUND
            )

        return self.json(_create_hue_success_responses(light_id, update))


def _create_hue_success_responses(
    light_id: str, update: StateUpdate
) -> list[dict[str, Any]]:
    """Create one success entry per attribute set on a light."""
    return [
        {"success": {f"/lights/{light_id}/state/{attr}": value}}
        for attr, value in update.present_fields()
    ]


# ---------------------------------------------------------------------------
# CLIP v2 views
# ---------------------------------------------------------------------------


class HueV2FallbackView(HueView):
    """Answer unknown CLIP v2 paths with an empty envelope, as a real bridge does."""

    url = "/clip/v2/{tail:.*}"
    name = "emulated_hue_bridge:clip:fallback"
    any_method = True

    async def handle(self, request: web.Request, **kwargs: str) -> web.Response:
        """Handle a request with any method."""
        return self.json(v2_envelope())


class HueV2LightsView(HueView):
    """Handle GET /clip/v2/resource/light — list all lights."""

    url = "/clip/v2/resource/light"
    name = "emulated_hue_bridge:clip:lights"

    async def get(self, request: web.Request) -> web.Response:
        """Handle a GET request."""
        registry = request.app[KEY_LIGHT_REGISTRY]
        return self.json(
            v2_envelope([light_to_v2(light) for light in registry.list_all()])
        )


class HueV2LightView(HueView):
    """Handle GET and PUT /clip/v2/resource/light/{light_id}."""

    url = "/clip/v2/resource/light/{light_id}"
    name = "emulated_hue_bridge:clip:light"

    async def get(self, request: web.Request, light_id: str) -> web.Response:
        """Handle a GET request."""
        registry = request.app[KEY_LIGHT_REGISTRY]

        light = resolve_light(registry, light_id)
        if light is None:
            return self.json(_v2_error("Not Found"), status_code=HTTPStatus.NOT_FOUND)

        return self.json(v2_envelope([light_to_v2(light)]))

    async def put(self, request: web.Request, light_id: str) -> web.Response:
        """Apply a partial CLIP v2 update to one light."""
        registry = request.app[KEY_LIGHT_REGISTRY]

        try:
            request_json = await request.json()
        except ValueError:
            _LOGGER.warning("Received invalid json")
            return self.json(
                _v2_error("Invalid JSON"), status_code=HTTPStatus.BAD_REQUEST
            )

        try:
            update = state_update_from_v2(request_json)
        except vol.Invalid as err:
            _LOGGER.warning("Unable to parse data: %s (%s)", request_json, err)
            return self.json(
                _v2_error(f"Invalid body: {err}"), status_code=HTTPStatus.BAD_REQUEST
            )

        light = resolve_light(registry, light_id)
        if light is None or not registry.apply_update(light.light_id, update):
            _LOGGER.debug("Unknown light id: %s", light_id)
            return self.json(_v2_error("Not Found"), status_code=HTTPStatus.NOT_FOUND)

        _LOGGER.debug("V2 light %s updated via CLIP API", light_id)
        return self.json(v2_envelope([light_to_v2(light)]))


V1_VIEWS: tuple[type[HueView], ...] = (
    HueAllLightsStateView,
    HueOneLightStateView,
    HueOneLightChangeView,
    # Registered last so the routes above win
    HuePairingView,
)

V2_VIEWS: tuple[type[HueView], ...] = (
    HueV2LightsView,
    HueV2LightView,
    HueV2FallbackView,
)
