"""Registry of virtual Hue lights and their change notifications."""
from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import uuid

from .const import LIGHT_NAME_TEMPLATE, LIGHT_UNIQUE_ID_TEMPLATE
from .hue_light import Light, StateUpdate
from .locks import ReadWriteLock

_LOGGER = logging.getLogger(__name__)

LightListener = Callable[[Light], None]


class LightRegistry:
    """Owns the set of virtual lights.

    Membership is guarded by its own reader/writer lock, separate from the
    per-light state locks. Lights are only ever added.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._lights: dict[str, Light] = {}
        self._lock = ReadWriteLock()
        self._listeners: list[tuple[LightListener, asyncio.AbstractEventLoop | None]] = []
        self._listeners_lock = ReadWriteLock()

    def populate(self, count: int) -> list[Light]:
        """Create ``count`` lights numbered from 1."""
        lights = [self.create(index) for index in range(1, count + 1)]
        _LOGGER.info("Created %d virtual lights", len(lights))
        return lights

    def create(self, index: int) -> Light:
        """Create a light with default state and register it under ``index``."""
        light = Light(
            light_id=str(index),
            uuid=str(uuid.uuid4()),
            name=LIGHT_NAME_TEMPLATE.format(index=index),
            unique_id=LIGHT_UNIQUE_ID_TEMPLATE.format(index=index),
        )
        with self._lock.write():
            self._lights[light.light_id] = light
        _LOGGER.debug("Created light %s (%s)", light.light_id, light.uuid)
        return light

    def get(self, light_id: str) -> Light | None:
        """Get a light by its v1 id."""
        with self._lock.read():
            return self._lights.get(light_id)

    def list_all(self) -> list[Light]:
        """Get all lights in creation order."""
        with self._lock.read():
            return list(self._lights.values())

    def apply_update(self, light_id: str, update: StateUpdate) -> bool:
        """Apply a sparse update to one light.

        Returns False if no light has ``light_id``. Listeners are notified
        after the light's lock has been released.
        """
        light = self.get(light_id)
        if light is None:
            return False

        light.apply(update)
        _LOGGER.debug("Light %s updated: %s", light_id, dict(update.present_fields()))
        self._notify(light)
        return True

    def subscribe(self, listener: LightListener) -> Callable[[], None]:
        """Register a listener called with each light after it changes.

        When subscribed from inside a running event loop the listener is
        scheduled on that loop, otherwise it is called directly. Returns a
        callable that removes the listener.
        """
        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        entry = (listener, loop)
        with self._listeners_lock.write():
            self._listeners.append(entry)

        def _unsubscribe() -> None:
            with self._listeners_lock.write():
                if entry in self._listeners:
                    self._listeners.remove(entry)

        return _unsubscribe

    def _notify(self, light: Light) -> None:
        """Signal listeners without waiting for them."""
        with self._listeners_lock.read():
            listeners = list(self._listeners)

        for listener, loop in listeners:
            if loop is not None:
                if loop.is_closed():
                    continue
                loop.call_soon_threadsafe(self._call_listener, listener, light)
            else:
                self._call_listener(listener, light)

    @staticmethod
    def _call_listener(listener: LightListener, light: Light) -> None:
        try:
            listener(light)
        except Exception:
            _LOGGER.exception("Error in light listener for light %s", light.light_id)

