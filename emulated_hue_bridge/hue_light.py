"""Virtual Hue light representation."""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .const import (
    DEFAULT_BRI,
    DEFAULT_CT,
    LIGHT_MANUFACTURER,
    LIGHT_MODEL_ID,
    LIGHT_SW_VERSION,
    LIGHT_TYPE,
)
from .locks import ReadWriteLock


class ColorMode(str, Enum):
    """Colour representation currently driving a light."""

    HS = "hs"
    CT = "ct"
    XY = "xy"


@dataclass
class LightState:
    """Mutable state of one light, in Hue v1 units."""

    on: bool = False
    bri: int = DEFAULT_BRI
    hue: int = 0
    sat: int = 0
    ct: int = DEFAULT_CT
    colormode: ColorMode = ColorMode.CT
    alert: str = "none"
    effect: str = "none"
    reachable: bool = True


@dataclass(frozen=True)
class StateUpdate:
    """Sparse state change. ``None`` means the field was not sent."""

    on: bool | None = None
    bri: int | None = None
    hue: int | None = None
    sat: int | None = None
    ct: int | None = None

    def present_fields(self) -> Iterator[tuple[str, Any]]:
        """Yield (v1 key, value) for every field that was sent, in v1 order."""
        for key in ("on", "bri", "hue", "sat", "ct"):
            value = getattr(self, key)
            if value is not None:
                yield key, value

    @property
    def is_empty(self) -> bool:
        """Return True if the update carries no fields."""
        return next(self.present_fields(), None) is None


@dataclass(eq=False)
class Light:
    """A virtual Hue light.

    ``light_id`` is the v1 resource number and the registry key, ``uuid`` is
    the v2 resource id. Both are fixed at creation.
    """

    light_id: str
    uuid: str
    name: str
    unique_id: str
    device_type: str = LIGHT_TYPE
    model_id: str = LIGHT_MODEL_ID
    manufacturer: str = LIGHT_MANUFACTURER
    sw_version: str = LIGHT_SW_VERSION
    _state: LightState = field(default_factory=LightState, repr=False)
    _lock: ReadWriteLock = field(default_factory=ReadWriteLock, repr=False)

    def snapshot(self) -> LightState:
        """Return a copy of the current state taken under the shared lock."""
        with self._lock.read():
            return replace(self._state)

    def apply(self, update: StateUpdate) -> None:
        """Apply every present field of ``update`` under one exclusive lock."""
        with self._lock.write():
            state = self._state
            if update.on is not None:
                state.on = update.on
            if update.bri is not None:
                state.bri = update.bri
            if update.hue is not None:
                state.hue = update.hue
                state.colormode = ColorMode.HS
            if update.sat is not None:
                state.sat = update.sat
                state.colormode = ColorMode.HS
            if update.ct is not None:
                state.ct = update.ct
                state.colormode = ColorMode.CT
