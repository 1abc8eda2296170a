"""Colour conversions between Hue integer ranges, RGB and xy.

The xy mapping is a plain linear scaling, not a CIE conversion. v2 clients
round-trip colours through it, so the two directions must invert each other.
"""
from __future__ import annotations

from .const import (
    HUE_API_STATE_BRI_MAX,
    HUE_API_STATE_HUE_MAX,
    HUE_API_STATE_HUE_MIN,
    HUE_API_STATE_SAT_MAX,
    HUE_API_STATE_SAT_MIN,
    RGB_OFF,
    RGB_WARM_WHITE,
)
from .hue_light import ColorMode, LightState

RGB = tuple[int, int, int]


def hsv_to_rgb(hue: int, saturation: int, brightness: int) -> RGB:
    """Convert Hue hue (0..65535), sat (0..254) and bri (0..254) to RGB."""
    h = hue / HUE_API_STATE_HUE_MAX * 360.0
    if h >= 360.0:
        h = 0.0
    s = saturation / HUE_API_STATE_SAT_MAX
    v = brightness / HUE_API_STATE_BRI_MAX

    c = v * s
    x = c * (1 - abs((h / 60.0) % 2 - 1))
    m = v - c

    if h < 60:
        r1, g1, b1 = c, x, 0.0
    elif h < 120:
        r1, g1, b1 = x, c, 0.0
    elif h < 180:
        r1, g1, b1 = 0.0, c, x
    elif h < 240:
        r1, g1, b1 = 0.0, x, c
    elif h < 300:
        r1, g1, b1 = x, 0.0, c
    else:
        r1, g1, b1 = c, 0.0, x

    return (
        round(255 * (r1 + m)),
        round(255 * (g1 + m)),
        round(255 * (b1 + m)),
    )


def hue_sat_to_xy(hue: int, saturation: int) -> tuple[float, float]:
    """Map Hue hue/sat onto the simplified xy plane."""
    return hue / HUE_API_STATE_HUE_MAX, saturation / HUE_API_STATE_SAT_MAX


def xy_to_hue_sat(x: float, y: float) -> tuple[int, int]:
    """Map simplified xy coordinates back to Hue hue/sat, clamped to range."""
    hue = round(x * HUE_API_STATE_HUE_MAX)
    sat = round(y * HUE_API_STATE_SAT_MAX)
    return (
        max(HUE_API_STATE_HUE_MIN, min(hue, HUE_API_STATE_HUE_MAX)),
        max(HUE_API_STATE_SAT_MIN, min(sat, HUE_API_STATE_SAT_MAX)),
    )


def warm_white_rgb(brightness: int) -> RGB:
    """Return the colour-temperature display colour scaled by brightness."""
    intensity = brightness / HUE_API_STATE_BRI_MAX
    r, g, b = RGB_WARM_WHITE
    return round(r * intensity), round(g * intensity), round(b * intensity)


def light_state_to_rgb(state: LightState) -> RGB:
    """Return the colour a presentation layer should draw for a light."""
    if not state.on:
        return RGB_OFF
    if state.colormode is ColorMode.HS:
        return hsv_to_rgb(state.hue, state.sat, state.bri)
    return warm_white_rgb(state.bri)
