"""Emulated Philips Hue bridge.

Serves the Hue v1 API, the CLIP v2 light resource and SSDP discovery for a
set of in-memory virtual lights, so Hue clients can find and control them
as if they were real hardware.
"""
from .bridge import EmulatedHueBridge, create_app
from .config import BridgeConfig
from .hue_light import ColorMode, Light, LightState, StateUpdate
from .hue_light_registry import LightRegistry

__all__ = [
    "BridgeConfig",
    "ColorMode",
    "EmulatedHueBridge",
    "Light",
    "LightRegistry",
    "LightState",
    "StateUpdate",
    "create_app",
]
