"""Translation between light state and the Hue v1 / CLIP v2 wire formats.

Both directions of both APIs go through here. Decoding validates the whole
payload before anything touches a light, and keeps "not sent" distinct from
"sent": a field missing from the payload is ``None`` in the resulting
``StateUpdate`` and leaves the light's value alone.
"""
from __future__ import annotations

import math
from typing import Any

import voluptuous as vol

from .color_math import hue_sat_to_xy, xy_to_hue_sat
from .const import (
    HUE_API_STATE_BRI_MAX,
    HUE_API_STATE_BRI_MIN,
    HUE_API_STATE_CT_MAX,
    HUE_API_STATE_CT_MIN,
    HUE_API_STATE_HUE_MAX,
    HUE_API_STATE_HUE_MIN,
    HUE_API_STATE_SAT_MAX,
    HUE_API_STATE_SAT_MIN,
    HUE_GAMUT_C,
    HUE_GAMUT_TYPE,
    LIGHT_ARCHETYPE,
)
from .hue_light import ColorMode, Light, StateUpdate

# Hue API state key names (as they appear in JSON requests/responses)
HUE_API_STATE_ON = "on"
HUE_API_STATE_BRI = "bri"
HUE_API_STATE_COLORMODE = "colormode"
HUE_API_STATE_HUE = "hue"
HUE_API_STATE_SAT = "sat"
HUE_API_STATE_CT = "ct"
HUE_API_STATE_ALERT = "alert"
HUE_API_STATE_EFFECT = "effect"
HUE_API_STATE_REACHABLE = "reachable"


def _strict_int(value: Any) -> int:
    """Accept JSON integers only (JSON booleans decode to ``bool``)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise vol.Invalid("expected an integer")
    return value


def _number(value: Any) -> float:
    """Accept finite JSON numbers, integer or not."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise vol.Invalid("expected a number")
    if not math.isfinite(value):
        raise vol.Invalid("expected a finite number")
    return float(value)


def _hue_range(v_min: int, v_max: int) -> vol.All:
    return vol.All(_strict_int, vol.Range(min=v_min, max=v_max))


V1_STATE_SCHEMA = vol.Schema(
    {
        vol.Optional(HUE_API_STATE_ON): bool,
        vol.Optional(HUE_API_STATE_BRI): _hue_range(
            HUE_API_STATE_BRI_MIN, HUE_API_STATE_BRI_MAX
        ),
        vol.Optional(HUE_API_STATE_HUE): _hue_range(
            HUE_API_STATE_HUE_MIN, HUE_API_STATE_HUE_MAX
        ),
        vol.Optional(HUE_API_STATE_SAT): _hue_range(
            HUE_API_STATE_SAT_MIN, HUE_API_STATE_SAT_MAX
        ),
        vol.Optional(HUE_API_STATE_CT): _hue_range(
            HUE_API_STATE_CT_MIN, HUE_API_STATE_CT_MAX
        ),
    },
    extra=vol.REMOVE_EXTRA,
)

_MIREK_SCHEMA = vol.Schema({vol.Optional("mirek"): _number}, extra=vol.REMOVE_EXTRA)

V2_LIGHT_UPDATE_SCHEMA = vol.Schema(
    {
        vol.Optional("on"): vol.Schema(
            {vol.Optional("on"): bool}, extra=vol.REMOVE_EXTRA
        ),
        vol.Optional("dimming"): vol.Schema(
            {vol.Optional("brightness"): _number}, extra=vol.REMOVE_EXTRA
        ),
        vol.Optional("color"): vol.Schema(
            {
                vol.Optional("xy"): vol.Schema(
                    {vol.Required("x"): _number, vol.Required("y"): _number},
                    extra=vol.REMOVE_EXTRA,
                ),
                vol.Optional("color_temperature"): _MIREK_SCHEMA,
            },
            extra=vol.REMOVE_EXTRA,
        ),
        # Real CLIP v2 clients send colour temperature at the top level
        vol.Optional("color_temperature"): _MIREK_SCHEMA,
    },
    extra=vol.REMOVE_EXTRA,
)


# ---------------------------------------------------------------------------
# v1
# ---------------------------------------------------------------------------


def state_update_from_v1(payload: Any) -> StateUpdate:
    """Decode a v1 ``PUT .../state`` body.

    Raises ``vol.Invalid`` if the body is not an object or a field has the
    wrong type or range.
    """
    return StateUpdate(**V1_STATE_SCHEMA(payload))


def light_to_v1(light: Light) -> dict[str, Any]:
    """Convert a light to its full v1 JSON representation."""
    state = light.snapshot()
    return {
        "state": {
            HUE_API_STATE_ON: state.on,
            HUE_API_STATE_BRI: state.bri,
            HUE_API_STATE_HUE: state.hue,
            HUE_API_STATE_SAT: state.sat,
            HUE_API_STATE_CT: state.ct,
            HUE_API_STATE_COLORMODE: state.colormode.value,
            HUE_API_STATE_ALERT: state.alert,
            HUE_API_STATE_EFFECT: state.effect,
            HUE_API_STATE_REACHABLE: state.reachable,
        },
        "type": light.device_type,
        "name": light.name,
        "modelid": light.model_id,
        "manufacturername": light.manufacturer,
        "swversion": light.sw_version,
        "uniqueid": light.unique_id,
    }


# ---------------------------------------------------------------------------
# CLIP v2
# ---------------------------------------------------------------------------


def v2_brightness_to_hue(brightness: float) -> int:
    """Convert v2 dimming percent to Hue brightness.

    Halves round up. Only the lower bound is clamped; percentages above 100
    give values above the v1 maximum.
    """
    bri = math.floor(brightness / 100 * HUE_API_STATE_BRI_MAX + 0.5)
    return max(HUE_API_STATE_BRI_MIN, bri)


def hue_brightness_to_v2(bri: int) -> float:
    """Convert Hue brightness 1..254 to v2 dimming percent."""
    return bri / HUE_API_STATE_BRI_MAX * 100


def state_update_from_v2(payload: Any) -> StateUpdate:
    """Decode a CLIP v2 ``PUT /resource/light/<id>`` body.

    xy colour sets hue and saturation, so it forces hue/saturation mode;
    mirek (clamped to 153..500) forces colour temperature mode. Raises
    ``vol.Invalid`` on a malformed body.
    """
    data = V2_LIGHT_UPDATE_SCHEMA(payload)
    fields: dict[str, Any] = {}

    if (on := data.get("on", {}).get("on")) is not None:
        fields["on"] = on

    if (brightness := data.get("dimming", {}).get("brightness")) is not None:
        fields["bri"] = v2_brightness_to_hue(brightness)

    color = data.get("color", {})
    if (xy := color.get("xy")) is not None:
        fields["hue"], fields["sat"] = xy_to_hue_sat(xy["x"], xy["y"])

    color_temperature = data.get("color_temperature") or color.get(
        "color_temperature", {}
    )
    if (mirek := color_temperature.get("mirek")) is not None:
        fields["ct"] = max(HUE_API_STATE_CT_MIN, min(int(mirek), HUE_API_STATE_CT_MAX))

    return StateUpdate(**fields)


def light_to_v2(light: Light) -> dict[str, Any]:
    """Convert a light to its CLIP v2 resource representation."""
    state = light.snapshot()
    resource: dict[str, Any] = {
        "id": light.uuid,
        "id_v1": f"/lights/{light.light_id}",
        "metadata": {"name": light.name, "archetype": LIGHT_ARCHETYPE},
        "on": {"on": state.on},
        "dimming": {"brightness": hue_brightness_to_v2(state.bri)},
        "type": "light",
    }

    if state.colormode is ColorMode.HS:
        x, y = hue_sat_to_xy(state.hue, state.sat)
        resource["color"] = {
            "xy": {"x": x, "y": y},
            "gamut": HUE_GAMUT_C,
            "gamut_type": HUE_GAMUT_TYPE,
        }
    elif state.colormode is ColorMode.CT:
        resource["color"] = {"color_temperature": {"mirek": state.ct}}

    return resource


def v2_envelope(
    data: list[dict[str, Any]] | None = None,
    errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Wrap CLIP v2 resources in the ``{errors, data}`` envelope."""
    return {"errors": errors or [], "data": data or []}
