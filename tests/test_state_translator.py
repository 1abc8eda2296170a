"""Tests for the v1 / v2 wire format translation."""
from __future__ import annotations

import pytest
import voluptuous as vol

from emulated_hue_bridge.hue_light import ColorMode, StateUpdate
from emulated_hue_bridge.state_translator import (
    hue_brightness_to_v2,
    light_to_v1,
    light_to_v2,
    state_update_from_v1,
    state_update_from_v2,
    v2_brightness_to_hue,
    v2_envelope,
)


class TestV1Decode:
    """Tests for decoding v1 state bodies."""

    def test_partial_body(self):
        """Fields that were not sent stay unset."""
        assert state_update_from_v1({"on": True, "bri": 200}) == StateUpdate(
            on=True, bri=200
        )

    def test_all_fields(self):
        """Every supported field is decoded."""
        update = state_update_from_v1(
            {"on": False, "bri": 1, "hue": 65535, "sat": 0, "ct": 500}
        )
        assert update == StateUpdate(on=False, bri=1, hue=65535, sat=0, ct=500)

    def test_unknown_fields_ignored(self):
        """Fields the bridge does not model are dropped."""
        update = state_update_from_v1({"transitiontime": 4, "alert": "select"})
        assert update.is_empty

    @pytest.mark.parametrize(
        "payload",
        [
            {"on": "yes"},
            {"on": None},
            {"bri": "high"},
            {"bri": 0},
            {"bri": 255},
            {"bri": 200.5},
            {"hue": True},
            {"hue": 65536},
            {"sat": -1},
            {"ct": 100},
            [{"on": True}],
            "on",
            None,
        ],
    )
    def test_invalid_bodies(self, payload):
        """Wrong types, out of range values and non-objects are rejected."""
        with pytest.raises(vol.Invalid):
            state_update_from_v1(payload)


class TestV1Encode:
    """Tests for the v1 light representation."""

    def test_default_light(self, registry):
        """A fresh light serialises flat with its full state."""
        assert light_to_v1(registry.get("1")) == {
            "state": {
                "on": False,
                "bri": 254,
                "hue": 0,
                "sat": 0,
                "ct": 366,
                "colormode": "ct",
                "alert": "none",
                "effect": "none",
                "reachable": True,
            },
            "type": "Extended color light",
            "name": "Fake Hue Light 1",
            "modelid": "LCT016",
            "manufacturername": "Philips",
            "swversion": "1.65.11_r26581",
            "uniqueid": "00:17:88:01:00:bd:ab:01-0b",
        }


class TestV2Decode:
    """Tests for decoding CLIP v2 light updates."""

    def test_on(self):
        """on.on maps to the power field."""
        assert state_update_from_v2({"on": {"on": True}}) == StateUpdate(on=True)

    def test_dimming(self):
        """Dimming percent converts to Hue brightness with rounding."""
        assert state_update_from_v2({"dimming": {"brightness": 50}}) == StateUpdate(
            bri=127
        )

    def test_dimming_lower_clamp(self):
        """Zero percent clamps to the minimum brightness."""
        assert v2_brightness_to_hue(0) == 1

    def test_dimming_above_full_is_not_clamped(self):
        """Above 100 percent the value passes the v1 maximum unchanged.

        Only the lower bound is clamped; this pins the current behaviour.
        """
        assert v2_brightness_to_hue(120) == 305

    @pytest.mark.parametrize(("percent", "bri"), [(25, 64), (75, 191)])
    def test_dimming_halves_round_up(self, percent, bri):
        """Halfway brightness values round up, not to even."""
        assert v2_brightness_to_hue(percent) == bri

    def test_xy_forces_hue_and_saturation(self):
        """xy colour sets both hue and sat."""
        update = state_update_from_v2({"color": {"xy": {"x": 0.5, "y": 1.0}}})
        assert update == StateUpdate(hue=32768, sat=254)

    def test_nested_mirek(self):
        """color.color_temperature.mirek sets the colour temperature."""
        update = state_update_from_v2({"color": {"color_temperature": {"mirek": 250}}})
        assert update == StateUpdate(ct=250)

    def test_top_level_mirek(self):
        """The top-level color_temperature form is accepted too."""
        update = state_update_from_v2({"color_temperature": {"mirek": 300.7}})
        assert update == StateUpdate(ct=300)

    def test_mirek_clamped(self):
        """Mirek outside the supported range is clamped."""
        assert state_update_from_v2(
            {"color_temperature": {"mirek": 1000}}
        ) == StateUpdate(ct=500)

    def test_combined_update(self):
        """Any subset of keys may be combined."""
        update = state_update_from_v2(
            {"on": {"on": False}, "dimming": {"brightness": 100}, "type": "light"}
        )
        assert update == StateUpdate(on=False, bri=254)

    def test_empty_body(self):
        """Absent keys are no-ops."""
        assert state_update_from_v2({}).is_empty
        assert state_update_from_v2({"on": {}, "dimming": {}}).is_empty

    @pytest.mark.parametrize(
        "payload",
        [
            {"on": None},
            {"on": {"on": "true"}},
            {"dimming": {"brightness": "50"}},
            {"dimming": 50},
            {"color": {"xy": {"x": 0.1}}},
            {"color": {"xy": [0.1, 0.2]}},
            {"dimming": {"brightness": float("inf")}},
            {"dimming": {"brightness": float("nan")}},
            {"color": {"xy": {"x": float("inf"), "y": 0.1}}},
            {"color_temperature": {"mirek": float("-inf")}},
            [],
        ],
    )
    def test_invalid_bodies(self, payload):
        """Malformed v2 bodies are rejected."""
        with pytest.raises(vol.Invalid):
            state_update_from_v2(payload)


class TestV2Encode:
    """Tests for the CLIP v2 light resource."""

    def test_default_light_reports_colour_temperature(self, registry):
        """A light in colour temperature mode reports its mirek."""
        light = registry.get("1")
        resource = light_to_v2(light)

        assert resource == {
            "id": light.uuid,
            "id_v1": "/lights/1",
            "metadata": {"name": "Fake Hue Light 1", "archetype": "sultan_bulb"},
            "on": {"on": False},
            "dimming": {"brightness": 100.0},
            "type": "light",
            "color": {"color_temperature": {"mirek": 366}},
        }

    def test_hue_saturation_light_reports_xy_and_gamut(self, registry):
        """A light in hue/saturation mode reports xy and gamut C."""
        registry.apply_update("2", StateUpdate(hue=65535, sat=127))
        color = light_to_v2(registry.get("2"))["color"]

        assert color["xy"] == {"x": 1.0, "y": 0.5}
        assert color["gamut_type"] == "C"
        assert color["gamut"]["red"] == {"x": 0.675, "y": 0.322}
        assert "color_temperature" not in color

    def test_xy_mode_omits_colour(self, registry):
        """Any other colour mode leaves the colour block out."""
        light = registry.get("1")
        light._state.colormode = ColorMode.XY
        assert "color" not in light_to_v2(light)

    def test_brightness_percent(self):
        """Hue brightness converts back to a percentage."""
        assert hue_brightness_to_v2(127) == pytest.approx(50.0)
        assert hue_brightness_to_v2(254) == pytest.approx(100.0)

    def test_envelope(self):
        """The envelope always carries both lists."""
        assert v2_envelope() == {"errors": [], "data": []}
        assert v2_envelope([{"id": "a"}]) == {"errors": [], "data": [{"id": "a"}]}
