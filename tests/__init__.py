"""Tests for the emulated Hue bridge."""
