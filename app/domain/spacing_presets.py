"""
Standard vine spacing patterns used in commercial viticulture.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class SpacingPreset:
    key: str
    label: str
    vine_spacing_ft: float
    row_spacing_ft: float


SPACING_PRESETS = (
    SpacingPreset("6x8", "6' x 8' (High Density)", 6.0, 8.0),
    SpacingPreset("6x10", "6' x 10' (Standard)", 6.0, 10.0),
    SpacingPreset("8x8", "8' x 8' (Square)", 8.0, 8.0),
    SpacingPreset("8x10", "8' x 10' (Wide Row)", 8.0, 10.0),
    SpacingPreset("8x12", "8' x 12' (Mechanical)", 8.0, 12.0),
)


def get_spacing_preset(key: str) -> SpacingPreset:
    """
    Look up a spacing preset by key.

    Raises:
        KeyError: If no preset has the given key
    """
    for preset in SPACING_PRESETS:
        if preset.key == key:
            return preset
    raise KeyError(key)
