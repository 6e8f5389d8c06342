"""Named configuration presets.

Each preset is a dictionary that can be unpacked into CoreConfig(**preset).
Presets provide starting points for:
- A driven coronal-loop style run (periodic in x, driven lower wall)
- A fully periodic box
- A closed box with no-slip walls and a damping layer

Usage:
    from mhdcore.presets import get_preset, get_preset_names
    config = CoreConfig(**get_preset("driven_loop"))
"""

from __future__ import annotations

from typing import Any

_PRESETS: dict[str, dict[str, Any]] = {
    "driven_loop": {
        "_meta": {
            "description": "256^2 tile, periodic in x, vz driven on the lower-y wall",
        },
        "grid": {"nx": 256, "ny": 256, "x_min": 0.0, "x_max": 100.0, "y_min": -20.0, "y_max": 80.0},
        "boundaries": {"x_min": "periodic", "x_max": "periodic", "y_min": "user", "y_max": "user"},
        "driver": {"enabled": True},
        "damping": {"enabled": False},
    },
    "periodic_box": {
        "_meta": {
            "description": "64^2 doubly periodic unit box, no driving or damping",
        },
        "grid": {"nx": 64, "ny": 64, "x_min": 0.0, "x_max": 1.0, "y_min": 0.0, "y_max": 1.0},
        "boundaries": {
            "x_min": "periodic", "x_max": "periodic",
            "y_min": "periodic", "y_max": "periodic",
        },
    },
    "closed_box": {
        "_meta": {
            "description": "64^2 box with no-slip walls and a 10-cell damping layer",
        },
        "grid": {"nx": 64, "ny": 64, "x_min": 0.0, "x_max": 1.0, "y_min": 0.0, "y_max": 1.0},
        "boundaries": {"x_min": "user", "x_max": "user", "y_min": "user", "y_max": "user"},
        "damping": {"enabled": True, "n_cells": 10.0, "damp_scale": 1.0},
    },
}


def get_preset(name: str) -> dict[str, Any]:
    """Return a copy of a named preset configuration.

    Args:
        name: Preset name.

    Returns:
        Config dict ready for ``CoreConfig(**preset)``.

    Raises:
        KeyError: If the preset name is not found.
    """
    if name not in _PRESETS:
        available = ", ".join(_PRESETS.keys())
        raise KeyError(f"Unknown preset '{name}'. Available: {available}")
    preset = {k: dict(v) for k, v in _PRESETS[name].items()}
    preset.pop("_meta", None)
    return preset


def get_preset_description(name: str) -> str:
    """Return the one-line description of a preset."""
    if name not in _PRESETS:
        raise KeyError(f"Unknown preset '{name}'")
    return _PRESETS[name]["_meta"]["description"]


def get_preset_names() -> list[str]:
    """Return list of all preset names."""
    return list(_PRESETS.keys())
