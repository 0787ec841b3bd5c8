from __future__ import annotations

from typing import Any

from .field_types import Scene
from .scene_io import scene_from_dict

_GRID_3X3 = [
    {"id": 0, "x": 2, "y": 2},
    {"id": 1, "x": 5, "y": 2},
    {"id": 2, "x": 8, "y": 2},
    {"id": 3, "x": 2, "y": 5},
    {"id": 4, "x": 5, "y": 5},
    {"id": 5, "x": 8, "y": 5},
    {"id": 6, "x": 2, "y": 8},
    {"id": 7, "x": 5, "y": 8},
    {"id": 8, "x": 8, "y": 8},
]

_CELL_CENTERS = [
    {"id": 0, "x": 3.5, "y": 3.5},
    {"id": 1, "x": 6.5, "y": 3.5},
    {"id": 2, "x": 3.5, "y": 6.5},
    {"id": 3, "x": 6.5, "y": 6.5},
]

PRESET_DATA: dict[str, dict[str, Any]] = {
    # One horizontal crack between a particle below and one above.
    "case1": {
        "nodes": [
            {"id": 0, "x": 2, "y": 2},
            {"id": 1, "x": 8, "y": 2},
            {"id": 2, "x": 2, "y": 8},
            {"id": 3, "x": 8, "y": 8},
        ],
        "particles": [
            {"id": 0, "x": 5, "y": 4},
            {"id": 1, "x": 5, "y": 6},
        ],
        "cracks": [
            {"id": 0, "points": [{"x": 1, "y": 5}, {"x": 9, "y": 5}]},
        ],
    },
    # Diagonal crack through a 3x3 grid.
    "case2": {
        "nodes": _GRID_3X3,
        "particles": _CELL_CENTERS,
        "cracks": [
            {"id": 0, "points": [{"x": 1, "y": 1}, {"x": 9, "y": 9}]},
        ],
    },
    # Horizontal and vertical cracks.
    "case3": {
        "nodes": _GRID_3X3,
        "particles": _CELL_CENTERS,
        "cracks": [
            {"id": 0, "points": [{"x": 0, "y": 5}, {"x": 10, "y": 5}]},
            {"id": 1, "points": [{"x": 5, "y": 0}, {"x": 5, "y": 10}]},
        ],
    },
}

PRESETS: tuple[str, ...] = tuple(PRESET_DATA)


def load_preset(name: str) -> Scene:
    if name not in PRESET_DATA:
        raise KeyError(f"unknown preset {name!r}; choose from {', '.join(PRESETS)}")
    return scene_from_dict(PRESET_DATA[name])
