from __future__ import annotations

import json
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .field_types import Crack, Node, Particle, Point, Scene
from .pipeline import validate_cracks


def _coord(entry: Mapping[str, Any], name: str, where: str) -> float:
    if name not in entry:
        raise ValueError(f"{where}: missing '{name}'")
    raw = entry[name]
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{where}: '{name}' must be a number, got {raw!r}")
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"{where}: '{name}' is not finite")
    return value


def _ident(entry: Mapping[str, Any], where: str) -> int:
    raw = entry.get("id")
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{where}: 'id' must be an integer, got {raw!r}")
    return raw


def _entries(data: Mapping[str, Any], name: str) -> list[Mapping[str, Any]]:
    raw = data.get(name, [])
    if not isinstance(raw, list):
        raise ValueError(f"'{name}' must be a list")
    for i, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise ValueError(f"{name}[{i}] must be an object")
    return raw


def scene_from_dict(data: Mapping[str, Any]) -> Scene:
    """
    Build a Scene from
      {"nodes": [{id,x,y}], "particles": [{id,x,y}],
       "cracks": [{id, points: [{x,y}, ...]}]}
    Missing sections are empty. Cracks are validated (>= 2 points).
    """
    nodes = tuple(
        Node(
            _ident(e, f"nodes[{i}]"),
            _coord(e, "x", f"nodes[{i}]"),
            _coord(e, "y", f"nodes[{i}]"),
        )
        for i, e in enumerate(_entries(data, "nodes"))
    )
    particles = tuple(
        Particle(
            _ident(e, f"particles[{i}]"),
            _coord(e, "x", f"particles[{i}]"),
            _coord(e, "y", f"particles[{i}]"),
        )
        for i, e in enumerate(_entries(data, "particles"))
    )

    cracks: list[Crack] = []
    for i, e in enumerate(_entries(data, "cracks")):
        where = f"cracks[{i}]"
        raw_points = e.get("points")
        if not isinstance(raw_points, list):
            raise ValueError(f"{where}: 'points' must be a list")
        points: list[Point] = []
        for j, pt in enumerate(raw_points):
            if not isinstance(pt, Mapping):
                raise ValueError(f"{where}.points[{j}] must be an object")
            at = f"{where}.points[{j}]"
            points.append(Point(_coord(pt, "x", at), _coord(pt, "y", at)))
        cracks.append(Crack(_ident(e, where), tuple(points)))

    validate_cracks(cracks)
    return Scene(nodes=nodes, particles=particles, cracks=tuple(cracks))


def load_scene(path: str | Path) -> Scene:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError("scene file must contain a JSON object")
    return scene_from_dict(data)
