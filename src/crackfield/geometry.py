from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from .field_types import NO_CROSSING, FieldLabel, Node, NpPositions, Particle, Point, Triangle


class Areas(NamedTuple):
    area1: float
    area2: float
    area3: float
    area4: float


class CrossingCheck(NamedTuple):
    result: int
    areas: Areas


@beartype
def triangle_area(a: Point, b: Point, c: Point) -> float:
    """Signed twice-area of (a, b, c). Positive is counter-clockwise, 0 is collinear."""
    return a.x * (b.y - c.y) + b.x * (c.y - a.y) + c.x * (a.y - b.y)


@beartype
def check_crossing(
    particle: Point,
    node: Point,
    seg_start: Point,
    seg_end: Point,
) -> CrossingCheck:
    """
    Classify the particle->node segment against one crack segment.

    area1/area2 place the crack endpoints relative to the pair segment,
    area3/area4 place the particle and node relative to the crack segment.
    Returns 2 for the [-,+,+,-] pattern, 3 for [+,-,-,+], else 0.
    A zero area counts as the non-negative side.
    """
    area1 = triangle_area(particle, node, seg_start)
    area2 = triangle_area(particle, node, seg_end)
    area3 = triangle_area(seg_start, seg_end, particle)
    area4 = triangle_area(seg_start, seg_end, node)

    result = NO_CROSSING
    if area1 < 0 and area2 >= 0 and area3 >= 0 and area4 < 0:
        result = int(FieldLabel.ABOVE)
    elif area1 >= 0 and area2 < 0 and area3 < 0 and area4 >= 0:
        result = int(FieldLabel.BELOW)

    return CrossingCheck(result, Areas(area1, area2, area3, area4))


def crossing_triangles(
    particle: Point, node: Point, seg_start: Point, seg_end: Point
) -> tuple[Triangle, Triangle, Triangle, Triangle]:
    return (
        (particle, node, seg_start),
        (particle, node, seg_end),
        (seg_start, seg_end, particle),
        (seg_start, seg_end, node),
    )


@jaxtyped(typechecker=beartype)
def positions_array(items: Sequence[Node | Particle | Point]) -> NpPositions:
    """(N,2) float64 coordinates in input order; (0,2) when empty."""
    if len(items) == 0:
        return np.zeros((0, 2), dtype=np.float64)
    return np.asarray([(item.x, item.y) for item in items], dtype=np.float64)
