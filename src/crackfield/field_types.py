from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import NamedTuple, TypeAlias

import numpy as np
from jaxtyping import Float, Int


class InvalidCrackError(ValueError):
    """Raised when a crack polyline has fewer than two points."""


InvalidCrack = InvalidCrackError


class FieldLabel(IntEnum):
    NONE = 1
    ABOVE = 2
    BELOW = 3


# Per-segment result code when the pair segment does not cross.
NO_CROSSING = 0

VALID_LABELS = frozenset(int(label) for label in FieldLabel)


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))


@dataclass(frozen=True)
class Node:
    id: int
    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", int(self.id))
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class Particle:
    id: int
    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", int(self.id))
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


def _as_point(p: Point | Sequence[float]) -> Point:
    if isinstance(p, Point):
        return p
    x, y = p
    return Point(x, y)


@dataclass(frozen=True)
class Crack:
    """Ordered polyline; consecutive points form the segments."""

    id: int
    points: tuple[Point, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", int(self.id))
        object.__setattr__(self, "points", tuple(_as_point(p) for p in self.points))

    @property
    def n_segments(self) -> int:
        return max(len(self.points) - 1, 0)

    def segments(self) -> Iterator[tuple[Point, Point]]:
        for i in range(self.n_segments):
            yield self.points[i], self.points[i + 1]


@dataclass(frozen=True)
class Scene:
    nodes: tuple[Node, ...]
    particles: tuple[Particle, ...]
    cracks: tuple[Crack, ...]


class PairKey(NamedTuple):
    node_id: int
    particle_id: int


NpPositions: TypeAlias = Float[np.ndarray, "N 2"]
NpPoint: TypeAlias = Float[np.ndarray, "2"]
NpRanking: TypeAlias = Int[np.ndarray, "K"]
FieldState: TypeAlias = Mapping[PairKey, int]
Triangle: TypeAlias = tuple[Point, Point, Point]
