from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple, overload

from .encoding import encode_state
from .field_types import FieldState, Triangle
from .geometry import Areas

if TYPE_CHECKING:
    from .consistency import Remap
    from .fields import FieldAccumulator


class StepKind(Enum):
    INIT = "init"
    CRACK_START = "crack_start"
    SEGMENT_TEST = "segment_test"
    PAIR_RESULT = "pair_result"
    CONSISTENCY_START = "consistency_start"
    NODE_FIELDS = "node_fields"
    WARNING = "warning"
    NORMALIZATION = "normalization"
    COMPLETE = "complete"


class SegmentCounts(NamedTuple):
    f2: int
    f3: int


@dataclass(frozen=True)
class Step:
    """
    One recorded state transition.

    field_state is the combined-field snapshot taken after the action the
    step describes. The description is for people; use kind to branch.
    """

    index: int
    kind: StepKind
    description: str
    field_state: FieldState
    node_id: int | None = None
    particle_id: int | None = None
    crack_id: int | None = None
    segment_index: int | None = None
    triangles: tuple[Triangle, ...] | None = None
    areas: Areas | None = None
    crossing_result: int | None = None
    counts: SegmentCounts | None = None
    consistency_node_id: int | None = None
    consistency_fields: tuple[int, ...] | None = None
    normalization: Remap | None = None

    @property
    def normalization_action(self) -> str | None:
        if self.normalization is None:
            return None
        return str(self.normalization)


class Trace(Sequence[Step]):
    """Immutable, index-addressable sequence of steps."""

    def __init__(self, steps: Sequence[Step]) -> None:
        self._steps: tuple[Step, ...] = tuple(steps)

    @overload
    def __getitem__(self, index: int) -> Step: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Step, ...]: ...

    def __getitem__(self, index: int | slice) -> Step | tuple[Step, ...]:
        return self._steps[index]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trace):
            return NotImplemented
        return self._steps == other._steps

    def __repr__(self) -> str:
        return f"Trace(steps={len(self._steps)})"

    @property
    def final_state(self) -> FieldState:
        if not self._steps:
            raise IndexError("empty trace has no final state")
        return self._steps[-1].field_state

    def of_kind(self, kind: StepKind) -> tuple[Step, ...]:
        return tuple(step for step in self._steps if step.kind is kind)


class TraceRecorder:
    """
    Append-only step log bound to one accumulator.
    Each emit snapshots the accumulator as it is at call time, so callers
    mutate first and emit after.
    """

    def __init__(self, accumulator: FieldAccumulator) -> None:
        self._accumulator = accumulator
        self._steps: list[Step] = []
        self._closed = False

    def __len__(self) -> int:
        return len(self._steps)

    def emit(self, kind: StepKind, description: str, **context: Any) -> Step:
        if self._closed:
            raise RuntimeError("trace recorder is closed")
        step = Step(
            index=len(self._steps),
            kind=kind,
            description=description,
            field_state=encode_state(self._accumulator.view()),
            **context,
        )
        self._steps.append(step)
        return step

    def finish(self) -> Trace:
        self._closed = True
        return Trace(self._steps)
