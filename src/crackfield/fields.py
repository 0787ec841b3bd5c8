from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType

from beartype import beartype

from ..utils import debug
from .connectivity import Connectivity
from .field_types import VALID_LABELS, Crack, FieldLabel, Node, PairKey, Particle
from .geometry import check_crossing, crossing_triangles
from .trace import SegmentCounts, StepKind, TraceRecorder

_LABEL_TEXT = {
    int(FieldLabel.NONE): "No Net Crossing",
    int(FieldLabel.ABOVE): "Net Above",
    int(FieldLabel.BELOW): "Net Below",
}


class FieldAccumulator:
    """Per-pair label list, one slot per crack, every slot starting at 1."""

    def __init__(self, pairs: Iterable[PairKey], n_cracks: int) -> None:
        if n_cracks < 0:
            raise ValueError("n_cracks must be >= 0")
        self.n_cracks = n_cracks
        self._labels: dict[PairKey, list[int]] = {
            PairKey(*key): [int(FieldLabel.NONE)] * n_cracks for key in pairs
        }

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, key: object) -> bool:
        return key in self._labels

    def __iter__(self) -> Iterator[PairKey]:
        return iter(self._labels)

    def items(self) -> Iterator[tuple[PairKey, tuple[int, ...]]]:
        for key, labels in self._labels.items():
            yield key, tuple(labels)

    def view(self) -> Mapping[PairKey, Sequence[int]]:
        return MappingProxyType(self._labels)

    def labels(self, key: PairKey) -> tuple[int, ...]:
        return tuple(self._labels[key])

    def get(self, key: PairKey, crack_idx: int) -> int:
        return self._labels[key][crack_idx]

    def set(self, key: PairKey, crack_idx: int, label: int) -> None:
        if int(label) not in VALID_LABELS:
            raise ValueError(f"label must be one of {sorted(VALID_LABELS)}, got {label}")
        self._labels[key][crack_idx] = int(label)

    def remap(
        self, keys: Iterable[PairKey], crack_idx: int, src: int, dst: int
    ) -> list[PairKey]:
        """Rewrite src -> dst on crack_idx for the given keys; returns the keys changed."""
        changed: list[PairKey] = []
        for key in keys:
            if self._labels[key][crack_idx] == src:
                self.set(key, crack_idx, dst)
                changed.append(key)
        return changed


@beartype
def cancel_counts(f2: int, f3: int) -> tuple[int, int]:
    """Opposite-side crossings cancel pairwise; at least one count ends at 0."""
    if f2 < 0 or f3 < 0:
        raise ValueError("crossing counts must be >= 0")
    if f2 > 0 and f3 > 0:
        m = min(f2, f3)
        f2 -= m
        f3 -= m
    return f2, f3


@beartype
def resolve_label(f2: int, f3: int) -> int:
    f2, f3 = cancel_counts(f2, f3)
    if f2 % 2 == 1:
        return int(FieldLabel.ABOVE)
    if f3 % 2 == 1:
        return int(FieldLabel.BELOW)
    return int(FieldLabel.NONE)


def run_crossing_phase(
    recorder: TraceRecorder,
    accumulator: FieldAccumulator,
    connectivity: Connectivity,
    nodes_by_id: Mapping[int, Node],
    particles: Sequence[Particle],
    crack: Crack,
    crack_idx: int,
) -> None:
    """Test every connected pair against every segment of one crack."""
    n_results = 0
    for particle in particles:
        p = particle.point
        for node_id in connectivity.particle_to_nodes[particle.id]:
            n = nodes_by_id[node_id].point
            key = PairKey(node_id, particle.id)

            f2 = 0
            f3 = 0
            for i, (start, end) in enumerate(crack.segments()):
                check = check_crossing(p, n, start, end)
                if check.result == FieldLabel.ABOVE:
                    f2 += 1
                elif check.result == FieldLabel.BELOW:
                    f3 += 1

                recorder.emit(
                    StepKind.SEGMENT_TEST,
                    f"Checking Node {node_id}-P{particle.id} vs Segment {i}",
                    node_id=node_id,
                    particle_id=particle.id,
                    crack_id=crack.id,
                    segment_index=i,
                    triangles=crossing_triangles(p, n, start, end),
                    areas=check.areas,
                    crossing_result=check.result,
                    counts=SegmentCounts(f2, f3),
                )

            final = resolve_label(f2, f3)
            changed = accumulator.get(key, crack_idx) != final
            accumulator.set(key, crack_idx, final)

            # Unchanged 1s carry no information; skip the step, not the write.
            if changed or final != FieldLabel.NONE:
                n_results += 1
                recorder.emit(
                    StepKind.PAIR_RESULT,
                    f"Result Node {node_id}-P{particle.id}: {_LABEL_TEXT[final]}",
                    node_id=node_id,
                    particle_id=particle.id,
                    crack_id=crack.id,
                    crossing_result=final,
                )

    debug.log(
        f"crack {crack.id}: segments={crack.n_segments} "
        f"pairs={connectivity.n_pairs} results={n_results}"
    )
