from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from beartype import beartype

from ..utils import debug, debug_helpers
from .connectivity import Connectivity
from .field_types import Crack, FieldLabel, Node, PairKey
from .fields import FieldAccumulator
from .trace import StepKind, TraceRecorder


class Remap(NamedTuple):
    src: int
    dst: int

    def __str__(self) -> str:
        return f"{self.src}->{self.dst}"


# A node that sees "no crossing" next to one committed side moves its 1s
# to the opposite side. {2,3} has no default and is left alone.
_REMAPS: dict[tuple[int, ...], Remap] = {
    (int(FieldLabel.NONE), int(FieldLabel.ABOVE)): Remap(
        int(FieldLabel.NONE), int(FieldLabel.BELOW)
    ),
    (int(FieldLabel.NONE), int(FieldLabel.BELOW)): Remap(
        int(FieldLabel.NONE), int(FieldLabel.ABOVE)
    ),
}


def seen_fields(
    accumulator: FieldAccumulator,
    node_id: int,
    particle_ids: Sequence[int],
    crack_idx: int,
) -> tuple[int, ...]:
    """Distinct labels on crack_idx across a node's particles, ascending."""
    seen = {accumulator.get(PairKey(node_id, pid), crack_idx) for pid in particle_ids}
    return tuple(sorted(seen))


@beartype
def normalization_remap(fields: tuple[int, ...]) -> Remap | None:
    return _REMAPS.get(tuple(sorted(fields)))


def run_consistency_phase(
    recorder: TraceRecorder,
    accumulator: FieldAccumulator,
    connectivity: Connectivity,
    nodes: Sequence[Node],
    crack: Crack,
    crack_idx: int,
) -> None:
    recorder.emit(
        StepKind.CONSISTENCY_START,
        f"Consistency Check Phase for Crack {crack.id + 1}",
        crack_id=crack.id,
    )

    for node in nodes:
        particle_ids = connectivity.node_to_particles[node.id]
        if not particle_ids:
            continue

        fields = seen_fields(accumulator, node.id, particle_ids, crack_idx)
        recorder.emit(
            StepKind.NODE_FIELDS,
            f"Node {node.id} sees fields: [{', '.join(str(f) for f in fields)}]",
            node_id=node.id,
            consistency_node_id=node.id,
            consistency_fields=fields,
        )

        if len(fields) == 3:
            debug_helpers.log_once(
                f"conflict_{crack.id}_{node.id}",
                f"crack {crack.id}: node {node.id} sees all 3 fields",
            )
            recorder.emit(
                StepKind.WARNING,
                f"WARNING: Node {node.id} sees all 3 fields!",
                node_id=node.id,
                consistency_node_id=node.id,
                consistency_fields=fields,
            )
            continue

        remap = normalization_remap(fields) if len(fields) == 2 else None
        if remap is None:
            continue

        keys = [PairKey(node.id, pid) for pid in particle_ids]
        changed = accumulator.remap(keys, crack_idx, remap.src, remap.dst)
        debug.log(f"crack {crack.id}: node {node.id} remap {remap} pairs={len(changed)}")
        recorder.emit(
            StepKind.NORMALIZATION,
            f"Normalizing Node {node.id}: Remapping Field {remap.src} -> {remap.dst}",
            node_id=node.id,
            consistency_node_id=node.id,
            consistency_fields=fields,
            normalization=remap,
        )
