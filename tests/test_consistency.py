import pytest

from src.crackfield.connectivity import Connectivity
from src.crackfield.consistency import (
    Remap,
    normalization_remap,
    run_consistency_phase,
    seen_fields,
)
from src.crackfield.field_types import Crack, Node, PairKey
from src.crackfield.fields import FieldAccumulator
from src.crackfield.trace import StepKind, TraceRecorder

CRACK = Crack(0, ((0, 0), (1, 0)))


def _single_node(labels: list[int]) -> tuple[FieldAccumulator, Connectivity]:
    pids = tuple(range(len(labels)))
    conn = Connectivity(
        particle_to_nodes={pid: (0,) for pid in pids},
        node_to_particles={0: pids},
    )
    acc = FieldAccumulator(conn.pairs(), n_cracks=1)
    for pid, label in zip(pids, labels):
        acc.set(PairKey(0, pid), 0, label)
    return acc, conn


def _run(labels: list[int]):
    acc, conn = _single_node(labels)
    rec = TraceRecorder(acc)
    run_consistency_phase(rec, acc, conn, [Node(0, 0, 0)], CRACK, 0)
    after = [acc.get(PairKey(0, pid), 0) for pid in range(len(labels))]
    return after, rec.finish()


@pytest.mark.parametrize(
    ("fields", "expected"),
    [
        ((1, 2), Remap(1, 3)),
        ((1, 3), Remap(1, 2)),
        ((2, 3), None),
        ((1,), None),
        ((1, 2, 3), None),
    ],
)
def test_normalization_remap(fields: tuple[int, ...], expected: Remap | None) -> None:
    assert normalization_remap(fields) == expected


def test_remap_str() -> None:
    assert str(Remap(1, 3)) == "1->3"


def test_seen_fields_sorted_distinct() -> None:
    acc, conn = _single_node([3, 1, 3, 2])
    assert seen_fields(acc, 0, conn.node_to_particles[0], 0) == (1, 2, 3)


def test_one_and_two_remaps_ones_to_three() -> None:
    after, trace = _run([1, 2, 1, 2])
    assert after == [3, 2, 3, 2]
    norm = trace.of_kind(StepKind.NORMALIZATION)
    assert len(norm) == 1
    assert norm[0].normalization_action == "1->3"
    assert norm[0].consistency_fields == (1, 2)


def test_one_and_three_remaps_ones_to_two() -> None:
    after, trace = _run([3, 1])
    assert after == [3, 2]
    assert trace.of_kind(StepKind.NORMALIZATION)[0].normalization_action == "1->2"


def test_two_and_three_left_alone() -> None:
    after, trace = _run([2, 3, 3])
    assert after == [2, 3, 3]
    assert [s.kind for s in trace] == [StepKind.CONSISTENCY_START, StepKind.NODE_FIELDS]


def test_three_way_conflict_warns_without_mutation() -> None:
    after, trace = _run([1, 2, 3])
    assert after == [1, 2, 3]
    assert len(trace.of_kind(StepKind.WARNING)) == 1
    assert trace.of_kind(StepKind.NORMALIZATION) == ()
    assert trace[-1].field_state == trace[0].field_state


def test_single_label_no_action() -> None:
    after, trace = _run([1, 1])
    assert after == [1, 1]
    assert len(trace) == 2
    assert trace[1].description == "Node 0 sees fields: [1]"


def test_nodes_without_particles_are_skipped() -> None:
    acc, conn = _single_node([1])
    conn = Connectivity(
        particle_to_nodes=conn.particle_to_nodes,
        node_to_particles={0: (0,), 5: ()},
    )
    rec = TraceRecorder(acc)
    run_consistency_phase(rec, acc, conn, [Node(5, 9, 9), Node(0, 0, 0)], CRACK, 0)
    trace = rec.finish()
    assert [s.consistency_node_id for s in trace.of_kind(StepKind.NODE_FIELDS)] == [0]
