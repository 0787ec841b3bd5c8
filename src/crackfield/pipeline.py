from __future__ import annotations

from collections.abc import Sequence

from beartype import beartype

from ..utils import debug
from .connectivity import NODES_PER_PARTICLE, build_connectivity
from .consistency import run_consistency_phase
from .field_types import Crack, InvalidCrackError, Node, Particle, Scene
from .fields import FieldAccumulator, run_crossing_phase
from .trace import StepKind, Trace, TraceRecorder


def validate_cracks(cracks: Sequence[Crack]) -> None:
    for crack in cracks:
        if len(crack.points) < 2:
            raise InvalidCrackError(
                f"crack {crack.id} has {len(crack.points)} point(s); at least 2 required"
            )


@beartype
def generate_trace(
    nodes: Sequence[Node],
    particles: Sequence[Particle],
    cracks: Sequence[Crack],
    *,
    nodes_per_particle: int = NODES_PER_PARTICLE,
) -> Trace:
    """
    Run the crossing and consistency passes over every crack and return the
    full step trace. The whole input is consumed before returning.

    Steps: init, then per crack (crack start, segment tests and pair results
    per pair, consistency start, per-node fields / warning / normalization),
    then complete. With no connected pairs only init and complete are emitted.
    """
    validate_cracks(cracks)

    connectivity = build_connectivity(nodes, particles, k=nodes_per_particle)
    accumulator = FieldAccumulator(connectivity.pairs(), n_cracks=len(cracks))
    recorder = TraceRecorder(accumulator)
    nodes_by_id = {node.id: node for node in nodes}

    recorder.emit(
        StepKind.INIT,
        "Initialization: Connected pairs set to Field 1 (No Crossing).",
    )

    if len(accumulator) > 0:
        for crack_idx, crack in enumerate(cracks):
            start = len(recorder)
            recorder.emit(
                StepKind.CRACK_START,
                f"Processing Crack {crack.id + 1}...",
                crack_id=crack.id,
            )
            run_crossing_phase(
                recorder,
                accumulator,
                connectivity,
                nodes_by_id,
                particles,
                crack,
                crack_idx,
            )
            run_consistency_phase(
                recorder, accumulator, connectivity, nodes, crack, crack_idx
            )
            debug.log(f"crack {crack.id}: steps={len(recorder) - start}")

    recorder.emit(StepKind.COMPLETE, "Computation Complete. Final fields shown.")
    trace = recorder.finish()
    debug.log(f"trace: steps={len(trace)} pairs={len(accumulator)} cracks={len(cracks)}")
    return trace


def generate_scene_trace(
    scene: Scene, *, nodes_per_particle: int = NODES_PER_PARTICLE
) -> Trace:
    return generate_trace(
        scene.nodes,
        scene.particles,
        scene.cracks,
        nodes_per_particle=nodes_per_particle,
    )
