from __future__ import annotations

import argparse
from typing import Protocol, cast

from .crackfield.connectivity import NODES_PER_PARTICLE
from .crackfield.encoding import decode_combined
from .crackfield.field_types import Scene
from .crackfield.pipeline import generate_scene_trace
from .crackfield.presets import PRESETS, load_preset
from .crackfield.scene_io import load_scene
from .crackfield.trace import Step, StepKind, Trace
from .utils import debug


class CliArgs(Protocol):
    preset: str
    scene: str | None
    step: int | None
    kind: list[str] | None
    nodes_per_particle: int
    final: bool
    verbose: bool


def format_step(step: Step, n_cracks: int) -> list[str]:
    lines = [f"step {step.index} [{step.kind.value}] {step.description}"]
    if step.crack_id is not None:
        seg = "" if step.segment_index is None else f" segment={step.segment_index}"
        lines.append(f"  crack={step.crack_id}{seg}")
    if step.node_id is not None or step.particle_id is not None:
        lines.append(f"  node={step.node_id} particle={step.particle_id}")
    if step.areas is not None:
        a = step.areas
        lines.append(
            f"  areas=({a.area1:.1f}, {a.area2:.1f}, {a.area3:.1f}, {a.area4:.1f})"
        )
    if step.crossing_result is not None:
        lines.append(f"  result={step.crossing_result}")
    if step.counts is not None:
        lines.append(f"  f2={step.counts.f2} f3={step.counts.f3}")
    if step.consistency_fields is not None:
        lines.append(f"  fields={list(step.consistency_fields)}")
    if step.normalization_action is not None:
        lines.append(f"  action={step.normalization_action}")
    lines.extend(format_field_state(step, n_cracks))
    return lines


def format_field_state(step: Step, n_cracks: int) -> list[str]:
    lines = ["  field state:"]
    for key, value in step.field_state.items():
        labels = decode_combined(value, n_cracks)
        lines.append(
            f"    N{key.node_id}-P{key.particle_id}: {value} labels={list(labels)}"
        )
    return lines


def select_steps(trace: Trace, kinds: list[str] | None) -> list[Step]:
    if not kinds:
        return list(trace)
    wanted = {StepKind(k) for k in kinds}
    return [step for step in trace if step.kind in wanted]


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(
        description="Trace crack-crossing field labels for node/particle pairs"
    )
    ap.add_argument(
        "--preset",
        choices=PRESETS,
        default="case1",
        help="Built-in scene (ignored when --scene is given)",
    )
    ap.add_argument("--scene", default=None, help="Scene JSON (nodes/particles/cracks)")
    ap.add_argument(
        "--step",
        type=int,
        default=None,
        help="Print one step in detail (negative counts from the end)",
    )
    ap.add_argument(
        "--kind",
        action="append",
        choices=[k.value for k in StepKind],
        default=None,
        help="Only list steps of this kind (repeatable)",
    )
    ap.add_argument(
        "--nodes_per_particle",
        type=int,
        default=NODES_PER_PARTICLE,
        help="Nearest nodes connected to each particle",
    )
    ap.add_argument(
        "--final", action="store_true", help="Print the final field state"
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logs")

    args = cast(CliArgs, ap.parse_args(argv))
    debug.set_verbose(args.verbose)

    if args.nodes_per_particle < 1:
        raise ValueError("nodes_per_particle must be >= 1")

    scene: Scene
    if args.scene is not None:
        scene = load_scene(args.scene)
        debug.log(f"scene: {args.scene}")
    else:
        scene = load_preset(args.preset)
        debug.log(f"preset: {args.preset}")

    trace = generate_scene_trace(scene, nodes_per_particle=args.nodes_per_particle)
    n_cracks = len(scene.cracks)

    if args.step is not None:
        if not -len(trace) <= args.step < len(trace):
            raise IndexError(f"step {args.step} out of range for {len(trace)} steps")
        print("\n".join(format_step(trace[args.step], n_cracks)))
        return

    for step in select_steps(trace, args.kind):
        print(f"{step.index:5d}  {step.description}")
    if args.final:
        print("\n".join(format_field_state(trace[-1], n_cracks)))
    print(
        f"steps={len(trace)} nodes={len(scene.nodes)} "
        f"particles={len(scene.particles)} cracks={n_cracks}"
    )


if __name__ == "__main__":
    main()
