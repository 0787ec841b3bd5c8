from . import (
    connectivity,
    consistency,
    encoding,
    fields,
    geometry,
    pipeline,
    presets,
    scene_io,
    trace,
)
from .field_types import (
    Crack,
    FieldLabel,
    InvalidCrack,
    InvalidCrackError,
    Node,
    PairKey,
    Particle,
    Point,
    Scene,
)
from .pipeline import generate_scene_trace, generate_trace
from .trace import Step, StepKind, Trace

__all__ = [
    "connectivity",
    "consistency",
    "encoding",
    "fields",
    "geometry",
    "pipeline",
    "presets",
    "scene_io",
    "trace",
    "Crack",
    "FieldLabel",
    "InvalidCrack",
    "InvalidCrackError",
    "Node",
    "PairKey",
    "Particle",
    "Point",
    "Scene",
    "Step",
    "StepKind",
    "Trace",
    "generate_scene_trace",
    "generate_trace",
]
