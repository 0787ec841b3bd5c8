from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from ..utils import debug, debug_helpers
from .field_types import Node, NpPoint, NpPositions, NpRanking, PairKey, Particle
from .geometry import positions_array

NODES_PER_PARTICLE = 4


@dataclass(frozen=True)
class Connectivity:
    """
    Bipartite node <-> particle graph.
    particle_to_nodes: particle id -> node ids, nearest first
    node_to_particles: node id -> particle ids, in particle input order
    """

    particle_to_nodes: Mapping[int, tuple[int, ...]]
    node_to_particles: Mapping[int, tuple[int, ...]]

    def pairs(self) -> Iterator[PairKey]:
        for particle_id, node_ids in self.particle_to_nodes.items():
            for node_id in node_ids:
                yield PairKey(node_id, particle_id)

    @property
    def n_pairs(self) -> int:
        return sum(len(ids) for ids in self.particle_to_nodes.values())


@jaxtyped(typechecker=beartype)
def nearest_nodes(
    particle_xy: NpPoint,
    node_xy: NpPositions,
    k: int = NODES_PER_PARTICLE,
) -> NpRanking:
    """
    Indices of the k nodes closest to particle_xy by squared distance.
    Equal distances keep node input order (stable sort).
    """
    if k < 1:
        raise ValueError("k must be >= 1")
    d = node_xy - particle_xy[None, :]
    d2 = np.sum(d * d, axis=-1)
    order = np.argsort(d2, kind="stable")
    return order[:k].astype(np.int64)


@beartype
def build_connectivity(
    nodes: Sequence[Node],
    particles: Sequence[Particle],
    k: int = NODES_PER_PARTICLE,
) -> Connectivity:
    if k < 1:
        raise ValueError("k must be >= 1")

    node_xy = positions_array(nodes)
    particle_xy = positions_array(particles)
    debug_helpers.log_array("node_xy", node_xy)
    debug_helpers.log_array("particle_xy", particle_xy)

    node_ids = [n.id for n in nodes]
    particle_to_nodes: dict[int, tuple[int, ...]] = {}
    node_to_particles: dict[int, list[int]] = {node_id: [] for node_id in node_ids}

    for p, xy in zip(particles, particle_xy):
        ranked = nearest_nodes(xy, node_xy, k)
        connected = tuple(node_ids[int(i)] for i in ranked)
        particle_to_nodes[p.id] = connected
        for node_id in connected:
            node_to_particles[node_id].append(p.id)

    conn = Connectivity(
        particle_to_nodes=MappingProxyType(particle_to_nodes),
        node_to_particles=MappingProxyType(
            {node_id: tuple(pids) for node_id, pids in node_to_particles.items()}
        ),
    )
    debug.log(
        f"connectivity: nodes={len(nodes)} particles={len(particles)} "
        f"k={k} pairs={conn.n_pairs}"
    )
    return conn
