import numpy as np
import pytest

from src.crackfield.connectivity import build_connectivity, nearest_nodes
from src.crackfield.field_types import Node, PairKey, Particle


def _corner_nodes() -> list[Node]:
    return [Node(0, 2, 2), Node(1, 8, 2), Node(2, 2, 8), Node(3, 8, 8)]


def test_nearest_nodes_ranks_by_distance() -> None:
    node_xy = np.array([[10.0, 0.0], [1.0, 0.0], [0.0, 3.0], [2.0, 2.0], [0.0, -1.5]])
    ranked = nearest_nodes(np.array([0.0, 0.0]), node_xy, 3)
    np.testing.assert_array_equal(ranked, np.array([1, 4, 3]))


def test_nearest_nodes_ties_keep_input_order() -> None:
    node_xy = np.array(
        [[3.0, 4.0], [4.0, 3.0], [5.0, 0.0], [0.0, 5.0], [-5.0, 0.0]]
    )
    ranked = nearest_nodes(np.array([0.0, 0.0]), node_xy, 4)
    np.testing.assert_array_equal(ranked, np.array([0, 1, 2, 3]))


def test_nearest_nodes_rejects_bad_k() -> None:
    with pytest.raises(ValueError):
        nearest_nodes(np.array([0.0, 0.0]), np.zeros((2, 2)), 0)


def test_build_connectivity_four_nodes() -> None:
    particles = [Particle(0, 5, 4), Particle(1, 5, 6)]
    conn = build_connectivity(_corner_nodes(), particles)

    assert conn.particle_to_nodes[0] == (0, 1, 2, 3)
    assert conn.particle_to_nodes[1] == (2, 3, 0, 1)
    for node_id in range(4):
        assert conn.node_to_particles[node_id] == (0, 1)
    assert conn.n_pairs == 8
    assert list(conn.pairs())[:4] == [PairKey(n, 0) for n in (0, 1, 2, 3)]


def test_build_connectivity_fewer_than_k_nodes() -> None:
    nodes = [Node(7, 0, 0), Node(9, 10, 0)]
    conn = build_connectivity(nodes, [Particle(0, 1, 0)])
    assert conn.particle_to_nodes[0] == (7, 9)


def test_build_connectivity_only_k_nearest() -> None:
    nodes = [Node(i, float(i), 0.0) for i in range(6)]
    conn = build_connectivity(nodes, [Particle(0, 0.2, 0.0)])
    assert conn.particle_to_nodes[0] == (0, 1, 2, 3)
    assert conn.node_to_particles[4] == ()
    assert conn.node_to_particles[5] == ()


def test_build_connectivity_custom_k() -> None:
    conn = build_connectivity(_corner_nodes(), [Particle(0, 5, 4)], k=2)
    assert conn.particle_to_nodes[0] == (0, 1)


def test_build_connectivity_empty_inputs() -> None:
    conn = build_connectivity([], [Particle(0, 1, 1)])
    assert conn.particle_to_nodes[0] == ()
    assert conn.n_pairs == 0

    conn = build_connectivity(_corner_nodes(), [])
    assert dict(conn.particle_to_nodes) == {}
    assert all(pids == () for pids in conn.node_to_particles.values())


def test_connectivity_is_read_only() -> None:
    conn = build_connectivity(_corner_nodes(), [Particle(0, 5, 4)])
    with pytest.raises(TypeError):
        conn.particle_to_nodes[0] = ()  # type: ignore[index]
