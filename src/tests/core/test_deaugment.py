"""
Tests for deaugmentation.

The augmentation of X (one corner per bond end, corners of a vertex
fully connected) must collapse back to a graph with the coordination
sequences of X, whatever cells the corners are written in.

Run with:
    python3 -m pytest tests/core/test_deaugment.py -v
"""

from crystal_graphs.analysis.coordination import check_graph
from crystal_graphs.builders.deaugment import deaugment, find_clusters
from crystal_graphs.spec import PeriodicGraph

from nets import DIA_CS, PCU_CS, augment, shift_vertex


def test_augment_sizes(pcu_graph, dia_graph):
    assert augment(pcu_graph).n_vertices == 6
    assert augment(dia_graph).n_vertices == 8
    assert set(augment(dia_graph).degree()) == {4}


def test_deaugment_pcu(pcu_graph):
    """A single cluster: the restricted second pass gives the same partition."""
    n_clusters, _ = find_clusters(augment(pcu_graph))
    assert n_clusters == 1
    assert deaugment(augment(pcu_graph)) == pcu_graph


def test_deaugment_dia(dia_graph):
    augmented = augment(dia_graph)
    n_clusters, membership = find_clusters(augmented)
    assert n_clusters == 2
    assert {membership[v][0] for v in range(4)} == {0}
    assert {membership[v][0] for v in range(4, 8)} == {1}

    result = deaugment(augmented)
    assert result == dia_graph
    assert check_graph(result, [DIA_CS, DIA_CS])


def test_deaugment_follows_offsets(dia_graph):
    """Corners written in other cells still collapse to diamond."""
    augmented = augment(dia_graph)
    augmented = shift_vertex(augmented, 2, (1, 0, 0))
    augmented = shift_vertex(augmented, 5, (0, -1, 2))
    n_clusters, membership = find_clusters(augmented)
    assert n_clusters == 2
    assert membership[2][1] == (-1, 0, 0)

    result = deaugment(augmented)
    assert result.n_vertices == 2
    assert result.degree() == [4, 4]
    assert check_graph(result, [DIA_CS, DIA_CS])


def test_deaugment_shifted_pcu(pcu_graph):
    augmented = shift_vertex(augment(pcu_graph), 3, (0, 1, 1))
    result = deaugment(augmented)
    assert check_graph(result, [PCU_CS])


def test_ringless_graph_unchanged():
    """Nothing to collapse: every vertex is its own cluster."""
    chain = PeriodicGraph(2, [(0, 1, (0, 0, 0)), (0, 1, (1, 0, 0))])
    assert deaugment(chain) == chain
