"""
Tests for ring attributions.

A ring has no shortcut, so:
    pcu  12 squares through every vertex, 3 squares modulo translation
    dia  12 hexagons through every vertex, nothing shorter, no odd ring

Run with:
    python3 -m pytest tests/core/test_rings.py -v
"""

from crystal_graphs.analysis.coordination import graph_distances
from crystal_graphs.analysis.rings import canonical_ring, ring_attributions, rings
from crystal_graphs.spec import PeriodicGraph, PeriodicVertex, add_offsets, sub_offsets

from nets import augment


def _is_closed_walk(graph, ring):
    for a, b in zip(ring, ring[1:] + ring[:1]):
        step = sub_offsets(b.ofs, a.ofs)
        if (b.v, step) not in graph.neighbors(a.v):
            return False
    return True


def test_pcu_squares(pcu_graph):
    ra = ring_attributions(pcu_graph)
    squares = [r for r in ra[0] if len(r) == 4]
    assert len(squares) == 12
    assert min(len(r) for r in ra[0]) == 4
    assert all(len(r) % 2 == 0 for r in ra[0])


def test_pcu_squares_modulo_translation(pcu_graph):
    assert len([r for r in rings(pcu_graph) if len(r) == 4]) == 3


def test_dia_hexagons(dia_graph):
    ra = ring_attributions(dia_graph)
    for s in range(2):
        assert len(ra[s]) == 12
        assert all(len(r) == 6 for r in ra[s])


def test_rings_start_at_attributed_vertex(dia_graph):
    ra = ring_attributions(dia_graph)
    for s, attributed in enumerate(ra):
        for ring in attributed:
            assert ring[0] == PeriodicVertex(s, (0, 0, 0))
            assert _is_closed_walk(dia_graph, ring)
            assert len(set(ring)) == len(ring)


def test_rings_have_no_shortcut(pcu_graph):
    for ring in ring_attributions(pcu_graph)[0]:
        n = len(ring)
        for i in range(n):
            ball = graph_distances(pcu_graph, ring[i].v, n // 2)
            for j in range(n):
                k = min(abs(i - j), n - abs(i - j))
                d = ball.get((ring[j].v, sub_offsets(ring[j].ofs, ring[i].ofs)))
                assert d is None or d >= k


def test_triangles_in_augmented_dia(dia_graph):
    """Corners of a tetrahedral cluster: three triangles each."""
    ra = ring_attributions(augment(dia_graph))
    for attributed in ra:
        triangles = [r for r in attributed if len(r) == 3]
        assert len(triangles) == 3
        assert all(len(r) == 3 for r in attributed)


def test_canonical_ring_invariance():
    ring = (PeriodicVertex(0, (0, 0, 0)), PeriodicVertex(1, (0, 0, 0)),
            PeriodicVertex(2, (1, 0, 0)))
    shifted = tuple(PeriodicVertex(v, add_offsets(o, (0, 3, -1))) for v, o in ring)
    rotated = shifted[1:] + shifted[:1]
    assert canonical_ring(rotated[::-1]) == canonical_ring(ring)


def test_chain_has_no_ring():
    g = PeriodicGraph(2, [(0, 1, (0, 0, 0)), (0, 1, (1, 0, 0))])
    assert ring_attributions(g) == [[], []]
