"""
Rings of a Periodic Graph
=========================

A RING is a simple cycle of periodic vertices with no shortcut: any two
of its vertices are exactly as far apart in the graph as they are
along the ring (for a pair k steps apart on the ring, graph distance k).

Lengths searched: 3 .. 2·depth + 3 (depth = RING_DEPTH by default).

SEARCH:
    For a ring of length L through s, the vertex at position i lies at
    graph distance min(i, L - i) from s. A depth-first search from
    (s, 0) that only steps onto vertices at the expected distance finds
    every candidate; a pairwise distance check then removes cycles with
    a shortcut. Distances come from breadth-first balls of radius L//2,
    one per vertex, shared across the whole search.

ATTRIBUTION:
    ring_attributions()[s] lists the rings through s, each translated
    so that s sits at offset (0, 0, 0) and listed first. A ring through
    two images of s appears once per image.
"""

from typing import Dict, List, Tuple

from ..spec.constants import RING_DEPTH
from ..spec.structures import (
    PeriodicGraph, PeriodicVertex, ZERO_OFFSET, add_offsets, sub_offsets,
)
from .coordination import graph_distances


Ring = Tuple[PeriodicVertex, ...]


def _translate(ring, ofs) -> Ring:
    return tuple(PeriodicVertex(v, sub_offsets(o, ofs)) for v, o in ring)


def canonical_ring(ring) -> Ring:
    """Representative of a ring modulo rotation, reversal and lattice translation."""
    ring = tuple(PeriodicVertex(v, tuple(o)) for v, o in ring)
    n = len(ring)
    best = None
    for seq in (ring, ring[::-1]):
        for k in range(n):
            rot = seq[k:] + seq[:k]
            rot = _translate(rot, rot[0].ofs)
            if best is None or rot < best:
                best = rot
    return best


class _RingSearch:
    """Shared distance balls for all ring searches on one graph."""

    def __init__(self, graph: PeriodicGraph, max_len: int):
        self.graph = graph
        self.max_len = max_len
        self.radius = max_len // 2
        self._balls: Dict[int, dict] = {}

    def ball(self, v: int) -> dict:
        if v not in self._balls:
            self._balls[v] = graph_distances(self.graph, v, self.radius)
        return self._balls[v]

    def distance(self, a: PeriodicVertex, b: PeriodicVertex):
        """Graph distance between periodic vertices, None beyond the search radius."""
        return self.ball(a.v).get((b.v, sub_offsets(b.ofs, a.ofs)))

    def has_shortcut(self, path) -> bool:
        n = len(path)
        for i in range(n):
            for j in range(i + 2, n):
                k = min(j - i, n - (j - i))
                d = self.distance(path[i], path[j])
                if d is not None and d < k:
                    return True
        return False

    def rings_from(self, s: int) -> List[Ring]:
        """Rings through (s, 0), starting there, one entry per direction pair."""
        start = PeriodicVertex(s, ZERO_OFFSET)
        ball = self.ball(s)
        found = set()

        for length in range(3, self.max_len + 1):
            path = [start]
            on_path = {start}
            # explicit stack of neighbor iterators
            stack = [iter(self.graph.neighbors(s))]
            while stack:
                step = len(path)
                advanced = False
                for w, t in stack[-1]:
                    pv = PeriodicVertex(w, add_offsets(path[-1].ofs, t))
                    if pv in on_path or ball.get(pv) != min(step, length - step):
                        continue
                    if step == length - 1:
                        closes = any(PeriodicVertex(x, add_offsets(pv.ofs, u)) == start
                                     for x, u in self.graph.neighbors(w))
                        candidate = tuple(path) + (pv,)
                        if closes and not self.has_shortcut(candidate):
                            rev = (candidate[0],) + candidate[:0:-1]
                            found.add(min(candidate, rev))
                        continue
                    path.append(pv)
                    on_path.add(pv)
                    stack.append(iter(self.graph.neighbors(w)))
                    advanced = True
                    break
                if not advanced:
                    stack.pop()
                    if len(path) > 1:
                        on_path.discard(path.pop())

        return sorted(found, key=lambda r: (len(r), r))


def ring_attributions(graph: PeriodicGraph, depth: int = RING_DEPTH) -> List[List[Ring]]:
    """
    Rings through every vertex.

    Args:
        graph: PeriodicGraph
        depth: rings of length 3 .. 2·depth + 3 are listed

    Returns:
        ra with ra[s] the rings through s, shortest first; each ring is a
        tuple of PeriodicVertex starting with (s, (0, 0, 0))
    """
    search = _RingSearch(graph, 2 * depth + 3)
    return [search.rings_from(s) for s in range(graph.n_vertices)]


def rings(graph: PeriodicGraph, depth: int = RING_DEPTH) -> List[Ring]:
    """Distinct rings of the graph, modulo lattice translation."""
    found = set()
    for attributed in ring_attributions(graph, depth):
        found.update(canonical_ring(r) for r in attributed)
    return sorted(found, key=lambda r: (len(r), r))
