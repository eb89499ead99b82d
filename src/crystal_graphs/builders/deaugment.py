"""
Deaugmentation
==============

The augmented net X-a replaces every vertex of X by a small cluster
(a polygon or polyhedron with one corner per incident bond). Collapsing
each cluster back to a single vertex recovers X.

Clusters are grown along short rings:

    1. vertices ordered by their shortest ring (ringless vertices last)
    2. each unvisited vertex seeds a cluster; a worklist of
       (ring, offset of the ring's anchor) pairs absorbs every unvisited
       ring vertex and queues that vertex's own rings
    3. a ring reaching a vertex already owned by another cluster is
       skipped whole
    4. if everything ended in one cluster, start over following only
       rings at most 2 longer than the seed's shortest ring

Membership (c, o) of vertex w means the periodic vertex (w, o) belongs
to the copy of cluster c in cell (0, 0, 0). A bond u → v with offset t
becomes c_u → c_v with offset t + o_u - o_v; bonds inside a cluster
vanish.
"""

from collections import deque
from typing import Dict, Optional, Tuple

from ..analysis.rings import ring_attributions
from ..spec.constants import RING_DEPTH
from ..spec.structures import (
    Offset, PeriodicGraph, ZERO_OFFSET, add_offsets, sub_offsets,
)


def _grow_clusters(ra, order, max_extra: Optional[int]) -> Tuple[int, Dict[int, Tuple[int, Offset]]]:
    """
    Partition the vertices into ring clusters.

    Args:
        ra: ring attributions (ra[s] rings through s, s at zero offset first)
        order: seeding order of the vertices
        max_extra: when set, only follow rings no longer than the seed's
                   shortest ring + max_extra

    Returns:
        (number of clusters, {vertex: (cluster, offset)})
    """
    membership: Dict[int, Tuple[int, Offset]] = {}
    n_clusters = 0
    for seed in order:
        if seed in membership:
            continue
        c = n_clusters
        n_clusters += 1
        membership[seed] = (c, ZERO_OFFSET)
        limit = None
        if max_extra is not None and ra[seed]:
            limit = min(len(r) for r in ra[seed]) + max_extra

        worklist = deque((ring, ZERO_OFFSET) for ring in ra[seed])
        while worklist:
            ring, anchor = worklist.popleft()
            if limit is not None and len(ring) > limit:
                continue
            if any(w in membership and membership[w][0] != c for w, _ in ring):
                continue
            for w, o in ring:
                if w in membership:
                    continue
                ofs = add_offsets(anchor, o)
                membership[w] = (c, ofs)
                worklist.extend((r, ofs) for r in ra[w])

    return n_clusters, membership


def find_clusters(graph: PeriodicGraph, depth: int = RING_DEPTH) -> Tuple[int, Dict[int, Tuple[int, Offset]]]:
    """
    Ring clusters of a graph.

    Returns:
        (number of clusters, {vertex: (cluster, offset)})
    """
    ra = ring_attributions(graph, depth)
    shortest = [min((len(r) for r in rings), default=float('inf')) for rings in ra]
    order = sorted(range(graph.n_vertices), key=lambda v: (shortest[v], v))

    n_clusters, membership = _grow_clusters(ra, order, None)
    if n_clusters == 1:
        n_clusters, membership = _grow_clusters(ra, order, 2)
    return n_clusters, membership


def deaugment(graph: PeriodicGraph, depth: int = RING_DEPTH) -> PeriodicGraph:
    """
    Collapse the ring clusters of an augmented net.

    Args:
        graph: PeriodicGraph of an augmented net
        depth: ring depth passed to ring_attributions

    Returns:
        PeriodicGraph with one vertex per cluster
    """
    n_clusters, membership = find_clusters(graph, depth)
    edges = []
    for u, v, t in graph.edges:
        i, o_u = membership[u]
        j, o_v = membership[v]
        ofs = sub_offsets(add_offsets(t, o_u), o_v)
        if i == j and ofs == ZERO_OFFSET:
            continue
        edges.append((i, j, ofs))
    return PeriodicGraph(n_clusters, edges)
