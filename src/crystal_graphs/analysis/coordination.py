"""
Coordination Sequences and Graph Acceptance
===========================================

The coordination sequence of a vertex counts the periodic vertices at
graph distance 1, 2, ..., depth. It is the topological fingerprint the
database gives for every vertex, and the acceptance test for every
reconstructed graph.

ACCEPTANCE (check_graph):
    1. set of vertex degrees == set of first terms of the target sequences
    2. every vertex's sequence (CS_DEPTH terms) is one of the targets

The degree check is cheap and rejects most wrong trial graphs before
any breadth-first search runs.
"""

from collections import deque
from typing import Iterable, List, Tuple

from ..spec.constants import CS_DEPTH
from ..spec.structures import PeriodicGraph, ZERO_OFFSET, add_offsets


def coordination_sequence(graph: PeriodicGraph, v: int, depth: int = CS_DEPTH) -> Tuple[int, ...]:
    """
    Shell sizes around vertex v at graph distances 1..depth.

    Breadth-first search over periodic vertices (vertex, cell offset),
    starting from v in cell (0, 0, 0).
    """
    seen = {(v, ZERO_OFFSET)}
    frontier = [(v, ZERO_OFFSET)]
    shells = []
    for _ in range(depth):
        nxt = []
        for u, ofs in frontier:
            for w, t in graph.neighbors(u):
                pv = (w, add_offsets(ofs, t))
                if pv not in seen:
                    seen.add(pv)
                    nxt.append(pv)
        shells.append(len(nxt))
        frontier = nxt
    return tuple(shells)


def coordination_sequences(graph: PeriodicGraph, depth: int = CS_DEPTH) -> List[Tuple[int, ...]]:
    return [coordination_sequence(graph, v, depth) for v in range(graph.n_vertices)]


def graph_distances(graph: PeriodicGraph, v: int, depth: int) -> dict:
    """
    Graph distance from (v, 0) to every periodic vertex within depth.

    Returns:
        {(vertex, offset): distance}
    """
    dist = {(v, ZERO_OFFSET): 0}
    queue = deque([(v, ZERO_OFFSET)])
    while queue:
        u, ofs = queue.popleft()
        d = dist[(u, ofs)]
        if d == depth:
            continue
        for w, t in graph.neighbors(u):
            pv = (w, add_offsets(ofs, t))
            if pv not in dist:
                dist[pv] = d + 1
                queue.append(pv)
    return dist


def check_graph(graph: PeriodicGraph, sequences: Iterable[Iterable[int]],
                depth: int = CS_DEPTH) -> bool:
    """
    True iff the graph reproduces the target coordination sequences.

    Args:
        graph: candidate PeriodicGraph
        sequences: target sequences (one per vertex, duplicates allowed)
        depth: number of shells compared

    Returns:
        True when the degree set matches the first terms of the unique
        targets and every vertex's sequence is a target
    """
    targets = {tuple(seq)[:depth] for seq in sequences}
    if not targets:
        return False
    if sorted(set(graph.degree())) != sorted({seq[0] for seq in targets}):
        return False
    return all(coordination_sequence(graph, v, depth) in targets
               for v in range(graph.n_vertices))
