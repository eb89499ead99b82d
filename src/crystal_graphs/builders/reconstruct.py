"""
Graph Reconstruction from Positions
===================================

Infer the bonds of a net from the fractional positions of its vertices
and edge midpoints, accepting a graph only when it reproduces the target
coordination sequences (analysis.coordination.check_graph).

PREPARATION (ReconstructionContext.prepare):
    - vertex positions wrapped to [0, 1)
    - precision p: one more than the smallest decimal count at which
      all positions are distinct
    - vertex table keyed on precise_round(position, p)
    - Strategy C tie tolerance ε = (volume / n)^(1/3)

STRATEGIES, tried in order:
    A  closest       each vertex bonds to its k closest images,
                     k the first term of its target sequence
    B  edge_orbits   the two vertices nearest each symmetry-unique edge
                     midpoint form a seed bond; each seed and all of
                     its symmetry images are added
    C  edge_progression
                     every full-cell edge midpoint has a ranked list of
                     candidate bonds; combinations are enumerated like an
                     odometer until one is accepted or PROGRESSION_CAP
                     trials have run

A strategy returns None to decline. ValueError signals a record that
no strategy can handle (e.g. vertices that coincide after rounding).
"""

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ..analysis.coordination import check_graph
from ..geometry.neighbors import closest_positions
from ..geometry.positions import VertexTable, choose_precision, precise_round, wrap_fractional
from ..geometry.symmetry import expand_edge_sites
from ..spec.constants import (
    EDGE_CANDIDATES, EDGE_TOL_FACTOR, MAX_ROUND_DIGITS, PROGRESSION_CAP,
)
from ..spec.structures import (
    Lattice, NetRecord, PeriodicEdge, PeriodicGraph, ZERO_OFFSET,
    canonical_edge, sub_offsets,
)


@dataclass
class ReconstructionContext:
    """Rounded positions and tolerances shared by all strategies of one record."""
    lattice: Lattice
    table: VertexTable
    digits: int
    positions: np.ndarray           # rounded at `digits`, table keys
    precise_positions: np.ndarray   # rounded at `digits + 1`
    edge_sites: np.ndarray          # symmetry-unique midpoints, rounded at `digits`
    epsilon: float
    sequences: Tuple[Tuple[int, ...], ...]

    @classmethod
    def prepare(cls, record: NetRecord,
                max_digits: int = MAX_ROUND_DIGITS) -> 'ReconstructionContext':
        """
        Raises:
            ValueError: if the record has no vertex or two vertices
                        coincide after rounding
        """
        if record.n_vertices == 0:
            raise ValueError(f"{record.name}: no vertex")
        wrapped = wrap_fractional(record.vertices)
        digits = choose_precision(wrapped, max_digits)
        table = VertexTable(wrapped, digits)
        precise = np.asarray(precise_round(wrapped, digits + 1), dtype=float).reshape(-1, 3)
        edge_sites = np.asarray(precise_round(wrap_fractional(record.edge_sites), digits),
                                dtype=float).reshape(-1, 3)
        epsilon = (record.lattice.volume / record.n_vertices) ** (1 / 3)
        return cls(record.lattice, table, digits, table.positions, precise,
                   edge_sites, epsilon, record.sequences)

    @property
    def max_edge_length(self) -> float:
        return float(np.linalg.norm(self.lattice.matrix, axis=0).max())


# =============================================================================
# Strategy A: closest neighbors
# =============================================================================

def try_from_closest(record: NetRecord, ctx: ReconstructionContext) -> Optional[PeriodicGraph]:
    """
    Bond every vertex to its k closest periodic images.

    Raises:
        ValueError: if a vertex is not its own closest image
    """
    edges = []
    for i, pos in enumerate(ctx.positions):
        k = ctx.sequences[i][0]
        ids, _, offsets = closest_positions(pos, ctx.lattice, ctx.positions, np.inf, k + 1)
        if len(ids) < k + 1:
            return None
        if ids[0] != i or offsets[0] != ZERO_OFFSET:
            raise ValueError(f"{record.name}: vertex {i} is not its own closest image")
        edges.extend((i, j, ofs) for j, ofs in zip(ids[1:], offsets[1:]))

    graph = PeriodicGraph(record.n_vertices, edges)
    return graph if check_graph(graph, ctx.sequences) else None


# =============================================================================
# Strategy B: symmetry orbits of seed edges
# =============================================================================

def try_from_edge_orbits(record: NetRecord, ctx: ReconstructionContext) -> Optional[PeriodicGraph]:
    """Seed one bond per unique edge midpoint, then add its images under every symmetry operation."""
    tol = EDGE_TOL_FACTOR * 10.0 ** (-ctx.digits) * ctx.max_edge_length
    seeds = []
    edges = []
    for site in ctx.edge_sites:
        ids, _, offsets = closest_positions(site, ctx.lattice, ctx.precise_positions, tol, 2)
        if len(ids) < 2:
            return None
        if ids[0] == ids[1] and offsets[0] == offsets[1]:
            return None
        seeds.append((ctx.precise_positions[ids[0]] + offsets[0],
                      ctx.precise_positions[ids[1]] + offsets[1]))
        edges.append((ids[0], ids[1], sub_offsets(offsets[1], offsets[0])))

    for posa, posb in seeds:
        for op in ctx.lattice.symmetry:
            a = ctx.table.locate(op(posa))
            b = ctx.table.locate(op(posb))
            if a is None or b is None:
                return None
            if a.v == b.v and a.ofs == b.ofs:
                return None
            edges.append((a.v, b.v, sub_offsets(b.ofs, a.ofs)))

    graph = PeriodicGraph(record.n_vertices, edges)
    return graph if check_graph(graph, ctx.sequences) else None


# =============================================================================
# Strategy C: progressive assignment over edge midpoints
# =============================================================================

def edge_candidates(midpoint, ctx: ReconstructionContext,
                    maxsize: int = EDGE_CANDIDATES) -> List[PeriodicEdge]:
    """
    Ranked candidate bonds whose middle is `midpoint`.

    Each close vertex image is paired with its reflection through the
    midpoint; pairs with an endpoint missing from the vertex table, and
    zero-offset loops, are dropped. Duplicates keep their best rank.
    """
    ids, _, offsets = closest_positions(midpoint, ctx.lattice, ctx.positions, ctx.epsilon, maxsize)
    ranked = []
    seen = set()
    for j, ofs in zip(ids, offsets):
        pos = ctx.positions[j] + ofs
        src = ctx.table.locate(pos)
        dst = ctx.table.locate(2 * np.asarray(midpoint) - pos)
        if src is None or dst is None:
            continue
        if src.v == dst.v and src.ofs == dst.ofs:
            continue
        edge = canonical_edge(src.v, dst.v, sub_offsets(dst.ofs, src.ofs))
        if edge not in seen:
            seen.add(edge)
            ranked.append(edge)
    return ranked


def progressions(lengths: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """
    Every index combination, first slot fastest.

    Slots of length 0 stay at 0 and never advance.
    e.g. lengths (2, 3) → (0,0) (1,0) (0,1) (1,1) (0,2) (1,2)
    """
    lengths = list(lengths)
    slots = [i for i, n in enumerate(lengths) if n > 0]
    current = [0] * len(lengths)
    while True:
        yield tuple(current)
        for i in slots:
            if current[i] + 1 < lengths[i]:
                current[i] += 1
                break
            current[i] = 0
        else:
            return


def try_from_edge_progression(record: NetRecord, ctx: ReconstructionContext,
                              cap: int = PROGRESSION_CAP) -> Optional[PeriodicGraph]:
    """Try combinations of ranked candidate bonds, one per full-cell edge midpoint."""
    midpoints = np.round(expand_edge_sites(record), ctx.digits + 1)
    candidates = [edge_candidates(x, ctx) for x in midpoints]

    for trial, choice in enumerate(progressions([len(c) for c in candidates])):
        if trial >= cap:
            return None
        edges = [c[k] for c, k in zip(candidates, choice) if c]
        graph = PeriodicGraph(record.n_vertices, edges)
        if check_graph(graph, ctx.sequences):
            return graph
    return None


# =============================================================================
# Driver
# =============================================================================

Strategy = Callable[[NetRecord, ReconstructionContext], Optional[PeriodicGraph]]

STRATEGIES: Tuple[Strategy, ...] = (
    try_from_closest,
    try_from_edge_orbits,
    try_from_edge_progression,
)


def strategy_name(strategy: Strategy) -> str:
    name = strategy.__name__
    return name[len('try_from_'):] if name.startswith('try_from_') else name


def determine_graph(record: NetRecord,
                    strategies: Sequence[Strategy] = STRATEGIES) -> Optional[Tuple[str, PeriodicGraph]]:
    """
    Reconstruct the periodic graph of a record.

    Args:
        record: NetRecord with full-cell vertex positions
        strategies: strategies to try, in order

    Returns:
        (strategy name, graph) for the first accepted graph, or None

    Raises:
        ValueError: invalid record or non-unique vertex positions
    """
    record.validate()
    ctx = ReconstructionContext.prepare(record)
    for strategy in strategies:
        graph = strategy(record, ctx)
        if graph is not None:
            return strategy_name(strategy), graph
    return None
