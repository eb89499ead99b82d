"""Constants and the shared net/graph data model."""

from .constants import *  # noqa: F401,F403
from .structures import (
    Offset,
    ZERO_OFFSET,
    as_offset,
    add_offsets,
    sub_offsets,
    neg_offset,
    SymmetryOperation,
    with_identity,
    Lattice,
    PeriodicVertex,
    PeriodicEdge,
    canonical_edge,
    PeriodicGraph,
    NetRecord,
)
