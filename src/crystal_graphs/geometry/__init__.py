"""Periodic geometry - minimum images, neighbor search, rounding, symmetry."""

from .distance import (
    prepare_periodic_distance_computations,
    fold,
    periodic_distance,
    periodic_neighbor,
)
from .neighbors import closest_positions
from .positions import (
    wrap_fractional,
    precise_round,
    choose_precision,
    VertexTable,
)
from .symmetry import (
    expand_positions,
    expand_asymmetric_unit,
    expand_edge_sites,
)
