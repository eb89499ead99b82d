"""Topological analysis: coordination sequences, graph acceptance, rings."""

from .coordination import (
    coordination_sequence,
    coordination_sequences,
    graph_distances,
    check_graph,
)
from .rings import ring_attributions, rings, canonical_ring
