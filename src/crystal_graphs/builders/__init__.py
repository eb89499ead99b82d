"""Graph builders: reconstruction from positions, deaugmentation."""

from .reconstruct import (
    ReconstructionContext,
    STRATEGIES,
    determine_graph,
    edge_candidates,
    progressions,
    strategy_name,
    try_from_closest,
    try_from_edge_orbits,
    try_from_edge_progression,
)
from .deaugment import deaugment, find_clusters
