"""
crystal_graphs
==============

Reconstruction of the periodic graphs of 3-periodic crystal nets from
vertex and edge-midpoint positions, validated by coordination sequences.

Subpackages:
    spec      - constants and the shared data model
    geometry  - minimum-image distances, neighbor search, symmetry expansion
    analysis  - coordination sequences, graph acceptance, rings
    builders  - reconstruction strategies, deaugmentation
    pipeline  - batch extraction, reference archive comparison
"""

__version__ = "0.1.0"
