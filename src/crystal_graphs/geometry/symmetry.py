"""
Symmetry Expansion
==================

Databases list only symmetry-unique vertex and edge sites. Applying every
symmetry operation and merging coincident images gives the full cell.

Fractional space is the unit 3-torus, so coincidences are found with a
periodic KD-tree (scipy.spatial.cKDTree with boxsize=1).
"""

import numpy as np
from scipy.spatial import cKDTree
from typing import List, Sequence, Tuple

from ..spec.constants import SITE_MERGE_TOL
from ..spec.structures import Lattice, NetRecord, SymmetryOperation, with_identity
from .positions import wrap_fractional


def expand_positions(sites, operations: Sequence[SymmetryOperation],
                     tol: float = SITE_MERGE_TOL,
                     strict: bool = True) -> Tuple[np.ndarray, List[int]]:
    """
    All symmetry images of the given sites in the unit cell.

    Args:
        sites: (m, 3) fractional symmetry-unique positions
        operations: symmetry operations (identity implied if absent)
        tol: fractional distance under which two images are one position
        strict: raise if images of two DIFFERENT sites coincide

    Returns:
        positions: (n, 3) distinct positions in [0, 1)³, site order kept
        owners:    for each position, the index of the site it comes from

    Raises:
        ValueError: (strict) if two different sites share an image
    """
    sites = np.asarray(sites, dtype=float).reshape(-1, 3)
    if len(sites) == 0:
        return np.empty((0, 3)), []
    operations = with_identity(operations)

    images = []
    site_of_image = []
    for s, site in enumerate(sites):
        for op in operations:
            images.append(wrap_fractional(op(site)))
            site_of_image.append(s)
    images = np.array(images)

    tree = cKDTree(images, boxsize=1.0)
    assigned = np.full(len(images), -1, dtype=int)
    positions = []
    owners = []
    for k in range(len(images)):
        if assigned[k] >= 0:
            continue
        idx = len(positions)
        for j in tree.query_ball_point(images[k], tol):
            if assigned[j] >= 0:
                continue
            if strict and site_of_image[j] != site_of_image[k]:
                raise ValueError(f"Sites {site_of_image[k]} and {site_of_image[j]} "
                                 f"have coinciding images near {images[k]}")
            assigned[j] = idx
        positions.append(images[k])
        owners.append(site_of_image[k])

    return np.array(positions), owners


def expand_asymmetric_unit(name: str, lattice: Lattice, vertex_sites, sequences,
                           edge_sites=(), coordination=None, **kwargs) -> NetRecord:
    """
    Build a full-cell NetRecord from symmetry-unique vertex sites.

    Each site's coordination sequence (and declared coordination) is
    copied to all of its images. Edge sites stay symmetry-unique.
    """
    positions, owners = expand_positions(vertex_sites, lattice.symmetry)
    sequences = [tuple(sequences[s]) for s in owners]
    if coordination is not None:
        coordination = [coordination[s] for s in owners]
    return NetRecord(name, lattice, positions, edge_sites, sequences,
                     coordination=coordination, **kwargs)


def expand_edge_sites(record: NetRecord) -> np.ndarray:
    """Edge midpoints of the full cell (coincident midpoints merged)."""
    positions, _ = expand_positions(record.edge_sites, record.lattice.symmetry, strict=False)
    return positions
