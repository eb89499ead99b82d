"""
Candidate Neighbor Search
=========================

Bounded nearest-image search of a point among a set of fractional
positions, built on periodic_neighbor.

TIE POLICY (shared by all edge-inference strategies):
    - every image within the tie tolerance of an entry's minimum is a
      candidate, all reported at that minimum distance
    - only the `maxsize` closest candidates are kept (partial selection)
    - with a finite tolerance, candidates farther than tol from the
      closest kept one are dropped
"""

import numpy as np
from typing import List, Tuple

from ..spec.constants import SAFEMIN_FACTOR, IMAGE_TIE_RTOL
from ..spec.structures import Lattice, Offset, neg_offset
from .distance import prepare_periodic_distance_computations, periodic_neighbor


def closest_positions(point, lattice: Lattice, positions, tol: float,
                      maxsize: int) -> Tuple[List[int], np.ndarray, List[Offset]]:
    """
    Closest periodic images of `positions` around `point`.

    Args:
        point: fractional position (3,)
        lattice: Lattice
        positions: (n, 3) fractional positions
        tol: tie tolerance on distances (np.inf: keep exactly maxsize)
        maxsize: maximum number of candidates returned

    Returns:
        ids:     index into positions of each candidate
        dists:   Cartesian distance of each candidate, ascending
        offsets: lattice translation of each candidate; the candidate
                 image sits at positions[id] + offset
    """
    orthogonal, safemin = prepare_periodic_distance_computations(lattice)
    safemin = SAFEMIN_FACTOR * safemin
    image_tol = tol if np.isfinite(tol) else IMAGE_TIE_RTOL * lattice.volume ** (1 / 3)

    point = np.asarray(point, dtype=float)
    ids: List[int] = []
    dists: List[float] = []
    offsets: List[Offset] = []
    for i, y in enumerate(np.asarray(positions, dtype=float).reshape(-1, 3)):
        # periodic_neighbor offsets move point - y, i.e. move y the other way
        ofss, ref = periodic_neighbor(point - y, lattice, orthogonal, safemin, image_tol)
        for ofs in ofss:
            ids.append(i)
            dists.append(ref)
            offsets.append(neg_offset(ofs))

    dists = np.asarray(dists, dtype=float)
    size = min(maxsize, len(dists))
    if size <= 0:
        return [], np.empty(0), []

    if size == len(dists):
        candidates = np.arange(len(dists))
    else:
        candidates = np.argpartition(dists, size - 1)[:size]
    order = candidates[np.lexsort((candidates, dists[candidates]))]

    if np.isfinite(tol):
        cutoff = dists[order[0]] + tol
        order = order[dists[order] <= cutoff]

    return [ids[k] for k in order], dists[order], [offsets[k] for k in order]
