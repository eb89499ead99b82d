"""
Minimum-Image Distances
=======================

Periodic distance between fractional positions under an arbitrary,
possibly skewed, lattice.

FOLDING:
    delta → delta - rint(delta), every coordinate in [-0.5, 0.5].
    rint rounds half to even, so folding is ODD: fold(-d) = -fold(d).
    Consequences:
        - d(u→v) == d(v→u) exactly
        - the tie sets seen from the two ends of a bond are mirror images,
          so bonds requested from both ends agree

CERTIFIED RADIUS (safemin):
    Half of the smallest distance between opposite faces of the cell.
    A folded vector no longer than safemin IS the minimum image.

BEYOND safemin:
    Probe the 6 axis-adjacent translates (±1 along a, b, c) and keep
    the best. This is a bounded heuristic, NOT a shell search: very
    skewed cells can hide the true minimum image. Downstream
    coordination-sequence validation catches the consequences.
"""

import numpy as np
from typing import List, Tuple

from ..spec.constants import ORTHO_RTOL, BOUNDARY_RTOL
from ..spec.structures import Lattice, Offset, as_offset


AXIS_PROBES = np.array([
    [1, 0, 0], [-1, 0, 0],
    [0, 1, 0], [0, -1, 0],
    [0, 0, 1], [0, 0, -1],
], dtype=float)


def prepare_periodic_distance_computations(lattice: Lattice) -> Tuple[bool, float]:
    """
    Return (orthogonal, safemin) for a lattice.

    orthogonal: all three cell angles within ORTHO_RTOL of 90°
    safemin:    half of the smallest spacing between opposite cell faces
    """
    _, angles = lattice.cell_parameters()
    orthogonal = all(abs(x - 90.0) <= ORTHO_RTOL * 90.0 for x in angles)

    va, vb, vc = lattice.matrix.T
    volume = lattice.volume
    spacings = (
        volume / np.linalg.norm(np.cross(vb, vc)),
        volume / np.linalg.norm(np.cross(vc, va)),
        volume / np.linalg.norm(np.cross(va, vb)),
    )
    return orthogonal, float(min(spacings)) / 2


def fold(delta) -> Tuple[np.ndarray, np.ndarray]:
    """
    Fold a fractional displacement into [-0.5, 0.5]³.

    Returns:
        (folded, shift) with folded = delta + shift, shift integer-valued
    """
    delta = np.asarray(delta, dtype=float)
    shift = -np.rint(delta)
    return delta + shift, shift


def periodic_distance(delta, lattice: Lattice, orthogonal: bool = None,
                      safemin: float = None) -> float:
    """
    Minimum-image length of a fractional displacement.

    Args:
        delta: fractional displacement (3,)
        lattice: Lattice
        orthogonal, safemin: from prepare_periodic_distance_computations
            (computed when omitted)

    Returns:
        Cartesian length of the shortest image found
    """
    if orthogonal is None or safemin is None:
        orthogonal, safemin = prepare_periodic_distance_computations(lattice)

    folded, _ = fold(delta)
    mat = lattice.matrix
    ref = float(np.linalg.norm(mat @ folded))
    if orthogonal or ref <= safemin:
        return ref

    probes = (folded + AXIS_PROBES) @ mat.T
    return float(min(ref, np.linalg.norm(probes, axis=1).min()))


def periodic_neighbor(delta, lattice: Lattice, orthogonal: bool, safemin: float,
                      tol: float) -> Tuple[List[Offset], float]:
    """
    All near-minimal images of a fractional displacement.

    Same search as periodic_distance, but every offset o whose image
    |delta + o| lies within tol of the shortest one is returned, since
    symmetric nets often have several equally short periodic bonds.

    Orthogonal cells only probe the axes where the folded coordinate
    sits on the ±0.5 boundary (no other axis can produce a tie).

    Returns:
        (offsets, distance): offsets as integer 3-tuples, never empty;
                             distance is the shortest length found
    """
    folded, shift = fold(delta)
    mat = lattice.matrix
    ref = float(np.linalg.norm(mat @ folded))
    if ref <= safemin:
        return [as_offset(shift)], ref

    if orthogonal:
        probes = [AXIS_PROBES[2 * i + k]
                  for i in range(3)
                  if abs(abs(folded[i]) - 0.5) <= BOUNDARY_RTOL * 0.5
                  for k in range(2)]
    else:
        probes = list(AXIS_PROBES)

    candidates = [shift] + [shift + p for p in probes]
    norms = [ref] + [float(np.linalg.norm(mat @ (folded + p))) for p in probes]
    best = min(norms)

    offsets = [as_offset(c) for c, d in zip(candidates, norms) if d <= best + tol]
    return offsets, best
