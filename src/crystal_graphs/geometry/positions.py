"""
Fractional Position Rounding and Vertex Lookup
==============================================

Vertex identity is decided by rounding fractional coordinates:

    1. choose_precision: smallest number of decimals (1..MAX_ROUND_DIGITS)
       at which all vertices are distinct, plus one digit of margin
    2. precise_round: rounding that keeps exact halves of the last digit
       (0.125 stays 0.125 at 2 digits) and never returns 1.0
    3. VertexTable: fractional position → vertex id, used to identify the
       endpoints of symmetry images and of reflected edge candidates
"""

import numpy as np
from typing import Dict, Optional, Tuple

from ..spec.constants import EPS_CLOSE, MAX_ROUND_DIGITS
from ..spec.structures import PeriodicVertex, as_offset


def wrap_fractional(frac) -> np.ndarray:
    """Wrap fractional coordinates to [0, 1), snapping rounding noise to 0."""
    frac = np.asarray(frac, dtype=float)
    wrapped = frac - np.floor(frac)
    # x - floor(x) can land on 1.0 for tiny negative x
    snap = (np.abs(wrapped) < EPS_CLOSE) | (np.abs(wrapped - 1.0) < EPS_CLOSE)
    return np.where(snap, 0.0, wrapped)


def precise_round(x, digits: int):
    """
    Round to `digits` decimals, keeping exact halves of the last digit.

    With one extra digit y = floor(x·10^(digits+1)):
        last extra digit 5 → value kept at the half (0.125 → 0.125)
        otherwise          → nearest value on the 10^-digits grid
    A result of exactly 1.0 is retried with one more digit, so positions
    just below 1 never collide with positions at 0.
    """
    arr = np.asarray(x, dtype=float)
    u = 10.0 ** (digits + 1)
    y = np.floor(u * arr)
    r = np.fmod(y + 5, 10)
    ret = (y - r + np.where(r == 0, 0, 5)) / u

    ones = ret == 1.0
    if np.any(ones) and digits < 15:
        ret = np.where(ones, precise_round(np.where(ones, arr, 0.0), digits + 1), ret)

    if np.ndim(ret) == 0:
        return float(ret)
    return ret


def choose_precision(positions, max_digits: int = MAX_ROUND_DIGITS) -> int:
    """
    Number of decimals used to identify vertices.

    One more than the smallest rounding at which all positions are
    distinct; max_digits + 1 when none is.
    """
    positions = np.asarray(positions, dtype=float).reshape(-1, 3)
    n = len(positions)
    for digits in range(1, max_digits + 1):
        rounded = wrap_fractional(np.round(positions, digits))
        if len({tuple(p) for p in rounded}) == n:
            return digits + 1
    return max_digits + 1


def _key(frac) -> Tuple[float, float, float]:
    return tuple(float(x) for x in frac)


class VertexTable:
    """
    Lookup of vertex ids from fractional positions.

    Keys are the vertex positions rounded with precise_round(·, digits).
    A query first tries plain rounding to `digits` decimals, then
    precise_round, matching both conventions.

    Raises:
        ValueError: if two vertices share a key (positions not unique)
    """

    def __init__(self, positions, digits: int):
        self.digits = digits
        self.positions = np.asarray(precise_round(wrap_fractional(positions), digits),
                                     dtype=float).reshape(-1, 3)
        self._index: Dict[Tuple[float, float, float], int] = {}
        for i, p in enumerate(self.positions):
            key = _key(p)
            if key in self._index:
                raise ValueError(f"Vertices {self._index[key]} and {i} coincide at {key} "
                                 f"after rounding to {digits} digits")
            self._index[key] = i

    def __len__(self) -> int:
        return len(self._index)

    def find(self, frac) -> Optional[int]:
        """Vertex id at a fractional position already in [0, 1), or None."""
        rounded = wrap_fractional(np.round(np.asarray(frac, dtype=float), self.digits))
        v = self._index.get(_key(rounded))
        if v is None:
            v = self._index.get(_key(np.atleast_1d(precise_round(frac, self.digits))))
        return v

    def locate(self, pos) -> Optional[PeriodicVertex]:
        """
        Periodic vertex at an absolute fractional position, or None.

        The offset is the cell containing pos; a coordinate that rounds
        up to 1.0 carries into the next cell.
        """
        pos = np.asarray(pos, dtype=float)
        ofs = np.floor(pos)
        frac = pos - ofs
        rounded = np.round(frac, self.digits)
        carry = rounded >= 1.0
        rounded = np.where(carry, 0.0, rounded)

        v = self._index.get(_key(rounded))
        if v is not None:
            return PeriodicVertex(v, as_offset(ofs + carry))
        v = self._index.get(_key(np.atleast_1d(precise_round(frac, self.digits))))
        if v is not None:
            return PeriodicVertex(v, as_offset(ofs))
        return None
