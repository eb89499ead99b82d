"""Pytest fixtures shared by the core tests (nets defined in nets.py)."""

import pytest

from crystal_graphs.spec import NetRecord
from nets import CYCLIC, DIA_CS, PCU_CS, cubic, dia, pcu


@pytest.fixture
def pcu_graph():
    return pcu()


@pytest.fixture
def dia_graph():
    return dia()


@pytest.fixture
def pcu_record():
    """Single vertex at the origin, one unique edge midpoint, cyclic axis permutations."""
    return NetRecord("pcu", cubic(operations=CYCLIC), [[0, 0, 0]], [[0.5, 0, 0]], [PCU_CS],
                     coordination=[6])


@pytest.fixture
def dia_record():
    """Strategies A and B can both rebuild this one (all 4 midpoints given, no symmetry)."""
    return NetRecord("dia", cubic(), [[0, 0, 0], [0.5, 0.5, 0.5]],
                     [[0.25, 0.25, 0.25], [0.75, 0.25, 0.25],
                      [0.25, 0.75, 0.25], [0.25, 0.25, 0.75]],
                     [DIA_CS, DIA_CS], coordination=[4, 4])
