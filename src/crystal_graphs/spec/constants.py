"""
Global constants for crystal_graphs
===================================

All tolerances, caps and magic numbers in ONE place.
Functions take these as keyword defaults, so a caller can override
any of them per call without touching this module.
"""

# Numerical tolerances
EPS_CLOSE = 1e-10      # For "are these equal?" (integer-derived geometry)

# Lattice classification
ORTHO_RTOL = 0.02      # all three angles within 2% of 90° → orthogonal cell
BOUNDARY_RTOL = 0.01   # folded coordinate within 1% of ±0.5 → image may tie

# Minimum-image search
SAFEMIN_FACTOR = 6 / 7     # shrink certified radius before neighbor searches
IMAGE_TIE_RTOL = 1e-5      # image tie tolerance, relative to volume^(1/3)
# The 6-probe fallback beyond safemin is a bounded heuristic on purpose.
# Highly skewed cells may hide the true minimum image; check_graph is the gate.

# Position rounding (vertex lookup table)
MAX_ROUND_DIGITS = 8   # give up looking for a unique rounding beyond this
EDGE_TOL_FACTOR = 3    # seed-edge tolerance = 3·10^-p × longest cell edge
SITE_MERGE_TOL = 1e-4   # fractional distance under which symmetry images are one site

# Edge inference
EDGE_CANDIDATES = 6        # candidate vertex images per edge midpoint
PROGRESSION_CAP = 8192     # trial graphs before progressive assignment gives up

# Topological fingerprint
CS_DEPTH = 10          # coordination sequence shells compared against targets

# Rings: lengths 3 .. 2*RING_DEPTH + 3
RING_DEPTH = 2

# Records whose first coordination-sequence term legitimately differs from
# the declared vertex coordination in the reference database
KNOWN_IRREGULAR_SEQUENCES = frozenset({"xxv", "rpa", "qyc", "ecz", "ocf", "szp"})

# Suffix marking an augmented net ("X-a" is the augmentation of "X")
AUGMENTED_SUFFIX = "-a"
