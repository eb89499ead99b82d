"""
Pytest Configuration
====================

Automatically loaded by pytest. Puts src/ on sys.path so crystal_graphs
is importable without installation, and tests/core/ so the test
modules can share the reference nets in nets.py.

Usage:
    cd src
    pytest tests/ -v
"""

import sys
from pathlib import Path

src_root = Path(__file__).parent
for path in (src_root, src_root / 'tests' / 'core'):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
