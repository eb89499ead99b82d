"""Batch extraction over a database and comparison with a reference archive."""

from .archive import (
    primary_name,
    fingerprint,
    normalize_reference,
    compare_with_reference,
    find_deaugmentable,
)
from .batch import (
    ExtractionResult,
    extract_graphs,
    load_records,
    dump_records,
    load_reference,
    dump_graphs,
)
