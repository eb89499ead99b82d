"""
Batch Extraction
================

Reconstruct the graphs of a whole database in parallel.

FLOW:
    1. records dealt round-robin into one chunk per worker
    2. each worker runs determine_graph on its chunk and returns its own
       (graphs, failed, errored) lists; nothing is shared while running
    3. lists merged after the pool drains, in record order
    4. every failed X whose augmentation X-a succeeded is deaugmented
       and accepted when it reproduces X's coordination sequences
    5. with a reference archive and only_new, nets already present in
       the reference are dropped (after comparison)

A net raising an exception is recorded in `errored` with its message;
it never stops the batch.
"""

import json
import logging
import os
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..analysis.coordination import check_graph
from ..builders.deaugment import deaugment
from ..builders.reconstruct import determine_graph
from ..spec.constants import AUGMENTED_SUFFIX
from ..spec.structures import NetRecord, PeriodicGraph
from .archive import compare_with_reference

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    graphs: Dict[str, PeriodicGraph] = field(default_factory=dict)
    strategies: Dict[str, str] = field(default_factory=dict)
    failed: List[str] = field(default_factory=list)
    errored: Dict[str, str] = field(default_factory=dict)
    symmetry_issues: List[Tuple[str, str, int]] = field(default_factory=list)
    mismatches: List[str] = field(default_factory=list)

    def summary(self) -> str:
        return (f"{len(self.graphs)} graphs, {len(self.failed)} failed, "
                f"{len(self.errored)} errored, {len(self.symmetry_issues)} symmetry issues")


def _process_chunk(records: Sequence[NetRecord]):
    """Worker body: reconstruct every record of one chunk."""
    found = []
    failed = []
    errored = []
    for record in records:
        try:
            result = determine_graph(record)
        except Exception as e:
            errored.append((record.name, f"{type(e).__name__}: {e}"))
            continue
        if result is None:
            failed.append(record.name)
        else:
            strategy, graph = result
            found.append((record.name, strategy, graph))
    return found, failed, errored


def extract_graphs(records: Sequence[NetRecord],
                   reference: Optional[Mapping[str, str]] = None,
                   only_new: bool = True,
                   max_workers: Optional[int] = None,
                   use_processes: bool = True) -> ExtractionResult:
    """
    Reconstruct the periodic graph of every record.

    Args:
        records: NetRecords (full-cell vertex positions)
        reference: {name: graph string} of already known nets (read-only)
        only_new: drop nets present in the reference from the result
        max_workers: pool size (default os.cpu_count())
        use_processes: ProcessPoolExecutor if True, ThreadPoolExecutor otherwise

    Returns:
        ExtractionResult
    """
    records = list(records)
    result = ExtractionResult()
    result.symmetry_issues = [(r.name, *r.symmetry_issue) for r in records
                              if r.symmetry_issue is not None]
    if not records:
        return result

    n_workers = max(1, min(max_workers or os.cpu_count() or 1, len(records)))
    chunks = [records[k::n_workers] for k in range(n_workers)]
    logger.info("Reconstructing %d nets with %d %s", len(records), n_workers,
                "processes" if use_processes else "threads")

    executor_cls = ProcessPoolExecutor if use_processes else ThreadPoolExecutor
    found: Dict[str, Tuple[str, PeriodicGraph]] = {}
    failed = set()
    errored: Dict[str, str] = {}
    with executor_cls(max_workers=n_workers) as executor:
        futures = [executor.submit(_process_chunk, chunk) for chunk in chunks]
        for future in as_completed(futures):
            chunk_found, chunk_failed, chunk_errored = future.result()
            for name, strategy, graph in chunk_found:
                found[name] = (strategy, graph)
            failed.update(chunk_failed)
            errored.update(chunk_errored)

    for record in records:
        name = record.name
        if name in found:
            strategy, graph = found[name]
            result.graphs[name] = graph
            result.strategies[name] = strategy
        elif name in errored:
            logger.warning("%s errored: %s", name, errored[name])
            result.errored[name] = errored[name]
        elif name in failed:
            result.failed.append(name)

    _deaugment_failed(records, result)

    if reference is not None:
        new, result.mismatches = compare_with_reference(result.graphs, reference)
        if only_new:
            for name in list(result.graphs):
                if name not in new:
                    del result.graphs[name]
                    del result.strategies[name]

    logger.info("Extraction done: %s", result.summary())
    return result


def _deaugment_failed(records: Sequence[NetRecord], result: ExtractionResult) -> None:
    """Recover failed nets X from the graph found for X-a."""
    by_name = {r.name: r for r in records}
    still_failed = []
    for name in result.failed:
        augmented = result.graphs.get(name + AUGMENTED_SUFFIX)
        if augmented is not None:
            graph = deaugment(augmented)
            if check_graph(graph, by_name[name].sequences):
                logger.info("%s recovered from %s", name, name + AUGMENTED_SUFFIX)
                result.graphs[name] = graph
                result.strategies[name] = "deaugment"
                continue
        still_failed.append(name)
    result.failed = still_failed


# =============================================================================
# JSON interchange
# =============================================================================

def load_records(path) -> List[NetRecord]:
    """Read a JSON list of NetRecord dictionaries (see NetRecord.to_dict)."""
    with open(path) as f:
        data = json.load(f)
    return [NetRecord.from_dict(d) for d in data]


def dump_records(records: Sequence[NetRecord], path) -> None:
    with open(path, 'w') as f:
        json.dump([r.to_dict() for r in records], f, indent=1)


def load_reference(path) -> Dict[str, str]:
    """Read a JSON object {name: graph string}."""
    with open(path) as f:
        return dict(json.load(f))


def dump_graphs(graphs: Mapping[str, PeriodicGraph], path) -> None:
    """Write {name: graph string}, names sorted."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump({name: str(graphs[name]) for name in sorted(graphs)}, f, indent=1)
