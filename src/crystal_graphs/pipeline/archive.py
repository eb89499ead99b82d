"""
Reference Archive
=================

A reference archive maps net names to canonical graph strings
(str(PeriodicGraph)). It is read-only and always passed explicitly.

Keys may list aliases separated by commas ("dia,diamond"); the first
alias is the net name.

Comparison first tries canonical strings. When they differ, a
labelling-invariant fingerprint (vertex count, edge count, sorted
coordination sequences) decides, so a renumbering of the vertices or a
vertex written in another cell is not a mismatch. Mismatches are
advisory (warnings.warn), never errors.
"""

import warnings
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from ..analysis.coordination import check_graph, coordination_sequences
from ..builders.deaugment import deaugment
from ..spec.constants import AUGMENTED_SUFFIX
from ..spec.structures import NetRecord, PeriodicGraph


def primary_name(key: str) -> str:
    return key.split(',')[0].strip()


def fingerprint(graph: PeriodicGraph):
    """Invariant under vertex renumbering and per-vertex cell shifts."""
    return graph.n_vertices, graph.n_edges, sorted(coordination_sequences(graph))


def normalize_reference(reference: Mapping[str, str]) -> Dict[str, str]:
    """{net name: canonical graph string}, aliases dropped."""
    normalized = {}
    for key, text in reference.items():
        normalized[primary_name(key)] = str(PeriodicGraph.from_string(text))
    return normalized


def compare_with_reference(graphs: Mapping[str, PeriodicGraph],
                           reference: Mapping[str, str]) -> Tuple[Dict[str, PeriodicGraph], List[str]]:
    """
    Split reconstructed graphs into new nets and disagreements.

    Args:
        graphs: {name: reconstructed graph}
        reference: {name (with aliases): graph string}

    Returns:
        new:        graphs whose name is absent from the reference
        mismatches: names present in the reference with a different net
    """
    known = normalize_reference(reference)
    new = {}
    mismatches = []
    for name, graph in graphs.items():
        expected = known.get(name)
        if expected is None:
            new[name] = graph
            continue
        found = str(graph)
        if found == expected:
            continue
        if fingerprint(graph) != fingerprint(PeriodicGraph.from_string(expected)):
            warnings.warn(f"Found another graph for {name}: {expected!r}, {found!r}")
            mismatches.append(name)
    return new, mismatches


def find_deaugmentable(reference: Mapping[str, str],
                       records: Union[Mapping[str, NetRecord], Iterable[NetRecord]]) -> Dict[str, PeriodicGraph]:
    """
    Recover base nets missing from the reference through their augmentation.

    For every reference entry "X-a" whose base X is not itself in the
    reference, deaugment the X-a graph and keep it when it reproduces
    the coordination sequences of record X.

    Returns:
        {X: deaugmented graph}
    """
    if not isinstance(records, Mapping):
        records = {r.name: r for r in records}
    known = normalize_reference(reference)

    found = {}
    for name, text in known.items():
        if not name.endswith(AUGMENTED_SUFFIX):
            continue
        base = name[:-len(AUGMENTED_SUFFIX)]
        if base in known:
            continue
        record = records.get(base)
        if record is None:
            warnings.warn(f"Could not find {base}")
            continue
        graph = deaugment(PeriodicGraph.from_string(text))
        if check_graph(graph, record.sequences):
            found[base] = graph
    return found
