# kvik_gateway/aggregate.py
"""Set-based aggregations over gene/pathway membership.

Both functions are pure apart from the reference-library lookups they
delegate to; the count mappings live only for the duration of one call and
every entry is >= 1.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from .clients.kegg import ReferenceLibrary
from .ids import strip_gene_prefix

log = logging.getLogger("kvik.aggregate")


def _unique(ids: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for i in ids:
        seen.setdefault(i, None)
    return list(seen)


def common_gene_count(library: ReferenceLibrary, pathway_ids: Iterable[str]) -> int:
    """Number of distinct genes shared by at least two of the given pathways.

    Each pathway's gene list is trusted as-is: a gene listed twice in one
    pathway counts twice.
    """
    pathways = _unique(pathway_ids)
    if len(pathways) < 2:
        return 0

    gene_counts: Dict[str, int] = {}
    for pid in pathways:
        for gene in library.get_pathway(pid).genes:
            gene_counts[gene] = gene_counts.get(gene, 0) + 1

    shared = sum(1 for n in gene_counts.values() if n > 1)
    log.debug("commongenes %s -> %d of %d genes", pathways, shared, len(gene_counts))
    return shared


def pathway_frequency(library: ReferenceLibrary, gene_ids: Sequence[str]) -> Dict[str, int]:
    """Pathway ID -> number of input genes whose membership list contains it."""
    # Validate every ID before the first (slow) lookup.
    suffixes = [strip_gene_prefix(g) for g in gene_ids]

    pathway_counts: Dict[str, int] = {}
    for suffix in suffixes:
        gene = library.get_gene(suffix)
        for pid in _unique(library.pathways(gene)):
            pathway_counts[pid] = pathway_counts.get(pid, 0) + 1

    log.debug("commonpathways %d genes -> %d pathways", len(suffixes), len(pathway_counts))
    return pathway_counts
