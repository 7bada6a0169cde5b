from __future__ import annotations

import re
from typing import List

from .errors import MalformedIdentifier

# Path segments arrive URL-decoded; '+' is the form-encoding of a space.
_SEP_RE = re.compile(r"[\s+]+")


def split_id_list(raw: str) -> List[str]:
    """Split a path-embedded, space-separated ID list, dropping empty tokens."""
    if not raw:
        return []
    return [tok for tok in _SEP_RE.split(raw.strip()) if tok]


def strip_gene_prefix(gene_id: str) -> str:
    """'hsa:1234' -> '1234'. No default is guessed for malformed input."""
    if not isinstance(gene_id, str) or ":" not in gene_id:
        raise MalformedIdentifier(str(gene_id))
    prefix, _, suffix = gene_id.partition(":")
    if not prefix or not suffix:
        raise MalformedIdentifier(gene_id)
    return suffix


def is_gene_id(value: str, organism: str) -> bool:
    return value.lower().startswith(f"{organism}:")


def is_pathway_id(value: str, organism: str) -> bool:
    v = value.lower()
    return v.startswith(organism) and not v.startswith(f"{organism}:")


def is_compound_id(value: str) -> bool:
    return value.lower().startswith("cpd")
