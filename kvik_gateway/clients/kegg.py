# kvik_gateway/clients/kegg.py
"""
KEGG REST reference library
===========================

The gateway treats the gene/pathway library as an external collaborator; this
module is the default implementation, backed by https://rest.kegg.jp.

- ``ReferenceLibrary`` is the interface the aggregator and the pass-through
  handlers need (tests swap in an in-memory fake).
- ``KeggClient`` fetches KEGG flat files with a sync ``httpx.Client``, parses
  them with bioservices' KEGG parser and keeps the raw text under
  ``cache_dir`` (wiped by ``/resetcache/``).
- Lookups are synchronous and possibly slow; FastAPI runs the handlers that
  call them in its thread pool.

Any failure (transport error, non-200, empty or unparsable entry) raises
``ReferenceLookupFailed``.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from typing import Any, Dict, List, Optional, Protocol

import httpx
from bioservices import KEGG
from pydantic import BaseModel, Field

from ..errors import ReferenceLookupFailed

log = logging.getLogger("kvik.kegg")

USER_AGENT = "kvik-gateway/1.0 (+KEGG REST)"

# ------------------------------------------------------------------------------
# Models
# ------------------------------------------------------------------------------

class Pathway(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    classes: List[str] = Field(default_factory=list)
    genes: List[str] = Field(default_factory=list)


class Gene(BaseModel):
    id: str
    names: List[str] = Field(default_factory=list)
    definition: str = ""
    pathways: List[str] = Field(default_factory=list)


class Compound(BaseModel):
    id: str
    names: List[str] = Field(default_factory=list)
    formula: str = ""
    exact_mass: Optional[float] = None
    mol_weight: Optional[float] = None
    pathways: List[str] = Field(default_factory=list)


class ReferenceLibrary(Protocol):
    def get_pathway(self, pathway_id: str) -> Pathway: ...

    def get_gene(self, gene_id: str) -> Gene: ...

    def pathways(self, gene: Gene) -> List[str]: ...

    def get_compound(self, compound_id: str) -> Compound: ...

    def readable_pathway_name(self, pathway_id: str) -> str: ...

    def gene_id_from_name(self, name: str) -> Optional[str]: ...


# ------------------------------------------------------------------------------
# Parsed-entry helpers
# ------------------------------------------------------------------------------
# bioservices returns str, list or dict per field depending on the entry type;
# these flatten whichever shape arrives.

def _lines(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, dict):
        return [f"{k} {v}".strip() for k, v in value.items()]
    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for v in value:
            out.extend(_lines(v))
        return out
    return [ln.strip() for ln in str(value).splitlines() if ln.strip()]


def _text(value: Any) -> str:
    return " ".join(_lines(value))


def _ids(value: Any) -> List[str]:
    """Leading identifiers of a GENE / PATHWAY style field."""
    if isinstance(value, dict):
        return [str(k).strip() for k in value.keys()]
    return [ln.split()[0] for ln in _lines(value)]


def _symbols(value: Any) -> List[str]:
    return [n.strip() for line in _lines(value) for n in re.split(r"[,;]", line) if n.strip()]


def _float_or_none(value: Any) -> Optional[float]:
    try:
        return float(str(value).split()[0])
    except Exception:
        return None


def pathway_from_entry(pathway_id: str, entry: Dict[str, Any], organism: str) -> Pathway:
    return Pathway(
        id=pathway_id,
        name=_text(entry.get("NAME")),
        description=_text(entry.get("DESCRIPTION")),
        classes=[c.strip() for c in _text(entry.get("CLASS")).split(";") if c.strip()],
        genes=[f"{organism}:{gid}" for gid in _ids(entry.get("GENE"))],
    )


def gene_from_entry(gene_id: str, entry: Dict[str, Any]) -> Gene:
    if entry.get("SYMBOL"):
        names = _symbols(entry["SYMBOL"])
        definition = _text(entry.get("NAME"))
    else:
        names = _symbols(entry.get("NAME"))
        definition = _text(entry.get("DEFINITION"))
    return Gene(id=gene_id, names=names, definition=definition, pathways=_ids(entry.get("PATHWAY")))


def compound_from_entry(compound_id: str, entry: Dict[str, Any]) -> Compound:
    # compound names may contain commas; split on line / ';' only
    raw_names = entry.get("NAME")
    names: List[str] = []
    for line in _lines(raw_names):
        names.extend(n.strip() for n in line.split(";") if n.strip())
    return Compound(
        id=compound_id,
        names=names,
        formula=_text(entry.get("FORMULA")),
        exact_mass=_float_or_none(entry.get("EXACT_MASS")),
        mol_weight=_float_or_none(entry.get("MOL_WEIGHT")),
        pathways=_ids(entry.get("PATHWAY")),
    )


def readable_name(name: str) -> str:
    """'Cell cycle - Homo sapiens (human)' -> 'Cell cycle'."""
    return name.split(" - ")[0].strip()


# ------------------------------------------------------------------------------
# Client
# ------------------------------------------------------------------------------

class KeggClient:
    def __init__(
        self,
        base_url: str = "https://rest.kegg.jp",
        *,
        organism: str = "hsa",
        cache_dir: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.organism = organism
        self.cache_dir = cache_dir
        self._kegg = KEGG(verbose=False)
        self._http = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout, connect=4.0),
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    # --------------------------- raw access ----------------------------------

    def _cache_path(self, op: str, arg: str) -> Optional[str]:
        if not self.cache_dir:
            return None
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", f"{op}_{arg}")
        return os.path.join(self.cache_dir, safe)

    def _read_cache(self, path: Optional[str]) -> Optional[str]:
        if not path or not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
        if not text.strip():
            log.warning("ignoring empty cache entry %s", path)
            return None
        return text

    def _write_cache(self, path: str, text: str) -> None:
        # Readers in other threads only ever see a complete file.
        os.makedirs(self.cache_dir, exist_ok=True)  # type: ignore[arg-type]
        fd, tmp = tempfile.mkstemp(dir=self.cache_dir, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def _fetch(self, op: str, arg: str) -> str:
        path = self._cache_path(op, arg)
        cached = self._read_cache(path)
        if cached is not None:
            return cached

        try:
            r = self._http.get(f"/{op}/{arg}")
        except httpx.HTTPError as e:
            log.warning("KEGG %s/%s failed: %s", op, arg, e)
            raise ReferenceLookupFailed(arg, f"KEGG unreachable ({e.__class__.__name__})") from e
        if r.status_code != 200:
            raise ReferenceLookupFailed(arg, f"KEGG returned {r.status_code}")
        text = r.text
        if not text.strip():
            raise ReferenceLookupFailed(arg, "empty KEGG entry")

        if path:
            self._write_cache(path, text)
        return text

    def _entry(self, kegg_id: str) -> Dict[str, Any]:
        text = self._fetch("get", kegg_id)
        try:
            entry = self._kegg.parse(text)
        except Exception as e:
            raise ReferenceLookupFailed(kegg_id, f"unparsable KEGG entry ({e.__class__.__name__})") from e
        if not isinstance(entry, dict):
            raise ReferenceLookupFailed(kegg_id, "unparsable KEGG entry")
        return entry

    # --------------------------- lookups -------------------------------------

    def get_pathway(self, pathway_id: str) -> Pathway:
        return pathway_from_entry(pathway_id, self._entry(pathway_id), self.organism)

    def get_gene(self, gene_id: str) -> Gene:
        full = gene_id if ":" in gene_id else f"{self.organism}:{gene_id}"
        return gene_from_entry(full, self._entry(full))

    def pathways(self, gene: Gene) -> List[str]:
        return list(gene.pathways)

    def get_compound(self, compound_id: str) -> Compound:
        full = compound_id if ":" in compound_id else f"cpd:{compound_id}"
        return compound_from_entry(full, self._entry(full))

    def readable_pathway_name(self, pathway_id: str) -> str:
        return readable_name(self.get_pathway(pathway_id).name)

    def gene_id_from_name(self, name: str) -> Optional[str]:
        # find/ returns tab-separated "<id>\t<symbols>; <description>" lines
        text = self._fetch("find", f"{self.organism}/{name}")
        wanted = name.strip().upper()
        first: Optional[str] = None
        for line in text.strip().splitlines():
            gid, _, desc = line.partition("\t")
            gid = gid.strip()
            if not gid.startswith(f"{self.organism}:"):
                continue
            first = first or gid
            symbols = [s.strip().upper() for s in desc.split(";")[0].split(",")]
            if wanted in symbols:
                return gid
        return first
