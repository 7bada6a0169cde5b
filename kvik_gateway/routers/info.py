# kvik_gateway/routers/info.py
"""
Gene / pathway endpoints
========================

Aggregations (``commongenes``, ``commonpathways``) plus thin pass-through
lookups against the reference library. Handlers are plain ``def`` so FastAPI
runs the (blocking) library calls in its thread pool.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse

from ..aggregate import common_gene_count, pathway_frequency
from ..clients.kegg import ReferenceLibrary
from ..config import Settings
from ..deps import get_library, get_settings
from ..ids import is_compound_id, is_gene_id, is_pathway_id, split_id_list, strip_gene_prefix

log = logging.getLogger("kvik.info")


def common_genes(pathways: str, library: ReferenceLibrary = Depends(get_library)) -> int:
    return common_gene_count(library, split_id_list(pathways))


def common_pathways(genes: str, library: ReferenceLibrary = Depends(get_library)) -> Dict[str, int]:
    return pathway_frequency(library, split_id_list(genes))


def gene_pathways(gene: str, library: ReferenceLibrary = Depends(get_library)) -> Dict[str, Any]:
    ids = split_id_list(gene)
    if not ids:
        raise HTTPException(status_code=400, detail="Invalid gene: value must be a non-empty string")
    g = library.get_gene(strip_gene_prefix(ids[0]))
    return {"gene": g.id, "pathways": library.pathways(g)}


def pathway_name(pathway_id: str, library: ReferenceLibrary = Depends(get_library)) -> PlainTextResponse:
    return PlainTextResponse(library.readable_pathway_name(pathway_id.strip()))


def info(
    items: str,
    info_type: str,
    settings: Settings = Depends(get_settings),
    library: ReferenceLibrary = Depends(get_library),
):
    # info_type is accepted but not interpreted yet
    ids = split_id_list(items)
    first = ids[0] if ids else ""
    org = settings.kegg_organism

    if is_gene_id(first, org):
        return JSONResponse(library.get_gene(strip_gene_prefix(first)).model_dump())
    if is_pathway_id(first, org):
        return JSONResponse(library.get_pathway(first).model_dump())
    if is_compound_id(first):
        return JSONResponse(library.get_compound(first).model_dump())
    return PlainTextResponse(items)


def gene_id(name: str, library: ReferenceLibrary = Depends(get_library)) -> PlainTextResponse:
    gid = library.gene_id_from_name(name.strip())
    if not gid:
        raise HTTPException(status_code=404, detail=f"No gene id found for '{name}'")
    log.info("gene name %s -> %s", name, gid)
    return PlainTextResponse(gid)
