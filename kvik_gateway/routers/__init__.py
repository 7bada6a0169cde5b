"""HTTP surface of the gateway.

``ROUTES`` is the single, ordered routing table. FastAPI matches routes in
registration order, so more specific paths come before generic ones
(``/info/gene/{genes}/commonpathways`` before ``/info/{items}/{info_type}``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from fastapi import APIRouter, Depends

from ..config import Settings
from ..deps import get_settings
from . import datastore, info, public


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    endpoint: Callable[..., Any]
    tags: Optional[List[str]] = None


async def healthz(settings: Settings = Depends(get_settings)) -> dict:
    return {"ok": True, "version": settings.app_version, "datastore": settings.datastore_url}


ROUTES: List[Route] = [
    Route("GET", "/healthz", healthz, ["Health"]),
    Route("GET", "/datastore/{subpath:path}", datastore.datastore_get, ["Datastore"]),
    Route("POST", "/datastore/{subpath:path}", datastore.datastore_post, ["Datastore"]),
    Route("GET", "/info/gene/{genes}/commonpathways", info.common_pathways, ["Info"]),
    Route("GET", "/info/gene/{gene}/pathways", info.gene_pathways, ["Info"]),
    Route("GET", "/info/pathway/{pathways}/commongenes", info.common_genes, ["Info"]),
    Route("GET", "/info/pathway/{pathway_id}/name", info.pathway_name, ["Info"]),
    Route("GET", "/info/{items}/{info_type}", info.info, ["Info"]),
    Route("GET", "/geneid/{name}", info.gene_id, ["Info"]),
    Route("GET", "/public/{filepath:path}", public.public_file, ["Public"]),
    Route("GET", "/resetcache/", public.reset_cache, ["Maintenance"]),
]


def build_router(routes: List[Route] = ROUTES) -> APIRouter:
    router = APIRouter()
    for r in routes:
        router.add_api_route(r.path, r.endpoint, methods=[r.method], tags=r.tags)
    return router
