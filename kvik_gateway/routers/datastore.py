# kvik_gateway/routers/datastore.py
# Raw pass-through to the datastore; status and body are mirrored verbatim.
from __future__ import annotations

import logging

from fastapi import Depends, Request, Response
from fastapi.responses import PlainTextResponse

from ..config import Settings
from ..deps import get_settings, get_upstream
from ..errors import UpstreamUnavailable
from ..proxy import UpstreamClient, abandon_on_disconnect

log = logging.getLogger("kvik.datastore")

PREFIX = "/datastore/"

# nginx's "client closed request"; never reaches the (gone) client.
CLIENT_CLOSED = 499


def upstream_subpath(request: Request, subpath: str) -> str:
    """Sub-path after ``/datastore/``, still percent-encoded, query included."""
    raw = request.scope.get("raw_path")
    path = raw.decode("latin-1").split("?", 1)[0] if raw else request.url.path
    if PREFIX in path:
        path = path.split(PREFIX, 1)[1]
    else:
        path = subpath
    query = request.url.query
    return f"{path}?{query}" if query else path


async def datastore_get(
    subpath: str,
    request: Request,
    settings: Settings = Depends(get_settings),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Response:
    sub = upstream_subpath(request, subpath)
    try:
        result = await abandon_on_disconnect(request, upstream.forward("GET", sub))
    except UpstreamUnavailable as e:
        log.warning("datastore GET /%s unavailable: %s", sub, e.reason)
        return PlainTextResponse(settings.datastore_fallback_body, status_code=404)
    if result is None:
        return Response(status_code=CLIENT_CLOSED)
    return Response(
        content=result.body,
        status_code=result.status,
        media_type=result.content_type or "text/plain",
    )


async def datastore_post(
    subpath: str,
    request: Request,
    upstream: UpstreamClient = Depends(get_upstream),
) -> Response:
    sub = upstream_subpath(request, subpath)
    body = await request.body()
    try:
        result = await abandon_on_disconnect(request, upstream.forward("POST", sub, body))
    except UpstreamUnavailable as e:
        log.warning("datastore POST /%s unavailable: %s", sub, e.reason)
        return Response(status_code=500)
    if result is None:
        return Response(status_code=CLIENT_CLOSED)
    return Response(status_code=200)
