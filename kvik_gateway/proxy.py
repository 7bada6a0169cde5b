# kvik_gateway/proxy.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Optional, TypeVar

import httpx
from fastapi import Request

from .errors import UpstreamUnavailable

log = logging.getLogger("kvik.proxy")

T = TypeVar("T")

DISCONNECT_POLL_SECONDS = 0.25


@dataclass(frozen=True)
class ProxyResult:
    status: int
    body: bytes
    content_type: Optional[str] = None


def join_url(base: str, path: str) -> str:
    """Base with exactly one trailing slash, then ``path`` verbatim.

    Extra leading slashes in ``path`` are part of the datastore sub-path and
    are kept: `/datastore//x` reaches `<base>//x`.
    """
    if not base:
        return path
    return base.rstrip("/") + "/" + path


class UpstreamClient:
    """Single-shot forwarding of datastore calls.

    No retries: a failed attempt is reported immediately as UpstreamUnavailable.
    The body is read until the connection signals end-of-stream, so a missing
    or negative Content-Length never truncates the payload.
    """

    def __init__(
        self,
        base_url: str,
        http: httpx.AsyncClient,
        timeout: Optional[httpx.Timeout] = None,
        total_timeout: Optional[float] = None,
    ):
        self.base_url = base_url
        self.http = http
        self.timeout = timeout
        # httpx timeouts are per operation; this caps the whole exchange.
        self.total_timeout = total_timeout

    async def forward(self, method: str, path: str, body: Optional[bytes] = None) -> ProxyResult:
        method = method.upper()
        if method not in ("GET", "POST"):
            raise ValueError(f"unsupported datastore method: {method}")
        url = join_url(self.base_url, path)
        kwargs = {}
        if method == "POST":
            kwargs["content"] = body or b""
            kwargs["headers"] = {"Content-Type": "text/plain"}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        try:
            result = await asyncio.wait_for(self._exchange(method, url, kwargs), self.total_timeout)
        except asyncio.TimeoutError as e:
            log.warning("%s %s exceeded %.1fs", method, url, self.total_timeout)
            raise UpstreamUnavailable(url, f"no complete response within {self.total_timeout}s") from e
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, url, e.__class__.__name__)
            raise UpstreamUnavailable(url, f"{e.__class__.__name__}: {e}") from e
        log.debug("%s %s -> %s (%d bytes)", method, url, result.status, len(result.body))
        return result

    async def _exchange(self, method: str, url: str, kwargs: dict) -> ProxyResult:
        async with self.http.stream(method, url, **kwargs) as r:
            chunks = [chunk async for chunk in r.aiter_bytes()]
            return ProxyResult(
                status=r.status_code,
                body=b"".join(chunks),
                content_type=r.headers.get("content-type"),
            )


async def abandon_on_disconnect(request: Request, call: Awaitable[T]) -> Optional[T]:
    """Await ``call`` but cancel it if the inbound client goes away.

    Returns None when the client disconnected first.
    """
    task = asyncio.ensure_future(call)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                log.info("client went away on %s; abandoning upstream call", request.url.path)
                task.cancel()
                return None
    except asyncio.CancelledError:
        task.cancel()
        raise
