from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

log = logging.getLogger("kvik.main")


class AllowOriginMiddleware(BaseHTTPMiddleware):
    """Stamp ``Access-Control-Allow-Origin`` on every response.

    CORSMiddleware only answers when the request carries an Origin header; the
    visualisation front-end also loads these endpoints without one. Unhandled
    errors are turned into a plain 500 here so they carry the header as well.
    """

    def __init__(self, app, allow_origin: str = "*"):
        super().__init__(app)
        self.allow_origin = allow_origin

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception:
            log.exception("unhandled error on %s %s", request.method, request.url.path)
            response = PlainTextResponse("Internal Server Error", status_code=500)
        response.headers["Access-Control-Allow-Origin"] = self.allow_origin
        return response
