# kvik_gateway/errors.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = logging.getLogger("kvik.errors")


class GatewayError(Exception):
    """Base class for gateway failures that map onto a client response."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamUnavailable(GatewayError):
    """Transport failure talking to the datastore (connect, read, timeout)."""
    status_code = 502

    def __init__(self, url: str, reason: str):
        super().__init__(f"datastore request to {url} failed: {reason}")
        self.url = url
        self.reason = reason


class MalformedIdentifier(GatewayError):
    """Caller-supplied identifier is missing its namespace separator."""
    status_code = 400

    def __init__(self, identifier: str, expected: str = "<namespace>:<id>"):
        super().__init__(f"Malformed identifier '{identifier}': expected {expected}")
        self.identifier = identifier


class ReferenceLookupFailed(GatewayError):
    """The reference library could not resolve an identifier."""
    status_code = 404

    def __init__(self, identifier: str, reason: str = "not found"):
        super().__init__(f"Reference lookup failed for '{identifier}': {reason}")
        self.identifier = identifier
        self.reason = reason


async def _gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    log.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def install_error_handlers(app: FastAPI) -> None:
    # UpstreamUnavailable is handled at the proxy boundary; this is the
    # fallback for any other caller.
    app.add_exception_handler(GatewayError, _gateway_error_handler)  # type: ignore[arg-type]
