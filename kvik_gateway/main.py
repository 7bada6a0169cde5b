from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .clients.kegg import KeggClient, ReferenceLibrary
from .config import Settings
from .errors import install_error_handlers
from .middleware import AllowOriginMiddleware
from .proxy import UpstreamClient
from .routers import build_router

log = logging.getLogger("kvik.main")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
        stream=sys.stdout,
    )


# ------------------------------------------------------------------------------
# App factory
# ------------------------------------------------------------------------------
def create_app(
    settings: Optional[Settings] = None,
    *,
    library: Optional[ReferenceLibrary] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the gateway.

    ``library`` replaces the KEGG REST client and ``transport`` the network
    layer under the datastore client (both used by tests).
    """
    settings = settings or Settings.from_env()

    owned_library: Optional[KeggClient] = None
    if library is None:
        owned_library = KeggClient(
            settings.kegg_base_url,
            organism=settings.kegg_organism,
            cache_dir=settings.resolve(settings.cache_dir),
            timeout=settings.kegg_timeout,
        )
        library = owned_library

    http = httpx.AsyncClient(timeout=settings.datastore_timeouts, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Proxying /datastore/ to %s", settings.datastore_url)
        yield
        await http.aclose()
        if owned_library is not None:
            owned_library.close()

    app = FastAPI(title=settings.app_title, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.library = library
    app.state.upstream = UpstreamClient(
        settings.datastore_url,
        http,
        timeout=settings.datastore_timeouts,
        total_timeout=settings.datastore_timeout,
    )

    # Preflights per CORS_ALLOW_ORIGINS; the plain header goes on every response.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AllowOriginMiddleware)

    install_error_handlers(app)
    app.include_router(build_router())
    return app


def main() -> None:
    """Run under uvicorn; `uvicorn kvik_gateway.main:create_app --factory` also works."""
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
