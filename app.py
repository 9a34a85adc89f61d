"""FastAPI application factory."""

import random
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_proxy, handle_root
from core.config import Config
from core.headers import HeaderBuilder
from core.home import HomeRouter
from core.protocols import RequestLogger
from services.proxy_service import ProxyService
from services.upstream import UpstreamClient

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    config: Config,
    logger: RequestLogger,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.limits.max_connections,
            max_keepalive_connections=config.limits.max_keepalive_connections,
        )
        client = httpx.AsyncClient(
            timeout=config.limits.upstream_timeout,
            limits=limits,
            follow_redirects=True,
            transport=transport,
        )
        app.state.upstream_client = UpstreamClient(client, HeaderBuilder())
        app.state.proxy_service = ProxyService(config=config, logger=logger)
        app.state.home_router = HomeRouter(config.home, rng=rng)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(
        title="GitHub Raw Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.api_route("/", methods=PROXY_METHODS)
    async def root(request: Request):
        return await handle_root(request, logger)

    @app.api_route("/{path:path}", methods=PROXY_METHODS)
    async def proxy_file(request: Request, path: str):
        return await handle_proxy(request, config, logger)

    return app
