"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import RedirectResponse, StreamingResponse

from core.config import Config
from core.exceptions import AuthError
from core.home import CAMOUFLAGE_PAGE, HOME_MEDIA_TYPE
from core.protocols import RequestLogger
from services.upstream import TEXT_MEDIA_TYPE


def _request_path(request: Request) -> str:
    """Return the path as sent by the client, percent-encoding intact."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.split(b"?", 1)[0].decode("utf-8", errors="replace")
    return request.url.path


async def handle_root(request: Request, logger: RequestLogger) -> Response | StreamingResponse:
    """Handle ``/``: redirect, fetch from the origin pool, or show the camouflage page."""
    decision = request.app.state.home_router.route()
    logger.log_home(decision.action, decision.target)

    if decision.action == "redirect":
        return RedirectResponse(decision.target, status_code=302)
    if decision.action == "fetch":
        upstream = request.app.state.upstream_client
        return await upstream.forward(
            request.method,
            decision.target,
            request.headers.items(),
            await request.body(),
            logger,
        )
    return Response(content=CAMOUFLAGE_PAGE, media_type=HOME_MEDIA_TYPE)


async def handle_proxy(
    request: Request,
    config: Config,
    logger: RequestLogger,
) -> Response | StreamingResponse:
    """Handle every other path: resolve target and token, then relay the file."""
    path = _request_path(request)
    proxy_service = request.app.state.proxy_service
    try:
        resolved = proxy_service.prepare(path, request.query_params.get("token"))
    except AuthError as e:
        return Response(content=e.message, status_code=e.status_code, media_type=TEXT_MEDIA_TYPE)

    upstream = request.app.state.upstream_client
    return await upstream.fetch_file(
        resolved,
        request.method,
        logger,
        path=path,
        error_message=config.error_message,
    )
