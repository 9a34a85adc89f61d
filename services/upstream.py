"""HTTP proxying utilities for upstream requests."""

from collections.abc import Sequence

import httpx
from fastapi import Response
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from core.exceptions import UpstreamConnectionError
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import ResolvedRequest

DEFAULT_ERROR_MESSAGE = "Unable to fetch the file. Check the path or token."
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"


class UpstreamClient:
    """Relay requests to the raw-content origin with streaming responses."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        header_builder: HeaderBuilder | None = None,
    ) -> None:
        self._client = client
        self._headers = header_builder or HeaderBuilder()

    async def fetch_file(
        self,
        resolved: ResolvedRequest,
        method: str,
        logger: RequestLogger,
        *,
        path: str,
        error_message: str = "",
    ) -> Response | StreamingResponse:
        """Fetch a file with the resolved credential and relay it unchanged.

        Non-2xx answers are replaced by ``error_message`` (or the default text)
        with the upstream status; transport failures become a 500.
        """
        headers = self._headers.build_upstream_headers(resolved.credential)
        try:
            response = await self._send(method, resolved.target_url, headers=headers)
        except UpstreamConnectionError as e:
            return _internal_error(e, "origin", logger)

        if not response.is_success:
            await response.aclose()
            logger.log_error("origin", response.status_code, f"{method} {resolved.target_url}")
            return Response(
                content=error_message or DEFAULT_ERROR_MESSAGE,
                status_code=response.status_code,
                media_type=TEXT_MEDIA_TYPE,
            )

        logger.log_proxied(
            method,
            path,
            resolved.target_url,
            status=response.status_code,
            credential=resolved.credential,
        )
        return self._stream(response)

    async def forward(
        self,
        method: str,
        url: str,
        headers: Sequence[tuple[str, str]],
        body: bytes,
        logger: RequestLogger,
    ) -> Response | StreamingResponse:
        """Replay an inbound request against ``url`` and relay whatever comes back."""
        try:
            response = await self._send(
                method,
                url,
                headers=self._headers.build_forward_headers(headers),
                content=body or None,
            )
        except UpstreamConnectionError as e:
            return _internal_error(e, "home", logger)
        return self._stream(response)

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            request = self._client.build_request(method, url, **kwargs)
            return await self._client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UpstreamConnectionError(str(e) or type(e).__name__, url=url) from e

    def _stream(self, response: httpx.Response) -> StreamingResponse:
        return StreamingResponse(
            response.aiter_raw(),
            status_code=response.status_code,
            headers=self._headers.build_response_headers(response.headers.multi_items()),
            background=BackgroundTask(self._cleanup_streaming, response),
        )

    async def _cleanup_streaming(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()


def _internal_error(error: UpstreamConnectionError, route: str, logger: RequestLogger) -> Response:
    logger.log_error(route, 500, f"{error.url}: {error}")
    return Response(
        content=f"Internal server error: {error}",
        status_code=500,
        media_type=TEXT_MEDIA_TYPE,
    )
