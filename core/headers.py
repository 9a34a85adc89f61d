"""Header construction for upstream requests and relayed responses."""

from collections.abc import Iterable

# Framing is owned by the ASGI server on each side of the proxy.
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)


class HeaderBuilder:
    """Build upstream request headers and filter relayed response headers."""

    def build_upstream_headers(self, credential: str | None) -> dict[str, str]:
        """Only the GitHub credential is sent; inbound headers stay behind."""
        if not credential:
            return {}
        return {"Authorization": f"token {credential}"}

    def build_forward_headers(self, headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        """Replay inbound headers to an origin-pool target, minus host and framing."""
        return [
            (key, value)
            for key, value in headers
            if key.lower() not in HOP_BY_HOP_HEADERS and key.lower() not in ("host", "content-length")
        ]

    def build_response_headers(self, headers: Iterable[tuple[str, str]]) -> dict[str, str]:
        """Pass upstream response headers through, minus hop-by-hop ones."""
        return {
            key: value for key, value in headers if key.lower() not in HOP_BY_HOP_HEADERS
        }
