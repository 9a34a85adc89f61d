"""Request preparation for proxied file fetches."""

from core.config import Config
from core.exceptions import AuthError
from core.origin import OriginURLBuilder
from core.paths import resolve_dot_segments
from core.protocols import RequestLogger
from core.request_types import ResolvedRequest
from core.tokens import TokenResolver


class ProxyService:
    """Turn an incoming path and token into an upstream target and credential."""

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        resolver: TokenResolver | None = None,
        url_builder: OriginURLBuilder | None = None,
    ) -> None:
        self._logger = logger
        self._resolver = resolver or TokenResolver(config.auth)
        self._url_builder = url_builder or OriginURLBuilder(config.upstream, config.repository)

    def prepare(self, request_path: str, user_token: str | None) -> ResolvedRequest:
        """Build the upstream request; auth failures raise before any network call.

        Dot segments are resolved first so the scope check sees the same path
        that reaches the origin.
        """
        request_path = resolve_dot_segments(request_path)
        target_url = self._url_builder.build(request_path)
        try:
            credential = self._resolver.resolve(request_path, user_token)
        except AuthError as e:
            self._logger.log_rejected(request_path, e.status_code, e.message)
            raise
        return ResolvedRequest(target_url=target_url, credential=credential)
