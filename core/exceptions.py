"""Custom exception hierarchy for the raw-content proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class AuthError(ProxyError):
    """Raised when a request cannot be given an upstream credential.

    Attributes:
        message: Plain-text body returned to the client
        status_code: HTTP status returned to the client
    """

    status_code = 400
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingToken(AuthError):
    """No token was supplied where one is required."""

    status_code = 400
    default_message = "Token required"


class InvalidToken(AuthError):
    """The supplied token does not match the scoped secret."""

    status_code = 403
    default_message = "Invalid token"


class ServerMisconfigured(AuthError):
    """A scoped rule matched but no server GitHub token is configured."""

    status_code = 500
    default_message = "Server GitHub token is not configured"


class UpstreamError(ProxyError):
    """Raised when the upstream origin cannot be reached or answers with an error.

    Attributes:
        message: Error message
        status_code: HTTP status code from upstream (optional)
        url: Upstream URL that was requested (optional)
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class UpstreamConnectionError(UpstreamError):
    """Raised when the upstream request fails at the transport level."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
    ) -> None:
        super().__init__(message, status_code=None, url=url)
