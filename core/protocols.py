"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_proxied(
        self,
        method: str,
        path: str,
        target_url: str,
        *,
        status: int,
        credential: str | None = None,
    ) -> None: ...
    def log_rejected(self, path: str, status: int, reason: str) -> None: ...
    def log_home(self, action: str, target: str | None = None) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
