"""Shared request data types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ResolvedRequest:
    """Upstream target and credential for a single proxied request."""

    target_url: str
    credential: str | None = None
