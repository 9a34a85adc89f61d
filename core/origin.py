"""Origin URL construction for raw file requests."""

import re

from core.config import RepositorySettings, UpstreamSettings

_DUPLICATE_SLASHES = re.compile(r"/{2,}")


class OriginURLBuilder:
    """Map an incoming request path onto the upstream raw-content host."""

    def __init__(self, upstream: UpstreamSettings, repository: RepositorySettings) -> None:
        self._base_url = upstream.base_url.rstrip("/")
        self._marker = re.compile(re.escape(self._base_url), re.IGNORECASE)
        self._prefix = "/".join(
            part for part in (repository.owner, repository.name, repository.branch) if part
        )

    def build(self, request_path: str) -> str:
        """Return the upstream URL for ``request_path``.

        Paths that embed the full upstream URL keep their own owner, repo and
        branch; everything after the embedded host is used verbatim.
        """
        embedded = self._marker.split(request_path, maxsplit=1)
        if len(embedded) == 2:
            url = self._base_url + embedded[1]
        elif self._prefix:
            url = f"{self._base_url}/{self._prefix}{request_path}"
        else:
            url = self._base_url + request_path
        return collapse_slashes(url)


def collapse_slashes(url: str) -> str:
    """Collapse repeated slashes everywhere after the ``scheme://`` prefix."""
    scheme, sep, rest = url.partition("://")
    if not sep:
        return _DUPLICATE_SLASHES.sub("/", url)
    return scheme + sep + _DUPLICATE_SLASHES.sub("/", rest)
