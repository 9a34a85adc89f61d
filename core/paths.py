"""Request path normalisation shared by scope matching and origin URLs."""

_SINGLE_DOT = frozenset({".", "%2e"})
_DOUBLE_DOT = frozenset({"..", ".%2e", "%2e.", "%2e%2e"})


def resolve_dot_segments(path: str) -> str:
    """Resolve ``.`` and ``..`` segments the way a WHATWG URL parser does.

    Percent-encoded dots (``%2e``, any case) count as dots. Empty segments
    are kept, and the result never climbs above ``/``.

    >>> resolve_dot_segments("/public/%2E%2e/private/x.txt")
    '/private/x.txt'
    """
    segments = path.split("/")[1:] if path.startswith("/") else path.split("/")
    resolved: list[str] = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        lowered = segment.lower()
        if lowered in _DOUBLE_DOT:
            if resolved:
                resolved.pop()
            if index == last:
                resolved.append("")
        elif lowered in _SINGLE_DOT:
            if index == last:
                resolved.append("")
        else:
            resolved.append(segment)
    return "/" + "/".join(resolved)
