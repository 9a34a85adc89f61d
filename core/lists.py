"""Parsing of delimited list settings (pools and scoped token rules)."""

import re

# Whitespace and quote characters act as separators alongside commas.
_SEPARATORS = re.compile(r"[\s\"'`]+")


def parse_list(raw: str | None) -> list[str]:
    """Split a raw setting into its non-empty items, in order.

    >>> parse_list('a, b\\nc"d')
    ['a', 'b', 'c', 'd']
    """
    if not raw:
        return []
    return [item for item in _SEPARATORS.sub(",", raw).split(",") if item]
