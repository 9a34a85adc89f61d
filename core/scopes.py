"""Path-scoped token rules: ``secret@path`` entries guarding a path subtree."""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import unquote

from core.lists import parse_list
from core.paths import resolve_dot_segments

_REPEATED_SLASHES = re.compile(r"/{2,}")


@dataclass(frozen=True)
class ScopeRule:
    """A path prefix that is only served when ``required_secret`` is presented."""

    required_secret: str
    scope_path: str

    def covers(self, normalized_path: str) -> bool:
        return normalized_path == self.scope_path or normalized_path.startswith(
            self.scope_path + "/"
        )


def normalize_scope_path(path: str) -> str:
    """Lower-case a configured path and give it exactly one leading slash."""
    path = _REPEATED_SLASHES.sub("/", path.strip().lower()).strip("/")
    return "/" + path


def parse_scope_rules(raw: str | None) -> list[ScopeRule]:
    """Parse ``secret@path`` entries, splitting each on its first ``@``.

    Entries without ``@`` or with an empty path are skipped. A secret that
    itself contains ``@`` cannot be expressed.
    """
    rules = []
    for entry in parse_list(raw):
        secret, sep, path = entry.partition("@")
        if not sep:
            continue
        scope_path = normalize_scope_path(path)
        if scope_path == "/":
            continue
        rules.append(ScopeRule(required_secret=secret.strip(), scope_path=scope_path))
    return rules


def match_scope(rules: Sequence[ScopeRule], request_path: str) -> ScopeRule | None:
    """Return the first rule whose scope covers ``request_path``."""
    decoded = resolve_dot_segments(unquote(request_path).lower())
    normalized = _REPEATED_SLASHES.sub("/", decoded)
    for rule in rules:
        if rule.covers(normalized):
            return rule
    return None
