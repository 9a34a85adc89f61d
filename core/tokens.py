"""Upstream credential resolution."""

from core.config import AuthSettings
from core.exceptions import InvalidToken, MissingToken, ServerMisconfigured
from core.scopes import ScopeRule, match_scope, parse_scope_rules


class TokenResolver:
    """Decide which GitHub token, if any, accompanies an upstream request.

    Path-scoped rules are checked first: a matching scope demands its own
    secret and is then served with the server token. Requests outside every
    scope use the default policy, where presenting the alias token swaps in
    the server token so the real one never leaves the server.
    """

    def __init__(self, auth: AuthSettings, rules: list[ScopeRule] | None = None) -> None:
        self._upstream_token = auth.upstream_token or None
        self._alias_token = auth.alias_token or None
        self._rules = rules if rules is not None else parse_scope_rules(auth.token_path)

    def resolve(self, request_path: str, user_token: str | None) -> str:
        """Return the credential for ``request_path`` or raise an ``AuthError``."""
        user_token = user_token or None

        rule = match_scope(self._rules, request_path) if self._rules else None
        if rule is not None:
            return self._resolve_scoped(rule, user_token)
        return self._resolve_default(user_token)

    def _resolve_scoped(self, rule: ScopeRule, user_token: str | None) -> str:
        if user_token is None:
            raise MissingToken()
        if user_token != rule.required_secret:
            raise InvalidToken()
        if self._upstream_token is None:
            raise ServerMisconfigured()
        return self._upstream_token

    def _resolve_default(self, user_token: str | None) -> str:
        if self._alias_token is not None and user_token == self._alias_token:
            token = self._upstream_token or self._alias_token
        else:
            token = user_token or self._upstream_token or self._alias_token
        if not token:
            raise MissingToken()
        return token
