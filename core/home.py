"""Root path handling: redirect pool, origin pool or a camouflage page."""

import random
from dataclasses import dataclass
from typing import Literal

from core.config import HomeSettings
from core.lists import parse_list

HOME_MEDIA_TYPE = "text/html; charset=UTF-8"

CAMOUFLAGE_PAGE = """<!DOCTYPE html>
<html>
<head>
<title>Welcome to nginx!</title>
<style>
    body { width: 35em; margin: 0 auto; font-family: Tahoma, Verdana, Arial, sans-serif; }
</style>
</head>
<body>
<h1>Welcome to nginx!</h1>
<p>If you see this page, the nginx web server is successfully installed and
working. Further configuration is required.</p>

<p>For online documentation and support please refer to
<a href="http://nginx.org/">nginx.org</a>.<br/>
Commercial support is available at
<a href="http://nginx.com/">nginx.com</a>.</p>

<p><em>Thank you for using nginx.</em></p>
</body>
</html>
"""


@dataclass(frozen=True)
class HomeDecision:
    """What to do with a request for ``/``."""

    action: Literal["redirect", "fetch", "page"]
    target: str | None = None


class HomeRouter:
    """Pick a root-path behavior; the redirect pool wins over the origin pool."""

    def __init__(self, home: HomeSettings, rng: random.Random | None = None) -> None:
        self._redirect_pool = parse_list(home.redirect_pool)
        self._origin_pool = parse_list(home.origin_pool)
        self._rng = rng or random.Random()

    def route(self) -> HomeDecision:
        if self._redirect_pool:
            return HomeDecision("redirect", self._rng.choice(self._redirect_pool))
        if self._origin_pool:
            return HomeDecision("fetch", self._rng.choice(self._origin_pool))
        return HomeDecision("page")
