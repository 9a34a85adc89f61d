"""End-to-end tests for the proxy application against a mocked origin."""

import httpx

from core.home import CAMOUFLAGE_PAGE
from services.upstream import DEFAULT_ERROR_MESSAGE

REPO = {"owner": "o", "name": "r", "branch": "b"}


class TestRootPath:
    def test_camouflage_page(self, make_client, origin) -> None:
        response = make_client().get("/")
        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=UTF-8"
        assert response.text == CAMOUFLAGE_PAGE
        assert origin.requests == []

    def test_redirect_pool(self, make_client, logger) -> None:
        class First:
            def choice(self, seq):
                return seq[0]

        client = make_client(rng=First(), home={"redirect_pool": "https://a.example/x https://b.example"})
        response = client.get("/")
        assert response.status_code == 302
        assert response.headers["location"] == "https://a.example/x"
        assert logger.home == [("redirect", "https://a.example/x")]

    def test_origin_pool_replays_request(self, make_client, origin) -> None:
        origin.body = b"<h1>mirror</h1>"
        origin.headers = {"content-type": "text/html", "x-origin": "yes"}
        client = make_client(home={"origin_pool": "https://mirror.example/"})
        response = client.get("/", headers={"X-Client": "1"})
        assert response.status_code == 200
        assert response.content == b"<h1>mirror</h1>"
        assert response.headers["x-origin"] == "yes"
        sent = origin.requests[0]
        assert str(sent.url) == "https://mirror.example/"
        assert sent.headers["x-client"] == "1"
        assert sent.headers["host"] == "mirror.example"

    def test_origin_pool_failure(self, make_client, origin, logger) -> None:
        origin.error = httpx.ConnectError("refused")
        response = make_client(home={"origin_pool": "https://mirror.example/"}).get("/")
        assert response.status_code == 500
        assert response.text.startswith("Internal server error")
        assert logger.errors[0][:2] == ("home", 500)


class TestProxyFile:
    def test_fetches_file_with_server_token(self, make_client, origin, logger) -> None:
        client = make_client(repository=REPO, auth={"upstream_token": "U"})
        response = client.get("/dir/file.txt")
        assert response.status_code == 200
        assert response.content == b"file contents"
        assert response.headers["content-type"] == "text/plain; charset=utf-8"
        sent = origin.requests[0]
        assert str(sent.url) == "https://raw.githubusercontent.com/o/r/b/dir/file.txt"
        assert sent.headers["authorization"] == "token U"
        assert logger.proxied[0]["status"] == 200

    def test_inbound_method_is_reused(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth={"upstream_token": "U"})
        assert client.head("/dir/file.txt").status_code == 200
        assert origin.requests[0].method == "HEAD"

    def test_inbound_headers_and_query_are_not_forwarded(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth={"upstream_token": "U"})
        client.get("/a.txt?token=mine&x=1", headers={"X-Secret": "s", "Cookie": "c=1"})
        sent = origin.requests[0]
        assert "x-secret" not in sent.headers
        assert "cookie" not in sent.headers
        assert sent.url.query == b""
        assert sent.headers["authorization"] == "token mine"

    def test_alias_token_is_replaced(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth={"upstream_token": "U", "alias_token": "V"})
        assert client.get("/a.txt", params={"token": "V"}).status_code == 200
        assert origin.requests[0].headers["authorization"] == "token U"

    def test_embedded_upstream_url(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth={"upstream_token": "U"})
        client.get("/https://raw.githubusercontent.com/x/y/z")
        assert str(origin.requests[0].url) == "https://raw.githubusercontent.com/x/y/z"

    def test_body_and_headers_relayed_unchanged(self, make_client, origin) -> None:
        origin.body = bytes(range(256)) * 64
        origin.headers = {"content-type": "application/octet-stream", "etag": '"abc"'}
        client = make_client(repository=REPO, auth={"upstream_token": "U"})
        response = client.get("/bin/blob.dat")
        assert response.content == origin.body
        assert response.headers["etag"] == '"abc"'
        assert response.headers["content-type"] == "application/octet-stream"


class TestAuthFailures:
    def test_no_credentials_anywhere(self, make_client, origin, logger) -> None:
        response = make_client(repository=REPO).get("/a.txt")
        assert response.status_code == 400
        assert response.text == "Token required"
        assert origin.requests == []
        assert logger.rejected == [("/a.txt", 400, "Token required")]

    def test_scoped_path_requires_token(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth={"upstream_token": "U", "token_path": "sec@/private"})
        assert client.get("/private/a.txt").status_code == 400
        assert client.get("/private/a.txt", params={"token": "bad"}).status_code == 403
        assert origin.requests == []

    def test_scoped_path_with_secret(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth={"upstream_token": "U", "token_path": "sec@/private"})
        response = client.get("/private/sub/a.txt", params={"token": "sec"})
        assert response.status_code == 200
        assert origin.requests[0].headers["authorization"] == "token U"

    def test_scoped_path_percent_encoded(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth={"upstream_token": "U", "token_path": "sec@/private"})
        assert client.get("/%50rivate/a.txt").status_code == 400
        assert client.get("/%50rivate/a.txt", params={"token": "sec"}).status_code == 200
        assert origin.requests[0].headers["authorization"] == "token U"

    def test_scoped_path_without_server_token(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth={"token_path": "sec@/private"})
        response = client.get("/private/a.txt", params={"token": "sec"})
        assert response.status_code == 500
        assert response.text == "Server GitHub token is not configured"
        assert origin.requests == []


class TestUpstreamFailures:
    def test_not_found_default_message(self, make_client, origin, logger) -> None:
        origin.status = 404
        origin.body = b"404: Not Found"
        response = make_client(repository=REPO, auth={"upstream_token": "U"}).get("/missing.txt")
        assert response.status_code == 404
        assert response.text == DEFAULT_ERROR_MESSAGE
        assert logger.errors[0][:2] == ("origin", 404)
        assert logger.proxied == []

    def test_not_found_override_message(self, make_client, origin) -> None:
        origin.status = 404
        client = make_client(repository=REPO, auth={"upstream_token": "U"}, error_message="nope")
        response = client.get("/missing.txt")
        assert response.status_code == 404
        assert response.text == "nope"

    def test_transport_failure(self, make_client, origin, logger) -> None:
        origin.error = httpx.ConnectError("connection refused")
        response = make_client(repository=REPO, auth={"upstream_token": "U"}).get("/a.txt")
        assert response.status_code == 500
        assert response.text == "Internal server error: connection refused"
        assert logger.errors[0][:2] == ("origin", 500)


class TestDotSegments:
    AUTH = {"upstream_token": "U", "token_path": "sec@/private"}

    def _get(self, client, raw_path: str, **params):
        # The requested URL only has to reach the catch-all route.
        return client.get("/placeholder", params=params, headers={"x-test-raw-path": raw_path})

    def test_parent_segment_cannot_skip_scope(self, make_client, origin, logger) -> None:
        client = make_client(repository=REPO, auth=self.AUTH)
        response = self._get(client, "/public/../private/x.txt")
        assert response.status_code == 400
        assert origin.requests == []
        assert logger.rejected == [("/private/x.txt", 400, "Token required")]

    def test_percent_encoded_dots_cannot_skip_scope(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth=self.AUTH)
        for raw_path in (
            "/public/%2e%2e/private/x.txt",
            "/public/%2E./private/x.txt",
            "/public/.%2e/private/x.txt",
            "/./private/x.txt",
            "/%2e/private/x.txt",
        ):
            assert self._get(client, raw_path).status_code == 400, raw_path
        assert origin.requests == []

    def test_wrong_secret_through_parent_segment(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth=self.AUTH)
        assert self._get(client, "/public/../private/x.txt", token="bad").status_code == 403
        assert origin.requests == []

    def test_checked_path_is_the_fetched_path(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth=self.AUTH)
        response = self._get(client, "/public/%2e%2e/private/./x.txt", token="sec")
        assert response.status_code == 200
        assert str(origin.requests[0].url) == "https://raw.githubusercontent.com/o/r/b/private/x.txt"
        assert origin.requests[0].headers["authorization"] == "token U"

    def test_unscoped_target_after_resolution(self, make_client, origin) -> None:
        client = make_client(repository=REPO, auth=self.AUTH)
        response = self._get(client, "/private/../public/x.txt")
        assert response.status_code == 200
        assert str(origin.requests[0].url) == "https://raw.githubusercontent.com/o/r/b/public/x.txt"
