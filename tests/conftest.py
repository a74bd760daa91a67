"""
Shared fixtures.

`FakeApis` plays both remote services behind a single `httpx.MockTransport`
and records every request, so tests can assert on exactly which calls went out.
"""

from typing import Any

import httpx
import pytest

from core.config import AppSettings

SUFFIX = "example.test"
PIHOLE_HOST = "pihole.test"
NPM_HOST = "npm.test"


class FakeApis:
    """In-memory Pi-hole + Nginx Proxy Manager."""

    pihole_host = PIHOLE_HOST
    npm_host = NPM_HOST

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.cname_status = 200
        self.cname_body: Any = {"took": 0.001}
        self.token_body: Any = {"token": "tok-0123456789", "expires": "2026-10-19T00:00:00Z"}
        self.hosts: list[dict[str, Any]] = []
        self.create_status = 201
        self.create_body: Any = {"id": 42}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        path = request.url.path
        method = request.method

        if host == PIHOLE_HOST:
            if method == "PUT" and path.startswith("/api/config/dns/cnameRecords/"):
                return self._respond(self.cname_status, self.cname_body)
            if method == "GET" and path == "/api/info/version":
                return httpx.Response(200, json={"version": {}})

        if host == NPM_HOST:
            if method == "GET" and path == "/api/":
                return httpx.Response(200, json={"status": "OK"})
            if method == "POST" and path == "/api/tokens":
                return self._respond(200, self.token_body)
            if method == "GET" and path == "/api/nginx/proxy-hosts":
                return httpx.Response(200, json=self.hosts)
            if method == "DELETE" and path.startswith("/api/nginx/proxy-hosts/"):
                return httpx.Response(200, json=True)
            if method == "POST" and path == "/api/nginx/proxy-hosts":
                return self._respond(self.create_status, self.create_body)

        return httpx.Response(404, json={"error": {"message": "Not Found"}})

    @staticmethod
    def _respond(status: int, body: Any) -> httpx.Response:
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, host: str | None = None) -> list[tuple[str, str]]:
        """(method, path) pairs in the order they were sent."""
        return [
            (r.method, r.url.path)
            for r in self.requests
            if host is None or r.url.host == host
        ]


@pytest.fixture
def settings() -> AppSettings:
    """Settings pointing at the fake services."""
    return AppSettings(
        pihole_url=f"http://{PIHOLE_HOST}/",
        npm_url=f"http://{NPM_HOST}",
        domain_suffix=SUFFIX,
        certificate_id=7,
        npm_email="admin@example.test",
        npm_password="s3cret",
        debug=False,
    )


@pytest.fixture
def apis() -> FakeApis:
    return FakeApis()
