"""Unit tests for the Nginx Proxy Manager client."""

import json

import httpx
import pytest

from adapters.proxy_manager import ProxyManagerClient
from core.domain.models import BackendAddress
from core.errors import ApiError, AuthenticationError

BACKEND = BackendAddress.parse("10.0.0.5:8080")


@pytest.fixture
def npm(settings, apis):
    client = ProxyManagerClient(settings, transport=apis.transport)
    yield client
    client.close()


class TestAuthenticate:
    """Tests for token retrieval."""

    def test_sends_configured_credentials(self, npm, apis):
        token = npm.authenticate()

        assert token == "tok-0123456789"
        request = apis.requests[0]
        assert (request.method, request.url.path) == ("POST", "/api/tokens")
        assert json.loads(request.content) == {
            "identity": "admin@example.test",
            "secret": "s3cret",
        }

    @pytest.mark.parametrize(
        "body",
        [{"error": {"message": "Invalid password"}}, {"token": ""}, {"token": None}, "<html>", []],
    )
    def test_missing_token_is_authentication_error(self, npm, apis, body):
        apis.token_body = body
        with pytest.raises(AuthenticationError):
            npm.authenticate()

    def test_transport_failure_is_authentication_error(self, settings):
        def boom(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with ProxyManagerClient(settings, transport=httpx.MockTransport(boom)) as npm:
            with pytest.raises(AuthenticationError, match="timed out"):
                npm.authenticate()


class TestFindExisting:
    """Tests for list + client-side filter."""

    def test_returns_first_match(self, npm, apis):
        apis.hosts = [
            {"id": 1, "domain_names": ["other.example.test"]},
            {"id": 5, "domain_names": ["www.example.test", "app.example.test"]},
            {"id": 9, "domain_names": ["app.example.test"]},
        ]
        assert npm.find_existing("app.example.test", "tok") == 5

    def test_uses_bearer_token(self, npm, apis):
        npm.find_existing("app.example.test", "tok-abc")
        assert apis.requests[0].headers["Authorization"] == "Bearer tok-abc"

    def test_absent(self, npm, apis):
        apis.hosts = [{"id": 1, "domain_names": ["myapp.example.test"]}]
        assert npm.find_existing("app.example.test", "tok") is None

    def test_malformed_list_is_api_error(self, settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"oops": 1}))
        with ProxyManagerClient(settings, transport=transport) as npm:
            with pytest.raises(ApiError, match="Unexpected proxy host list"):
                npm.find_existing("app.example.test", "tok")

    def test_non_2xx_is_api_error(self, settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"error": "expired"}))
        with ProxyManagerClient(settings, transport=transport) as npm:
            with pytest.raises(ApiError) as exc_info:
                npm.find_existing("app.example.test", "tok")
        assert exc_info.value.status_code == 401


class TestCreateHost:
    """Tests for proxy host creation."""

    def test_posts_fixed_payload(self, npm, apis):
        new_id = npm.create_host("app.example.test", BACKEND, "tok")

        assert new_id == 42
        request = apis.requests[0]
        assert (request.method, request.url.path) == ("POST", "/api/nginx/proxy-hosts")
        body = json.loads(request.content)
        assert body["domain_names"] == ["app.example.test"]
        assert body["forward_host"] == "10.0.0.5"
        assert body["forward_port"] == 8080
        assert body["forward_scheme"] == "http"
        assert body["certificate_id"] == 7
        assert body["access_list_id"] == 0

    def test_explicit_certificate_id(self, npm, apis):
        npm.create_host("app.example.test", BACKEND, "tok", certificate_id=3)
        assert json.loads(apis.requests[0].content)["certificate_id"] == 3

    @pytest.mark.parametrize("body", [{}, {"id": None}, {"id": "42"}, "created", [42]])
    def test_2xx_without_id_is_failure(self, npm, apis, body):
        apis.create_body = body
        with pytest.raises(ApiError) as exc_info:
            npm.create_host("app.example.test", BACKEND, "tok")
        assert exc_info.value.status_code == 201

    def test_additional_properties_hint(self, npm, apis):
        apis.create_status = 400
        apis.create_body = {"error": {"message": "data should NOT have additional properties"}}

        with pytest.raises(ApiError) as exc_info:
            npm.create_host("app.example.test", BACKEND, "tok")

        assert exc_info.value.hint is not None
        assert "minimal fields" in exc_info.value.hint

    def test_plain_failure_has_no_hint(self, npm, apis):
        apis.create_status = 500
        apis.create_body = {"error": {"message": "Internal Error"}}

        with pytest.raises(ApiError) as exc_info:
            npm.create_host("app.example.test", BACKEND, "tok")

        assert exc_info.value.hint is None
        assert exc_info.value.status_code == 500


class TestDeleteHost:
    def test_delete_by_id_ignores_answer(self, settings):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(500, text="nope")

        with ProxyManagerClient(settings, transport=httpx.MockTransport(handler)) as npm:
            npm.delete_host(17, "tok")

        assert seen == [("DELETE", "/api/nginx/proxy-hosts/17")]

    def test_unreachable_delete_does_not_raise(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with ProxyManagerClient(settings, transport=httpx.MockTransport(handler)) as npm:
            assert npm.delete_host(17, "tok") is None
