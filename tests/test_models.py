"""Unit tests for domain models."""

import pytest

from core.domain.mode import Mode
from core.domain.models import (
    BackendAddress,
    CnameRecord,
    HostRequest,
    ProxyHost,
    ProxyHostPayload,
    build_fqdn,
)
from core.errors import InvocationError


class TestMode:
    """Tests for operation selection."""

    def test_no_flags_runs_both(self):
        assert Mode.from_flags(False, False) is Mode.BOTH

    def test_both_flags_equal_no_flags(self):
        assert Mode.from_flags(True, True) is Mode.BOTH

    def test_single_flags(self):
        assert Mode.from_flags(True, False) is Mode.DNS_ONLY
        assert Mode.from_flags(False, True) is Mode.PROXY_ONLY

    def test_step_selection(self):
        assert Mode.BOTH.runs_dns and Mode.BOTH.runs_proxy
        assert Mode.DNS_ONLY.runs_dns and not Mode.DNS_ONLY.runs_proxy
        assert not Mode.PROXY_ONLY.runs_dns and Mode.PROXY_ONLY.runs_proxy


class TestBackendAddress:
    """Tests for strict IP:PORT parsing."""

    def test_parses_ip_and_port(self):
        backend = BackendAddress.parse("10.0.0.5:8080")
        assert backend.ip == "10.0.0.5"
        assert backend.port == 8080
        assert str(backend) == "10.0.0.5:8080"

    @pytest.mark.parametrize(
        "text",
        ["host.name:80", "1.2.3.4", "1.2.3.4:abc", "[::1]:80", "1.2.3:80", " 1.2.3.4:80", "1.2.3.4:80/x", "1.2.3.4:80\n"],
    )
    def test_rejects_malformed(self, text):
        with pytest.raises(InvocationError) as exc_info:
            BackendAddress.parse(text)
        assert "Invalid source format" in str(exc_info.value)
        assert exc_info.value.show_usage is False


class TestHostRequest:
    """Tests for invocation validation."""

    @pytest.mark.parametrize("sub,suffix", [("app", "example.test"), ("a-b", "home.lan"), ("x.y", "z")])
    def test_fqdn_is_subdomain_dot_suffix(self, sub, suffix):
        request = HostRequest.from_cli(dest=sub, source="1.2.3.4:5", domain_suffix=suffix)
        assert request.fqdn == f"{sub}.{suffix}" == build_fqdn(sub, suffix)

    def test_missing_dest(self):
        with pytest.raises(InvocationError, match="--dest"):
            HostRequest.from_cli(dest=None, source="1.2.3.4:5", domain_suffix="example.test")

    def test_blank_dest(self):
        with pytest.raises(InvocationError, match="--dest"):
            HostRequest.from_cli(dest="  ", source="1.2.3.4:5", domain_suffix="example.test")

    def test_cname_only_without_source_is_valid(self):
        request = HostRequest.from_cli(
            dest="app", source=None, domain_suffix="example.test", cname_only=True
        )
        assert request.mode is Mode.DNS_ONLY
        assert request.backend is None

    def test_proxy_only_without_source_fails(self):
        with pytest.raises(InvocationError, match="--source"):
            HostRequest.from_cli(
                dest="app", source=None, domain_suffix="example.test", proxy_only=True
            )

    def test_both_flags_without_source_fails(self):
        """Both flags mean both steps, which need a backend."""
        with pytest.raises(InvocationError, match="--source"):
            HostRequest.from_cli(
                dest="app", source=None, domain_suffix="example.test",
                cname_only=True, proxy_only=True,
            )

    def test_source_still_validated_in_cname_only(self):
        with pytest.raises(InvocationError, match="Invalid source format"):
            HostRequest.from_cli(
                dest="app", source="nope", domain_suffix="example.test", cname_only=True
            )

    def test_direct_construction_enforces_backend(self):
        with pytest.raises(ValueError):
            HostRequest(subdomain="app", fqdn="app.example.test", mode=Mode.BOTH)


class TestCnameRecord:
    def test_api_key_encodes_comma(self):
        record = CnameRecord(domain="app.example.test", target="proxy.example.test")
        assert record.api_key() == "app.example.test%2Cproxy.example.test"


class TestProxyHost:
    def test_serves_exact_domain_only(self):
        host = ProxyHost.model_validate(
            {"id": 3, "domain_names": ["myapp.example.test"], "enabled": True}
        )
        assert host.serves("myapp.example.test")
        assert not host.serves("app.example.test")


class TestProxyHostPayload:
    def test_fixed_shape(self):
        payload = ProxyHostPayload.for_backend(
            "app.example.test", BackendAddress.parse("10.0.0.5:8080"), 2
        )
        assert payload.model_dump() == {
            "domain_names": ["app.example.test"],
            "forward_host": "10.0.0.5",
            "forward_port": 8080,
            "forward_scheme": "http",
            "certificate_id": 2,
            "ssl_forced": True,
            "block_exploits": True,
            "caching_enabled": False,
            "allow_websocket_upgrade": True,
            "http2_support": True,
            "access_list_id": 0,
        }
