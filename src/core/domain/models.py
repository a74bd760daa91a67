"""Domain models (Pydantic v2).

These models describe *what* a run manipulates (a backend address, a CNAME
record, a proxy host), not *how* it is sent over the wire.
"""

from __future__ import annotations

import re
from urllib.parse import quote

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from core.domain.mode import Mode
from core.errors import InvocationError

# Strict dotted quad plus numeric port. Octet ranges are not checked.
_BACKEND_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+:[0-9]+$")


def build_fqdn(subdomain: str, domain_suffix: str) -> str:
    return f"{subdomain}.{domain_suffix}"


class BackendAddress(BaseModel):
    """The service a proxy host forwards to (`ip:port`)."""

    model_config = ConfigDict(frozen=True)

    ip: str = Field(..., min_length=7, description="Dotted-quad IPv4 literal.")
    port: int = Field(..., ge=0, description="TCP port of the backend service.")

    @classmethod
    def parse(cls, text: str) -> "BackendAddress":
        """Parse `IP:PORT`; hostnames, IPv6 and missing ports are rejected."""

        if not _BACKEND_RE.fullmatch(text):
            raise InvocationError(
                "Invalid source format. Must be IP:PORT (e.g., 192.168.1.50:3456)",
                show_usage=False,
            )
        ip, port = text.split(":", 1)
        return cls(ip=ip, port=int(port))

    def __str__(self) -> str:
        return f"{self.ip}:{self.port}"


class HostRequest(BaseModel):
    """Validated invocation parameters for one run."""

    model_config = ConfigDict(frozen=True)

    subdomain: str = Field(..., min_length=1)
    fqdn: str = Field(..., min_length=3)
    backend: BackendAddress | None = None
    force: bool = False
    mode: Mode = Mode.BOTH
    debug: bool = False

    @model_validator(mode="after")
    def _backend_required_for_proxy(self) -> "HostRequest":
        if self.mode.runs_proxy and self.backend is None:
            raise ValueError("backend is required unless mode is dns-only")
        return self

    @classmethod
    def from_cli(
        cls,
        *,
        dest: str | None,
        source: str | None,
        domain_suffix: str,
        force: bool = False,
        cname_only: bool = False,
        proxy_only: bool = False,
        debug: bool = False,
    ) -> "HostRequest":
        """Validate raw flag values in the order the user would fix them."""

        if not dest or not dest.strip():
            raise InvocationError("Error: Subdomain (--dest) is required")
        subdomain = dest.strip()

        mode = Mode.from_flags(cname_only, proxy_only)
        if mode.runs_proxy and not source:
            raise InvocationError(
                "Error: Source IP:PORT (--source) is required for proxy configuration"
            )

        backend = BackendAddress.parse(source) if source else None
        return cls(
            subdomain=subdomain,
            fqdn=build_fqdn(subdomain, domain_suffix),
            backend=backend,
            force=force,
            mode=mode,
            debug=debug,
        )


class CnameRecord(BaseModel):
    """A DNS alias `domain -> target`."""

    model_config = ConfigDict(frozen=True)

    domain: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)

    def api_key(self) -> str:
        """Pi-hole identifies the record by `domain,target`, percent-encoded."""

        return quote(f"{self.domain},{self.target}", safe="")


class ProxyHost(BaseModel):
    """A proxy host as listed by Nginx Proxy Manager (only the fields we read)."""

    model_config = ConfigDict(extra="ignore")

    id: int
    domain_names: list[str] = Field(default_factory=list)

    def serves(self, domain: str) -> bool:
        return domain in self.domain_names


class ProxyHostPayload(BaseModel):
    """Body of the create-proxy-host call.

    The shape is fixed: TLS terminates at the proxy, the backend is plain HTTP.
    """

    domain_names: list[str] = Field(..., min_length=1, max_length=1)
    forward_host: str
    forward_port: int
    forward_scheme: str = "http"
    certificate_id: int
    ssl_forced: bool = True
    block_exploits: bool = True
    caching_enabled: bool = False
    allow_websocket_upgrade: bool = True
    http2_support: bool = True
    access_list_id: int = 0

    @classmethod
    def for_backend(
        cls, domain: str, backend: BackendAddress, certificate_id: int
    ) -> "ProxyHostPayload":
        return cls(
            domain_names=[domain],
            forward_host=backend.ip,
            forward_port=backend.port,
            certificate_id=certificate_id,
        )
