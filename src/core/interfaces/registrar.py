"""Contracts for the two remote steps.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The Pi-hole and Nginx Proxy Manager adapters stay interchangeable with
  in-memory fakes in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import BackendAddress


@runtime_checkable
class DnsRegistrar(Protocol):
    """Creates DNS aliases."""

    def create_cname(self, fqdn: str, target: str) -> None:
        """Create `fqdn -> target`; raise `ApiError` on any non-2xx answer."""

        ...


@runtime_checkable
class ProxyConfigurator(Protocol):
    """Reverse-proxy operations used by the proxy step, in call order."""

    def authenticate(self, email: str | None = None, password: str | None = None) -> str:
        """Return a bearer token or raise `AuthenticationError`."""

        ...

    def find_existing(self, fqdn: str, token: str) -> int | None:
        ...

    def delete_host(self, host_id: int, token: str) -> None:
        ...

    def create_host(
        self,
        fqdn: str,
        backend: BackendAddress,
        token: str,
        certificate_id: int | None = None,
    ) -> int:
        """Return the new host id or raise `ApiError`."""

        ...

    def close(self) -> None:
        ...
