"""DNS registrar: Pi-hole.

Implementation:
- One `PUT /api/config/dns/cnameRecords/<domain>%2C<target>` per run.
- No existence pre-check: Pi-hole's own answer decides. Any 2xx is success
  (a fresh record and an identical existing one are not told apart).
- No retry.
"""

from __future__ import annotations

import httpx

from adapters.http_client import build_client
from core.config import AppSettings
from core.domain.models import CnameRecord
from core.errors import ApiError
from core.interfaces.registrar import DnsRegistrar
from core.logging import get_logger

logger = get_logger(__name__)

CNAME_RECORDS_PATH = "/api/config/dns/cnameRecords"


class PiholeRegistrar(DnsRegistrar):
    """Creates CNAME records through the Pi-hole web API."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def create_cname(self, fqdn: str, target: str) -> None:
        record = CnameRecord(domain=fqdn, target=target)
        path = f"{CNAME_RECORDS_PATH}/{record.api_key()}"
        logger.debug("Pi-hole API endpoint: %s%s", self._settings.pihole_url, path)

        try:
            with build_client(
                self._settings.pihole_url, self._settings, transport=self._transport
            ) as client:
                response = client.put(path)
        except httpx.HTTPError as exc:
            raise ApiError(f"Failed to reach Pi-hole: {exc}") from exc

        if not response.is_success:
            raise ApiError(
                "Failed to add CNAME record to Pi-hole",
                status_code=response.status_code,
                body=response.text,
            )
