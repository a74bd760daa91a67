"""Proxy configurator: Nginx Proxy Manager.

Responsibility:
- Obtain a bearer token (`POST /api/tokens`).
- Find an existing proxy host serving the domain (list + client-side filter).
- Delete a proxy host by id.
- Create the new proxy host with a fixed payload.

The ordering and the conflict policy live in `core.services.host_pipeline`.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from adapters.http_client import build_client, mask_token, read_json
from core.config import AppSettings
from core.domain.models import BackendAddress, ProxyHost, ProxyHostPayload
from core.errors import ApiError, AuthenticationError
from core.interfaces.registrar import ProxyConfigurator
from core.logging import get_logger

logger = get_logger(__name__)

TOKENS_PATH = "/api/tokens"
PROXY_HOSTS_PATH = "/api/nginx/proxy-hosts"

# NPM's schema validator answers with this when the payload has unknown fields.
ADDITIONAL_PROPERTIES_MARKER = "additional properties"

_PROXY_HOST_LIST = TypeAdapter(list[ProxyHost])


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class ProxyManagerClient(ProxyConfigurator):
    """Talks to the Nginx Proxy Manager REST API."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = build_client(
                self._settings.npm_url, self._settings, transport=self._transport
            )
        return self._client

    def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            self._client.close()
        self._client = None

    def __enter__(self) -> "ProxyManagerClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._get_client().request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(f"Failed to reach Nginx Proxy Manager: {exc}") from exc

    def authenticate(self, email: str | None = None, password: str | None = None) -> str:
        """Exchange credentials for a bearer token valid for this run only."""

        email = email if email is not None else self._settings.npm_email
        if password is None:
            password = self._settings.npm_password.get_secret_value()

        logger.debug("Authenticating with Nginx Proxy Manager as %s", email)
        try:
            response = self._send(
                "POST", TOKENS_PATH, json={"identity": email, "secret": password}
            )
        except ApiError as exc:
            raise AuthenticationError(
                f"Failed to authenticate with Nginx Proxy Manager: {exc}"
            ) from exc

        payload = read_json(response)
        token = payload.get("token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthenticationError(
                "Failed to authenticate with Nginx Proxy Manager",
                body=response.text,
            )

        logger.debug("Obtained token %s", mask_token(token))
        return token

    def list_hosts(self, token: str) -> list[ProxyHost]:
        response = self._send("GET", PROXY_HOSTS_PATH, headers=_bearer(token))
        if not response.is_success:
            raise ApiError(
                "Failed to list proxy hosts",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            hosts = _PROXY_HOST_LIST.validate_python(read_json(response))
        except ValidationError as exc:
            raise ApiError(
                "Unexpected proxy host list from Nginx Proxy Manager",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        logger.debug("Proxy list response length: %d", len(hosts))
        return hosts

    def find_existing(self, fqdn: str, token: str) -> int | None:
        """Id of the first proxy host serving `fqdn`, or None."""

        logger.debug("Checking if proxy host exists for %s...", fqdn)
        for host in self.list_hosts(token):
            if host.serves(fqdn):
                logger.debug("Found proxy host with ID: %s", host.id)
                return host.id

        logger.debug("No matching proxy host found")
        return None

    def delete_host(self, host_id: int, token: str) -> None:
        """Best effort: the answer is traced but not validated."""

        try:
            response = self._send("DELETE", f"{PROXY_HOSTS_PATH}/{host_id}", headers=_bearer(token))
        except ApiError as exc:
            logger.debug("Delete failed: %s", exc)
            return
        logger.debug("Delete response: %s %s", response.status_code, response.text)

    def create_host(
        self,
        fqdn: str,
        backend: BackendAddress,
        token: str,
        certificate_id: int | None = None,
    ) -> int:
        """Create the proxy host and return the id NPM assigned to it."""

        if certificate_id is None:
            certificate_id = self._settings.certificate_id
        payload = ProxyHostPayload.for_backend(fqdn, backend, certificate_id)
        logger.debug("NPM payload: %s", payload.model_dump_json(indent=2))

        response = self._send(
            "POST",
            PROXY_HOSTS_PATH,
            headers=_bearer(token),
            json=payload.model_dump(),
        )

        if response.is_success:
            body = read_json(response)
            new_id = body.get("id") if isinstance(body, dict) else None
            if isinstance(new_id, int) and not isinstance(new_id, bool):
                return new_id

        hint = None
        if ADDITIONAL_PROPERTIES_MARKER in response.text:
            hint = "The API rejected some fields in the request payload. Try with minimal fields only."
        raise ApiError(
            "Failed to create proxy host in Nginx Proxy Manager",
            status_code=response.status_code,
            body=response.text,
            hint=hint,
        )

