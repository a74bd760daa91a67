"""Error taxonomy.

Every failure the tool reports derives from `AddHostError`. The pipeline
catches them per step, so one failing step never prevents the next one.
"""

from __future__ import annotations


class AddHostError(Exception):
    """Base class for all errors surfaced to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvocationError(AddHostError):
    """Bad or missing command-line input. Raised before any network call."""

    def __init__(self, message: str, *, show_usage: bool = True) -> None:
        super().__init__(message)
        self.show_usage = show_usage


class AuthenticationError(AddHostError):
    """No token could be obtained from Nginx Proxy Manager."""

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body


class ConflictError(AddHostError):
    """A proxy host already serves the domain and overwrite was not requested."""

    def __init__(self, domain: str, host_id: int) -> None:
        super().__init__(
            f"Proxy host already exists for {domain} (ID: {host_id}). Use --force to overwrite."
        )
        self.domain = domain
        self.host_id = host_id


class ApiError(AddHostError):
    """Non-2xx status, malformed body or transport failure from a remote API."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.hint = hint

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (Status: {self.status_code})"
