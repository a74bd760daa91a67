"""Operation selection for a run.

Both the CLI and the pipeline share this enum, so it lives in the domain
layer rather than next to the typer flags.
"""

from __future__ import annotations

from enum import Enum


class Mode(str, Enum):
    """Which of the two steps a run performs."""

    BOTH = "both"
    DNS_ONLY = "dns-only"
    PROXY_ONLY = "proxy-only"

    @classmethod
    def from_flags(cls, cname_only: bool, proxy_only: bool) -> "Mode":
        """Derive the mode from the two exclusive CLI flags.

        Passing both flags is the same as passing neither.
        """

        if cname_only == proxy_only:
            return cls.BOTH
        return cls.DNS_ONLY if cname_only else cls.PROXY_ONLY

    @property
    def runs_dns(self) -> bool:
        return self is not Mode.PROXY_ONLY

    @property
    def runs_proxy(self) -> bool:
        return self is not Mode.DNS_ONLY

    def label(self) -> str:
        """Human readable label for the summary."""

        return {
            Mode.BOTH: "CNAME + proxy host",
            Mode.DNS_ONLY: "CNAME only",
            Mode.PROXY_ONLY: "proxy host only",
        }[self]
