"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Adapters (Pi-hole / Nginx Proxy Manager) read endpoints and credentials
  from a single `AppSettings` value passed to them explicitly.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__version__ = "0.1.0"

PLACEHOLDER = "CHANGEME"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "add-host"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "add-host"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "add-host"
    return Path.home() / ".config" / "add-host"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Write or update variables in the user's global .env file."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# add-host user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application configuration.

    Loaded once per invocation and handed to every operation; nothing reads
    the environment behind the caller's back.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADD_HOST_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    pihole_url: str = Field(
        default=f"https://{PLACEHOLDER}",
        min_length=8,
        description="Base URL of the Pi-hole web API.",
    )
    npm_url: str = Field(
        default=f"https://{PLACEHOLDER}",
        min_length=8,
        description="Base URL of the Nginx Proxy Manager API.",
    )
    domain_suffix: str = Field(
        default=PLACEHOLDER,
        min_length=1,
        description="Domain appended to every subdomain (e.g. 'home.example').",
    )
    proxy_target: str | None = Field(
        default=None,
        description="CNAME target. Defaults to 'proxy.<domain_suffix>'.",
    )
    certificate_id: int = Field(
        default=2,
        ge=0,
        description="NPM certificate id, in the order shown by the web UI.",
    )
    npm_email: str = Field(
        default="npm_email@email.co",
        min_length=1,
        description="Nginx Proxy Manager login identity.",
    )
    npm_password: SecretStr = Field(
        default=SecretStr("npm_password"),
        description="Nginx Proxy Manager login secret.",
    )
    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("add_host_debug", "debug"),
        description="Verbose tracing of requests and raw responses.",
    )
    http_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default=f"add-host/{__version__}",
        min_length=1,
        description="User-Agent sent to both APIs.",
    )

    @field_validator("pihole_url", "npm_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("domain_suffix")
    @classmethod
    def _strip_leading_dot(cls, value: str) -> str:
        value = value.strip().lstrip(".")
        if not value:
            raise ValueError("domain_suffix must not be empty")
        return value

    @property
    def cname_target(self) -> str:
        return self.proxy_target or f"proxy.{self.domain_suffix}"

    def placeholders(self) -> list[str]:
        """Names of settings still holding the shipped placeholder value."""

        fields = {
            "pihole_url": self.pihole_url,
            "npm_url": self.npm_url,
            "domain_suffix": self.domain_suffix,
        }
        return [name for name, value in fields.items() if PLACEHOLDER in value]
