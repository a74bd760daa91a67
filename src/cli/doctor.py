"""Doctor command for environment diagnostics."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_client
from adapters.proxy_manager import ProxyManagerClient
from core.config import AppSettings, write_user_env_vars
from core.errors import AddHostError

app = typer.Typer(
    no_args_is_help=True,
    help="Environment diagnostics and configuration checks.",
    context_settings={"help_option_names": ["--help"]},
)

_console = Console()

OK = "OK"
FAIL = "FAIL"


@dataclass
class Check:
    name: str
    status: str
    detail: str

    @property
    def failed(self) -> bool:
        return self.status == FAIL


def _check_http(
    base_url: str,
    path: str,
    settings: AppSettings,
    transport: httpx.BaseTransport | None = None,
) -> tuple[bool, str]:
    try:
        with build_client(base_url, settings, transport=transport) as client:
            response = client.get(path)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


def _check_npm_login(
    settings: AppSettings, transport: httpx.BaseTransport | None = None
) -> tuple[bool, str]:
    with ProxyManagerClient(settings, transport=transport) as npm:
        try:
            npm.authenticate()
        except AddHostError as exc:
            return False, str(exc)
    return True, f"Token issued for {settings.npm_email}"


def collect_checks(
    settings: AppSettings, *, transport: httpx.BaseTransport | None = None
) -> list[Check]:
    """Configuration checks, then connectivity (best-effort) to both APIs."""

    checks: list[Check] = []

    placeholders = settings.placeholders()
    if placeholders:
        checks.append(Check("Configuration", FAIL, "Still set to CHANGEME: " + ", ".join(placeholders)))
    else:
        checks.append(Check("Configuration", OK, f"*.{settings.domain_suffix} → {settings.cname_target}"))
    checks.append(Check("Certificate", OK, f"ID {settings.certificate_id}"))

    ok_pihole, detail_pihole = _check_http(settings.pihole_url, "/api/info/version", settings, transport)
    checks.append(Check("Pi-hole API", OK if ok_pihole else FAIL, detail_pihole))

    ok_npm, detail_npm = _check_http(settings.npm_url, "/api/", settings, transport)
    checks.append(Check("Nginx Proxy Manager API", OK if ok_npm else FAIL, detail_npm))

    if ok_npm:
        ok_login, detail_login = _check_npm_login(settings, transport)
        checks.append(Check("Nginx Proxy Manager login", OK if ok_login else FAIL, detail_login))

    return checks


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    checks = collect_checks(settings)

    table = Table(title="add-host Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    for check in checks:
        table.add_row(check.name, check.status, check.detail)

    _console.print(table)

    if any(check.failed for check in checks):
        _console.print(
            "\n[yellow]Note:[/yellow] run `add-host doctor setup` to store URLs and credentials."
        )
        raise typer.Exit(code=1)


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env).

    No manual .env editing needed.
    """

    current = AppSettings()

    pihole_url = typer.prompt("Pi-hole URL", default=current.pihole_url, show_default=True).strip()
    npm_url = typer.prompt("Nginx Proxy Manager URL", default=current.npm_url, show_default=True).strip()
    suffix = typer.prompt("Domain suffix", default=current.domain_suffix, show_default=True).strip()
    cert_id = typer.prompt("Certificate ID", default=current.certificate_id, type=int, show_default=True)
    email = typer.prompt("NPM email", default=current.npm_email, show_default=True).strip()
    password = typer.prompt("NPM password", hide_input=True, confirmation_prompt=False).strip()

    if not pihole_url or not npm_url or not suffix:
        raise typer.BadParameter("URLs and domain suffix are required")

    env_path = write_user_env_vars(
        {
            "ADD_HOST_PIHOLE_URL": pihole_url,
            "ADD_HOST_NPM_URL": npm_url,
            "ADD_HOST_DOMAIN_SUFFIX": suffix,
            "ADD_HOST_CERTIFICATE_ID": str(cert_id),
            "ADD_HOST_NPM_EMAIL": email,
            "ADD_HOST_NPM_PASSWORD": password,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
