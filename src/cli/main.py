"""add-host CLI (typer).

`add-host --dest app --source 10.0.0.5:8080` publishes `app.<suffix>`:
a CNAME in Pi-hole and a proxy host in Nginx Proxy Manager.
"""

from __future__ import annotations

import sys
from typing import Optional

import typer
from pydantic import ValidationError

from adapters.pihole import PiholeRegistrar
from adapters.proxy_manager import ProxyManagerClient
from cli.doctor import app as doctor_app
from cli.ui_components import build_summary_panel, build_usage, console_hooks, print_start
from core.config import AppSettings
from core.domain.models import HostRequest
from core.errors import InvocationError
from core.interfaces.registrar import DnsRegistrar, ProxyConfigurator
from core.logging import configure_logging, console, get_logger
from core.services.host_pipeline import run_host_pipeline

PROG_NAME = "add-host"

app = typer.Typer(
    add_completion=False,
    # `--help` is our own eager flag so it prints the same usage as input errors.
    context_settings={"help_option_names": []},
    rich_markup_mode=None,
)
app.add_typer(doctor_app, name="doctor")

logger = get_logger(__name__)


def load_settings() -> AppSettings:
    return AppSettings()


def build_services(settings: AppSettings) -> tuple[DnsRegistrar, ProxyConfigurator]:
    return PiholeRegistrar(settings), ProxyManagerClient(settings)


def _settings_or_exit() -> AppSettings:
    try:
        return load_settings()
    except ValidationError as exc:
        console.print(f"❌ Invalid configuration: {exc}", style="error", markup=False)
        raise typer.Exit(code=1) from exc


def _usage_and_exit(settings: AppSettings, code: int) -> None:
    console.print(build_usage(PROG_NAME, settings))
    raise typer.Exit(code=code)


def _help_callback(value: bool) -> None:
    if not value:
        return
    try:
        settings = load_settings()
    except ValidationError:
        # Usage still prints with a broken environment; the suffix falls back to the placeholder.
        settings = AppSettings.model_construct()
    _usage_and_exit(settings, 0)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    dest: Optional[str] = typer.Option(None, "--dest", metavar="SUBDOMAIN", help="Subdomain to create."),
    source: Optional[str] = typer.Option(None, "--source", metavar="IP:PORT", help="Backend service IP and port."),
    force: bool = typer.Option(False, "--force", help="Overwrite existing entries if they exist."),
    cname_only: bool = typer.Option(False, "--cname-only", help="Only add the CNAME record to Pi-hole."),
    proxy_only: bool = typer.Option(False, "--proxy-only", help="Only add the proxy host to Nginx Proxy Manager."),
    debug: bool = typer.Option(False, "--debug", help="Enable verbose debug output."),
    show_help: bool = typer.Option(
        False,
        "--help",
        is_eager=True,
        callback=_help_callback,
        help="Display this help message.",
    ),
) -> None:
    """Create a Pi-hole CNAME and an Nginx Proxy Manager host for a subdomain."""

    if ctx.invoked_subcommand is not None:
        return

    settings = _settings_or_exit()
    debug = debug or settings.debug
    configure_logging(debug)
    if debug:
        logger.debug("Debug mode enabled! 🐛")

    try:
        request = HostRequest.from_cli(
            dest=dest,
            source=source,
            domain_suffix=settings.domain_suffix,
            force=force,
            cname_only=cname_only,
            proxy_only=proxy_only,
            debug=debug,
        )
    except InvocationError as exc:
        console.print(f"❌ {exc}", style="error", markup=False)
        if exc.show_usage:
            _usage_and_exit(settings, 1)
        raise typer.Exit(code=1) from exc

    print_start(console, request)

    registrar, configurator = build_services(settings)
    report = run_host_pipeline(
        request,
        settings,
        registrar=registrar,
        configurator=configurator,
        hooks=console_hooks(console),
    )

    console.print()
    console.print(build_summary_panel(report, debug=debug))
    raise typer.Exit(code=report.exit_code)


def run() -> None:
    # Workaround for UnicodeEncodeError on Windows terminals (cp1252 vs utf-8).
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")
    app(prog_name=PROG_NAME)


if __name__ == "__main__":
    run()
