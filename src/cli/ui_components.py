"""CLI UI components (Rich).

Why separate components:
- Keeps command logic free of presentation details.
- The usage text and the summary are reused by the doctor and by tests.
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import AppSettings
from core.domain.models import HostRequest
from core.services.host_pipeline import PipelineHooks, RunReport


def console_hooks(console: Console) -> PipelineHooks:
    """Pipeline callbacks that print themed status lines."""

    def _line(prefix: str, style: str):
        def emit(message: str) -> None:
            console.print(Text(f"{prefix}{message}", style=style))

        return emit

    return PipelineHooks(
        info=_line("ℹ️  ", "info"),
        success=_line("✅ ", "success"),
        warning=_line("⚠️  ", "warning"),
        error=_line("❌ ", "error"),
    )


def build_usage(prog: str, settings: AppSettings) -> Text:
    """Usage text in the same shape as `--help`, with the configured suffix."""

    suffix = settings.domain_suffix
    text = Text()
    text.append("ℹ️  Usage: ", style="bold blue")
    text.append(f"{prog} [OPTIONS]\n\n")
    text.append("Required arguments (at least one operation must be selected):\n", style="bold")
    text.append(f"  --dest SUBDOMAIN       Subdomain to create (e.g., 'toto' creates toto.{suffix})\n")
    text.append("  --source IP:PORT       Backend service IP and port (e.g., '192.168.1.50:3456')\n\n")
    text.append("Operation selection:\n", style="bold")
    text.append("  --cname-only           Only add CNAME record to Pi-hole (requires --dest)\n")
    text.append("  --proxy-only           Only add proxy host to Nginx Proxy Manager (requires --dest and --source)\n")
    text.append("  (If neither is specified, both operations will be performed)\n\n")
    text.append("Optional arguments:\n", style="bold")
    text.append("  --force                Overwrite existing entries if they exist\n")
    text.append("  --debug                Enable verbose debug output\n")
    text.append("  --help                 Display this help message\n\n")
    text.append("Examples:\n", style="bold")
    text.append(f"  {prog} --dest toto --source 192.168.1.50:3456\n")
    text.append(f"  {prog} --dest toto --cname-only\n")
    text.append(f"  {prog} --dest toto --source 192.168.1.50:3456 --proxy-only --debug")
    return text


def print_start(console: Console, request: HostRequest) -> None:
    console.print(Text(f"ℹ️  🚀 Starting configuration for {request.fqdn}", style="info"))
    if request.backend is not None:
        console.print(Text(f"ℹ️  🔌 Backend service: {request.backend}", style="info"))


def build_summary_table(report: RunReport) -> Table:
    """Key/value table describing what was configured."""

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("• Domain:", report.fqdn)
    if report.mode.runs_dns:
        table.add_row("• CNAME points to:", report.cname_target)
    if report.mode.runs_proxy:
        table.add_row("• Backend service:", str(report.backend))
        table.add_row("• HTTPS:", f"✅ (Certificate ID: {report.certificate_id})")
    return table


def build_summary_panel(report: RunReport, *, debug: bool = False) -> Panel:
    """Final panel, differentiated by outcome and by which steps ran."""

    if report.ok:
        parts: list = [Text("Configuration complete! 🎉", style="success"), build_summary_table(report)]
        if report.mode.runs_proxy:
            parts.append(Text(f"\n🌐 Your service should be accessible at: https://{report.fqdn}"))
        return Panel(Group(*parts), title="📋 Summary", border_style="green")

    body = Text("⚠️ Not all operations completed successfully. Check errors above.", style="warning")
    for step in report.steps:
        status = "OK" if step.ok else "FAILED"
        body.append(f"\n  • {step.name}: {status}", style="success" if step.ok else "error")
    if not debug:
        body.append("\n\n💡 Tip: Run with ")
        body.append("--debug", style="warning")
        body.append(" flag for more detailed output")
    return Panel(body, title="📋 Summary", border_style="yellow")
