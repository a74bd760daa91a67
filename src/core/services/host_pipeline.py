"""Host publishing orchestration.

The CLI validates flags into a `HostRequest` and delegates everything else to
`run_host_pipeline`: the DNS step, then the proxy step, each one failing on
its own. Printing stays out of this module; progress is reported through
`PipelineHooks` so the pipeline can be driven from tests without a console.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from adapters.pihole import PiholeRegistrar
from adapters.proxy_manager import ProxyManagerClient
from core.config import AppSettings
from core.domain.mode import Mode
from core.domain.models import BackendAddress, HostRequest
from core.errors import AddHostError, ApiError, ConflictError, InvocationError
from core.interfaces.registrar import DnsRegistrar, ProxyConfigurator
from core.logging import get_logger

logger = get_logger(__name__)

DNS_STEP = "dns"
PROXY_STEP = "proxy"

DEBUG_HINT = "Run with --debug for more information."


def _noop(message: str) -> None:
    return None


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    info: Callable[[str], None] = _noop
    success: Callable[[str], None] = _noop
    warning: Callable[[str], None] = _noop
    error: Callable[[str], None] = _noop


@dataclass
class StepResult:
    """Outcome of one step."""

    name: str
    ok: bool
    message: str
    detail: str | None = None
    hint: str | None = None
    proxy_host_id: int | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


@dataclass
class RunReport:
    """Output of a pipeline invocation."""

    fqdn: str
    mode: Mode
    cname_target: str
    certificate_id: int
    backend: BackendAddress | None = None
    steps: list[StepResult] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        """Last non-zero step code, 0 when every attempted step succeeded."""

        code = 0
        for step in self.steps:
            if step.exit_code != 0:
                code = step.exit_code
        return code

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def step(self, name: str) -> StepResult | None:
        for step in self.steps:
            if step.name == name:
                return step
        return None


def _failure(
    name: str, exc: AddHostError, hooks: PipelineHooks, debug: bool = False
) -> StepResult:
    detail = None
    hint = None
    if isinstance(exc, ApiError):
        detail = exc.body
        hint = exc.hint
        if hint and not debug:
            hint = f"{hint} {DEBUG_HINT}"
    elif getattr(exc, "body", None):
        detail = exc.body

    hooks.error(str(exc))
    if detail:
        hooks.error(f"Response: {detail}")
    if hint:
        hooks.warning(hint)
    return StepResult(name=name, ok=False, message=str(exc), detail=detail, hint=hint)


def run_dns_step(
    request: HostRequest,
    settings: AppSettings,
    registrar: DnsRegistrar,
    hooks: PipelineHooks,
) -> StepResult:
    target = settings.cname_target
    hooks.info(f"Adding CNAME record to Pi-hole: {request.fqdn} → {target}")
    try:
        registrar.create_cname(request.fqdn, target)
    except AddHostError as exc:
        return _failure(DNS_STEP, exc, hooks, request.debug)

    hooks.success("CNAME record added successfully")
    return StepResult(name=DNS_STEP, ok=True, message=f"{request.fqdn} → {target}")


def run_proxy_step(
    request: HostRequest,
    settings: AppSettings,
    configurator: ProxyConfigurator,
    hooks: PipelineHooks,
) -> StepResult:
    """Authenticate, check for a conflicting host, optionally delete it, create."""

    hooks.info(f"Configuring Nginx Proxy Manager for {request.fqdn}")
    try:
        if request.backend is None:
            raise InvocationError(
                "Error: Source IP:PORT (--source) is required for proxy configuration"
            )
        token = configurator.authenticate()

        existing_id = configurator.find_existing(request.fqdn, token)
        if existing_id is not None:
            if not request.force:
                raise ConflictError(request.fqdn, existing_id)
            hooks.warning(f"Deleting existing proxy host (ID: {existing_id})...")
            configurator.delete_host(existing_id, token)
            hooks.warning(f"Removed existing proxy host (ID: {existing_id})")

        new_id = configurator.create_host(
            request.fqdn, request.backend, token, settings.certificate_id
        )
    except AddHostError as exc:
        return _failure(PROXY_STEP, exc, hooks, request.debug)
    finally:
        configurator.close()

    hooks.success(f"Proxy host configured successfully with HTTPS (ID: {new_id})")
    return StepResult(
        name=PROXY_STEP,
        ok=True,
        message=f"{request.fqdn} → {request.backend}",
        proxy_host_id=new_id,
    )


def run_host_pipeline(
    request: HostRequest,
    settings: AppSettings,
    *,
    registrar: DnsRegistrar | None = None,
    configurator: ProxyConfigurator | None = None,
    hooks: PipelineHooks | None = None,
) -> RunReport:
    """Run the steps selected by `request.mode`, strictly one after the other.

    A DNS failure does not stop the proxy step and a proxy failure does not
    undo the DNS record.
    """

    hooks = hooks or PipelineHooks()
    report = RunReport(
        fqdn=request.fqdn,
        mode=request.mode,
        cname_target=settings.cname_target,
        certificate_id=settings.certificate_id,
        backend=request.backend,
    )

    logger.debug("Running %s for %s", request.mode.value, request.fqdn)

    if request.mode.runs_dns:
        registrar = registrar or PiholeRegistrar(settings)
        report.steps.append(run_dns_step(request, settings, registrar, hooks))

    if request.mode.runs_proxy:
        configurator = configurator or ProxyManagerClient(settings)
        report.steps.append(run_proxy_step(request, settings, configurator, hooks))

    return report
