"""
Plan use case — probe the host and report the install decision.

Read-only: no prompts, no filesystem writes. Backs ``appfast-bootstrap plan``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from appfast_bootstrap.core.models.plan import InstallPlan, VersionChoice
from appfast_bootstrap.core.models.settings import InstallerSettings
from appfast_bootstrap.core.models.tooling import ToolRequirement, ToolStatus
from appfast_bootstrap.core.services import planner
from appfast_bootstrap.core.services.environment import detect_nvm
from appfast_bootstrap.core.services.platform_probe import SystemSignals, probe
from appfast_bootstrap.core.services.tool_availability import check, default_requirements
from appfast_bootstrap.core.services.version_resolver import latest

ToolChecker = Callable[[Sequence[ToolRequirement]], list[ToolStatus]]
LatestResolver = Callable[[str, float], str | None]


def build_plan(
    settings: InstallerSettings | None = None,
    *,
    signals: SystemSignals | None = None,
    check_tools: ToolChecker | None = None,
    use_latest: bool = False,
    resolve_latest: LatestResolver | None = None,
) -> InstallPlan:
    """Run the decision engine against the current host.

    Args:
        settings: Installer settings (defaults if None).
        signals: Host signals; collected from the running system if None.
        check_tools: Tool checker; ``tool_availability.check`` if None.
        use_latest: Resolve the latest release instead of the pinned one.
        resolve_latest: Release index lookup; ``version_resolver.latest`` if None.
    """
    settings = settings or InstallerSettings()
    if signals is None:
        signals = SystemSignals.collect()
    if check_tools is None:
        def check_tools(reqs: Sequence[ToolRequirement]) -> list[ToolStatus]:
            return check(reqs, timeout=settings.tool_timeout)

    platform = probe(signals)
    requirements = default_requirements(settings)
    statuses = check_tools(requirements)

    choice = VersionChoice()
    if use_latest:
        resolver = resolve_latest or latest
        choice = VersionChoice(
            use_latest=True,
            latest=resolver(settings.release_index_url, settings.network_timeout),
        )

    return planner.plan(
        platform,
        statuses,
        choice,
        settings=settings,
        requirements=requirements,
        nvm_installed=bool(detect_nvm().get("installed")),
    )
