"""
Install planner — compose probe, tool checks and version choice into
one InstallPlan.

States::

    INIT → PLATFORM_CHECKED → TOOLS_CHECKED → VERSION_RESOLVED
         → ASSET_BUILT → READY

Any guard that fails moves the plan to FAILED and records the
transition it failed at. Pure: no I/O, no prompts.

Guards:
    PLATFORM_CHECKED  os family and arch supported (Windows needs WSL)
    TOOLS_CHECKED     no hard requirement missing
    VERSION_RESOLVED  latest if chosen and known, else the pinned version
    ASSET_BUILT       asset name built for the resolved version
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from appfast_bootstrap.core.errors import ErrorKind, UnsupportedPlatform
from appfast_bootstrap.core.models.plan import (
    InstallPlan,
    PlanFailure,
    PlanState,
    VersionChoice,
)
from appfast_bootstrap.core.models.platform import Arch, OsFamily, PlatformInfo
from appfast_bootstrap.core.models.settings import InstallerSettings
from appfast_bootstrap.core.models.tooling import ToolRequirement, ToolRole, ToolStatus
from appfast_bootstrap.core.services import remediation as hints
from appfast_bootstrap.core.services.asset_builder import build
from appfast_bootstrap.core.services.tool_availability import (
    DOWNLOAD_TOOLS,
    default_requirements,
    select_download_tool,
)
from appfast_bootstrap.core.services.versioning import parse_version

logger = logging.getLogger(__name__)


def _failed(
    platform: PlatformInfo,
    tools: Sequence[ToolStatus],
    *,
    at: PlanState,
    kind: ErrorKind,
    message: str,
    missing: dict[str, str],
    tool: str | None = None,
    download_tool: str | None = None,
) -> InstallPlan:
    logger.info("Plan failed at %s: %s", at, message)
    return InstallPlan(
        platform=platform,
        tools=tuple(tools),
        missing_hard=frozenset(missing),
        remediation=dict(missing),
        state=PlanState.FAILED,
        download_tool=download_tool,
        failure=PlanFailure(kind=kind, failed_at=at, message=message, tool=tool),
    )


def _check_platform(platform: PlatformInfo, tools: Sequence[ToolStatus]) -> InstallPlan | None:
    if platform.os_family == OsFamily.WINDOWS:
        return _failed(
            platform, tools,
            at=PlanState.PLATFORM_CHECKED,
            kind=ErrorKind.UNSUPPORTED_PLATFORM,
            message="Windows detected. This installer requires Windows Subsystem for Linux (WSL).",
            missing={"wsl": hints.wsl_remediation()},
            tool="wsl",
        )
    if platform.os_family == OsFamily.UNSUPPORTED or platform.arch == Arch.UNSUPPORTED:
        return _failed(
            platform, tools,
            at=PlanState.PLATFORM_CHECKED,
            kind=ErrorKind.UNSUPPORTED_PLATFORM,
            message="Unsupported operating system or architecture.",
            missing={"platform": hints.unsupported_platform_remediation(platform)},
            tool="platform",
        )
    return None


def _missing_tools(
    platform: PlatformInfo,
    requirements: Sequence[ToolRequirement],
    statuses: Sequence[ToolStatus],
    nvm_installed: bool,
) -> tuple[dict[str, str], list[tuple[str, ErrorKind, str]]]:
    """Collect unmet hard requirements in requirement order.

    Returns the tool → remediation mapping and, in the same order,
    ``(tool, kind, message)`` triples describing each problem.
    """
    by_name = {s.name: s for s in statuses}
    manager = platform.package_manager
    missing: dict[str, str] = {}
    problems: list[tuple[str, ErrorKind, str]] = []
    download_checked = False

    for req in requirements:
        status = by_name.get(req.name)
        found = status is not None and status.found

        if req.role == ToolRole.HARD and not found:
            missing[req.name] = hints.install_command(manager, req.name)
            problems.append((
                req.name,
                ErrorKind.MISSING_HARD_DEPENDENCY,
                f"{req.display_name} could not be found, but is required.",
            ))

        elif req.role == ToolRole.DOWNLOAD and not download_checked:
            download_checked = True
            if select_download_tool(statuses) is None:
                missing[DOWNLOAD_TOOLS[0]] = hints.download_tool_remediation(manager)
                problems.append((
                    DOWNLOAD_TOOLS[0],
                    ErrorKind.MISSING_HARD_DEPENDENCY,
                    "Neither cURL nor wget found.",
                ))

        elif req.role == ToolRole.RUNTIME:
            minimum = req.min_version or "0"
            if not found:
                missing[req.name] = hints.node_install_remediation(minimum)
                problems.append((
                    req.name,
                    ErrorKind.MISSING_HARD_DEPENDENCY,
                    f"{req.display_name} is required.",
                ))
            elif parse_version(status.version) is None:
                missing[req.name] = hints.node_install_remediation(minimum)
                problems.append((
                    req.name,
                    ErrorKind.VERSION_CHECK_FAILED,
                    f"Failed to get the {req.display_name} version "
                    f"(got {status.version!r}). Please ensure it is properly installed.",
                ))
            elif status.meets_minimum is False:
                missing[req.name] = hints.node_upgrade_remediation(minimum, nvm_installed)
                problems.append((
                    req.name,
                    ErrorKind.MISSING_HARD_DEPENDENCY,
                    f"{req.display_name} version {minimum} or higher is required "
                    f"(current version: {status.version}).",
                ))

    return missing, problems


def plan(
    platform: PlatformInfo,
    tool_statuses: Sequence[ToolStatus],
    version_choice: VersionChoice | None = None,
    *,
    settings: InstallerSettings | None = None,
    requirements: Sequence[ToolRequirement] | None = None,
    nvm_installed: bool = False,
) -> InstallPlan:
    """Build the install plan.

    Args:
        platform: Result of the platform probe.
        tool_statuses: Result of the tool check, after any interactive
            runtime remediation has already been attempted.
        version_choice: Whether the user asked for the latest release,
            and what the release index returned.
        settings: Pinned versions and upstream locations.
        requirements: The requirements ``tool_statuses`` answer;
            defaults to ``default_requirements(settings)``.
        nvm_installed: Selects the Node.js upgrade hint.
    """
    settings = settings or InstallerSettings()
    version_choice = version_choice or VersionChoice()
    if requirements is None:
        requirements = default_requirements(settings)
    tools = tuple(tool_statuses)

    # INIT → PLATFORM_CHECKED
    failed = _check_platform(platform, tools)
    if failed is not None:
        return failed

    # PLATFORM_CHECKED → TOOLS_CHECKED
    download_tool = select_download_tool(tools)
    missing, problems = _missing_tools(platform, requirements, tools, nvm_installed)
    if problems:
        tool, kind, message = problems[0]
        return _failed(
            platform, tools,
            at=PlanState.TOOLS_CHECKED,
            kind=kind,
            message=message,
            missing=missing,
            tool=tool,
            download_tool=download_tool,
        )

    # TOOLS_CHECKED → VERSION_RESOLVED
    if version_choice.use_latest and version_choice.latest:
        version = version_choice.latest
    else:
        if version_choice.use_latest:
            logger.warning(
                "Latest version unknown, using supported version %s",
                settings.supported_version,
            )
        version = settings.supported_version

    # VERSION_RESOLVED → ASSET_BUILT
    try:
        asset = build(
            version,
            platform.os_family,
            platform.arch,
            project=settings.backend_project,
            ext=settings.archive_ext,
            download_base=settings.download_base,
        )
    except UnsupportedPlatform as exc:
        return _failed(
            platform, tools,
            at=PlanState.ASSET_BUILT,
            kind=ErrorKind.UNSUPPORTED_PLATFORM,
            message=exc.message,
            missing={"platform": hints.unsupported_platform_remediation(platform)},
            tool="platform",
            download_tool=download_tool,
        )
    except ValueError as exc:
        return _failed(
            platform, tools,
            at=PlanState.ASSET_BUILT,
            kind=ErrorKind.VERSION_CHECK_FAILED,
            message=f"Invalid {settings.backend_project} version {version!r}: {exc}",
            missing={"version": f"Set supported_version in appfast.yml (see {settings.releases_page})."},
            tool="version",
            download_tool=download_tool,
        )

    # ASSET_BUILT → READY
    logger.info("Plan ready: %s via %s", asset.file_name, download_tool)
    return InstallPlan(
        platform=platform,
        tools=tools,
        asset=asset,
        state=PlanState.READY,
        download_tool=download_tool,
        version=asset.version,
    )
