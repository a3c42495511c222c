"""
Tool availability — which required executables are on PATH.

Read-only probes: ``shutil.which`` for presence and, only for
requirements with a minimum version, one ``--version`` invocation
bounded by a timeout.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence

from appfast_bootstrap.core.models.settings import InstallerSettings
from appfast_bootstrap.core.models.tooling import ToolRequirement, ToolRole, ToolStatus
from appfast_bootstrap.core.services.versioning import meets_minimum

logger = logging.getLogger(__name__)

# Preference order for fetching files; first present one is used.
DOWNLOAD_TOOLS: tuple[str, ...] = ("curl", "wget")


def default_requirements(settings: InstallerSettings | None = None) -> list[ToolRequirement]:
    """The tools SvelteAppFast needs, in the order they are reported."""
    settings = settings or InstallerSettings()
    return [
        ToolRequirement(name="unzip", role=ToolRole.HARD, label="unzip"),
        ToolRequirement(name="git", role=ToolRole.HARD, label="Git"),
        *(
            ToolRequirement(name=tool, role=ToolRole.DOWNLOAD, label=tool)
            for tool in DOWNLOAD_TOOLS
        ),
        ToolRequirement(
            name="node",
            role=ToolRole.RUNTIME,
            min_version=settings.node_min_version,
            label="Node.js",
        ),
    ]


def get_tool_version(tool: str, timeout: float = 10) -> str | None:
    """Return the first non-empty line a tool prints for its version.

    Returns ``None`` if the tool is missing, times out, or prints nothing.
    """
    cmd = [tool, "--version"]
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Timed out after %ss asking %s for its version", timeout, tool)
        return None
    except OSError as exc:
        logger.warning("Could not run %s: %s", cmd[0], exc)
        return None

    # Some tools write version to stderr
    output = (result.stdout or "") + (result.stderr or "")
    for line in output.splitlines():
        if line.strip():
            return line.strip()
    return None


def check_tool(requirement: ToolRequirement, timeout: float = 10) -> ToolStatus:
    """Probe a single requirement."""
    path = shutil.which(requirement.name)
    if path is None:
        logger.debug("%s not found on PATH", requirement.name)
        return ToolStatus(name=requirement.name, found=False)

    if requirement.min_version is None:
        return ToolStatus(name=requirement.name, found=True, path=path)

    version = get_tool_version(requirement.name, timeout=timeout)
    ok = meets_minimum(version, requirement.min_version)
    if not ok:
        logger.info(
            "%s version %r does not meet minimum %s",
            requirement.name, version, requirement.min_version,
        )
    return ToolStatus(
        name=requirement.name,
        found=True,
        version=version,
        meets_minimum=ok,
        path=path,
    )


def check(
    requirements: Sequence[ToolRequirement],
    timeout: float = 10,
) -> list[ToolStatus]:
    """Check every requirement and report all of them, in input order.

    A failure while probing one tool never stops the others.
    """
    statuses: list[ToolStatus] = []
    for requirement in requirements:
        try:
            statuses.append(check_tool(requirement, timeout=timeout))
        except Exception as exc:
            logger.warning("Probe for %s failed: %s", requirement.name, exc)
            statuses.append(ToolStatus(name=requirement.name, found=False))
    return statuses


def select_download_tool(statuses: Sequence[ToolStatus]) -> str | None:
    """First present download tool, in ``DOWNLOAD_TOOLS`` order."""
    found = {s.name for s in statuses if s.found}
    for tool in DOWNLOAD_TOOLS:
        if tool in found:
            return tool
    return None
