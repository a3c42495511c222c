"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from appfast_bootstrap.core.models import PlatformInfo, ToolStatus, InstallPlan
"""

from appfast_bootstrap.core.models.action import Action, Receipt
from appfast_bootstrap.core.models.plan import (
    InstallPlan,
    PlanFailure,
    PlanState,
    VersionChoice,
)
from appfast_bootstrap.core.models.platform import (
    Arch,
    OsFamily,
    PackageManager,
    PlatformInfo,
)
from appfast_bootstrap.core.models.release import ReleaseAsset
from appfast_bootstrap.core.models.settings import InstallerSettings
from appfast_bootstrap.core.models.tooling import ToolRequirement, ToolRole, ToolStatus

__all__ = [
    # action.py
    "Action",
    "Arch",
    "InstallPlan",
    # settings.py
    "InstallerSettings",
    "OsFamily",
    "PackageManager",
    "PlanFailure",
    "PlanState",
    # platform.py
    "PlatformInfo",
    "Receipt",
    # release.py
    "ReleaseAsset",
    # tooling.py
    "ToolRequirement",
    "ToolRole",
    "ToolStatus",
    # plan.py
    "VersionChoice",
]
