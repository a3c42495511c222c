"""
Install use case — the interactive installer.

Feeds the user's answers into the decision engine, then carries out
the plan step by step through adapters:

    confirm → probe → tool check → (nvm + Node.js LTS) → plan
    → version choice → project location → clone frontend
    → download + extract backend → npm install

Every failure raises an ``InstallerError``. Nothing continues after a
failure and nothing is rolled back.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from appfast_bootstrap.adapters.archive.unzip import UnzipAdapter
from appfast_bootstrap.adapters.network.download import DownloadAdapter
from appfast_bootstrap.adapters.registry import AdapterRegistry
from appfast_bootstrap.adapters.shell.command import ShellCommandAdapter
from appfast_bootstrap.adapters.vcs.git import GitAdapter
from appfast_bootstrap.core.errors import (
    AssetNotFound,
    ExternalToolFailure,
    FilesystemError,
    InstallerError,
    NetworkUnavailable,
    UserCancelled,
)
from appfast_bootstrap.core.models.action import Action, Receipt
from appfast_bootstrap.core.models.plan import InstallPlan, VersionChoice
from appfast_bootstrap.core.models.platform import OsFamily, PlatformInfo
from appfast_bootstrap.core.models.release import ReleaseAsset
from appfast_bootstrap.core.models.settings import InstallerSettings
from appfast_bootstrap.core.models.tooling import ToolRequirement, ToolRole, ToolStatus
from appfast_bootstrap.core.services import planner
from appfast_bootstrap.core.services.environment import detect_nvm, nvm_dir, prepend_to_path
from appfast_bootstrap.core.services.platform_probe import SystemSignals, probe
from appfast_bootstrap.core.services.remediation import (
    NVM_HOMEPAGE,
    unknown_distribution_warning,
)
from appfast_bootstrap.core.services.tool_availability import (
    check,
    default_requirements,
    select_download_tool,
)
from appfast_bootstrap.core.services.version_resolver import latest
from appfast_bootstrap.ui.prompts import Prompter

logger = logging.getLogger(__name__)

PINNED = "supported"
LATEST = "latest"

FRONTEND_DIR = "frontend"
BACKEND_DIR = "pocketbase"

_PLATFORM_BANNERS = {
    OsFamily.WSL: "Running in Windows Subsystem for 🐧 Linux (WSL)",
    OsFamily.WINDOWS: "🪟 Windows detected",
    OsFamily.DARWIN: "🍎 macOS detected",
    OsFamily.LINUX: "🐧 Linux detected",
}

ToolChecker = Callable[[Sequence[ToolRequirement]], list[ToolStatus]]
LatestResolver = Callable[[str, float], str | None]


@dataclass
class InstallResult:
    """Where the new project ended up and the plan that built it."""

    project_name: str
    install_folder: Path
    plan: InstallPlan

    @property
    def frontend_dir(self) -> Path:
        return self.install_folder / FRONTEND_DIR

    @property
    def backend_dir(self) -> Path:
        return self.install_folder / BACKEND_DIR

    def to_dict(self) -> dict:
        return {
            "project_name": self.project_name,
            "install_folder": str(self.install_folder),
            "frontend_dir": str(self.frontend_dir),
            "backend_dir": str(self.backend_dir),
            "plan": self.plan.to_dict(),
        }


def build_registry(download_tool: str | None) -> AdapterRegistry:
    """Registry with the real git, unzip, shell and download adapters."""
    registry = AdapterRegistry()
    registry.register(GitAdapter())
    registry.register(UnzipAdapter())
    registry.register(ShellCommandAdapter())
    if download_tool:
        registry.register(DownloadAdapter(download_tool))
    return registry


class InstallFlow:
    """One interactive installation. Every collaborator is injectable."""

    def __init__(
        self,
        prompter: Prompter,
        settings: InstallerSettings | None = None,
        *,
        registry: AdapterRegistry | None = None,
        signals: SystemSignals | None = None,
        check_tools: ToolChecker | None = None,
        resolve_latest: LatestResolver | None = None,
        nvm_detector: Callable[[], dict] | None = None,
        cwd: Path | None = None,
    ):
        self.prompter = prompter
        self.settings = settings or InstallerSettings()
        self._registry = registry
        self._signals = signals
        self._check_tools = check_tools
        self._resolve_latest = resolve_latest or latest
        self._nvm_detector = nvm_detector or detect_nvm
        self.cwd = cwd or Path.cwd()

    # ── Entry point ─────────────────────────────────────────────

    def run(self) -> InstallResult:
        self._confirm_start()

        platform = self._detect_platform()
        requirements = default_requirements(self.settings)

        self.prompter.info("🧪 Checking for dependencies...")
        statuses = self._check(requirements)
        registry = self._registry or build_registry(select_download_tool(statuses))
        statuses = self._ensure_runtime(registry, platform, requirements, statuses)

        # Fail on platform/tools before asking anything else.
        nvm_installed = bool(self._nvm_detector().get("installed"))
        preliminary = planner.plan(
            platform, statuses, VersionChoice(),
            settings=self.settings,
            requirements=requirements,
            nvm_installed=nvm_installed,
        )
        preliminary.raise_for_failure()
        node = preliminary.tool("node")
        if node is not None and node.version:
            self.prompter.success(f"✅ Node.js version {node.version} detected")

        plan = planner.plan(
            platform, statuses, self._choose_version(),
            settings=self.settings,
            requirements=requirements,
            nvm_installed=nvm_installed,
        )
        plan.raise_for_failure()

        project_name, folder = self._choose_location()
        frontend = self._clone_frontend(registry, folder)
        self._install_backend(registry, folder, plan)
        self._install_frontend_deps(registry, frontend)

        result = InstallResult(project_name=project_name, install_folder=folder, plan=plan)
        self._print_next_steps(result)
        return result

    # ── Decision steps ──────────────────────────────────────────

    def _confirm_start(self) -> None:
        self.prompter.info(f"Installing 🚀 {self.settings.product_name}")
        self.prompter.info(
            f"This installer will get you started with {self.settings.product_name} in no time! "
            "Missing dependencies will be pointed out or installed for you."
        )
        if not self.prompter.confirm("Do you want to proceed?"):
            raise UserCancelled()

    def _detect_platform(self) -> PlatformInfo:
        self.prompter.info("🧪 Detecting operating system...")
        platform = probe(self._signals)

        banner = _PLATFORM_BANNERS.get(platform.os_family)
        if banner:
            self.prompter.info(banner)

        if platform.unknown_distribution:
            self.prompter.warn(unknown_distribution_warning(self.settings.node_min_version))
            if not self.prompter.confirm("Do you want to proceed?"):
                raise UserCancelled()
        return platform

    def _check(self, requirements: Sequence[ToolRequirement]) -> list[ToolStatus]:
        if self._check_tools is not None:
            return self._check_tools(requirements)
        return check(requirements, timeout=self.settings.tool_timeout)

    def _ensure_runtime(
        self,
        registry: AdapterRegistry,
        platform: PlatformInfo,
        requirements: Sequence[ToolRequirement],
        statuses: list[ToolStatus],
    ) -> list[ToolStatus]:
        """Offer one nvm-based install when the runtime is absent.

        Skipped when something the planner rejects first (platform,
        hard tools, download tool) is already wrong.
        """
        runtime = next((r for r in requirements if r.role == ToolRole.RUNTIME), None)
        if runtime is None:
            return statuses
        by_name = {s.name: s for s in statuses}
        current = by_name.get(runtime.name)
        if current is not None and current.found:
            return statuses

        download_tool = select_download_tool(statuses)
        hard_missing = [
            r.name for r in requirements
            if r.role == ToolRole.HARD and not (by_name.get(r.name) and by_name[r.name].found)
        ]
        if not platform.is_supported or hard_missing or download_tool is None:
            return statuses

        if not self.prompter.confirm(
            f"❌ {runtime.display_name} is not installed. "
            "Do you want to install it via node version manager (nvm)?"
        ):
            return statuses

        self._install_node_lts(registry, download_tool)
        rechecked = self._check([runtime])
        updated = rechecked[0] if rechecked else ToolStatus(name=runtime.name, found=False)
        return [updated if s.name == runtime.name else s for s in statuses]

    def _install_node_lts(self, registry: AdapterRegistry, download_tool: str) -> None:
        fetch = "curl -o-" if download_tool == "curl" else "wget -qO-"
        self.prompter.success("✅ Installing nvm...")
        self._run_or_raise(
            registry,
            Action(
                id="install-nvm",
                adapter="shell",
                params={
                    "command": f"{fetch} {self.settings.nvm_install_url} | bash",
                    "timeout": 300,
                },
            ),
            ExternalToolFailure(
                "nvm", "install",
                "Failed to install nvm",
                remediation=f"Install nvm manually: {NVM_HOMEPAGE}",
            ),
        )

        self.prompter.success("✅ Installing Node.js LTS version...")
        script = (
            '. "$NVM_DIR/nvm.sh" && nvm install --lts && '
            "nvm use --lts >/dev/null && nvm which current"
        )
        receipt = self._run_or_raise(
            registry,
            Action(
                id="install-node-lts",
                adapter="shell",
                params={
                    "command": ["bash", "-c", script],
                    "shell": False,
                    "env": {"NVM_DIR": str(nvm_dir())},
                    "timeout": 900,
                },
            ),
            ExternalToolFailure(
                "nvm", "install --lts",
                "Failed to install Node.js LTS",
                remediation="Run 'nvm install --lts' manually, then run the installer again.",
            ),
        )

        # nvm only changes PATH inside its own shell; expose node to this run.
        lines = receipt.output.strip().splitlines()
        if lines and lines[-1].strip().startswith("/"):
            prepend_to_path(str(Path(lines[-1].strip()).parent))
        else:
            logger.warning("Could not locate the nvm-installed node binary: %r", receipt.output)

    def _choose_version(self) -> VersionChoice:
        pinned = self.settings.supported_version
        backend = self.settings.backend_project
        answer = self.prompter.choose(
            f"📦 Which {backend} version? '{PINNED}' ({pinned}) or '{LATEST}'",
            [PINNED, LATEST],
            default=PINNED,
        )
        if answer != LATEST:
            return VersionChoice()

        found = self._resolve_latest(self.settings.release_index_url, self.settings.network_timeout)
        if found is None:
            self.prompter.warn(
                f"⚠️ Could not determine the latest {backend} release, "
                f"using supported version {pinned}"
            )
        return VersionChoice(use_latest=True, latest=found)

    def _choose_location(self) -> tuple[str, Path]:
        name = self.prompter.ask("🧐 Enter a name for your new project")
        if not name:
            raise UserCancelled("A project name is required.")

        folder = self.prompter.ask("📂 Choose an installation folder", default=f"./{name}")
        if not self.prompter.confirm(f"❓ Install in {folder}?", default=True):
            folder = self.prompter.ask("📂 Enter a new installation folder")
            if not folder:
                raise UserCancelled("An installation folder is required.")

        path = Path(folder).expanduser()
        if not path.is_absolute():
            path = self.cwd / path
        _make_dir(path)
        return name, path

    # ── Execution steps ─────────────────────────────────────────

    def _clone_frontend(self, registry: AdapterRegistry, folder: Path) -> Path:
        frontend = folder / FRONTEND_DIR
        # Checked right before the confirmed remove-and-reclone.
        if frontend.exists():
            self.prompter.warn(f"🚨 The '{FRONTEND_DIR}' directory already exists")
            if not self.prompter.confirm("🗑️ Do you want to remove it and clone again?"):
                raise UserCancelled(
                    f"Please remove or rename the existing '{FRONTEND_DIR}' directory and try again."
                )
            _remove_path(frontend)

        url = self.settings.template_repo
        self.prompter.info(f"🧬 Cloning {self.settings.product_name} repository...")
        self._run_or_raise(
            registry,
            Action(
                id="clone-frontend",
                adapter="git",
                params={
                    "operation": "clone",
                    "url": url,
                    "dest": str(frontend),
                    "timeout": self.settings.clone_timeout,
                },
            ),
            ExternalToolFailure(
                "git", "clone",
                "Failed to clone repository",
                remediation=f"Check that {url} is reachable and try again.",
            ),
            working_dir=folder,
        )
        return frontend

    def _install_backend(self, registry: AdapterRegistry, folder: Path, plan: InstallPlan) -> Path:
        plan.raise_for_failure()
        asset = plan.asset
        if asset is None:
            raise InstallerError(
                "No release asset was resolved for this platform",
                remediation="Run 'appfast-bootstrap plan' to see what is missing.",
            )
        backend = self.settings.backend_project
        backend_dir = folder / BACKEND_DIR
        _make_dir(backend_dir)

        archive = backend_dir / asset.file_name
        self.prompter.info(f"💽 Setting up {backend}...")
        self.prompter.info(f"📥 Downloading {backend} {asset.version}...")
        receipt = registry.execute_action(
            Action(
                id="download-backend",
                adapter="download",
                params={
                    "url": asset.download_url,
                    "dest": str(archive),
                    "connect_timeout": self.settings.network_timeout,
                },
            ),
            working_dir=str(backend_dir),
        )
        if receipt.failed:
            raise self._download_error(receipt, asset, plan.download_tool, backend_dir)

        self.prompter.info(f"📦 Extracting {backend}...")
        self._run_or_raise(
            registry,
            Action(
                id="extract-backend",
                adapter="unzip",
                params={"archive": str(archive), "dest": str(backend_dir)},
            ),
            ExternalToolFailure(
                "unzip", "extract",
                f"Failed to extract {backend}",
                remediation=(
                    f"Check free disk space in {backend_dir}, then download "
                    f"{asset.download_url} manually and run: unzip -o {archive.name} -d {backend_dir}"
                ),
            ),
            working_dir=backend_dir,
        )

        try:
            archive.unlink(missing_ok=True)
        except OSError as e:
            raise FilesystemError(
                str(archive), "remove",
                f"Failed to remove {archive}: {e}",
                remediation=f"Check the permissions of {backend_dir}, then delete {archive} manually.",
            ) from e

        binary = backend_dir / backend
        try:
            binary.chmod(binary.stat().st_mode | 0o111)
        except OSError as e:
            raise FilesystemError(
                str(binary), "chmod",
                f"Failed to make {backend} executable: {e}",
                remediation=f"Run: chmod +x {binary}",
            ) from e
        return backend_dir

    def _install_frontend_deps(self, registry: AdapterRegistry, frontend: Path) -> None:
        self.prompter.info("📥 Installing frontend dependencies...")
        self._run_or_raise(
            registry,
            Action(
                id="npm-install",
                adapter="shell",
                params={
                    "command": ["npm", "install"],
                    "shell": False,
                    "cwd": str(frontend),
                    "timeout": self.settings.npm_timeout,
                },
            ),
            ExternalToolFailure(
                "npm", "install",
                "Failed to install frontend dependencies",
                remediation=f"👉 Please try running 'npm install' manually in {frontend}",
            ),
            working_dir=frontend,
        )

    def _print_next_steps(self, result: InstallResult) -> None:
        folder = result.install_folder
        backend = self.settings.backend_project
        self.prompter.success(
            f"🎉 Installation complete! Your {self.settings.product_name} project is ready 🎉"
        )
        self.prompter.info("")
        self.prompter.info("To start the development server:")
        self.prompter.info(f"1. Start {backend} in the terminal:")
        self.prompter.info(f"   cd {folder / BACKEND_DIR} && ./{backend} serve")
        self.prompter.info("")
        self.prompter.info("2. In a second terminal window or tab, start the frontend:")
        self.prompter.info(f"   cd {folder / FRONTEND_DIR} && npm run dev")
        self.prompter.info("🚀🚀🚀 Happy Hacking 🚀🚀🚀")

    # ── Helpers ─────────────────────────────────────────────────

    def _run_or_raise(
        self,
        registry: AdapterRegistry,
        action: Action,
        error: InstallerError,
        working_dir: Path | None = None,
    ) -> Receipt:
        """Execute ``action``; on failure raise ``error`` with the receipt's detail."""
        receipt = registry.execute_action(action, working_dir=str(working_dir or self.cwd))
        if receipt.failed:
            if receipt.error:
                error.message = f"{error.message}: {receipt.error}"
                error.args = (error.message,)
            raise error
        return receipt

    def _download_error(
        self,
        receipt: Receipt,
        asset: ReleaseAsset,
        download_tool: str | None,
        backend_dir: Path,
    ) -> InstallerError:
        url = asset.download_url
        if receipt.metadata.get("http_status") == 404:
            return AssetNotFound(
                url,
                f"Release asset {asset.file_name} was not found (HTTP 404)",
                remediation=(
                    "The release naming scheme may have changed. "
                    f"Check the assets of v{asset.version} at {self.settings.releases_page} "
                    "or pin a different supported_version in appfast.yml."
                ),
            )
        if receipt.metadata.get("network_error"):
            return NetworkUnavailable(
                url,
                f"Could not download {asset.file_name}: {receipt.error}",
                remediation="Check your internet connection and proxy settings, then try again.",
            )
        return ExternalToolFailure(
            download_tool or "download", "download",
            f"Failed to download {self.settings.backend_project}: {receipt.error}",
            remediation=(
                f"Check free disk space and permissions in {backend_dir}, "
                f"or download {url} manually and unzip it into {backend_dir}."
            ),
        )


def run_install(
    prompter: Prompter,
    settings: InstallerSettings | None = None,
    **collaborators,
) -> InstallResult:
    """Run one interactive installation.

    Args:
        prompter: Where questions go (terminal or scripted).
        settings: Installer settings (defaults if None).
        **collaborators: Optional overrides passed to ``InstallFlow``
            (registry, signals, check_tools, resolve_latest, nvm_detector, cwd).

    Raises:
        InstallerError: On any terminal failure.
    """
    return InstallFlow(prompter, settings, **collaborators).run()


# ── Filesystem helpers ──────────────────────────────────────────

def _make_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(
            str(path), "create",
            f"Failed to create directory {path}: {e}",
            remediation=f"Check that {path.parent} exists and is writable, or choose another folder.",
        ) from e


def _remove_path(path: Path) -> None:
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        raise FilesystemError(
            str(path), "remove",
            f"Failed to remove {path}: {e}",
            remediation=f"Remove or rename {path} manually and try again.",
        ) from e
