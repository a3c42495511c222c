"""
Node version manager (nvm) detection.

Read-only: env vars and directory listings. Used to phrase the
Node.js upgrade hint and to locate an nvm-installed node binary.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def nvm_dir() -> Path:
    """``$NVM_DIR`` or the nvm installer's default ``~/.nvm``."""
    env_dir = os.environ.get("NVM_DIR", "")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".nvm"


def detect_nvm() -> dict:
    """Detect an nvm installation.

    Returns::

        {
            "installed": True,
            "nvm_dir": "/home/user/.nvm",
            "available_versions": ["v22.11.0", "v20.18.0"],
        }
    """
    candidates = [nvm_dir(), Path.home() / ".config" / "nvm"]
    found = next((c for c in candidates if (c / "nvm.sh").is_file()), None)
    if found is None:
        return {"installed": False}

    versions_dir = found / "versions" / "node"
    versions: list[str] = []
    if versions_dir.is_dir():
        try:
            versions = sorted(
                (d.name for d in versions_dir.iterdir() if d.name.startswith("v")),
                reverse=True,
            )
        except OSError as exc:
            logger.debug("Cannot list %s: %s", versions_dir, exc)

    return {
        "installed": True,
        "nvm_dir": str(found),
        "available_versions": versions[:10],
    }


def prepend_to_path(directory: str) -> None:
    """Make binaries in ``directory`` visible to this process and its children."""
    current = os.environ.get("PATH", "")
    parts = current.split(os.pathsep) if current else []
    if directory in parts:
        return
    os.environ["PATH"] = os.pathsep.join([directory, *parts])
    logger.debug("Prepended %s to PATH", directory)
