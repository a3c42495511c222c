"""
Installer errors — every failure that ends a run.

All errors are terminal: the installer never continues with a
half-configured project. Each error carries the remediation text the
CLI prints before exiting with ``exit_code``.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Failure categories, also used to tag a failed install plan."""

    USER_CANCELLED = "user_cancelled"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    MISSING_HARD_DEPENDENCY = "missing_hard_dependency"
    VERSION_CHECK_FAILED = "version_check_failed"
    NETWORK_UNAVAILABLE = "network_unavailable"
    ASSET_NOT_FOUND = "asset_not_found"
    FILESYSTEM_ERROR = "filesystem_error"
    EXTERNAL_TOOL_FAILURE = "external_tool_failure"


class InstallerError(Exception):
    """Base class for all terminal installer failures."""

    kind: ErrorKind = ErrorKind.EXTERNAL_TOOL_FAILURE
    exit_code: int = 1

    def __init__(self, message: str, remediation: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.remediation = remediation

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "remediation": self.remediation,
        }


class UserCancelled(InstallerError):
    kind = ErrorKind.USER_CANCELLED

    def __init__(self, message: str = "Installation cancelled.", remediation: str = "") -> None:
        super().__init__(message, remediation)


class UnsupportedPlatform(InstallerError):
    kind = ErrorKind.UNSUPPORTED_PLATFORM


class MissingHardDependency(InstallerError):
    kind = ErrorKind.MISSING_HARD_DEPENDENCY

    def __init__(self, tool: str, message: str = "", remediation: str = "") -> None:
        super().__init__(message or f"{tool} could not be found", remediation)
        self.tool = tool


class VersionCheckFailed(InstallerError):
    kind = ErrorKind.VERSION_CHECK_FAILED

    def __init__(self, tool: str, message: str = "", remediation: str = "") -> None:
        super().__init__(message or f"Failed to get the {tool} version", remediation)
        self.tool = tool


class NetworkUnavailable(InstallerError):
    kind = ErrorKind.NETWORK_UNAVAILABLE

    def __init__(self, url: str, message: str = "", remediation: str = "") -> None:
        super().__init__(message or f"Could not reach {url}", remediation)
        self.url = url


class AssetNotFound(InstallerError):
    """The release asset URL answered 404 — usually a renamed asset."""

    kind = ErrorKind.ASSET_NOT_FOUND

    def __init__(self, url: str, message: str = "", remediation: str = "") -> None:
        super().__init__(message or f"Release asset not found: {url}", remediation)
        self.url = url


class FilesystemError(InstallerError):
    kind = ErrorKind.FILESYSTEM_ERROR

    def __init__(self, path: str, op: str, message: str = "", remediation: str = "") -> None:
        super().__init__(message or f"Failed to {op} {path}", remediation)
        self.path = path
        self.op = op


class ExternalToolFailure(InstallerError):
    kind = ErrorKind.EXTERNAL_TOOL_FAILURE

    def __init__(self, tool: str, op: str, message: str = "", remediation: str = "") -> None:
        super().__init__(message or f"{tool} {op} failed", remediation)
        self.tool = tool
        self.op = op


def error_for_kind(
    kind: ErrorKind,
    message: str,
    *,
    remediation: str = "",
    tool: str | None = None,
) -> InstallerError:
    """Build the exception matching a plan failure."""
    if kind == ErrorKind.USER_CANCELLED:
        return UserCancelled(message, remediation)
    if kind == ErrorKind.UNSUPPORTED_PLATFORM:
        return UnsupportedPlatform(message, remediation)
    if kind == ErrorKind.MISSING_HARD_DEPENDENCY:
        return MissingHardDependency(tool or "unknown", message, remediation)
    if kind == ErrorKind.VERSION_CHECK_FAILED:
        return VersionCheckFailed(tool or "unknown", message, remediation)
    if kind == ErrorKind.NETWORK_UNAVAILABLE:
        return NetworkUnavailable("", message, remediation)
    if kind == ErrorKind.ASSET_NOT_FOUND:
        return AssetNotFound("", message, remediation)
    if kind == ErrorKind.FILESYSTEM_ERROR:
        return FilesystemError("", "", message, remediation)
    return ExternalToolFailure(tool or "unknown", "run", message, remediation)
