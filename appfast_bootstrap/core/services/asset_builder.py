"""
Release asset naming (pure).

Builds ``{project}_{version}_{os}_{arch}.{ext}`` and its download URL.
If upstream renames its assets these URLs 404; the download step
reports that as ``AssetNotFound`` rather than a network failure.
"""

from __future__ import annotations

from appfast_bootstrap.core.errors import UnsupportedPlatform
from appfast_bootstrap.core.models.platform import Arch, OsFamily
from appfast_bootstrap.core.models.release import ReleaseAsset

DEFAULT_PROJECT = "pocketbase"
DEFAULT_EXT = "zip"
DEFAULT_DOWNLOAD_BASE = "https://github.com/pocketbase/pocketbase/releases/download"


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return enum_cls.UNSUPPORTED


def build(
    version: str,
    os_family: OsFamily | str,
    arch: Arch | str,
    *,
    project: str = DEFAULT_PROJECT,
    ext: str = DEFAULT_EXT,
    download_base: str = DEFAULT_DOWNLOAD_BASE,
) -> ReleaseAsset:
    """Build the release asset for a version and platform.

    Raises:
        UnsupportedPlatform: If ``os_family`` or ``arch`` is unsupported
            (or not a known value).
        ValueError: If ``version`` is empty.
    """
    os_family = _coerce(OsFamily, os_family)
    arch = _coerce(Arch, arch)

    if os_family == OsFamily.UNSUPPORTED or arch == Arch.UNSUPPORTED:
        raise UnsupportedPlatform(
            f"No {project} release for os={os_family.value} arch={arch.value}",
        )

    version = version.strip().removeprefix("v")
    if not version:
        raise ValueError("version must not be empty")

    file_name = f"{project}_{version}_{os_family.asset_os}_{arch.value}.{ext}"
    return ReleaseAsset(
        version=version,
        file_name=file_name,
        download_url=f"{download_base.rstrip('/')}/v{version}/{file_name}",
    )
