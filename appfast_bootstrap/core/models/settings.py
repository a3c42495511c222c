"""
Installer settings — pinned versions and upstream locations.

Defaults describe the supported SvelteAppFast + PocketBase setup.
An optional ``appfast.yml`` can override any field.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InstallerSettings(BaseModel):
    """Validated installer configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    product_name: str = "SvelteAppFast"
    template_repo: str = "https://github.com/realJogicodes/svelte-app-fast.git"

    backend_project: str = "pocketbase"
    supported_version: str = "0.24.1"
    release_repo: str = "pocketbase/pocketbase"
    archive_ext: str = "zip"

    nvm_version: str = "v0.40.1"
    node_min_version: str = "22"

    network_timeout: float = Field(default=5.0, gt=0)
    tool_timeout: float = Field(default=10.0, gt=0)
    clone_timeout: float = Field(default=300.0, gt=0)
    npm_timeout: float = Field(default=900.0, gt=0)

    @field_validator("supported_version", "nvm_version", "node_min_version", mode="before")
    @classmethod
    def _version_text(cls, value: Any) -> Any:
        # YAML reads `22` as int and `0.25` as float; only the int is lossless.
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            raise ValueError(
                f"version {value!r} was read as a number; quote it in appfast.yml "
                f"(e.g. \"{value}\")"
            )
        return value

    @property
    def release_index_url(self) -> str:
        return f"https://api.github.com/repos/{self.release_repo}/releases/latest"

    @property
    def download_base(self) -> str:
        return f"https://github.com/{self.release_repo}/releases/download"

    @property
    def releases_page(self) -> str:
        return f"https://github.com/{self.release_repo}/releases"

    @property
    def nvm_install_url(self) -> str:
        return f"https://raw.githubusercontent.com/nvm-sh/nvm/{self.nvm_version}/install.sh"
