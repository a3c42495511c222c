"""
Release asset model — a downloadable artifact published against a tag.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ReleaseAsset(BaseModel):
    """Derived value: recomputed whenever version or platform change."""

    model_config = ConfigDict(frozen=True)

    version: str
    file_name: str
    download_url: str
