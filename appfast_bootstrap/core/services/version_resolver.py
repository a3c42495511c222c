"""
Release index lookup — the latest published version of a dependency.

A single bounded read of a GitHub-style release descriptor. Every
failure degrades to ``None``; callers fall back to the pinned version.
"""

from __future__ import annotations

import http.client
import logging
import re
import urllib.request

from appfast_bootstrap import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0

_TAG_PATTERN = re.compile(r'"tag_name"\s*:\s*"v?([^"]+)"')


def extract_tag(document: str) -> str | None:
    """Pull the tag (without a leading ``v``) out of a release descriptor."""
    match = _TAG_PATTERN.search(document)
    if not match:
        return None
    return match.group(1).strip() or None


def latest(release_index_url: str, timeout: float = DEFAULT_TIMEOUT) -> str | None:
    """Fetch the latest release tag, or ``None`` if it can't be determined.

    Args:
        release_index_url: e.g.
            ``https://api.github.com/repos/pocketbase/pocketbase/releases/latest``
        timeout: Seconds for connect and read.
    """
    req = urllib.request.Request(
        release_index_url,
        headers={
            "Accept": "application/vnd.github+json",
            "User-Agent": f"appfast-bootstrap/{__version__}",
        },
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read().decode("utf-8", errors="replace")
    except (OSError, ValueError, http.client.HTTPException) as exc:
        # URLError, HTTPError and socket timeouts are all OSError
        logger.warning("Release index unreachable (%s): %s", release_index_url, exc)
        return None

    tag = extract_tag(body)
    if tag is None:
        logger.warning("No tag_name in release index response from %s", release_index_url)
        return None

    logger.info("Latest release at %s: %s", release_index_url, tag)
    return tag
