"""
Version parsing and comparison (pure).

Versions are parsed into integer tuples and compared lexicographically
after zero-padding, so ``22`` == ``22.0.0`` and ``22.10`` > ``22.9``.
No I/O, no subprocess.
"""

from __future__ import annotations

import re

_LEADING_VERSION = re.compile(r"v?(\d+(?:\.\d+)*)", re.IGNORECASE)


def parse_version(text: str | None) -> tuple[int, ...] | None:
    """Parse the leading numeric version of a self-reported version string.

    ``"v22.1.0"`` → ``(22, 1, 0)``; ``"0.24.1-rc1"`` → ``(0, 24, 1)``;
    anything that does not start with a number (after an optional ``v``)
    → ``None``.
    """
    if not text:
        return None
    match = _LEADING_VERSION.match(text.strip())
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def _pad(a: tuple[int, ...], b: tuple[int, ...]) -> tuple[tuple[int, ...], tuple[int, ...]]:
    width = max(len(a), len(b))
    return a + (0,) * (width - len(a)), b + (0,) * (width - len(b))


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1. Raises ``ValueError`` on unparseable input."""
    a, b = parse_version(left), parse_version(right)
    if a is None or b is None:
        raise ValueError(f"Cannot compare versions {left!r} and {right!r}")
    a, b = _pad(a, b)
    return (a > b) - (a < b)


def meets_minimum(reported: str | None, minimum: str) -> bool:
    """Whether ``reported`` is at least ``minimum``.

    Unparseable input never meets the minimum.
    """
    have, need = parse_version(reported), parse_version(minimum)
    if have is None or need is None:
        return False
    have, need = _pad(have, need)
    return have >= need
