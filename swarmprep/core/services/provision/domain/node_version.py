"""
L1 Domain — Node.js version selection from a directory listing (pure).

The nodejs.org ``/dist/latest/`` page is an HTML directory listing.
Version discovery scans it for ``node-v<X.Y.Z>`` names. No I/O here.
"""

from __future__ import annotations

import re

DEFAULT_VERSION_PATTERN = r"node-v(\d+\.\d+\.\d+)"


class VersionDiscoveryError(Exception):
    """Raised when no version can be extracted from the listing."""


def parse_listing_versions(
    text: str,
    pattern: str = DEFAULT_VERSION_PATTERN,
) -> list[str]:
    """Return every version in the listing, in document order.

    Args:
        text: Raw listing document.
        pattern: Regex with one capture group for the dotted version.

    Returns:
        List of version strings, e.g. ``["18.19.1", "20.11.0"]``.
        Duplicates are kept; order is the listing's order.
    """
    return [m.group(1) for m in re.finditer(pattern, text)]


def first_listed_version(
    text: str,
    pattern: str = DEFAULT_VERSION_PATTERN,
) -> str | None:
    """Return the first version in document order.

    This is listing position, not semantic order: a listing holding
    ``node-v18.19.1/`` before ``node-v20.11.0/`` yields ``"18.19.1"``.
    """
    m = re.search(pattern, text)
    return m.group(1) if m else None


def _version_key(version: str) -> tuple[int, ...]:
    return tuple(int(x) for x in version.split("."))


def highest_listed_version(
    text: str,
    pattern: str = DEFAULT_VERSION_PATTERN,
) -> str | None:
    """Return the numerically highest version in the listing."""
    versions = parse_listing_versions(text, pattern)
    if not versions:
        return None
    return max(versions, key=_version_key)


def select_version(
    text: str,
    *,
    strategy: str = "first",
    pattern: str = DEFAULT_VERSION_PATTERN,
) -> str:
    """Pick a version from the listing using ``strategy``.

    Args:
        text: Raw listing document.
        strategy: ``"first"`` (document order) or ``"highest"``.
        pattern: Version regex with one capture group.

    Raises:
        VersionDiscoveryError: If nothing matches, or the strategy is unknown.
    """
    if strategy == "first":
        version = first_listed_version(text, pattern)
    elif strategy == "highest":
        version = highest_listed_version(text, pattern)
    else:
        raise VersionDiscoveryError(f"Unknown version strategy: {strategy!r}")

    if not version:
        raise VersionDiscoveryError(
            "Failed to fetch latest Node.js version. "
            "Please check your internet connection."
        )
    return version


def major_version(version: str) -> str:
    """Text up to the first ``.``: ``"20.11.0"`` → ``"20"``."""
    return version.split(".", 1)[0]
