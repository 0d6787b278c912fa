"""
L3 Detection — remote version listing.

Read-only network fetch of the Node.js distribution listing.
"""

from __future__ import annotations

import http.client
import logging
import urllib.request

from swarmprep.core.services.provision.data.constants import USER_AGENT
from swarmprep.core.services.provision.domain.node_version import (
    VersionDiscoveryError,
    select_version,
)

logger = logging.getLogger(__name__)

# Everything urlopen() raises for a bad URL, network or response
FETCH_ERRORS = (OSError, ValueError, http.client.HTTPException)


def fetch_text(url: str, timeout: int = 30) -> str:
    """GET a URL and return its body as text.

    Raises:
        OSError: On any network failure (``urllib.error.URLError`` included).
        ValueError: If ``url`` is malformed (e.g. has no scheme).
        http.client.HTTPException: If the response is cut short or garbled.
    """
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        charset = resp.headers.get_content_charset() or "utf-8"
        return resp.read().decode(charset, errors="replace")


def discover_latest_version(
    url: str,
    *,
    strategy: str = "first",
    pattern: str | None = None,
    timeout: int = 30,
    fetch=fetch_text,
) -> str:
    """Fetch the listing at ``url`` and pick a version from it.

    Raises:
        VersionDiscoveryError: If the listing can't be fetched or holds
            no version.
    """
    try:
        text = fetch(url, timeout=timeout)
    except FETCH_ERRORS as e:
        logger.warning("Listing fetch failed for %s: %s", url, e)
        raise VersionDiscoveryError(
            f"Failed to fetch latest Node.js version from {url}: {e}. "
            "Please check your internet connection."
        ) from e

    if pattern:
        version = select_version(text, strategy=strategy, pattern=pattern)
    else:
        version = select_version(text, strategy=strategy)
    logger.info("Discovered Node.js %s (%s strategy)", version, strategy)
    return version
