"""
Tests for Node.js version discovery — listing parsing and selection.
"""

import http.client
import urllib.error

import pytest

from swarmprep.core.services.provision.detection.listing import discover_latest_version
from swarmprep.core.services.provision.domain.node_version import (
    VersionDiscoveryError,
    first_listed_version,
    highest_listed_version,
    major_version,
    parse_listing_versions,
    select_version,
)

UNSORTED_LISTING = """\
<a href="node-v18.19.1/">node-v18.19.1/</a>
<a href="node-v20.11.0/">node-v20.11.0/</a>
"""


class TestParseListing:
    def test_all_versions_in_document_order(self):
        assert parse_listing_versions(UNSORTED_LISTING) == [
            "18.19.1", "18.19.1", "20.11.0", "20.11.0",
        ]

    def test_no_versions(self):
        assert parse_listing_versions("<html>empty</html>") == []

    def test_ignores_two_part_versions(self):
        assert parse_listing_versions("node-v20.11/ node-v21.0.0/") == ["21.0.0"]


class TestFirstListed:
    def test_first_match_not_numerically_latest(self):
        assert first_listed_version(UNSORTED_LISTING) == "18.19.1"

    def test_none_when_missing(self):
        assert first_listed_version("nothing here") is None

    def test_custom_pattern(self):
        assert first_listed_version("iojs-v3.3.1", r"iojs-v(\d+\.\d+\.\d+)") == "3.3.1"


class TestHighestListed:
    def test_numeric_not_lexical(self):
        text = "node-v9.11.2/ node-v10.0.0/ node-v10.0.1/"
        assert highest_listed_version(text) == "10.0.1"

    def test_unsorted_listing(self):
        assert highest_listed_version(UNSORTED_LISTING) == "20.11.0"


class TestSelectVersion:
    def test_default_strategy_is_first(self):
        assert select_version(UNSORTED_LISTING) == "18.19.1"

    def test_highest_strategy(self):
        assert select_version(UNSORTED_LISTING, strategy="highest") == "20.11.0"

    def test_empty_listing_is_fatal(self):
        with pytest.raises(VersionDiscoveryError, match="internet connection"):
            select_version("<html></html>")

    def test_unknown_strategy(self):
        with pytest.raises(VersionDiscoveryError, match="Unknown version strategy"):
            select_version(UNSORTED_LISTING, strategy="newest")


class TestMajorVersion:
    def test_major_of_three_part_version(self):
        assert major_version("20.11.0") == "20"

    def test_major_of_single_digit(self):
        assert major_version("8.0.0") == "8"


class TestDiscoverLatestVersion:
    def test_fetches_and_selects(self):
        seen = {}

        def fetch(url, timeout=30):
            seen["url"] = url
            seen["timeout"] = timeout
            return UNSORTED_LISTING

        version = discover_latest_version(
            "https://nodejs.org/dist/latest/", timeout=7, fetch=fetch,
        )
        assert version == "18.19.1"
        assert seen == {"url": "https://nodejs.org/dist/latest/", "timeout": 7}

    def test_network_error_becomes_discovery_error(self):
        def fetch(url, timeout=30):
            raise urllib.error.URLError("no route to host")

        with pytest.raises(VersionDiscoveryError, match="no route to host"):
            discover_latest_version("https://nodejs.org/dist/latest/", fetch=fetch)

    def test_malformed_url_becomes_discovery_error(self):
        with pytest.raises(VersionDiscoveryError, match="unknown url type"):
            discover_latest_version("nodejs.org/dist/latest/")

    def test_truncated_response_becomes_discovery_error(self):
        def fetch(url, timeout=30):
            raise http.client.IncompleteRead(b"<html>")

        with pytest.raises(VersionDiscoveryError):
            discover_latest_version("https://nodejs.org/dist/latest/", fetch=fetch)

    def test_empty_document(self):
        with pytest.raises(VersionDiscoveryError):
            discover_latest_version("https://example.invalid/", fetch=lambda url, timeout=30: "")
