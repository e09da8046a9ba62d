from __future__ import annotations

import os

import httpx
import pytest

from src.adapters.config import DEFAULT_FEED_URL


def _feed_reachable(url: str) -> bool:
    try:
        resp = httpx.get(url, timeout=5.0)
    except httpx.HTTPError:
        return False
    return 200 <= resp.status_code < 300


@pytest.fixture(scope="session")
def require_live_feed() -> str:
    url = os.getenv("GTFS_RT_VEHICLE_POSITIONS_URL") or DEFAULT_FEED_URL
    if not _feed_reachable(url):
        msg = f"GTFS-RT feed not reachable at {url}"

        # Opt-in hard failure for environments that are expected to have
        # network access to the feed.
        if os.getenv("REQUIRE_LIVE_FEED"):
            pytest.fail(msg, pytrace=False)

        pytest.skip(f"{msg}; skipping integration tests")
    return url
