# ┌───────────────────────────────────────────────────────────────┐
# │  Copyright (c) 2025 Ateet Vatan Bahmani                       │
# │  Project: MASX AI – Strategic Agentic AI System               │
# │  All rights reserved.                                         │
# └───────────────────────────────────────────────────────────────┘
#
# MASX AI is a proprietary software system developed and owned by Ateet Vatan Bahmani.
# The source code, documentation, workflows, designs, and naming (including "MASX AI")
# are protected by applicable copyright and trademark laws.
#
# Redistribution, modification, commercial use, or publication of any portion of this
# project without explicit written consent is strictly prohibited.
#
# This project is not open-source and is intended solely for internal, research,
# or demonstration use by the author.
#
# Contact: ab@masxai.com | MASXAI.com

"""
Tests for concurrent resource fetching.
"""

import asyncio

import pytest

from conftest import FakeFetch, run
from renderlab.core.exceptions import (
    FetchException,
    FetchNetworkException,
    FetchStatusException,
    FetchTimeoutException,
)
from renderlab.services.fetch import (
    LRUResourceCache,
    ResolvedResource,
    fetch_resources,
)


class TestFetchResources:
    """Ordering, deduplication and caching."""

    def test_empty_input_makes_no_requests(self):
        fetch = FakeFetch()
        result = run(fetch_resources([], fetch=fetch))
        assert result == []
        assert fetch.calls == []

    def test_duplicates_fetched_once(self):
        fetch = FakeFetch({"a": b"A", "b": b"B"})
        result = run(fetch_resources(["a", "b", "a"], fetch=fetch))

        assert [r.src for r in result] == ["a", "b"]
        assert [r.data for r in result] == [b"A", b"B"]
        assert sorted(fetch.calls) == ["a", "b"]

    def test_order_follows_first_occurrence(self):
        # "slow" finishes last but was requested first.
        fetch = FakeFetch({"slow": b"S", "fast": b"F"})

        async def scenario():
            original = fetch.__call__

            async def staggered(url, *, signal=None):
                if url == "slow":
                    await asyncio.sleep(0.05)
                return await original(url, signal=signal)

            return await fetch_resources(["slow", "fast"], fetch=staggered)

        result = run(scenario())
        assert [r.src for r in result] == ["slow", "fast"]

    def test_cache_hit_skips_fetch_and_returns_same_bytes(self):
        payload = b"cached-bytes"
        cache = {"a": payload}
        fetch = FakeFetch({"b": b"B"})

        result = run(fetch_resources(["a", "b"], fetch=fetch, cache=cache))

        assert fetch.calls == ["b"]
        assert result[0] == ResolvedResource(src="a", data=payload)
        assert result[0].data is payload

    def test_successful_fetch_populates_cache(self):
        cache = {}
        fetch = FakeFetch({"a": b"A"})

        run(fetch_resources(["a"], fetch=fetch, cache=cache))
        assert cache == {"a": b"A"}

        run(fetch_resources(["a"], fetch=fetch, cache=cache))
        assert fetch.calls == ["a"]

    def test_works_with_lru_cache(self):
        cache = LRUResourceCache(max_entries=1)
        fetch = FakeFetch({"a": b"A", "b": b"B"})

        run(fetch_resources(["a", "b"], fetch=fetch, cache=cache))
        assert len(cache) == 1
        assert cache.evictions == 1

    def test_binary_payload_preserved(self):
        payload = bytes(range(256))
        fetch = FakeFetch({"font.ttf": payload})
        result = run(fetch_resources(["font.ttf"], fetch=fetch))
        assert result[0].data == payload

    def test_all_fetches_share_one_signal(self):
        fetch = FakeFetch({"a": b"A", "b": b"B", "c": b"C"})
        run(fetch_resources(["a", "b", "c"], fetch=fetch))

        assert len(fetch.signals) == 3
        assert all(s is fetch.signals[0] for s in fetch.signals)


class TestFetchFailures:
    """Throw and tolerant modes."""

    def test_not_found_raises_status_error(self):
        fetch = FakeFetch({"a": (404, b"")})
        with pytest.raises(FetchStatusException) as exc_info:
            run(fetch_resources(["a"], fetch=fetch))

        assert exc_info.value.status == 404
        assert exc_info.value.locator == "a"
        assert "404" in str(exc_info.value)

    def test_server_error_raises(self):
        fetch = FakeFetch({"a": (500, b"boom")})
        with pytest.raises(FetchStatusException):
            run(fetch_resources(["a"], fetch=fetch))

    def test_network_error_wrapped(self):
        fetch = FakeFetch({"a": ConnectionError("refused")})
        with pytest.raises(FetchNetworkException) as exc_info:
            run(fetch_resources(["a"], fetch=fetch))
        assert "refused" in str(exc_info.value)

    def test_failure_aborts_siblings(self):
        fetch = FakeFetch({"bad": (500, b""), "slow": 1.0})
        with pytest.raises(FetchStatusException):
            run(fetch_resources(["slow", "bad"], fetch=fetch))

        assert fetch.cancelled == ["slow"]
        assert fetch.signals[0].aborted

    def test_tolerant_mode_omits_failures_and_keeps_order(self):
        fetch = FakeFetch({"a": b"A", "b": (404, b""), "c": b"C"})
        result = run(fetch_resources(["a", "b", "c"], fetch=fetch, throw_on_error=False))
        assert [r.src for r in result] == ["a", "c"]

    def test_tolerant_mode_does_not_cache_failures(self):
        cache = {}
        fetch = FakeFetch({"a": (404, b"")})
        run(fetch_resources(["a"], fetch=fetch, throw_on_error=False, cache=cache))
        assert cache == {}

    def test_timeout_fails_batch(self):
        fetch = FakeFetch({"a": 1.0, "b": 1.0})
        with pytest.raises(FetchTimeoutException) as exc_info:
            run(fetch_resources(["a", "b"], fetch=fetch, timeout_ms=20))

        assert isinstance(exc_info.value, FetchException)
        assert sorted(fetch.cancelled) == ["a", "b"]
        assert fetch.signals[0].timed_out

    def test_timeout_in_tolerant_mode_returns_empty(self):
        fetch = FakeFetch({"a": 1.0})
        result = run(fetch_resources(["a"], fetch=fetch, timeout_ms=20, throw_on_error=False))
        assert result == []
