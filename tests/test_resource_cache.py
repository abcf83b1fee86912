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

import pytest

from renderlab.services.fetch import LRUResourceCache


class TestLRUResourceCache:
    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            LRUResourceCache(max_entries=0)

    def test_evicts_least_recently_used(self):
        cache = LRUResourceCache(max_entries=2)
        cache["a"] = b"A"
        cache["b"] = b"B"
        assert cache["a"] == b"A"  # a is now most recent

        cache["c"] = b"C"

        assert "b" not in cache
        assert list(cache) == ["a", "c"]
        assert cache.evictions == 1

    def test_overwrite_does_not_grow(self):
        cache = LRUResourceCache(max_entries=2)
        cache["a"] = b"1"
        cache["a"] = b"2"
        assert len(cache) == 1
        assert cache["a"] == b"2"

    def test_stats_track_lookups(self):
        cache = LRUResourceCache(max_entries=4)
        cache["a"] = b"A"
        assert "a" in cache
        assert "missing" not in cache

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["entries"] == 1
        assert stats["max_entries"] == 4
