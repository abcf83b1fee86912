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
LRU cache for fetched resource payloads.

The resource fetcher only reads and inserts; eviction is the cache's own
business. The worker session owns one of these and shares it across requests.
"""

from collections import OrderedDict
from typing import Iterator, MutableMapping


class LRUResourceCache(MutableMapping):
    """Locator -> bytes mapping that evicts the least recently used entry."""

    def __init__(self, max_entries: int = 128):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, bytes]" = OrderedDict()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def __getitem__(self, locator: str) -> bytes:
        data = self._entries[locator]
        self._entries.move_to_end(locator)
        return data

    def __contains__(self, locator: object) -> bool:
        found = locator in self._entries
        if found:
            self.hits += 1
        else:
            self.misses += 1
        return found

    def __setitem__(self, locator: str, data: bytes) -> None:
        self._entries[locator] = data
        self._entries.move_to_end(locator)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            self.evictions += 1

    def __delitem__(self, locator: str) -> None:
        del self._entries[locator]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict:
        return {
            "entries": len(self._entries),
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
        }
