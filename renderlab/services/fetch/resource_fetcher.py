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
Concurrent, deduplicating, cache-aware resource fetching.

Turns a list of locators into resolved byte payloads:
- duplicates are fetched once, results keep first-occurrence order
- cache hits never touch the network
- all misses of a batch run concurrently under one shared AbortSignal
- non-2xx statuses are failures, exactly like network errors
"""

import asyncio
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    MutableMapping,
    Optional,
)

from renderlab.config import get_service_logger
from renderlab.core.exceptions import FetchException, FetchNetworkException, FetchStatusException

from .abort_signal import AbortSignal
from .http_fetcher import HttpFetcher

DEFAULT_TIMEOUT_MS = 5000

FetchCapability = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class ResolvedResource:
    """A locator and its payload."""

    src: str
    data: bytes


@dataclass(frozen=True)
class FetchPolicy:
    """
    Options for one resolve call.

    Attributes:
        timeout_ms: Deadline shared by every fetch of the batch
        fetch: Fetch capability, `HttpFetcher` when omitted
        throw_on_error: Fail the whole call on the first failure
        cache: Caller-owned locator -> bytes mapping
    """

    timeout_ms: float = DEFAULT_TIMEOUT_MS
    fetch: Optional[FetchCapability] = None
    throw_on_error: bool = True
    cache: Optional[MutableMapping[str, bytes]] = None


class ResourceFetcher:
    """Resolves locators to payloads under a `FetchPolicy`."""

    def __init__(self, policy: Optional[FetchPolicy] = None):
        self.policy = policy or FetchPolicy()
        self.logger = get_service_logger("ResourceFetcher")

    async def resolve(self, locators: Iterable[str]) -> List[ResolvedResource]:
        """
        Resolve every unique locator.

        Args:
            locators: Locators to resolve, duplicates allowed

        Returns:
            Resolved resources in first-occurrence order. With
            throw_on_error=False failed locators are omitted.

        Raises:
            FetchException: first failure, when throw_on_error is set
        """
        unique = list(dict.fromkeys(locators))
        if not unique:
            return []

        cache = self.policy.cache
        hits: Dict[str, bytes] = {}
        misses: List[str] = []
        for src in unique:
            if cache is not None and src in cache:
                hits[src] = cache[src]
            else:
                misses.append(src)

        fetched: Dict[str, bytes] = {}
        if misses:
            if self.policy.fetch is not None:
                fetched = await self._fetch_batch(misses, self.policy.fetch)
            else:
                async with HttpFetcher() as fetcher:
                    fetched = await self._fetch_batch(misses, fetcher)

        self.logger.debug(
            "resource_fetcher.py:Resolved resources",
            requested=len(unique),
            cache_hits=len(hits),
            fetched=len(fetched),
        )

        resolved = []
        for src in unique:
            if src in hits:
                resolved.append(ResolvedResource(src=src, data=hits[src]))
            elif src in fetched:
                resolved.append(ResolvedResource(src=src, data=fetched[src]))
        return resolved

    async def _fetch_batch(
        self, misses: List[str], fetch: FetchCapability
    ) -> Dict[str, bytes]:
        signal = AbortSignal.timeout(self.policy.timeout_ms)
        tasks = {
            src: asyncio.create_task(self._fetch_one(src, fetch, signal))
            for src in misses
        }
        signal.track(*tasks.values())

        try:
            if self.policy.throw_on_error:
                try:
                    payloads = await asyncio.gather(*tasks.values())
                except FetchException as e:
                    signal.abort(str(e))
                    # Drain the cancelled fetches so none is left unretrieved.
                    await asyncio.gather(*tasks.values(), return_exceptions=True)
                    self.logger.error(f"resource_fetcher.py:Batch failed: {e}")
                    raise
                return dict(zip(tasks.keys(), payloads))

            outcomes = await asyncio.gather(*tasks.values(), return_exceptions=True)
            fetched = {}
            for src, outcome in zip(tasks.keys(), outcomes):
                if isinstance(outcome, FetchException):
                    self.logger.warning(f"resource_fetcher.py:Skipping {src}: {outcome}")
                elif isinstance(outcome, BaseException):
                    raise outcome
                else:
                    fetched[src] = outcome
            return fetched
        finally:
            signal.dispose()

    async def _fetch_one(
        self, src: str, fetch: FetchCapability, signal: AbortSignal
    ) -> bytes:
        try:
            response = await fetch(src, signal=signal)
            if not response.ok:
                raise FetchStatusException(
                    src, response.status, getattr(response, "reason", "") or ""
                )
            data = await response.read()
        except asyncio.CancelledError:
            if signal.aborted:
                raise signal.exception_for(src) from None
            raise
        except FetchException:
            raise
        except Exception as e:
            raise FetchNetworkException(src, str(e) or e.__class__.__name__) from e

        if self.policy.cache is not None:
            self.policy.cache[src] = data
        return data


async def fetch_resources(
    urls: Iterable[str],
    *,
    timeout_ms: float = DEFAULT_TIMEOUT_MS,
    fetch: Optional[FetchCapability] = None,
    throw_on_error: bool = True,
    cache: Optional[MutableMapping[str, bytes]] = None,
) -> List[ResolvedResource]:
    """
    Fetch multiple resources concurrently.

    Validates HTTP status codes and deduplicates URLs.

    Args:
        urls: URLs to fetch
        timeout_ms: Timeout for the whole batch in milliseconds
        fetch: Custom fetch capability
        throw_on_error: If False, only successful fetches are returned
        cache: Mapping consulted before fetching and filled after

    Returns:
        List of ResolvedResource(src, data)
    """
    policy = FetchPolicy(
        timeout_ms=timeout_ms, fetch=fetch, throw_on_error=throw_on_error, cache=cache
    )
    return await ResourceFetcher(policy).resolve(urls)
