"""
Resource fetching for render programs.

Concurrent, deduplicating, cache-aware fetch of external resources with a
batch-wide timeout and fail-fast or tolerant failure policies.
"""

from .abort_signal import AbortSignal
from .http_fetcher import FetchResponse, HttpFetcher
from .resource_cache import LRUResourceCache
from .resource_fetcher import (
    DEFAULT_TIMEOUT_MS,
    FetchPolicy,
    ResolvedResource,
    ResourceFetcher,
    fetch_resources,
)

__all__ = [
    "AbortSignal",
    "FetchResponse",
    "HttpFetcher",
    "LRUResourceCache",
    "DEFAULT_TIMEOUT_MS",
    "FetchPolicy",
    "ResolvedResource",
    "ResourceFetcher",
    "fetch_resources",
]
