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
Default fetch capability backed by aiohttp.

The fetcher returns a `FetchResponse` and leaves status validation to the
resource fetcher, so fakes and the real client are interchangeable.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp

from renderlab.config import get_service_logger, get_settings

from .abort_signal import AbortSignal


@dataclass
class FetchResponse:
    """Buffered response returned by a fetch capability."""

    url: str
    status: int
    reason: str = ""
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def read(self) -> bytes:
        return self.body


class HttpFetcher:
    """
    Fetch capability using one shared aiohttp session.

    Use as an async context manager, or pass an existing session which the
    caller keeps ownership of.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        settings = get_settings()
        self.logger = get_service_logger("HttpFetcher")
        self.headers = {"User-Agent": settings.http_user_agent}
        if headers:
            self.headers.update(headers)

        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "HttpFetcher":
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=self.headers)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __call__(
        self, url: str, *, signal: Optional[AbortSignal] = None
    ) -> FetchResponse:
        if self._session is None:
            raise RuntimeError("HttpFetcher used outside of its context")

        if signal is not None and signal.aborted:
            raise signal.exception_for(url)

        self.logger.debug(f"http_fetcher.py:GET {url}")
        async with self._session.get(url, headers=self.headers) as response:
            # Error bodies are not needed: the status alone fails the fetch.
            body = await response.read() if response.status < 400 else b""
            return FetchResponse(
                url=url,
                status=response.status,
                reason=response.reason or "",
                body=body,
            )
