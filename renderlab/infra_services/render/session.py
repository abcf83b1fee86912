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
Worker session: the renderer and default font shared by every request.

Lifecycle: uninitialized -> initializing -> ready -> terminated. The renderer
and font are loaded exactly once; after `ready` they are read-only.
"""

import asyncio
import inspect
import time
from pathlib import Path
from typing import Optional

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from renderlab.config import get_service_logger
from renderlab.core.exceptions import (
    FetchException,
    SessionException,
    SessionInitializationException,
)
from renderlab.enums import SessionStateEnum
from renderlab.services.fetch import FetchPolicy, LRUResourceCache, ResourceFetcher
from renderlab.services.fetch.resource_fetcher import FetchCapability

from .renderer_iface import Renderer, RendererFactory


class WorkerSession:
    """
    Owns the rendering capability, the default font and the resource cache
    for the lifetime of one render worker.
    """

    def __init__(
        self,
        renderer_factory: RendererFactory,
        font_source: Optional[str] = None,
        fetch: Optional[FetchCapability] = None,
        fetch_timeout_ms: float = 5000,
        resource_cache_max_entries: int = 128,
        font_fetch_attempts: int = 3,
        font_retry_wait_seconds: float = 0.5,
    ):
        self.logger = get_service_logger("WorkerSession")

        self._renderer_factory = renderer_factory
        self.font_source = (font_source or "").strip() or None
        self.fetch = fetch
        self.fetch_timeout_ms = fetch_timeout_ms
        self.font_fetch_attempts = font_fetch_attempts
        self.font_retry_wait_seconds = font_retry_wait_seconds

        self.resource_cache: Optional[LRUResourceCache] = (
            LRUResourceCache(resource_cache_max_entries)
            if resource_cache_max_entries > 0
            else None
        )

        self.state = SessionStateEnum.UNINITIALIZED
        self.renderer: Optional[Renderer] = None
        self.font: Optional[bytes] = None

    @property
    def is_ready(self) -> bool:
        return self.state is SessionStateEnum.READY

    @property
    def is_terminated(self) -> bool:
        return self.state is SessionStateEnum.TERMINATED

    async def initialize(self) -> None:
        """
        Load the renderer and the default font, then become ready.

        Raises:
            SessionException: the session was already initialized
            SessionInitializationException: renderer or font failed to load
        """
        if self.state is not SessionStateEnum.UNINITIALIZED:
            raise SessionException(
                f"Session cannot initialize from state '{self.state.value}'"
            )

        self._transition(SessionStateEnum.INITIALIZING)
        started = time.perf_counter()

        try:
            renderer = self._renderer_factory()
            if inspect.isawaitable(renderer):
                renderer = await renderer

            font = await self._load_font()
            if font is not None:
                renderer.load_font(font)
        except asyncio.CancelledError:
            self._transition(SessionStateEnum.TERMINATED)
            raise
        except Exception as e:
            self.logger.error(f"session.py:Session initialization failed: {e}")
            self._transition(SessionStateEnum.TERMINATED)
            raise SessionInitializationException(
                f"Session initialization failed: {e}"
            ) from e

        if self.is_terminated:
            # Torn down while loading.
            raise SessionInitializationException("Session terminated during initialization")

        self.renderer = renderer
        self.font = font
        self._transition(SessionStateEnum.READY)
        self.logger.info(
            "session.py:Session ready",
            font_loaded=font is not None,
            init_ms=round((time.perf_counter() - started) * 1000, 2),
        )

    def terminate(self) -> None:
        if self.is_terminated:
            return
        self._transition(SessionStateEnum.TERMINATED)

    async def _load_font(self) -> Optional[bytes]:
        if self.font_source is None:
            self.logger.warning("session.py:No default font configured, using renderer default")
            return None

        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type((FetchException, OSError)),
            wait=wait_exponential(multiplier=self.font_retry_wait_seconds, max=10),
            stop=stop_after_attempt(self.font_fetch_attempts),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    self.logger.warning(
                        f"session.py:Retrying font load (attempt {attempt.retry_state.attempt_number})"
                    )
                return await self._read_font()
        return None

    async def _read_font(self) -> bytes:
        source = self.font_source
        if source.startswith(("http://", "https://")):
            fetcher = ResourceFetcher(
                FetchPolicy(timeout_ms=self.fetch_timeout_ms, fetch=self.fetch)
            )
            resolved = await fetcher.resolve([source])
            return resolved[0].data

        path = Path(source[len("file://"):] if source.startswith("file://") else source)
        return await asyncio.to_thread(path.read_bytes)

    def _transition(self, state: SessionStateEnum) -> None:
        self.logger.info(f"session.py:Session {self.state.value} -> {state.value}")
        self.state = state
