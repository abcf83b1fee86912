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
Consumer side of the render protocol.

The client owns a RenderWorker, numbers every request it sends and keeps only
the newest answer for display: results for older ids still resolve their own
waiters but never replace the current result.
"""

import asyncio
import itertools
import time
from typing import Any, Dict, Optional

from renderlab.config import get_service_logger
from renderlab.core.exceptions import (
    SessionInitializationException,
    WorkerNotReadyException,
    WorkerTerminatedException,
)
from renderlab.enums import MessageTypeEnum
from renderlab.schemas import RenderRequestMessage, RenderResultMessage

from .render_worker import RenderWorker, RenderWorkerConfig
from .renderer_iface import RendererFactory


class LatestResultGate:
    """Accepts a result only if it answers the most recently issued request."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.latest_id: Optional[int] = None
        self.current: Optional[RenderResultMessage] = None
        self.discarded = 0

    def reserve(self) -> int:
        """Allocate the next id without making it the latest."""
        return next(self._ids)

    def publish(self, request_id: int) -> None:
        self.latest_id = request_id

    def issue(self) -> int:
        request_id = self.reserve()
        self.publish(request_id)
        return request_id

    def offer(self, result: RenderResultMessage) -> bool:
        if result.id != self.latest_id:
            self.discarded += 1
            return False
        self.current = result
        return True


class RenderClient:
    """
    Drives a RenderWorker from the consumer side.

    Usage:
        async with RenderClientContext(factory) as client:
            result = await client.render(code)
    """

    def __init__(
        self,
        renderer_factory: RendererFactory,
        config: Optional[RenderWorkerConfig] = None,
        fetch=None,
        request_timeout_ms: float = 30000,
    ):
        self.logger = get_service_logger("RenderClient")
        self.worker = RenderWorker(renderer_factory, config=config, fetch=fetch)
        self.gate = LatestResultGate()
        self.request_timeout_ms = request_timeout_ms

        self._ready = asyncio.Event()
        self._pending: Dict[int, asyncio.Future] = {}
        self._reader: Optional[asyncio.Task] = None
        self._connected_at: Optional[float] = None

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set() and self.worker.is_ready

    @property
    def current(self) -> Optional[RenderResultMessage]:
        """The result for the newest request, once it arrived."""
        return self.gate.current

    async def connect(self, timeout: Optional[float] = None) -> None:
        """
        Start the worker and wait for its `ready` message.

        Raises:
            SessionInitializationException: the worker failed to start
            asyncio.TimeoutError: no ready within `timeout` seconds
        """
        if self._reader is not None:
            return

        await self.worker.start()
        self._reader = asyncio.create_task(self._read_loop(), name="render-client-reader")

        ready = asyncio.ensure_future(self._ready.wait())
        stopped = asyncio.ensure_future(self.worker.wait_stopped())
        try:
            done, _ = await asyncio.wait(
                {ready, stopped}, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            ready.cancel()
            stopped.cancel()

        if self._ready.is_set():
            self._connected_at = time.time()
            self.logger.info("render_client.py:Render worker connected")
            return

        await self.disconnect()
        if not done:
            raise asyncio.TimeoutError("Render worker did not become ready in time")
        raise SessionInitializationException(
            f"Render worker failed to start: {self.worker.startup_error}"
        )

    def submit(self, code: str) -> int:
        """
        Send a render request and return its id without waiting.

        Raises:
            WorkerTerminatedException: the worker no longer accepts requests
        """
        request_id = self.gate.reserve()
        self.worker.post_message(RenderRequestMessage(id=request_id, code=code).to_wire())
        # Only a request that was actually sent becomes the latest.
        self.gate.publish(request_id)
        return request_id

    async def render(
        self, code: str, timeout_ms: Optional[float] = None
    ) -> RenderResultMessage:
        """
        Render a program and wait for its result.

        Raises:
            WorkerNotReadyException: connect() has not completed
            asyncio.TimeoutError: no result within the timeout
        """
        if not self.is_ready:
            raise WorkerNotReadyException("Render worker is not ready")

        request_id = self.submit(code)
        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future

        timeout = (timeout_ms or self.request_timeout_ms) / 1000
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            self._pending.pop(request_id, None)

    async def disconnect(self) -> None:
        await self.worker.stop()
        if self._reader is not None:
            self._reader.cancel()
            await asyncio.gather(self._reader, return_exceptions=True)
            self._reader = None

        for future in self._pending.values():
            if not future.done():
                future.set_exception(WorkerTerminatedException("Render worker stopped"))
        self._pending.clear()
        self._ready.clear()
        self.logger.info("render_client.py:Render worker disconnected")

    async def _read_loop(self) -> None:
        while True:
            raw = await self.worker.next_message()
            message_type = raw.get("type")

            if message_type == MessageTypeEnum.READY.value:
                self._ready.set()
                continue
            if message_type != MessageTypeEnum.RENDER_RESULT.value:
                self.logger.warning(f"render_client.py:Unexpected message '{message_type}'")
                continue

            result = RenderResultMessage.model_validate(raw)
            if not self.gate.offer(result):
                self.logger.debug(
                    f"render_client.py:Discarded stale result {result.id} "
                    f"(latest {self.gate.latest_id})"
                )

            future = self._pending.get(result.id)
            if future is not None and not future.done():
                future.set_result(result)

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "ready": self.is_ready,
            "connected_at": self._connected_at,
            "latest_request_id": self.gate.latest_id,
            "discarded_results": self.gate.discarded,
            "pending_requests": len(self._pending),
            "worker": self.worker.get_metrics(),
        }


async def create_render_client(
    renderer_factory: RendererFactory,
    config: Optional[RenderWorkerConfig] = None,
    fetch=None,
    request_timeout_ms: float = 30000,
    connect_timeout: Optional[float] = None,
) -> RenderClient:
    """Create and connect a render client."""
    client = RenderClient(
        renderer_factory, config=config, fetch=fetch, request_timeout_ms=request_timeout_ms
    )
    await client.connect(timeout=connect_timeout)
    return client


class RenderClientContext:
    """Async context manager around a connected RenderClient."""

    def __init__(self, renderer_factory: RendererFactory, **kwargs):
        self.renderer_factory = renderer_factory
        self.kwargs = kwargs
        self.client: Optional[RenderClient] = None

    async def __aenter__(self) -> RenderClient:
        self.client = await create_render_client(self.renderer_factory, **self.kwargs)
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client is not None:
            await self.client.disconnect()
