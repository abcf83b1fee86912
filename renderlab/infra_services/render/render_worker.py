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
Render worker coordinating sandboxed render programs.

This module provides the worker side of the render protocol: it owns a
WorkerSession, reads render requests from an inbound channel, evaluates each
program in the sandbox, resolves the resources its node tree references,
invokes the renderer and writes a result tagged with the request id to the
outbound channel.
"""

import asyncio
import base64
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import ValidationError

from renderlab.config import Settings, get_service_logger, get_settings
from renderlab.core.exceptions import (
    CodeEvaluationException,
    ExportValidationException,
    FetchException,
    RendererException,
    SandboxException,
    SessionInitializationException,
    WorkerTerminatedException,
)
from renderlab.enums import MessageTypeEnum, SessionStateEnum
from renderlab.schemas import (
    ReadyMessage,
    RenderFailure,
    RenderOptions,
    RenderRequestMessage,
    RenderResultMessage,
    RenderSuccess,
    ValidationIssue,
    parse_message,
)
from renderlab.services.fetch import FetchPolicy, ResolvedResource, ResourceFetcher
from renderlab.services.fetch.resource_fetcher import FetchCapability

from .elements import extract_resource_urls, from_element, h
from .renderer_iface import RendererFactory
from .sandbox import evaluate_code_exports, validation_issues
from .session import WorkerSession
from .virtual_modules import VirtualModuleRegistry, default_registry


@dataclass
class RenderWorkerConfig:
    """Configuration for the render worker."""

    # Resource settings
    fetch_timeout_ms: int = 5000
    resource_throw_on_error: bool = True
    resource_cache_max_entries: int = 128

    # Session settings
    default_font: str = ""
    font_fetch_attempts: int = 3
    font_retry_wait_seconds: float = 0.5

    # Include the translated node tree in successful results
    include_node: bool = True

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RenderWorkerConfig":
        settings = settings or get_settings()
        return cls(
            fetch_timeout_ms=settings.fetch_timeout_ms,
            resource_throw_on_error=settings.resource_throw_on_error,
            resource_cache_max_entries=settings.resource_cache_max_entries,
            default_font=settings.default_font,
            font_fetch_attempts=settings.font_fetch_attempts,
            font_retry_wait_seconds=settings.font_retry_wait_seconds,
        )


class RenderWorker:
    """
    Single logical render worker.

    This class provides:
    - One session (renderer + font) loaded once, before anything is served
    - An inbound / outbound channel pair carrying plain dict messages
    - Sandboxed evaluation of every render program
    - Error results instead of exceptions, the worker stays ready
    - No cancellation of accepted requests; stale results are the consumer's concern
    """

    def __init__(
        self,
        renderer_factory: RendererFactory,
        config: Optional[RenderWorkerConfig] = None,
        fetch: Optional[FetchCapability] = None,
        modules: Optional[VirtualModuleRegistry] = None,
    ):
        """
        Initialize the render worker.

        Args:
            renderer_factory: Zero-argument callable returning the renderer
            config: Worker configuration parameters
            fetch: Fetch capability for fonts and node resources
            modules: Virtual modules importable from programs
        """
        self.config = config or RenderWorkerConfig.from_settings()
        self.logger = get_service_logger("RenderWorker")
        self.renderer_factory = renderer_factory
        self.fetch = fetch
        self.modules = modules or default_registry()

        # Channels
        self.inbound: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue()
        self.outbound: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue()

        # Worker state
        self.session: Optional[WorkerSession] = None
        self.startup_error: Optional[BaseException] = None
        self._run_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

        # Programs and synchronous renderers run here, one at a time, off the loop.
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="render-worker"
        )
        self._start_time = time.time()

        # Metrics
        self._total_requests = 0
        self._successful_renders = 0
        self._failed_renders = 0
        self._rejected_messages = 0
        self._total_render_time = 0.0

        self.logger.info("render_worker.py:RenderWorker initialized")

    # Lifecycle

    async def start(self) -> None:
        """Create the session and begin initializing it in the background."""
        if self._run_task is not None:
            return

        self.session = WorkerSession(
            renderer_factory=self.renderer_factory,
            font_source=self.config.default_font,
            fetch=self.fetch,
            fetch_timeout_ms=self.config.fetch_timeout_ms,
            resource_cache_max_entries=self.config.resource_cache_max_entries,
            font_fetch_attempts=self.config.font_fetch_attempts,
            font_retry_wait_seconds=self.config.font_retry_wait_seconds,
        )
        self._run_task = asyncio.create_task(self._run(), name="render-worker")

    async def stop(self) -> None:
        """
        Terminate the session. Requests still in flight are dropped without
        a result.
        """
        if self.session is not None:
            self.session.terminate()

        tasks = list(self._inflight)
        if self._run_task is not None:
            tasks.append(self._run_task)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._inflight.clear()
        # A program stuck in a loop keeps its thread; it is not waited for.
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.logger.info("render_worker.py:Render worker stopped")

    async def wait_stopped(self) -> None:
        """Wait until the dispatch loop exits (startup failure or stop)."""
        if self._run_task is not None:
            await asyncio.gather(self._run_task, return_exceptions=True)

    @property
    def state(self) -> SessionStateEnum:
        return self.session.state if self.session else SessionStateEnum.UNINITIALIZED

    @property
    def is_ready(self) -> bool:
        return self.session is not None and self.session.is_ready

    # Channels

    def post_message(self, message: Dict[str, Any]) -> None:
        """
        Queue an inbound message. Messages sent before `ready` wait in the
        channel until the session is ready.
        """
        if self.session is not None and self.session.is_terminated:
            raise WorkerTerminatedException("Render worker session is terminated")
        self.inbound.put_nowait(message)

    async def next_message(self) -> Dict[str, Any]:
        """Next outbound message (`ready` or `render-result`)."""
        return await self.outbound.get()

    def _emit(self, message) -> None:
        if self.session is not None and self.session.is_terminated:
            return
        self.outbound.put_nowait(message.to_wire())

    # Dispatch

    async def _run(self) -> None:
        try:
            await self.session.initialize()
        except SessionInitializationException as e:
            self.startup_error = e
            self.logger.error(f"render_worker.py:Render worker failed to start: {e}")
            return

        self._emit(ReadyMessage())
        self.logger.info("render_worker.py:Render worker ready")

        while True:
            raw = await self.inbound.get()
            await self._dispatch(raw)

    async def _dispatch(self, raw: Any) -> None:
        try:
            message = parse_message(raw)
        except ValidationError as e:
            self._reject(raw, e)
            return

        if isinstance(message, RenderRequestMessage):
            await self._handle_render_request(message)
        else:
            self._rejected_messages += 1
            self.logger.warning(
                f"render_worker.py:Ignoring '{message.type}' message sent to the worker"
            )

    def _reject(self, raw: Any, error: ValidationError) -> None:
        self._rejected_messages += 1
        message_type = raw.get("type") if isinstance(raw, dict) else None
        request_id = raw.get("id") if isinstance(raw, dict) else None
        self.logger.warning(
            "render_worker.py:Rejected malformed message",
            message_type=message_type,
            errors=error.error_count(),
        )

        # A broken render request that still carries an id gets an answer.
        if message_type == MessageTypeEnum.RENDER_REQUEST.value and isinstance(
            request_id, int
        ) and not isinstance(request_id, bool):
            issues = [
                ValidationIssue(path=issue["path"], message=issue["message"])
                for issue in validation_issues(error)
            ]
            self._emit(
                RenderResultMessage(
                    id=request_id,
                    result=RenderFailure(
                        message="Malformed render request",
                        kind="validation",
                        issues=issues,
                    ),
                )
            )

    # Render pipeline

    async def _handle_render_request(self, request: RenderRequestMessage) -> None:
        """
        Evaluate the program (transform, evaluate, translate) on the worker
        thread before the next message is dispatched, then hand resource
        resolution and rendering to a task.
        """
        self._total_requests += 1
        self.logger.debug(f"render_worker.py:Render request {request.id} received")

        loop = asyncio.get_running_loop()
        try:
            node, options = await loop.run_in_executor(
                self._executor, self._prepare, request.code
            )
        except SandboxException as e:
            self._fail(request.id, e)
            return

        if options.quality is not None and not options.format.supports_quality:
            self.logger.warning(
                f"render_worker.py:Request {request.id} sets quality for "
                f"'{options.format.value}', which ignores it"
            )

        task = asyncio.create_task(
            self._complete(request.id, node, options), name=f"render-{request.id}"
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    def _prepare(self, code: str) -> Tuple[Dict[str, Any], RenderOptions]:
        exports = evaluate_code_exports(code, self.modules)
        try:
            node = from_element(h(exports.default))
        except SandboxException:
            raise
        except asyncio.CancelledError:
            raise
        except BaseException as e:
            # Components are program code: SystemExit and friends included.
            raise CodeEvaluationException(
                f"{e.__class__.__name__}: {e}" if str(e) else e.__class__.__name__
            ) from e
        return node, exports.options

    async def _complete(
        self, request_id: int, node: Dict[str, Any], options: RenderOptions
    ) -> None:
        try:
            resources = await self._resolve_resources(node)
            data_url, duration_ms = await self._render(node, options, resources)
        except Exception as e:
            self._fail(request_id, e)
            return

        message = RenderResultMessage(
            id=request_id,
            result=RenderSuccess(
                data_url=data_url,
                duration_ms=duration_ms,
                options=options,
                node=node if self.config.include_node else None,
            ),
        )
        try:
            self._emit(message)
        except ValueError as e:
            # Node props that cannot cross the channel (functions, objects).
            self._fail(request_id, RendererException(f"Result is not serializable: {e}"))
            return

        self._successful_renders += 1
        self._total_render_time += duration_ms
        self.logger.info(
            "render_worker.py:Render completed",
            request_id=request_id,
            duration_ms=round(duration_ms, 2),
            resources=len(resources),
        )

    async def _resolve_resources(self, node: Dict[str, Any]) -> List[ResolvedResource]:
        urls = extract_resource_urls(node)
        if not urls:
            return []
        fetcher = ResourceFetcher(
            FetchPolicy(
                timeout_ms=self.config.fetch_timeout_ms,
                fetch=self.fetch,
                throw_on_error=self.config.resource_throw_on_error,
                cache=self.session.resource_cache,
            )
        )
        return await fetcher.resolve(urls)

    async def _render(
        self,
        node: Dict[str, Any],
        options: RenderOptions,
        resources: List[ResolvedResource],
    ) -> Tuple[str, float]:
        renderer = self.session.renderer
        start = time.perf_counter()
        try:
            artifact = await asyncio.get_running_loop().run_in_executor(
                self._executor, renderer.render, node, options, resources
            )
            if asyncio.iscoroutine(artifact) or isinstance(artifact, asyncio.Future):
                artifact = await artifact
        except RendererException:
            raise
        except Exception as e:
            raise RendererException(str(e) or e.__class__.__name__) from e
        duration_ms = (time.perf_counter() - start) * 1000

        if not isinstance(artifact, (bytes, bytearray, memoryview)):
            raise RendererException(
                f"Renderer returned {artifact.__class__.__name__}, expected bytes"
            )
        encoded = base64.b64encode(bytes(artifact)).decode("ascii")
        return f"data:{options.format.mime_type};base64,{encoded}", duration_ms

    def _fail(self, request_id: int, error: BaseException) -> None:
        self._failed_renders += 1
        self.logger.warning(
            f"render_worker.py:Render request {request_id} failed: {error}"
        )
        self._emit(RenderResultMessage(id=request_id, result=_failure_from(error)))

    def get_metrics(self) -> Dict[str, Any]:
        """Get render worker metrics."""
        uptime = time.time() - self._start_time
        completed = self._successful_renders + self._failed_renders
        cache = self.session.resource_cache if self.session else None

        return {
            "uptime_seconds": uptime,
            "state": self.state.value,
            "total_requests": self._total_requests,
            "successful_renders": self._successful_renders,
            "failed_renders": self._failed_renders,
            "rejected_messages": self._rejected_messages,
            "in_flight": len(self._inflight),
            "success_rate": (self._successful_renders / completed if completed else 0.0),
            "avg_render_time_ms": (
                self._total_render_time / self._successful_renders
                if self._successful_renders
                else 0.0
            ),
            "resource_cache": cache.stats() if cache is not None else None,
        }


def _failure_from(error: BaseException) -> RenderFailure:
    """Structured error result for any failure inside a request."""
    if isinstance(error, ExportValidationException):
        return RenderFailure(
            message=error.message,
            kind=error.kind,
            issues=[ValidationIssue(**issue) for issue in error.issues],
        )
    if isinstance(error, (SandboxException, RendererException)):
        return RenderFailure(message=error.message, kind=error.kind)
    if isinstance(error, FetchException):
        return RenderFailure(message=error.message, kind="resource")
    text = str(error)
    return RenderFailure(message=text or "Unknown error", kind="render")
