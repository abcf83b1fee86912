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
Cancellation signal shared by every fetch of one batch.

A signal is created once per batch. Aborting it (explicitly, or when its
timer expires) cancels every task registered with it at the same moment.
"""

import asyncio
from typing import Optional, Set

from renderlab.core.exceptions import (
    FetchAbortedException,
    FetchException,
    FetchTimeoutException,
)


class AbortSignal:
    """Batch-wide abort token with an optional deadline."""

    def __init__(self):
        self._reason: Optional[str] = None
        self._timeout_ms: Optional[float] = None
        self._timed_out = False
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    @classmethod
    def timeout(cls, timeout_ms: float) -> "AbortSignal":
        """Create a signal that aborts itself after `timeout_ms` milliseconds."""
        signal = cls()
        signal._timeout_ms = timeout_ms
        loop = asyncio.get_running_loop()
        signal._timer = loop.call_later(max(timeout_ms, 0) / 1000, signal._expire)
        return signal

    @property
    def aborted(self) -> bool:
        return self._reason is not None

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def track(self, *tasks: asyncio.Task) -> None:
        """Register tasks to be cancelled when the signal aborts."""
        for task in tasks:
            if self.aborted:
                task.cancel()
            self._tasks.add(task)

    def abort(self, reason: str = "batch aborted") -> None:
        if self.aborted:
            return
        self._reason = reason
        self._cancel_timer()
        for task in self._tasks:
            if not task.done():
                task.cancel()

    def exception_for(self, locator: str) -> FetchException:
        """Per-locator error describing why this signal aborted."""
        if self._timed_out:
            return FetchTimeoutException(locator, self._timeout_ms or 0)
        return FetchAbortedException(locator, self._reason or "batch aborted")

    def dispose(self) -> None:
        """Stop the timer; the batch is over."""
        self._cancel_timer()
        self._tasks.clear()

    def _expire(self) -> None:
        self._timer = None
        if self.aborted:
            return
        self._timed_out = True
        self.abort(f"timed out after {self._timeout_ms:g}ms")

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
