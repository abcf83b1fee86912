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
Tests for the consumer side: latest-result gating and the render client.
"""

import asyncio

import pytest

from conftest import CARD_PROGRAM, FakeFetch, FakeRenderer, run
from renderlab.core.exceptions import (
    SessionInitializationException,
    WorkerNotReadyException,
    WorkerTerminatedException,
)
from renderlab.infra_services.render import (
    LatestResultGate,
    RenderClient,
    RenderClientContext,
    RenderWorkerConfig,
)
from renderlab.schemas import RenderFailure, RenderResultMessage

SLOW_PROGRAM = """
def Card():
    return h("img", {"src": "https://cdn.test/slow.png"})

exports.default = Card
exports.options = {"width": 10, "height": 10, "format": "png"}
"""


def _result(request_id: int) -> RenderResultMessage:
    return RenderResultMessage(id=request_id, result=RenderFailure(message="x"))


class TestLatestResultGate:
    def test_ids_increase(self):
        gate = LatestResultGate()
        assert [gate.issue(), gate.issue(), gate.issue()] == [1, 2, 3]

    def test_out_of_order_results_keep_latest(self):
        gate = LatestResultGate()
        for _ in range(3):
            gate.issue()

        accepted = [gate.offer(_result(i)) for i in (1, 3, 2)]

        assert accepted == [False, True, False]
        assert gate.current.id == 3
        assert gate.discarded == 2

    def test_reserved_id_not_latest_until_published(self):
        gate = LatestResultGate()
        gate.issue()
        reserved = gate.reserve()
        assert gate.latest_id == 1
        gate.publish(reserved)
        assert gate.latest_id == reserved == 2

    def test_nothing_current_before_latest_arrives(self):
        gate = LatestResultGate()
        gate.issue()
        gate.issue()
        gate.offer(_result(1))
        assert gate.current is None


class TestRenderClient:
    def test_render_roundtrip(self):
        async def scenario():
            async with RenderClientContext(
                FakeRenderer, config=RenderWorkerConfig()
            ) as client:
                result = await client.render(CARD_PROGRAM)
                return result, client.current, client.get_metrics()

        result, current, metrics = run(scenario())
        assert result.ok
        assert result.id == 1
        assert current is result
        assert metrics["latest_request_id"] == 1
        assert metrics["worker"]["successful_renders"] == 1

    def test_stale_results_not_displayed(self):
        # Request 2 waits on a slow resource, so results arrive as 1, 3, 2.
        fetch = FakeFetch({"https://cdn.test/slow.png": 0.1})

        async def scenario():
            async with RenderClientContext(
                FakeRenderer, config=RenderWorkerConfig(), fetch=fetch
            ) as client:
                results = await asyncio.gather(
                    client.render(CARD_PROGRAM),
                    client.render(SLOW_PROGRAM),
                    client.render(CARD_PROGRAM),
                )
                return results, client.current, client.gate.discarded

        results, current, discarded = run(scenario())
        assert [r.id for r in results] == [1, 2, 3]
        assert all(r.ok for r in results)
        assert current.id == 3
        assert discarded == 2

    def test_failed_submit_keeps_latest_id(self):
        async def scenario():
            client = RenderClient(FakeRenderer, config=RenderWorkerConfig())
            await client.connect(timeout=2)
            result = await client.render(CARD_PROGRAM)
            await client.disconnect()
            with pytest.raises(WorkerTerminatedException):
                client.submit(CARD_PROGRAM)
            return result, client.gate.latest_id

        result, latest_id = run(scenario())
        assert result.id == 1
        assert latest_id == 1

    def test_render_before_connect(self):
        async def scenario():
            client = RenderClient(FakeRenderer, config=RenderWorkerConfig())
            with pytest.raises(WorkerNotReadyException):
                await client.render(CARD_PROGRAM)

        run(scenario())

    def test_connect_reports_startup_failure(self):
        def factory():
            raise RuntimeError("engine missing")

        async def scenario():
            client = RenderClient(factory, config=RenderWorkerConfig())
            with pytest.raises(SessionInitializationException) as exc_info:
                await client.connect(timeout=2)
            return str(exc_info.value)

        assert "engine missing" in run(scenario())

    def test_render_timeout(self):
        fetch = FakeFetch({"https://cdn.test/slow.png": 1.0})

        async def scenario():
            async with RenderClientContext(
                FakeRenderer, config=RenderWorkerConfig(), fetch=fetch
            ) as client:
                with pytest.raises(asyncio.TimeoutError):
                    await client.render(SLOW_PROGRAM, timeout_ms=20)
                return client.get_metrics()

        assert run(scenario())["pending_requests"] == 0
