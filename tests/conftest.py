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
Shared fakes for the render worker tests.

No network and no real rasterizer: fetches are answered from a dict and the
renderer returns a recognizable byte string.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from renderlab.config import get_settings
from renderlab.services.fetch import FetchResponse


class FakeFetch:
    """
    Fetch capability answering from a route table.

    A route value is bytes (200), a (status, bytes) tuple, an Exception to
    raise, or a float delay in seconds before a 200 with an empty body.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None, delay: float = 0.0):
        self.routes = dict(routes or {})
        self.delay = delay
        self.calls: List[str] = []
        self.signals = []
        self.cancelled: List[str] = []

    async def __call__(self, url, *, signal=None):
        self.calls.append(url)
        self.signals.append(signal)
        route = self.routes.get(url, (404, b""))
        try:
            if isinstance(route, float):
                await asyncio.sleep(route)
                return FetchResponse(url=url, status=200, body=b"")
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled.append(url)
            raise

        if isinstance(route, Exception):
            raise route
        if isinstance(route, tuple):
            status, body = route
            return FetchResponse(url=url, status=status, reason="Test", body=body)
        return FetchResponse(url=url, status=200, reason="OK", body=route)


class FakeRenderer:
    """Renderer returning the node tag and resource count as bytes."""

    def __init__(self, fail_with: Optional[Exception] = None, is_async: bool = False):
        self.fail_with = fail_with
        self.is_async = is_async
        self.fonts: List[bytes] = []
        self.calls = []

    def load_font(self, data: bytes) -> None:
        self.fonts.append(data)

    def render(self, node, options, resources):
        if self.is_async:
            return self._render_async(node, options, resources)
        return self._render(node, options, resources)

    async def _render_async(self, node, options, resources):
        await asyncio.sleep(0)
        return self._render(node, options, resources)

    def _render(self, node, options, resources):
        self.calls.append((node, options, list(resources)))
        if self.fail_with is not None:
            raise self.fail_with
        return f"{node.get('tag', node['type'])}:{len(resources)}".encode()


def run(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


CARD_PROGRAM = """
from renderlab.jsx import h

def Card():
    return h("div", {"style": {"backgroundColor": "#000"}}, "Hello")

exports.default = Card
exports.options = {"width": 1200, "height": 630, "format": "png"}
"""


IMAGE_PROGRAM = """
def Card():
    return h(
        "div",
        {"style": {"backgroundImage": "url('https://cdn.test/bg.png')"}},
        h("img", {"src": "https://cdn.test/logo.png", "width": 64, "height": 64}),
        h("img", {"src": "https://cdn.test/logo.png", "width": 32, "height": 32}),
    )

exports.default = Card
exports.options = {"width": 800, "height": 400, "format": "jpeg", "quality": 80}
"""


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_renderer():
    return FakeRenderer()
