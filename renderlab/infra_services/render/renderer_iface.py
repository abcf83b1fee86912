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
Renderer capability interface.

The layout/rasterization engine lives outside renderlab. The worker only
needs something that accepts a font once and turns a node tree plus options
into encoded image bytes. `render` may be synchronous or a coroutine.
"""

from __future__ import annotations

import importlib
from typing import Any, Awaitable, Callable, Dict, Protocol, Sequence, Union

from renderlab.core.exceptions import ConfigurationException
from renderlab.schemas import RenderOptions
from renderlab.services.fetch import ResolvedResource


class Renderer(Protocol):
    """Minimal rendering capability used by the worker session."""

    def load_font(self, data: bytes) -> None: ...

    def render(
        self,
        node: Dict[str, Any],
        options: RenderOptions,
        resources: Sequence[ResolvedResource],
    ) -> Union[bytes, Awaitable[bytes]]: ...


RendererFactory = Callable[[], Union[Renderer, Awaitable[Renderer]]]


def load_renderer_factory(path: str) -> RendererFactory:
    """
    Resolve a 'package.module:attribute' import path to a renderer factory.

    Raises:
        ConfigurationException: empty path, missing module or attribute
    """
    module_name, _, attribute = (path or "").strip().partition(":")
    if not module_name or not attribute:
        raise ConfigurationException(
            "renderer_factory must look like 'package.module:attribute'",
            {"renderer_factory": path},
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationException(
            f"Cannot import renderer module '{module_name}': {e}",
            {"renderer_factory": path},
        ) from e

    factory = getattr(module, attribute, None)
    if factory is None or not callable(factory):
        raise ConfigurationException(
            f"'{attribute}' in '{module_name}' is not a callable renderer factory",
            {"renderer_factory": path},
        )
    return factory
