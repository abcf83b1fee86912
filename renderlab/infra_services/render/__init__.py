"""Sandboxed render worker, session and consumer-side client."""

from .elements import Element, Fragment, extract_resource_urls, from_element, h
from .render_client import (
    LatestResultGate,
    RenderClient,
    RenderClientContext,
    create_render_client,
)
from .render_worker import RenderWorker, RenderWorkerConfig
from .renderer_iface import Renderer, RendererFactory, load_renderer_factory
from .sandbox import evaluate_code_exports, transform_code
from .session import WorkerSession
from .virtual_modules import VirtualModuleRegistry, default_registry

__all__ = [
    "Element",
    "Fragment",
    "extract_resource_urls",
    "from_element",
    "h",
    "LatestResultGate",
    "RenderClient",
    "RenderClientContext",
    "create_render_client",
    "RenderWorker",
    "RenderWorkerConfig",
    "Renderer",
    "RendererFactory",
    "load_renderer_factory",
    "evaluate_code_exports",
    "transform_code",
    "WorkerSession",
    "VirtualModuleRegistry",
    "default_registry",
]
