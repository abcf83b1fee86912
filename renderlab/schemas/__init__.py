"""Schemas for render options and worker messages."""

from .render_options import CodeExports, RenderOptions
from .messages import (
    ReadyMessage,
    RenderFailure,
    RenderRequestMessage,
    RenderResultMessage,
    RenderSuccess,
    ValidationIssue,
    parse_message,
)

__all__ = [
    "CodeExports",
    "RenderOptions",
    "ReadyMessage",
    "RenderFailure",
    "RenderRequestMessage",
    "RenderResultMessage",
    "RenderSuccess",
    "ValidationIssue",
    "parse_message",
]
