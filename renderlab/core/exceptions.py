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
Exception hierarchy for renderlab.

Fetch errors surface to the direct caller of the resource fetcher. Sandbox,
renderer and resource errors raised while serving a render request are
converted into error result messages by the render worker and never cross
the message boundary.
"""

from typing import Any, Dict, List, Optional, Sequence


class RenderLabException(Exception):
    """Base class for every renderlab error."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationException(RenderLabException):
    """Missing or invalid configuration."""


class ServiceException(RenderLabException):
    """External service call failed."""


# Fetch errors


class FetchException(ServiceException):
    """A single locator could not be resolved."""

    def __init__(self, locator: str, message: str):
        super().__init__(message, {"locator": locator})
        self.locator = locator


class FetchNetworkException(FetchException):
    """The fetch capability itself failed (connection, DNS, protocol)."""

    def __init__(self, locator: str, reason: str):
        super().__init__(locator, f"Network error for {locator}: {reason}")
        self.reason = reason


class FetchStatusException(FetchException):
    """The transport succeeded but the status code signals failure."""

    def __init__(self, locator: str, status: int, reason: str = ""):
        super().__init__(locator, f"HTTP {status}: {reason} for {locator}")
        self.status = status
        self.reason = reason


class FetchTimeoutException(FetchException):
    """The batch timeout elapsed before the fetch completed."""

    def __init__(self, locator: str, timeout_ms: float):
        super().__init__(locator, f"Timed out after {timeout_ms:g}ms fetching {locator}")
        self.timeout_ms = timeout_ms


class FetchAbortedException(FetchException):
    """The batch was aborted because another fetch failed."""

    def __init__(self, locator: str, reason: str = "batch aborted"):
        super().__init__(locator, f"Fetch of {locator} aborted: {reason}")
        self.reason = reason


# Sandbox errors


class SandboxException(RenderLabException):
    """User program could not be turned into a renderable tree."""

    kind = "evaluation"


class CodeTransformException(SandboxException):
    """The program failed to compile under the sandbox policy."""

    kind = "transform"

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Code transformation failed")


class CodeEvaluationException(SandboxException):
    """The program raised while executing or building its tree."""

    kind = "evaluation"


class ExportValidationException(SandboxException):
    """The export target does not match the expected shape."""

    kind = "validation"

    def __init__(self, issues: List[Dict[str, str]]):
        self.issues = issues
        summary = "; ".join(f"{issue['path']}: {issue['message']}" for issue in issues)
        super().__init__(f"Invalid exports: {summary}" if summary else "Invalid exports")


class ModuleNotAllowedException(SandboxException, ImportError):
    """Import of a module outside the virtual module allow-list."""

    kind = "evaluation"

    def __init__(self, name: str):
        SandboxException.__init__(self, f"Module '{name}' is not available in the sandbox")
        self.name = name


# Renderer errors


class RendererException(RenderLabException):
    """The rendering capability rejected the node tree or options."""

    kind = "render"


# Session errors


class SessionException(RenderLabException):
    """Worker session lifecycle violation."""


class SessionInitializationException(SessionException):
    """Renderer or default font failed to load."""


class WorkerNotReadyException(SessionException):
    """The worker has not emitted its ready signal yet."""


class WorkerTerminatedException(SessionException):
    """The worker session was torn down."""
