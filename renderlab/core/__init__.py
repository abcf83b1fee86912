"""Core building blocks shared across renderlab."""

from .exceptions import (
    RenderLabException,
    ConfigurationException,
    ServiceException,
    FetchException,
    FetchNetworkException,
    FetchStatusException,
    FetchTimeoutException,
    FetchAbortedException,
    SandboxException,
    CodeTransformException,
    CodeEvaluationException,
    ExportValidationException,
    ModuleNotAllowedException,
    RendererException,
    SessionException,
    SessionInitializationException,
    WorkerNotReadyException,
    WorkerTerminatedException,
)

__all__ = [
    "RenderLabException",
    "ConfigurationException",
    "ServiceException",
    "FetchException",
    "FetchNetworkException",
    "FetchStatusException",
    "FetchTimeoutException",
    "FetchAbortedException",
    "SandboxException",
    "CodeTransformException",
    "CodeEvaluationException",
    "ExportValidationException",
    "ModuleNotAllowedException",
    "RendererException",
    "SessionException",
    "SessionInitializationException",
    "WorkerNotReadyException",
    "WorkerTerminatedException",
]
