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
Sandboxed evaluation of render programs.

A render program is Python source that fills an `exports` target:

    from renderlab.jsx import h

    def Card():
        return h("div", {"style": {"backgroundColor": "#000"}}, "Hello")

    exports.default = Card
    exports.options = {"width": 1200, "height": 630, "format": "png"}

The program is compiled with RestrictedPython (no private attribute access,
guarded writes, iteration and item access) and executed against a fixed set
of bindings: `exports`, `h`, `Fragment` and an import hook limited to the
virtual module allow-list. No filesystem, network or real module access is
reachable from inside.
"""

import asyncio
import operator
from types import CodeType
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from RestrictedPython import compile_restricted_exec, limited_builtins, safe_builtins, utility_builtins
from RestrictedPython.Eval import default_guarded_getitem, default_guarded_getiter
from RestrictedPython.Guards import (
    full_write_guard,
    guarded_iter_unpack_sequence,
    guarded_unpack_sequence,
    safer_getattr,
)
from RestrictedPython.PrintCollector import PrintCollector

from renderlab.config import get_service_logger
from renderlab.core.exceptions import (
    CodeEvaluationException,
    CodeTransformException,
    ExportValidationException,
    SandboxException,
)
from renderlab.schemas import CodeExports

from .elements import Fragment, h
from .virtual_modules import VirtualModuleRegistry, default_registry

logger = get_service_logger("Sandbox")

PROGRAM_FILENAME = "<render-program>"

# Pure builtins added on top of RestrictedPython's safe set.
_EXTRA_BUILTINS = {
    "dict": dict,
    "enumerate": enumerate,
    "max": max,
    "min": min,
    "sum": sum,
    "any": any,
    "all": all,
    "reversed": reversed,
    "map": map,
    "filter": filter,
}

# Exceptions that escape `except Exception` handlers; programs never see them.
_BLOCKED_BUILTINS = ("BaseException", "SystemExit", "KeyboardInterrupt", "GeneratorExit")

_INPLACE_OPERATORS = {
    "+=": operator.iadd,
    "-=": operator.isub,
    "*=": operator.imul,
    "/=": operator.itruediv,
    "//=": operator.ifloordiv,
    "%=": operator.imod,
    "**=": operator.ipow,
    "<<=": operator.ilshift,
    ">>=": operator.irshift,
    "&=": operator.iand,
    "^=": operator.ixor,
    "|=": operator.ior,
}


class ExportTarget:
    """Empty object the program assigns its exports onto."""

    # Lets RestrictedPython's write guard accept attribute assignment.
    _guarded_writes = True

    def as_dict(self) -> Dict[str, Any]:
        return dict(vars(self))


def _inplace_var(op: str, target: Any, value: Any) -> Any:
    try:
        return _INPLACE_OPERATORS[op](target, value)
    except KeyError:
        raise SyntaxError(f"Unsupported augmented assignment '{op}'") from None


def _apply(func, *args, **kwargs):
    return func(*args, **kwargs)


def transform_code(code: str) -> CodeType:
    """
    Compile a program under the sandbox policy.

    Pure and synchronous: the same source always yields the same outcome.

    Raises:
        CodeTransformException: syntax errors or forbidden constructs
    """
    result = compile_restricted_exec(code, filename=PROGRAM_FILENAME)
    if result.errors or result.code is None:
        raise CodeTransformException(result.errors or ["Code transformation failed"])
    for warning in result.warnings:
        logger.debug(f"sandbox.py:Compile warning: {warning}")
    return result.code


def build_bindings(
    exports: ExportTarget, registry: Optional[VirtualModuleRegistry] = None
) -> Dict[str, Any]:
    """The complete global namespace a program runs with."""
    registry = registry or default_registry()

    builtins = dict(safe_builtins)
    builtins.update(limited_builtins)
    builtins.update(utility_builtins)
    builtins.update(_EXTRA_BUILTINS)
    for name in _BLOCKED_BUILTINS:
        builtins.pop(name, None)
    builtins["__import__"] = registry.make_importer()

    return {
        "__builtins__": builtins,
        "__name__": "render_program",
        "__metaclass__": type,
        "_getattr_": safer_getattr,
        "_getitem_": default_guarded_getitem,
        "_getiter_": default_guarded_getiter,
        "_iter_unpack_sequence_": guarded_iter_unpack_sequence,
        "_unpack_sequence_": guarded_unpack_sequence,
        "_write_": full_write_guard,
        "_inplacevar_": _inplace_var,
        "_apply_": _apply,
        "_print_": PrintCollector,
        "exports": exports,
        "h": h,
        "Fragment": Fragment,
    }


def execute_program(
    code: CodeType, registry: Optional[VirtualModuleRegistry] = None
) -> Dict[str, Any]:
    """
    Run compiled program code and return what it exported.

    Raises:
        SandboxException: the program raised, including disallowed imports
    """
    exports = ExportTarget()
    bindings = build_bindings(exports, registry)
    try:
        exec(code, bindings)
    except SandboxException:
        raise
    except asyncio.CancelledError:
        raise
    except BaseException as e:
        raise CodeEvaluationException(_describe(e)) from e
    return exports.as_dict()


def validate_exports(raw_exports: Dict[str, Any]) -> CodeExports:
    """
    Check the export target against the expected shape.

    Raises:
        ExportValidationException: one issue per offending field
    """
    try:
        return CodeExports.model_validate(raw_exports)
    except ValidationError as e:
        raise ExportValidationException(validation_issues(e)) from e


def evaluate_code_exports(
    code: str, registry: Optional[VirtualModuleRegistry] = None
) -> CodeExports:
    """Transform, execute and validate a program in one step."""
    return validate_exports(execute_program(transform_code(code), registry))


def validation_issues(error: ValidationError) -> List[Dict[str, str]]:
    return [
        {
            "path": ".".join(str(part) for part in issue["loc"]) or "exports",
            "message": issue["msg"],
        }
        for issue in error.errors()
    ]


def _describe(error: BaseException) -> str:
    text = str(error)
    return f"{error.__class__.__name__}: {text}" if text else error.__class__.__name__
