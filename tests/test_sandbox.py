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
Tests for sandboxed program evaluation.
"""

import pytest

from conftest import CARD_PROGRAM
from renderlab.core.exceptions import (
    CodeEvaluationException,
    CodeTransformException,
    ExportValidationException,
    ModuleNotAllowedException,
    SandboxException,
)
from renderlab.enums import ImageFormatEnum
from renderlab.infra_services.render import (
    VirtualModuleRegistry,
    evaluate_code_exports,
    from_element,
    h,
    transform_code,
)
from renderlab.infra_services.render.sandbox import ExportTarget, build_bindings


def _program(options: str, body: str = 'return h("div", None, "x")') -> str:
    return f"""
def Card():
    {body}

exports.default = Card
exports.options = {options}
"""


class TestTransform:
    def test_syntax_error(self):
        with pytest.raises(CodeTransformException) as exc_info:
            transform_code("def broken(:\n    pass")
        assert exc_info.value.kind == "transform"
        assert exc_info.value.errors

    def test_private_attribute_access_rejected(self):
        with pytest.raises(CodeTransformException):
            transform_code("x = ().__class__")

    def test_same_source_same_outcome(self):
        assert transform_code(CARD_PROGRAM).co_code == transform_code(CARD_PROGRAM).co_code


class TestEvaluate:
    def test_valid_program(self):
        exports = evaluate_code_exports(CARD_PROGRAM)

        assert exports.options.width == 1200
        assert exports.options.height == 630
        assert exports.options.format is ImageFormatEnum.PNG
        assert exports.options.quality is None

        node = from_element(h(exports.default))
        assert node["tag"] == "div"
        assert node["children"][0]["text"] == "Hello"

    def test_extra_exports_ignored(self):
        source = _program('{"width": 10, "height": 10, "format": "webp"}') + "\nexports.extra = 1\n"
        exports = evaluate_code_exports(source)
        assert exports.options.format is ImageFormatEnum.WEBP

    def test_disallowed_import(self):
        with pytest.raises(ModuleNotAllowedException) as exc_info:
            evaluate_code_exports("import os\n" + CARD_PROGRAM)
        assert exc_info.value.name == "os"
        assert isinstance(exc_info.value, ImportError)

    def test_relative_import_refused(self):
        with pytest.raises(SandboxException):
            evaluate_code_exports("from . import jsx\n" + CARD_PROGRAM)

    def test_no_filesystem_builtins(self):
        source = _program('{"width": 10, "height": 10, "format": "png"}')
        with pytest.raises(CodeEvaluationException) as exc_info:
            evaluate_code_exports('open("/etc/passwd")\n' + source)
        assert "NameError" in str(exc_info.value)

    def test_system_exit_is_evaluation_error(self):
        source = _program('{"width": 10, "height": 10, "format": "png"}')
        with pytest.raises(CodeEvaluationException) as exc_info:
            evaluate_code_exports('raise SystemExit("bye")\n' + source)
        assert "SystemExit" in str(exc_info.value)

    def test_process_exiting_exceptions_not_bound(self):
        builtins = build_bindings(ExportTarget())["__builtins__"]
        for name in ("SystemExit", "KeyboardInterrupt", "GeneratorExit", "BaseException"):
            assert name not in builtins
        assert "ValueError" in builtins

    def test_runtime_error_reported(self):
        with pytest.raises(CodeEvaluationException) as exc_info:
            evaluate_code_exports("1 / 0\n")
        assert "ZeroDivisionError" in exc_info.value.message

    def test_virtual_template_module(self):
        source = """
from renderlab.templates.docs_template_v1 import DocsTemplateV1

def Card():
    return h(DocsTemplateV1, {"title": "Guide", "site": "docs.test"})

exports.default = Card
exports.options = {"width": 1200, "height": 630, "format": "png"}
"""
        exports = evaluate_code_exports(source)
        node = from_element(h(exports.default))
        title = node["children"][1]
        assert title["tag"] == "h1"
        assert title["children"][0]["text"] == "Guide"

    def test_custom_registry(self):
        registry = VirtualModuleRegistry({"brand": {"COLOR": "#123456"}})
        source = "from brand import COLOR\n" + _program(
            '{"width": 10, "height": 10, "format": "png"}',
            'return h("div", {"style": {"color": COLOR}})',
        )
        exports = evaluate_code_exports(source, registry)
        assert from_element(h(exports.default))["style"] == {"color": "#123456"}

        with pytest.raises(ModuleNotAllowedException):
            evaluate_code_exports("from renderlab.jsx import h\n", registry)


class TestExportValidation:
    def test_invalid_format_type(self):
        with pytest.raises(ExportValidationException) as exc_info:
            evaluate_code_exports(_program('{"width": 100, "height": 100, "format": 123}'))

        assert exc_info.value.kind == "validation"
        paths = [issue["path"] for issue in exc_info.value.issues]
        assert paths == ["options.format"]

    def test_integers_are_strict(self):
        with pytest.raises(ExportValidationException) as exc_info:
            evaluate_code_exports(_program('{"width": "100", "height": 1.5, "format": "png"}'))
        paths = sorted(issue["path"] for issue in exc_info.value.issues)
        assert paths == ["options.height", "options.width"]

    def test_quality_bounds(self):
        with pytest.raises(ExportValidationException):
            evaluate_code_exports(
                _program('{"width": 10, "height": 10, "format": "jpeg", "quality": 101}')
            )

    def test_missing_default(self):
        with pytest.raises(ExportValidationException) as exc_info:
            evaluate_code_exports('exports.options = {"width": 1, "height": 1, "format": "png"}')
        assert [issue["path"] for issue in exc_info.value.issues] == ["default"]

    def test_non_callable_default(self):
        with pytest.raises(ExportValidationException):
            evaluate_code_exports(
                'exports.default = 5\nexports.options = {"width": 1, "height": 1, "format": "png"}'
            )
