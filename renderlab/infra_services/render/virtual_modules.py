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
Allow-list of modules importable from render programs.

Programs never reach the real import system: `import` statements resolve
against this registry only, each name mapping to a pre-registered namespace.
"""

from types import MappingProxyType, SimpleNamespace
from typing import Any, Dict, Iterable, Mapping, Optional

from renderlab.core.exceptions import ModuleNotAllowedException

from .elements import Fragment, h


def DocsTemplateV1(
    title: str = "Documentation",
    description: str = "",
    site: str = "",
    icon: Optional[str] = None,
    primary_color: str = "#6366f1",
    background: str = "#09090b",
):
    """Docs page card: site badge, title and description on a dark canvas."""
    header = [h("span", {"style": {"fontSize": 32, "color": "#a1a1aa"}}, site)]
    if icon:
        header.insert(0, h("img", {"src": icon, "width": 48, "height": 48}))

    return h(
        "div",
        {
            "style": {
                "width": "100%",
                "height": "100%",
                "display": "flex",
                "flexDirection": "column",
                "padding": 64,
                "backgroundColor": background,
                "color": "#fafafa",
            }
        },
        h("div", {"style": {"display": "flex", "alignItems": "center", "gap": 16}}, *header),
        h(
            "h1",
            {"style": {"fontSize": 72, "fontWeight": 700, "color": primary_color}},
            title,
        ),
        h("p", {"style": {"fontSize": 36, "color": "#d4d4d8"}}, description),
    )


class VirtualModuleRegistry:
    """Maps allow-listed module names to read-only namespaces."""

    def __init__(self, modules: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self._modules: Dict[str, SimpleNamespace] = {}
        for name, members in (modules or {}).items():
            self.register(name, members)

    def register(self, name: str, members: Mapping[str, Any]) -> None:
        self._modules[name] = SimpleNamespace(**dict(members))

    def names(self) -> Iterable[str]:
        return tuple(self._modules)

    def resolve(self, name: str) -> SimpleNamespace:
        try:
            return self._modules[name]
        except KeyError:
            raise ModuleNotAllowedException(name) from None

    def make_importer(self):
        """
        Build the `__import__` handed to the sandbox.

        Only `from <name> import ...` and dot-free `import <name>` are
        supported; relative imports are refused.
        """

        def restricted_import(name, globals=None, locals=None, fromlist=(), level=0):
            if level:
                raise ModuleNotAllowedException("." * level + (name or ""))
            module = self.resolve(name)
            if not fromlist and "." in name:
                raise ModuleNotAllowedException(name)
            return module

        return restricted_import


DEFAULT_MODULES = MappingProxyType(
    {
        "renderlab.jsx": {"h": h, "Fragment": Fragment},
        "renderlab.templates.docs_template_v1": {
            "DocsTemplateV1": DocsTemplateV1,
            "default": DocsTemplateV1,
        },
    }
)


def default_registry() -> VirtualModuleRegistry:
    return VirtualModuleRegistry(DEFAULT_MODULES)
