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
Worker protocol messages.

Messages cross the worker channels as plain dicts with camelCase keys; these
models validate and build them.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .render_options import RenderOptions


class WireModel(BaseModel):
    """Base for every message: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ReadyMessage(WireModel):
    type: Literal["ready"] = "ready"


class RenderRequestMessage(WireModel):
    type: Literal["render-request"] = "render-request"
    id: int
    code: str


class ValidationIssue(WireModel):
    path: str
    message: str


class RenderSuccess(WireModel):
    status: Literal["ok"] = "ok"
    data_url: str
    duration_ms: float
    options: RenderOptions
    node: Optional[Dict[str, Any]] = None


class RenderFailure(WireModel):
    status: Literal["error"] = "error"
    message: str
    kind: str = "evaluation"
    issues: List[ValidationIssue] = Field(default_factory=list)


RenderOutcome = Annotated[Union[RenderSuccess, RenderFailure], Field(discriminator="status")]


class RenderResultMessage(WireModel):
    type: Literal["render-result"] = "render-result"
    id: int
    result: RenderOutcome

    @property
    def ok(self) -> bool:
        return isinstance(self.result, RenderSuccess)


WorkerMessage = Annotated[
    Union[ReadyMessage, RenderRequestMessage, RenderResultMessage],
    Field(discriminator="type"),
]

_message_adapter: TypeAdapter = TypeAdapter(WorkerMessage)


def parse_message(raw: Dict[str, Any]):
    """
    Validate a raw channel message.

    Raises:
        pydantic.ValidationError: unknown type or malformed payload
    """
    return _message_adapter.validate_python(raw)
