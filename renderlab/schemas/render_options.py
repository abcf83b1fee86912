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
Schemas for what a render program must export.
"""

from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from renderlab.enums import ImageFormatEnum


class RenderOptions(BaseModel):
    """
    Output options exported by a render program.

    Integers are strict: "100" or 100.0 are rejected rather than coerced.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    width: int = Field(strict=True, gt=0)
    height: int = Field(strict=True, gt=0)
    quality: Optional[int] = Field(default=None, strict=True, ge=1, le=100)
    format: ImageFormatEnum


class CodeExports(BaseModel):
    """
    The export target after a program ran: a zero-argument component under
    `default` and its `options`.
    """

    model_config = ConfigDict(extra="ignore")

    default: Callable[[], Any]
    options: RenderOptions
