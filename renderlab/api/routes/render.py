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

import asyncio
import base64
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, Field

from renderlab.config import get_api_logger
from renderlab.infra_services.render import RenderClient
from renderlab.schemas import RenderResultMessage

router = APIRouter()
logger = get_api_logger("RenderRoutes")


class RenderRequestBody(BaseModel):
    code: str = Field(..., description="Render program source")
    timeout_ms: Optional[int] = Field(
        default=None, gt=0, alias="timeoutMs", description="Per-request timeout"
    )

    model_config = {"populate_by_name": True}


def _client(request: Request) -> RenderClient:
    return request.app.state.render_client


async def _render(request: Request, body: RenderRequestBody) -> RenderResultMessage:
    client = _client(request)
    try:
        return await client.render(body.code, timeout_ms=body.timeout_ms)
    except asyncio.TimeoutError:
        logger.warning("render.py:Render request timed out")
        raise HTTPException(status_code=504, detail="Render timed out")


@router.post("")
async def render(request: Request, body: RenderRequestBody):
    """
    Render a program and return the worker's result message.

    Errors in the program are part of the result (`status: "error"`), not an
    HTTP failure.
    """
    result = await _render(request, body)
    logger.info(f"render.py:Render {result.id} finished with status {result.result.status}")
    return result.to_wire()


@router.post("/image")
async def render_image(request: Request, body: RenderRequestBody):
    """Render a program and return the encoded image bytes."""
    result = await _render(request, body)
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.result.model_dump(by_alias=True))

    header, _, payload = result.result.data_url.partition(",")
    media_type = header[len("data:"):].split(";")[0]
    return Response(content=base64.b64decode(payload), media_type=media_type)
