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

from fastapi import APIRouter, Request

from renderlab.config import get_api_logger

router = APIRouter()
logger = get_api_logger("HealthRoutes")


@router.get("")
async def health(request: Request):
    """Render worker state and metrics."""
    client = getattr(request.app.state, "render_client", None)
    if client is None:
        return {"status": "starting", "ready": False}

    metrics = client.get_metrics()
    return {
        "status": "ok" if client.is_ready else "degraded",
        "ready": client.is_ready,
        "metrics": metrics,
    }
