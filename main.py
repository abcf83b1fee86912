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

import os

import uvicorn

from renderlab.api.app import create_app
from renderlab.config import configure_logging, get_settings

settings = get_settings()
configure_logging(settings.log_level, settings.log_format)

print("Starting renderlab API...")
app = create_app(settings=settings)

if __name__ == "__main__":
    port = int(os.environ.get("PORT", settings.api_port))

    uvicorn_args = {
        "host": settings.api_host or "0.0.0.0",
        "port": port,
        "log_level": (settings.log_level or "info").lower(),
    }

    print(
        f"API will run on {uvicorn_args['host']}:{uvicorn_args['port']} (log level: {uvicorn_args['log_level']})"
    )

    if settings.api_reload:
        uvicorn.run("main:app", reload=True, **uvicorn_args)
    else:
        uvicorn.run(app, **uvicorn_args)
