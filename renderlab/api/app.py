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
FastAPI application exposing the render worker over HTTP.

Main application setup with:
- Render client lifecycle
- Middleware configuration
- Error handling
- Route registration
- Request/response logging
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from renderlab import __version__
from renderlab.config import Settings, get_api_logger, get_settings
from renderlab.core.exceptions import (
    ConfigurationException,
    RenderLabException,
    SessionException,
)
from renderlab.infra_services.render import (
    RenderClient,
    RendererFactory,
    RenderWorkerConfig,
    load_renderer_factory,
)

from .routes import health, render


def _lifespan(renderer_factory: Optional[RendererFactory], settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger = get_api_logger("AppLifespan")

        # Startup
        logger.info("app.py:Starting renderlab API")
        factory = renderer_factory
        if factory is None:
            if not settings.has_renderer_config:
                raise ConfigurationException(
                    "No renderer configured, set RENDERER_FACTORY to 'module:attribute'"
                )
            factory = load_renderer_factory(settings.renderer_factory)

        client = RenderClient(
            factory,
            config=RenderWorkerConfig.from_settings(settings),
            request_timeout_ms=settings.render_request_timeout_ms,
        )
        try:
            await client.connect()
        except Exception as e:
            logger.error(f"app.py:API startup failed: {e}")
            raise
        app.state.render_client = client
        logger.info("app.py:API startup completed successfully")

        yield

        # Shutdown
        logger.info("app.py:Shutting down renderlab API")
        await client.disconnect()
        logger.info("app.py:API shutdown completed successfully")

    return lifespan


def create_app(
    renderer_factory: Optional[RendererFactory] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        renderer_factory: Renderer factory, resolved from settings when omitted
        settings: Application settings, the cached settings when omitted

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    logger = get_api_logger("AppFactory")

    app = FastAPI(
        title="renderlab API",
        description="Sandboxed code-to-image render worker",
        version=__version__,
        docs_url="/docs" if settings.enable_api_docs else None,
        redoc_url="/redoc" if settings.enable_api_docs else None,
        openapi_url="/openapi.json" if settings.enable_api_docs else None,
        lifespan=_lifespan(renderer_factory, settings),
    )

    _add_middleware(app, settings)
    _add_exception_handlers(app)
    _add_logging_middleware(app)
    _register_routes(app)

    logger.info("app.py:FastAPI application created successfully")
    return app


def _add_middleware(app: FastAPI, settings: Settings):
    """Add middleware to the application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)


def _add_exception_handlers(app: FastAPI):
    """Add exception handlers to the application."""

    @app.exception_handler(SessionException)
    async def session_exception_handler(request: Request, exc: SessionException):
        """The render worker is not available."""
        return JSONResponse(
            status_code=503,
            content={
                "error": "Render Worker Unavailable",
                "message": str(exc),
                "type": exc.__class__.__name__,
                "path": request.url.path,
            },
        )

    @app.exception_handler(ConfigurationException)
    async def configuration_exception_handler(
        request: Request, exc: ConfigurationException
    ):
        return JSONResponse(
            status_code=500,
            content={
                "error": "Configuration Error",
                "message": str(exc),
                "type": "ConfigurationException",
                "path": request.url.path,
            },
        )

    @app.exception_handler(RenderLabException)
    async def renderlab_exception_handler(request: Request, exc: RenderLabException):
        return JSONResponse(
            status_code=500,
            content={
                "error": "Render Error",
                "message": str(exc),
                "type": exc.__class__.__name__,
                "path": request.url.path,
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger = get_api_logger("ExceptionHandler")
        logger.error(f"app.py:Unhandled exception: {exc}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred",
                "type": "Exception",
                "path": request.url.path,
            },
        )


def _add_logging_middleware(app: FastAPI):
    """Add request/response logging middleware."""
    logger = get_api_logger("RequestLogging")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()

        logger.info(
            "Request started",
            method=request.method,
            url=str(request.url),
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                url=str(request.url),
                error=str(e),
                process_time=time.time() - start_time,
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            "Request completed",
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            process_time=process_time,
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response


def _register_routes(app: FastAPI):
    """Register API routes."""
    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(render.router, prefix="/render", tags=["Render"])

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "renderlab API",
            "version": __version__,
            "status": "operational",
            "endpoints": {
                "health": "/health",
                "render": "/render",
                "render_image": "/render/image",
                "docs": "/docs",
            },
        }
