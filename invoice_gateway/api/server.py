"""
FastAPI application factory.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_gateway.api.dependencies import init_dependencies
from invoice_gateway.api.routes import router
from invoice_gateway.pipeline import UploadConfig, UploadPipeline
from invoice_gateway.services import Authenticator, InvoiceUploader

logger = logging.getLogger(__name__)


def create_app(
    authenticator: Authenticator,
    uploader: InvoiceUploader,
    upload_config: Optional[UploadConfig] = None,
    cors_origins: list[str] = None,
    debug: bool = False
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        authenticator: Client credential checker
        uploader: Persistence backend for validated invoices
        upload_config: Size limit and test hooks (defaults if None)
        cors_origins: List of allowed CORS origins (None = allow all)
        debug: Enable debug mode

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Invoice Upload Gateway",
        description="REST API for validating and ingesting invoice PDFs",
        version="1.0.0",
        debug=debug
    )

    # CORS configuration
    if cors_origins is None:
        # Development: allow all origins
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    upload_config = upload_config or UploadConfig()
    pipeline = UploadPipeline(authenticator, uploader, upload_config)
    init_dependencies(app, pipeline)

    # Include routes
    app.include_router(router)

    @app.on_event("startup")
    async def startup():
        logger.info("Invoice Upload Gateway starting...")
        logger.info(f"  Authenticator: {type(authenticator).__name__}")
        logger.info(f"  Uploader: {type(uploader).__name__}")
        logger.info(f"  Max file size: {upload_config.max_file_size_bytes} bytes")
        if upload_config.allow_simulated_timeout:
            logger.info("  Simulated timeouts enabled (?simulateTimeout=true)")

    @app.on_event("shutdown")
    async def shutdown():
        logger.info("Invoice Upload Gateway shutting down...")

    return app
