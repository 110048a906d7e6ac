"""
Dependency access for API routes.

Collaborators are attached to app.state by create_app, so each app
instance (and each test client) carries its own pipeline.
"""

from fastapi import Request

from invoice_gateway.pipeline import UploadPipeline


def init_dependencies(app, pipeline: UploadPipeline) -> None:
    """Attach the upload pipeline to an app."""
    app.state.upload_pipeline = pipeline


def get_upload_pipeline(request: Request) -> UploadPipeline:
    """Get the upload pipeline for the current app."""
    pipeline = getattr(request.app.state, "upload_pipeline", None)
    if pipeline is None:
        raise RuntimeError("Upload pipeline not initialized")
    return pipeline
