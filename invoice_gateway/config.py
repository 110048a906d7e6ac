"""
Configuration loading and collaborator setup.
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml

from invoice_gateway.pipeline import UploadConfig
from invoice_gateway.services import Authenticator, InvoiceUploader
from invoice_gateway.services.mock import MockAuthenticator, MockUploader
from invoice_gateway.services.stub import NotImplementedUploader, StaticAuthenticator
from invoice_gateway.validation import MAX_FILE_SIZE_BYTES

logger = logging.getLogger(__name__)

# Map adapter types to classes
AUTHENTICATOR_TYPES = {
    "static": StaticAuthenticator,
    "mock": MockAuthenticator,
}

UPLOADER_TYPES = {
    "not_implemented": NotImplementedUploader,
    "mock": MockUploader,
}


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Load configuration from YAML file.

    Looks for config in order:
    1. Explicit path if provided
    2. CONFIG_FILE environment variable
    3. ./config/local.yaml
    4. ./config/default.yaml
    """
    search_paths = []

    if config_path:
        search_paths.append(Path(config_path))

    if env_path := os.environ.get("CONFIG_FILE"):
        search_paths.append(Path(env_path))

    # Default paths relative to project root
    project_root = Path(__file__).parent.parent
    search_paths.extend([
        project_root / "config" / "local.yaml",
        project_root / "config" / "default.yaml",
    ])

    for path in search_paths:
        if path.exists():
            logger.info(f"Loading config from {path}")
            with open(path) as f:
                return yaml.safe_load(f) or {}

    logger.warning("No config file found, using defaults")
    return {}


def _build_adapter(section: str, config: dict, adapter_types: dict, default: str):
    conf = config.get(section, {}) or {}
    adapter_type = conf.get("adapter", default)
    adapter_config = conf.get("config", {}) or {}

    if adapter_type not in adapter_types:
        logger.warning(f"Unknown {section} adapter '{adapter_type}', falling back to '{default}'")
        adapter_type = default
        adapter_config = {}

    adapter = adapter_types[adapter_type](adapter_config)
    logger.info(f"Using {section} adapter: {adapter_type}")
    return adapter


def setup_authenticator(config: dict) -> Authenticator:
    """
    Set up the client authenticator from configuration.

    Config format:
        auth:
          adapter: static
          config:
            clients:
              - client_id: demo-client
                client_secret: demo-secret
    """
    return _build_adapter("auth", config, AUTHENTICATOR_TYPES, "static")


def setup_uploader(config: dict) -> InvoiceUploader:
    """
    Set up the invoice persistence backend from configuration.

    Config format:
        uploader:
          adapter: not_implemented
    """
    return _build_adapter("uploader", config, UPLOADER_TYPES, "not_implemented")


def get_upload_config(config: dict) -> UploadConfig:
    """
    Extract upload pipeline configuration.

    The size limit may be given as max_file_size_bytes or max_file_size_mb;
    bytes wins when both are set.
    """
    upload = config.get("upload", {}) or {}

    max_bytes = upload.get("max_file_size_bytes")
    if max_bytes is None and "max_file_size_mb" in upload:
        max_bytes = int(upload["max_file_size_mb"] * 1024 * 1024)
    if max_bytes is None:
        max_bytes = MAX_FILE_SIZE_BYTES

    return UploadConfig(
        max_file_size_bytes=max_bytes,
        allow_simulated_timeout=upload.get("allow_simulated_timeout", True),
    )


def get_server_config(config: dict) -> dict:
    """Extract server configuration."""
    server = config.get("server", {}) or {}
    return {
        "host": server.get("host", "0.0.0.0"),
        "port": server.get("port", 3000),
        "debug": server.get("debug", False),
        "cors_origins": server.get("cors_origins", None),
    }
