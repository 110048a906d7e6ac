"""
Startup checks and validation.

Run before starting the server to catch configuration issues early.
"""

import errno
import importlib.util
import logging
import socket
import sys
from typing import Optional

from invoice_gateway.config import AUTHENTICATOR_TYPES, UPLOADER_TYPES
from invoice_gateway.pipeline import UploadConfig

logger = logging.getLogger(__name__)


def check_port_available(host: str, port: int) -> tuple[bool, Optional[str]]:
    """
    Check if a port is available for binding.

    Returns:
        (True, None) if available
        (False, error_message) if not
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind((host, port))
        return True, None
    except OSError as e:
        if e.errno == errno.EADDRINUSE:
            return False, f"Port {port} is already in use. Another service may be running on this port."
        elif e.errno == errno.EADDRNOTAVAIL:
            return False, f"Cannot bind to {host}:{port}. Check if the host address is valid."
        elif e.errno == errno.EACCES:
            return False, f"Permission denied for port {port}. Ports below 1024 require admin/root privileges."
        else:
            return False, f"Cannot bind to {host}:{port}: {e}"
    finally:
        sock.close()


def validate_config(config: dict) -> list[str]:
    """
    Validate configuration and return list of warnings/errors.

    Returns:
        List of warning/error messages (empty if all good)
    """
    issues = []

    # Check server config
    server = config.get("server", {}) or {}
    port = server.get("port", 3000)

    if not isinstance(port, int) or port < 1 or port > 65535:
        issues.append(f"Invalid port: {port}. Must be between 1 and 65535.")
    elif port < 1024:
        issues.append(f"Port {port} is a privileged port. Consider using a port >= 1024.")

    # Check upload limits
    upload = config.get("upload", {}) or {}
    for key in ("max_file_size_bytes", "max_file_size_mb"):
        if key in upload:
            value = upload[key]
            if not isinstance(value, (int, float)) or value <= 0:
                issues.append(f"Invalid upload limit {key}: {value}. Must be a positive number.")

    # Check collaborator adapters
    auth = config.get("auth", {}) or {}
    auth_adapter = auth.get("adapter", "static")
    if auth_adapter not in AUTHENTICATOR_TYPES:
        issues.append(f"Unknown auth adapter '{auth_adapter}'.")
    elif auth_adapter == "static" and not (auth.get("config") or {}).get("clients"):
        issues.append("No API clients configured. All uploads will be rejected as unauthorized.")

    uploader = config.get("uploader", {}) or {}
    uploader_adapter = uploader.get("adapter", "not_implemented")
    if uploader_adapter not in UPLOADER_TYPES:
        issues.append(f"Unknown uploader adapter '{uploader_adapter}'.")

    return issues


def check_dependencies() -> dict[str, bool]:
    """
    Check which runtime dependencies are importable.

    Returns:
        Dict of dependency name -> is_available
    """
    deps = {}

    # pypdf for integrity checks
    deps["pypdf"] = importlib.util.find_spec("pypdf") is not None

    # python-multipart for form uploads (import name changed in 0.0.13)
    deps["python-multipart"] = any(
        importlib.util.find_spec(name) is not None
        for name in ("python_multipart", "multipart")
    )

    return deps


def run_startup_checks(config: dict) -> None:
    """
    Run all startup checks. Exits with error if critical issues found.

    Args:
        config: Loaded configuration dict
    """
    logger.info("Running startup checks...")

    errors = []
    warnings = []

    # Check port availability
    server = config.get("server", {}) or {}
    host = server.get("host", "0.0.0.0")
    port = server.get("port", 3000)

    available, port_error = check_port_available(host, port)
    if not available:
        errors.append(port_error)

    # Validate config
    for issue in validate_config(config):
        if issue.startswith(("Invalid port", "Invalid upload limit")):
            errors.append(issue)
        else:
            warnings.append(issue)

    # Missing runtime dependencies are fatal
    deps = check_dependencies()
    missing_deps = [name for name, available in deps.items() if not available]
    if missing_deps:
        errors.append(f"Required dependencies not installed: {', '.join(missing_deps)}")

    # Report warnings
    for warning in warnings:
        logger.warning(f"  ⚠ {warning}")

    # Report errors and exit if any
    if errors:
        logger.error("Startup checks failed:")
        for error in errors:
            logger.error(f"  ✗ {error}")
        logger.error("")
        logger.error("Fix these issues and try again.")
        sys.exit(1)

    if warnings:
        logger.info(f"Startup checks passed with {len(warnings)} warning(s)")
    else:
        logger.info("Startup checks passed ✓")


def print_startup_banner(config: dict, upload_config: UploadConfig, authenticator, uploader) -> None:
    """Print the listening address and the active upload settings."""
    server = config.get("server", {}) or {}
    host = server.get("host", "0.0.0.0")
    port = server.get("port", 3000)

    lines = [
        "Invoice Upload Gateway",
        "",
        f"Listening:      http://{host}:{port}",
        f"API docs:       http://localhost:{port}/docs",
        f"Upload:         POST http://localhost:{port}/api/invoices/upload",
        "",
        f"Max file size:  {upload_config.max_file_size_bytes / (1024 * 1024):g} MB",
        f"Authenticator:  {type(authenticator).__name__}",
        f"Uploader:       {type(uploader).__name__}",
        f"Sim. timeout:   {'enabled' if upload_config.allow_simulated_timeout else 'disabled'}",
    ]
    width = max(len(line) for line in lines) + 4

    print("")
    print("=" * width)
    for line in lines:
        print(f"  {line}")
    print("=" * width)
    print("")
