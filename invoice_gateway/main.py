"""
Invoice Upload Gateway entry point.
"""

import argparse
import logging
import sys

import uvicorn

from invoice_gateway.api.server import create_app
from invoice_gateway.config import (
    get_server_config,
    get_upload_config,
    load_config,
    setup_authenticator,
    setup_uploader,
)
from invoice_gateway.startup import print_startup_banner, run_startup_checks

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Invoice Upload Gateway")
    parser.add_argument(
        "-c", "--config",
        help="Path to config file (default: config/default.yaml)"
    )
    parser.add_argument(
        "--host",
        help="Override host from config"
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Override port from config"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )
    parser.add_argument(
        "--skip-checks",
        action="store_true",
        help="Skip startup checks (not recommended)"
    )
    args = parser.parse_args()

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        logger.error(f"Failed to load config: {e}")
        sys.exit(1)

    # Apply CLI overrides before validation
    if args.host:
        config.setdefault("server", {})["host"] = args.host
    if args.port:
        config.setdefault("server", {})["port"] = args.port
    if args.debug:
        config.setdefault("server", {})["debug"] = True

    # Run startup checks
    if not args.skip_checks:
        run_startup_checks(config)

    authenticator = setup_authenticator(config)
    uploader = setup_uploader(config)
    upload_config = get_upload_config(config)
    server_config = get_server_config(config)

    app = create_app(
        authenticator=authenticator,
        uploader=uploader,
        upload_config=upload_config,
        cors_origins=server_config.get("cors_origins"),
        debug=server_config.get("debug", False)
    )

    print_startup_banner(config, upload_config, authenticator, uploader)

    # Run server
    try:
        uvicorn.run(
            app,
            host=server_config["host"],
            port=server_config["port"],
            log_level="debug" if server_config.get("debug") else "info"
        )
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
