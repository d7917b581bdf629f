"""Run the image service with uvicorn.

Loads and validates configs/service.v1.yaml, configures logging from its
``logging`` section, builds the FastAPI app and serves it.

CLI:
    python scripts/serve.py
    python scripts/serve.py --config configs/service.v1.yaml --port 9000
    python scripts/serve.py --log-level DEBUG --log-file outputs/logs/serve.log
"""

import argparse
import logging

import uvicorn

from src.server import create_app
from src.utils import validators
from src.utils.logging_config import install_excepthook, setup_logging

logger = logging.getLogger(__name__)


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Serve CAPTCHA, QR code and annotated image endpoints"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/service.v1.yaml",
        help="Path to service config",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Bind address (overrides server.host)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port (overrides server.port)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (overrides logging.log_level)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Log file path (overrides logging.log_file)",
    )

    args = parser.parse_args()

    cfg = validators.load_service_config(args.config)
    log_cfg = cfg.logging
    setup_logging(
        log_level=args.log_level or log_cfg.log_level,
        log_file=args.log_file or log_cfg.log_file,
        json=log_cfg.json_format,
        color=log_cfg.color,
        quiet_libs=log_cfg.quiet_libs,
        context={"app": "serve"},
    )
    install_excepthook()

    host = args.host or cfg.server.host
    port = args.port or cfg.server.port
    logger.info(f"Starting server on {host}:{port} (config: {args.config})")

    # Logging is already configured; keep uvicorn from installing its own
    uvicorn.run(create_app(cfg), host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
