"""Entry point for running the Smart Error Lens report server.

Loads configuration, sets up logging, configures the provider and serves
the WebSocket report stream with uvicorn.
"""

import argparse
import sys
from pathlib import Path

import structlog

from smart_error_lens._version import __version__

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging with secret sanitization.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from smart_error_lens.utils.logging import LogFormat, LogLevel, configure_logging

    configure_logging(
        level=LogLevel.DEBUG if debug else LogLevel.INFO,
        log_format=LogFormat(log_format.lower()),
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="smart-error-lens",
        description="Smart Error Lens - stream AI analyses of failing calls",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: environment only)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    parser.add_argument("--host", default=None, help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (overrides config)")

    parser.add_argument(
        "--mock",
        action="store_true",
        help="Force mock mode regardless of configured provider",
    )

    return parser.parse_args(argv)


def run_server(args: argparse.Namespace) -> int:
    """Load config, configure the pipeline and serve until interrupted.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from smart_error_lens.config.loader import load_config
    from smart_error_lens.core.config_store import configure
    from smart_error_lens.utils.errors import ConfigError
    from smart_error_lens.utils.logging import configure_logging

    log.info("starting_smart_error_lens", version=__version__)

    try:
        settings = load_config(args.config)
    except FileNotFoundError as e:
        log.error("configuration_file_not_found", path=str(args.config), error=str(e))
        return 1
    except ValueError as e:
        log.error("configuration_invalid", error=str(e))
        return 1

    if args.config is not None:
        configure_logging(
            level="DEBUG" if args.debug else settings.logging.level,
            log_format=settings.logging.format,
            file_path=settings.logging.file.path,
            file_enabled=settings.logging.file.enabled,
        )

    provider_options = settings.provider.model_dump()
    if args.mock:
        provider_options["mock_mode"] = True

    try:
        configure(provider_options)
    except ConfigError as e:
        # The store is already in mock mode; keep serving degraded
        log.warning("running_in_mock_mode", kind=e.kind.value, error=str(e))

    import uvicorn

    from smart_error_lens.server import create_app

    app = create_app(static_dir=settings.server.static_dir)
    uvicorn.run(
        app,
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
        log_config=None,
    )
    return 0


def main() -> int:
    """Main entry point."""
    args = parse_args()

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        return run_server(args)
    except KeyboardInterrupt:
        log.info("shutting_down_gracefully")
        return 0


if __name__ == "__main__":
    sys.exit(main())
