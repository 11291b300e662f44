"""Main entry point for the SnipeSniff service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Optional, Tuple

from snipesniff.config.environment import EnvironmentConfig
from snipesniff.config.exceptions import ConfigurationError
from snipesniff.config.loader import load_config, resolve_run_configuration
from snipesniff.config.models import AppConfig, RunConfiguration
from snipesniff.logging import get_logger
from snipesniff.logging.config import configure_logging
from snipesniff.scheduler import SnifferService, resolve_executor

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig, RunConfiguration]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > environment > config file > INFO.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)
    run_config = resolve_run_configuration(app_config, env_config)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config, run_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snipesniff",
        description="SnipeSniff - periodic network discovery synchronized with Snipe-IT",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--run-once",
        action="store_true",
        help="Run a single discovery immediately and exit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for SnipeSniff.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config, run_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
            secrets=[env_config.api_token],
        )

        logger.info(
            "SnipeSniff starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "run_once": args.run_once,
            },
        )

        if not app_config.executor:
            raise ConfigurationError(
                "No executor configured",
                suggestions=["Set executor: 'package.module:callable' in the configuration file"],
            )
        executor = resolve_executor(app_config.executor)

        with SnifferService.from_configuration(run_config, executor=executor) as service:
            if args.run_once:
                return _run_once(service, start_time)
            return _run_daemon(service, start_time)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            "Configuration error",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


def _run_once(service: SnifferService, start_time: float) -> int:
    logger.info("Executing one-shot discovery", extra={"event": "service.run_once.starting"})

    try:
        invocation = service.run_now()
    except Exception as e:
        logger.error(
            "One-shot discovery failed",
            extra={"event": "service.run_once.failed", "error_type": type(e).__name__},
        )
        exit_code = 1
    else:
        logger.info(
            "One-shot discovery completed",
            extra={"event": "service.run_once.completed", "run_id": invocation.run_id},
        )
        exit_code = 0

    _log_stopped(start_time)
    return exit_code


def _run_daemon(service: SnifferService, start_time: float) -> int:
    shutdown_event = threading.Event()

    def signal_handler(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    service.start()
    logger.info(
        "Scheduler started. Press Ctrl+C to stop",
        extra={"event": "service.daemon_mode.started"},
    )

    try:
        shutdown_event.wait()
    except KeyboardInterrupt:
        logger.info(
            "Keyboard interrupt received, shutting down",
            extra={"event": "service.keyboard_interrupt"},
        )

    service.stop()
    _log_stopped(start_time)
    return 0


def _log_stopped(start_time: float) -> None:
    logger.info(
        "SnipeSniff stopped",
        extra={
            "event": "service.stopping",
            "uptime_seconds": round(time.time() - start_time, 2),
        },
    )


if __name__ == "__main__":
    sys.exit(main())
