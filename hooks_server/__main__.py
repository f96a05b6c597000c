"""
Entrypoint for running the webhook relay.

Loads the configuration once, sets up logging and serves the FastAPI app
with uvicorn until the process is terminated.

Usage:
    python -m hooks_server [OPTIONS]
    jenkins-hooks [OPTIONS]  (after pip install)

Environment Variables:
    JENKINS_HOOKS_CONFIG: Configuration file (default: config.toml next to the executable)
        Under "python -m hooks_server" the executable is hooks_server/__main__.py,
        so the default resolves inside the package directory.
    JENKINS_HOOKS_HOST: Bind address (default: 127.0.0.1)
    JENKINS_HOOKS_PORT: Bind port (default: 3000)
    JENKINS_HOOKS_LOG_DIR: Directory for app.log (default: logs)
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn

from hooks_common.config import ConfigError, get_default_config_path, load_config

from .app import create_app
from .logging_setup import configure_logging

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_LOG_DIR = "logs"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Jenkins Hooks - relay GitHub push webhooks to Jenkins jobs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  JENKINS_HOOKS_CONFIG    Configuration file (default: config.toml next to the executable)
  JENKINS_HOOKS_HOST      Bind address (default: 127.0.0.1)
  JENKINS_HOOKS_PORT      Bind port (default: 3000)
  JENKINS_HOOKS_LOG_DIR   Directory for app.log (default: logs)

Note: Command-line arguments override environment variables.

Examples:
  # Run with default settings
  jenkins-hooks

  # Use a specific configuration and listen on all interfaces
  jenkins-hooks --config /etc/jenkins-hooks/config.toml --host 0.0.0.0

  # Enable debug logging
  jenkins-hooks --log-level DEBUG
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=(
            "Path to the TOML configuration (default: JENKINS_HOOKS_CONFIG env or "
            "config.toml next to the executable; under python -m that is the "
            "hooks_server package directory)"
        ),
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Bind address (default: JENKINS_HOOKS_HOST env or 127.0.0.1)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Bind port (default: JENKINS_HOOKS_PORT env or 3000)",
    )

    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for the rotating log file (default: JENKINS_HOOKS_LOG_DIR env or logs)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def get_config_path(args: argparse.Namespace) -> Path:
    if args.config is not None:
        return args.config
    return get_default_config_path()


def get_host(args: argparse.Namespace) -> str:
    if args.host:
        return args.host
    return os.environ.get("JENKINS_HOOKS_HOST", DEFAULT_HOST)


def get_port(args: argparse.Namespace) -> int:
    """
    Get the bind port from CLI args or environment.

    Args:
        args: Parsed command-line arguments

    Returns:
        Port number to listen on
    """
    if args.port is not None:
        return args.port

    raw = os.environ.get("JENKINS_HOOKS_PORT")
    if raw is None:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        logger.warning(f"Invalid JENKINS_HOOKS_PORT={raw}, using default {DEFAULT_PORT}")
        return DEFAULT_PORT
    if not 1 <= port <= 65535:
        logger.warning(f"Invalid JENKINS_HOOKS_PORT={raw}, using default {DEFAULT_PORT}")
        return DEFAULT_PORT
    return port


def get_log_dir(args: argparse.Namespace) -> Path:
    if args.log_dir is not None:
        return args.log_dir
    return Path(os.environ.get("JENKINS_HOOKS_LOG_DIR", DEFAULT_LOG_DIR))


def main(argv: list[str] | None = None) -> int:
    """
    Main entrypoint for the relay.

    Returns:
        Exit code (0 for graceful shutdown, 1 for startup errors)
    """
    args = parse_args(argv)

    try:
        log_file = configure_logging(args.log_level, get_log_dir(args))
    except (OSError, ValueError) as e:
        print(f"Failed to initialize logging: {e}", file=sys.stderr)
        return 1

    config_path = get_config_path(args)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error(f"Failed to initialize config: {e}")
        return 1

    host = get_host(args)
    port = get_port(args)

    logger.info("Starting Jenkins Hooks")
    logger.info(f"  Config: {config_path}")
    logger.info(f"  Log file: {log_file}")
    logger.info(f"  Listening on: {host}:{port}")

    app = create_app(config)

    try:
        # log_config=None keeps uvicorn on the handlers installed above
        uvicorn.run(app, host=host, port=port, log_config=None)
    except SystemExit as e:
        # uvicorn exits with 1 when the port cannot be bound
        if e.code in (0, None):
            return 0
        logger.error(f"Application could not be started on {host}:{port}")
        return e.code if isinstance(e.code, int) else 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
