#!/usr/bin/env python3
# line_server/server_launcher.py
"""
Server Launcher

Command-line entry point for the line server. Settings come from an
optional YAML configuration file; command-line flags take precedence.
"""

import asyncio
import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from line_server.server import LineServer
from line_server.server_config import ServerConfig

def setup_logging(verbosity: int = 1) -> None:
    """
    Configure logging based on verbosity level.

    Logging levels:
    - 0: WARNING - Only show critical issues
    - 1: INFO - Standard operational information
    - 2: DEBUG - Detailed diagnostic information

    Args:
        verbosity: Logging verbosity level (0-2)
    """
    log_levels = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG
    }
    level = log_levels.get(verbosity, logging.DEBUG)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Line-oriented TCP echo and command server',
        epilog='Messages from each client IP are logged to <log-dir>/<ip>.log'
    )
    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Path to YAML configuration file'
    )
    parser.add_argument(
        '--host',
        type=str,
        help='Host address to bind to (default: 0.0.0.0)'
    )
    parser.add_argument(
        '--port', '-p',
        type=int,
        help='Port to listen on (default: 4000)'
    )
    parser.add_argument(
        '--log-dir',
        type=str,
        help='Directory for per-client message logs (default: logs)'
    )
    parser.add_argument(
        '--idle-timeout',
        type=float,
        help='Seconds of inactivity before a client is disconnected (default: 30)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=1,
        help='Increase verbosity (can be used multiple times)'
    )
    return parser

def build_config(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Merge the configuration file (if any) with command-line overrides.

    Raises:
        FileNotFoundError: If the configuration file does not exist
        ConfigError: If the resulting configuration is invalid
    """
    if args.config:
        config = ServerConfig.load_config(args.config)
    else:
        config = ServerConfig.create_default_config()

    overrides = {
        'host': args.host,
        'port': args.port,
        'log_dir': args.log_dir,
        'idle_timeout': args.idle_timeout,
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value

    ServerConfig.validate_config(config)
    return config

async def run_server(server: LineServer) -> None:
    await server.start_server()

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the server launcher.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger('server-launcher')

    try:
        config = build_config(args)
        if args.config:
            logger.info(f"Loaded configuration from {args.config}")

        server = ServerConfig.create_server_from_config(config)
        logger.info(f"Starting line server on {config['host']}:{config['port']}")

        asyncio.run(run_server(server))

    except KeyboardInterrupt:
        logger.info("Server shutdown initiated by user.")
        return 0

    except Exception as e:
        logger.error(f"Error launching server: {e}")
        if args.verbose >= 2:
            import traceback
            traceback.print_exc()
        return 1

    finally:
        logger.info("Server process completed.")

    return 0

# Entry point for script execution
if __name__ == "__main__":
    sys.exit(main())
