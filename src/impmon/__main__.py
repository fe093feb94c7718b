"""Entry point for the impmon MCP server."""

import argparse
import logging

from importlib.metadata import PackageNotFoundError, version

from impmon.logging_config import setup_logging

logger = logging.getLogger("impmon")


def main() -> int:
    """Main entry point for the impmon MCP server."""
    parser = argparse.ArgumentParser(
        description="impmon: MCP server controlling an impedance measurement session"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    args = parser.parse_args()

    setup_logging(verbose=args.verbose)

    try:
        current = version("impmon")
    except PackageNotFoundError:
        current = "dev"
    logger.info(f"Starting impmon v{current}...")

    try:
        from impmon.server import server

        server.run()
        return 0

    except Exception as e:
        logger.error(f"Server failed to start: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    exit(main())
