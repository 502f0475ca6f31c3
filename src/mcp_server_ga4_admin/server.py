"""
Google Analytics Admin MCP Server

A Model Context Protocol server for the Google Analytics 4 Admin API.
Provides tools for accounts, properties, data streams, annotations,
audiences and custom dimensions over stdio.
"""

import logging
import sys

# Import coordinator with singleton MCP instance
from .coordinator import mcp
from .config import load_settings

# The following imports are necessary to register the tools with the `mcp`
# object, even though they are not directly used in this file.
# The `# noqa: F401` comment tells the linter to ignore the "unused import"
# warning.
from . import accounts  # noqa: F401
from . import data_streams  # noqa: F401
from . import annotations  # noqa: F401
from . import audiences  # noqa: F401
from . import custom_dimensions  # noqa: F401

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Send all log output to stderr; stdout carries the MCP protocol."""
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    """Main entry point for the MCP server."""
    configure_logging(load_settings().log_level)
    try:
        logger.info("Starting Google Analytics Admin MCP Server on stdio...")
        mcp.run()

    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise


if __name__ == "__main__":
    main()
