"""Module declaring the singleton MCP instance.

The singleton allows other modules to register their tools with the same MCP
server using `@mcp.tool` annotations, thereby 'coordinating' the bootstrapping
of the server. The Admin API clients are not module globals: the lifespan
builds them once and tools receive them through the request context.
"""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastmcp import Context, FastMCP

from .clients import AdminClients
from .config import load_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def admin_lifespan(server: FastMCP) -> AsyncIterator[AdminClients]:
    """Build the Admin API clients for the lifetime of the server."""
    clients = AdminClients.from_settings(load_settings())
    try:
        yield clients
    finally:
        clients.close()
        logger.info("Google Analytics Admin clients closed")


def get_clients(ctx: Context) -> AdminClients:
    """Return the clients built by the lifespan for this server."""
    return ctx.request_context.lifespan_context


# Creates the singleton.
mcp = FastMCP("google-analytics-admin", lifespan=admin_lifespan)
