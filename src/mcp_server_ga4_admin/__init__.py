"""
Google Analytics Admin MCP Server

A Model Context Protocol server for the Google Analytics 4 Admin API.
"""

__version__ = "0.1.0"

from .server import main

__all__ = ["main"]
