#!/usr/bin/env python3
"""
Simple runner for local development.
"""

import os
import sys

# Add debug output
print("Starting Google Analytics Admin MCP Server...", file=sys.stderr)
print(f"Python version: {sys.version}", file=sys.stderr)
print(f"Current working directory: {os.getcwd()}", file=sys.stderr)
print(
    "Credentials: "
    f"GOOGLE_CLIENT_EMAIL={bool(os.getenv('GOOGLE_CLIENT_EMAIL'))} "
    f"GOOGLE_APPLICATION_CREDENTIALS={bool(os.getenv('GOOGLE_APPLICATION_CREDENTIALS'))}",
    file=sys.stderr,
)

# Add the src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

try:
    from mcp_server_ga4_admin.server import main
    print("Successfully imported main function", file=sys.stderr)
except ImportError as e:
    print(f"Import error: {e}", file=sys.stderr)
    sys.exit(1)

if __name__ == "__main__":
    main()
