"""
Error handling for GA4 Admin API tools.

Both the typed admin client and the raw REST client surface failures that
carry an HTTP status. Tools translate those into JSON error results.
"""

import json
import logging
from typing import Any, Optional

from google.api_core.exceptions import GoogleAPICallError

# Configure logging
logger = logging.getLogger(__name__)

PERMISSION_HINT = "Check Service Account permissions in GA4."


class AdminApiError(Exception):
    """A non-2xx response from the Admin API REST endpoint."""

    def __init__(self, status: int, message: str, details: Any = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.status} {self.message}"


def status_of(error: BaseException) -> Optional[int]:
    """Return the HTTP status carried by an API error, if any."""
    if isinstance(error, AdminApiError):
        return error.status
    if isinstance(error, GoogleAPICallError):
        return error.code
    return None


def describe(message: str, error: Optional[BaseException] = None) -> str:
    """Combine a tool-level message with the details of the underlying error."""
    if error is None:
        return message
    if isinstance(error, GoogleAPICallError):
        return f"{message}: Google API Error {error.code} - {error.message}"
    if isinstance(error, AdminApiError):
        return f"{message}: Google API Error {error.status} - {error.message}"
    return f"{message}: {error}"


def error_response(message: str, error: Optional[BaseException] = None) -> str:
    """Log the failure and build the JSON error result returned to the client."""
    detailed_message = describe(message, error)
    logger.error(f"MCP tool error: {detailed_message}")
    return json.dumps({"error": detailed_message}, indent=2)


def api_error_response(
    error: BaseException,
    default: str,
    not_found: Optional[str] = None,
    forbidden: Optional[str] = None,
    invalid: Optional[str] = None,
) -> str:
    """Pick the message matching the error status and build the error result."""
    status = status_of(error)
    if status == 404 and not_found:
        return error_response(not_found, error)
    if status == 403 and forbidden:
        return error_response(forbidden, error)
    if status == 400 and invalid:
        return error_response(invalid, error)
    return error_response(default, error)
