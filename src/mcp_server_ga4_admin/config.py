"""
Configuration for the GA4 Admin MCP Server.

Settings are read from environment variables, optionally seeded from a
dotenv file named by ``ENV_FILE`` (default ``.env``).
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://analyticsadmin.googleapis.com/v1alpha"
ANALYTICS_EDIT_SCOPE = "https://www.googleapis.com/auth/analytics.edit"


class Settings(BaseModel):
    """Runtime settings for the server."""

    client_email: Optional[str] = Field(
        default=None, description="Service account e-mail for explicit credentials"
    )
    private_key: Optional[str] = Field(
        default=None, description="Service account private key (PEM)"
    )
    api_url: str = Field(default=DEFAULT_API_URL, description="Admin API REST base URL")
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    log_level: str = Field(default="INFO", description="Root logging level")

    model_config = {"frozen": True}

    @property
    def has_service_account(self) -> bool:
        return bool(self.client_email and self.private_key)


def load_env_file(path: Optional[str] = None) -> bool:
    """Load a dotenv file into the process environment if it exists."""
    env_path = path or os.getenv("ENV_FILE", ".env")
    if not os.path.exists(env_path):
        logger.debug(f"No env file at {env_path}, using environment variables directly")
        return False
    return load_dotenv(env_path, override=False)


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    load_env_file()

    private_key = os.getenv("GOOGLE_PRIVATE_KEY")
    if private_key:
        # Parse private key (handle escaped newlines)
        private_key = private_key.replace("\\n", "\n")

    timeout = os.getenv("GA4_REQUEST_TIMEOUT")
    try:
        request_timeout = float(timeout) if timeout else 30.0
    except ValueError:
        raise ValueError(f"GA4_REQUEST_TIMEOUT must be a number, got {timeout!r}") from None

    return Settings(
        client_email=os.getenv("GOOGLE_CLIENT_EMAIL") or None,
        private_key=private_key or None,
        api_url=(os.getenv("GA4_ADMIN_API_URL") or DEFAULT_API_URL).rstrip("/"),
        request_timeout=request_timeout,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
