"""
Google Analytics Admin API clients.

Builds credentials, the typed admin client and a small REST client for the
resources the typed client does not cover (annotations, audiences and custom
dimensions).
"""

import json
import logging
from dataclasses import dataclass
from importlib import metadata
from typing import Any, Dict, List, Optional

import google.auth
from google.analytics.admin_v1alpha import AnalyticsAdminServiceClient
from google.api_core.gapic_v1.client_info import ClientInfo
from google.auth.credentials import Credentials
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from .config import ANALYTICS_EDIT_SCOPE, Settings
from .errors import AdminApiError

# Configure logging
logger = logging.getLogger(__name__)


def _package_version() -> str:
    try:
        return metadata.version("mcp-server-ga4-admin")
    except metadata.PackageNotFoundError:
        return "unknown"


# Adds a custom user agent to all typed client requests.
_CLIENT_INFO = ClientInfo(user_agent=f"mcp-server-ga4-admin/{_package_version()}")


def build_credentials(settings: Settings) -> Credentials:
    """Create credentials from explicit service account settings or ADC."""
    if settings.has_service_account:
        credentials_info = {
            "type": "service_account",
            "client_email": settings.client_email,
            "private_key": settings.private_key,
            "private_key_id": "",
            "client_id": "",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "auth_provider_x509_cert_url": "https://www.googleapis.com/oauth2/v1/certs",
        }
        logger.info(f"Using service account credentials for {settings.client_email}")
        return service_account.Credentials.from_service_account_info(
            credentials_info, scopes=[ANALYTICS_EDIT_SCOPE]
        )

    # Falls back to Application Default Credentials (GOOGLE_APPLICATION_CREDENTIALS).
    credentials, _ = google.auth.default(scopes=[ANALYTICS_EDIT_SCOPE])
    logger.info("Using Application Default Credentials")
    return credentials


def _error_from_response(response) -> AdminApiError:
    """Translate an error response into AdminApiError using the Google error envelope."""
    details: Any = None
    message = response.reason or "Request failed"
    try:
        details = response.json()
    except ValueError:
        details = response.text or None
    if isinstance(details, dict) and isinstance(details.get("error"), dict):
        message = details["error"].get("message") or message
    return AdminApiError(response.status_code, message, details)


class AdminRestClient:
    """Thin JSON client for the Admin API REST surface.

    The underlying AuthorizedSession obtains and refreshes the OAuth2
    access token on demand.
    """

    def __init__(self, session: AuthorizedSession, base_url: str, timeout: float = 30.0):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        url = self.url(path)
        if body is not None:
            logger.debug(f"API request {method} {url}: {json.dumps(body, indent=2)}")

        response = self.session.request(
            method,
            url,
            json=body,
            params=params,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        if response.status_code >= 400:
            raise _error_from_response(response)

        if not response.content:
            return {}
        data = response.json()
        logger.debug(f"API response {method} {url}: {json.dumps(data, indent=2)}")
        return data

    def get(self, path: str) -> Dict[str, Any]:
        return self.request("GET", path)

    def list_all(self, path: str, collection: str) -> List[Dict[str, Any]]:
        """GET every page of a collection, following nextPageToken."""
        items: List[Dict[str, Any]] = []
        params: Optional[Dict[str, str]] = None
        while True:
            data = self.request("GET", path, params=params)
            items.extend(data.get(collection, []))
            page_token = data.get("nextPageToken")
            if not page_token:
                return items
            params = {"pageToken": page_token}

    def post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("POST", path, body=body)

    def patch(self, path: str, body: Dict[str, Any], update_mask: list) -> Dict[str, Any]:
        return self.request("PATCH", path, body=body, params={"updateMask": ",".join(update_mask)})

    def delete(self, path: str) -> Dict[str, Any]:
        return self.request("DELETE", path)


@dataclass
class AdminClients:
    """Handle passed to every tool: the typed client plus the REST client."""

    admin: AnalyticsAdminServiceClient
    rest: AdminRestClient

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminClients":
        credentials = build_credentials(settings)
        admin = AnalyticsAdminServiceClient(credentials=credentials, client_info=_CLIENT_INFO)
        rest = AdminRestClient(
            AuthorizedSession(credentials), settings.api_url, settings.request_timeout
        )
        logger.info("Google Analytics Admin clients initialized successfully")
        return cls(admin=admin, rest=rest)

    def close(self) -> None:
        self.rest.session.close()
