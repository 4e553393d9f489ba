"""Cloud SQL Admin API client.

Thin wrapper over Application Default Credentials and an authorized
requests session. Only the executeSql endpoint is used.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import google.auth
import requests
from google.auth.credentials import Credentials
from google.auth.exceptions import DefaultCredentialsError, GoogleAuthError
from google.auth.transport.requests import AuthorizedSession

from .errors import TransportError
from .request_builder import redact_payload

logger = logging.getLogger(__name__)

BASE_URL = "https://sqladmin.googleapis.com"
SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


def execute_sql_url(project_id: str, instance_id: str) -> str:
    """Build the executeSql endpoint URL for an instance."""
    return f"{BASE_URL}/sql/v1beta4/projects/{project_id}/instances/{instance_id}/executeSql"


def _response_body(response: requests.Response | None) -> Any:
    """Decode an error response body, falling back to raw text."""
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class CloudSQLAdmin:
    """Client for the Cloud SQL Admin API.

    Credentials are resolved lazily from Application Default Credentials
    unless a session is injected, in which case the session is used as-is.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session
        self._credentials: Credentials | None = None
        self._project_id: str | None = None

    def _load_credentials(self) -> Credentials:
        if self._credentials is None:
            self._credentials, self._project_id = google.auth.default(scopes=SCOPES)
        return self._credentials

    def get_default_project_id(self) -> str | None:
        """Return the project from the ambient Google Cloud configuration."""
        try:
            self._load_credentials()
        except DefaultCredentialsError as e:
            logger.debug("Default credentials unavailable: %s", e)
            return None
        return self._project_id or None

    def execute_sql(
        self,
        project_id: str,
        instance_id: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """POST ``payload`` to executeSql and return the decoded response.

        Raises:
            TransportError: the request failed or returned a non-2xx status.
                Details are logged with the redacted payload only.
        """
        url = execute_sql_url(project_id, instance_id)

        try:
            if self._session is not None:
                return self._post(self._session, url, payload)
            with AuthorizedSession(self._load_credentials()) as session:
                return self._post(session, url, payload)
        except requests.HTTPError as e:
            response = e.response
            error = TransportError(
                str(e),
                url=url,
                status=response.status_code if response is not None else None,
                reason=response.reason if response is not None else None,
                body=_response_body(response),
            )
            self._log_failure(error, payload)
            raise error from e
        except (requests.RequestException, GoogleAuthError) as e:
            error = TransportError(str(e), url=url)
            self._log_failure(error, payload)
            raise error from e

    @staticmethod
    def _post(session: requests.Session, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = session.post(url, json=payload)
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _log_failure(error: TransportError, payload: dict[str, Any]) -> None:
        logger.error(
            "API request failed: %s - Status: %s %s - URL: %s - Data: %s",
            error.message,
            error.status,
            error.reason,
            error.url,
            json.dumps(error.body),
        )
        logger.debug(
            "Error details - URL: %s - Payload: %s - Status: %s %s",
            error.url,
            json.dumps(redact_payload(payload)),
            error.status,
            error.reason,
        )
