from typing import Any

import httpx

from docmigration.logging.logger import Log
from docmigration.workspace.exceptions import (
    CollaboratorAuthError,
    CollaboratorError,
    CollaboratorNetworkError,
    CollaboratorNotFoundError,
    CollaboratorPermissionError,
)
from docmigration.workspace.session import Session

_STATUS_ERRORS: dict[int, type[CollaboratorError]] = {
    401: CollaboratorAuthError,
    403: CollaboratorPermissionError,
    404: CollaboratorNotFoundError,
}

_STATUS_MESSAGES = {
    401: "Unauthorized. Invalid or expired OAuth token.",
    403: "Permission denied. User does not have access to this {resource}.",
    404: "{resource} not found or not accessible.",
}


class GoogleApiClient:
    """Thin JSON-over-HTTP client for Google REST APIs using a bearer token."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    def get(
        self,
        session: Session,
        path: str,
        *,
        resource: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return self.request("GET", session, path, resource=resource, params=params)

    def request(
        self,
        method: str,
        session: Session,
        path: str,
        *,
        resource: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON object.

        Raises:
            CollaboratorNetworkError: on connection failures and timeouts.
            CollaboratorAuthError: on HTTP 401 or when the session has no token.
            CollaboratorPermissionError: on HTTP 403.
            CollaboratorNotFoundError: on HTTP 404.
            CollaboratorError: on any other error status or a non-object body.
        """
        if not session.is_authenticated:
            raise CollaboratorAuthError("Unauthorized. No OAuth access token provided.")
        Log.debug(f"{method} {path} params={params}")
        try:
            response = self._client.request(
                method,
                path,
                params=params,
                json=json,
                headers=session.authorization_header,
            )
        except httpx.TransportError as exc:
            raise CollaboratorNetworkError(f"Google API network error: {exc}") from exc

        if response.is_error:
            raise self._status_error(response, resource)

        try:
            payload = response.json()
        except ValueError as exc:
            raise CollaboratorError(f"Google API returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise CollaboratorError("Google API response must be a JSON object")
        return payload

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def _status_error(response: httpx.Response, resource: str) -> CollaboratorError:
        status = response.status_code
        error_cls = _STATUS_ERRORS.get(status, CollaboratorError)
        template = _STATUS_MESSAGES.get(status)
        if template is None:
            message = f"Google API error {status} while accessing {resource}"
        else:
            message = template.format(resource=resource)
            message = message[:1].upper() + message[1:]
        detail = _error_detail(response)
        return error_cls(f"{message} {detail}".strip())


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()[:200]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", ""))
    return ""
