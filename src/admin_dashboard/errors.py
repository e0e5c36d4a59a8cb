# src/admin_dashboard/errors.py

from typing import Any, Optional

import httpx


def response_detail(response: httpx.Response) -> Any:
    """Best-effort error detail from an API response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        return body.get("detail", body.get("message", body))
    return body


class DashboardError(Exception):
    """Base class for every error raised by the dashboard client."""


class ApiError(DashboardError):
    """A non-2xx answer from the catalog API."""

    def __init__(self, status_code: int, detail: Any = None, message: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message or f"API request failed with status {status_code}")

    @classmethod
    def from_response(cls, response: httpx.Response, message: Optional[str] = None) -> "ApiError":
        return cls(response.status_code, response_detail(response), message)


class CredentialError(ApiError):
    """Credentials were rejected: bad login, expired or invalid refresh token."""


class MissingTokensError(CredentialError):
    def __init__(self):
        super().__init__(401, None, "Missing tokens")


class AuthorizationError(ApiError):
    """Terminal authorization failure for a request (401 after its single retry)."""


class InsufficientPrivilegeError(AuthorizationError):
    def __init__(self, detail: Any = None):
        super().__init__(
            403,
            detail,
            "Admin access required. You need to be an administrator to perform this action.",
        )
