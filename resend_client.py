"""
resend_client.py
----------------
Minimal client for the Resend REST API (https://resend.com/docs/api-reference).

Results mirror the official SDKs: a ResendResponse carrying either ``data``
or ``error``. API errors come back as values; transport failures
(requests.RequestException) are raised. Every call is one request, no retry.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

import config

logger = logging.getLogger(__name__)

# Request keys as the tools build them → Resend REST field names
_FIELD_NAMES = {
    "replyTo": "reply_to",
    "scheduledAt": "scheduled_at",
}


@dataclass
class ResendResponse:
    data: Optional[Dict[str, Any]] = None
    error: Optional[Dict[str, Any]] = None


def to_api_payload(email_request: Dict[str, Any]) -> Dict[str, Any]:
    """Rename camelCase keys for the REST API and drop unset fields."""
    return {
        _FIELD_NAMES.get(key, key): value
        for key, value in email_request.items()
        if value is not None
    }


class ResendClient:
    """Thin wrapper around the Resend HTTP API for a single API key."""

    def __init__(
        self,
        api_key: str,
        base_url: str = config.RESEND_API_URL,
        timeout: float = config.REQUEST_TIMEOUT,
    ):
        if not api_key:
            raise ValueError("Resend API key is required")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> ResendResponse:
        url = f"{self.base_url}{path}"
        logger.debug(f"Resend {method} {url}")
        resp = requests.request(
            method,
            url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            **kwargs,
        )

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code >= 400:
            if not isinstance(body, dict):
                body = {"statusCode": resp.status_code, "message": resp.text}
            logger.error(f"Resend {method} {path} failed | status={resp.status_code}")
            return ResendResponse(error=body)

        return ResendResponse(data=body if isinstance(body, dict) else {})

    # ── Emails ────────────────────────────────────────────────────────────────

    def send_email(self, email_request: Dict[str, Any]) -> ResendResponse:
        """POST /emails."""
        return self._request("POST", "/emails", json=to_api_payload(email_request))

    def list_emails(self, limit: int = 20, offset: int = 0) -> ResendResponse:
        """GET /emails."""
        return self._request("GET", "/emails", params={"limit": limit, "offset": offset})
