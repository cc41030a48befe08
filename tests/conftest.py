"""Shared fixtures: a fake Resend HTTP API patched in place of requests."""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

import resend_client

REFERENCE = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


def _in_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class FakeResendAPI:
    """Records every outbound call and replays queued responses."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Any] = []

    def queue(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.responses.append(FakeResponse(status_code, body, text))

    def fail_with(self, exc: Exception):
        self.responses.append(exc)

    def __call__(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, "in_event_loop": _in_event_loop(), **kwargs})
        response = self.responses.pop(0) if self.responses else FakeResponse(200, {"id": "email_123"})
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def resend_api(monkeypatch):
    fake = FakeResendAPI()
    monkeypatch.setattr(resend_client.requests, "request", fake)
    return fake


@pytest.fixture
def reference():
    return REFERENCE
