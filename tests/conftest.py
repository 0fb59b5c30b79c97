"""
Where: tests/conftest.py
What: Shared fixtures for the widget proxy tests.
Why: Keep settings and the completion stub identical across test modules.
"""

import pytest
from werkzeug.datastructures import Headers

from api._config import Settings
from api._dispatch import RequestContext

ALLOWED = "https://widget.example.com"


class StubClient:
    """Records prompts and returns a canned reply instead of calling OpenAI."""

    def __init__(self, reply="stub reply", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, system, user):
        self.calls.append((system, user))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings():
    return Settings(allow_origins=(ALLOWED, "http://localhost:5173"), openai_api_key="sk-test")


@pytest.fixture
def keyless_settings():
    return Settings(allow_origins=(ALLOWED,), openai_api_key="")


@pytest.fixture
def make_ctx():
    def _make(action=None, body="", content_type="application/x-www-form-urlencoded",
              method="POST", origin=ALLOWED, is_base64_encoded=False):
        headers = Headers()
        if origin:
            headers["Origin"] = origin
        if content_type:
            headers["Content-Type"] = content_type
        query = {"action": action} if action is not None else {}
        return RequestContext(
            method=method,
            path="/api/proxy",
            query=query,
            headers=headers,
            body=body,
            is_base64_encoded=is_base64_encoded,
        )
    return _make


@pytest.fixture
def stub_client():
    return StubClient
