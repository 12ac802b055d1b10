"""Shared fixtures: a fake requests.post and an isolated CLI environment."""
from __future__ import annotations

import io
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import pytest
import requests
from requests.structures import CaseInsensitiveDict


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, headers: Optional[Dict[str, str]] = None, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self.headers = CaseInsensitiveDict(headers or {})
        if isinstance(body, str):
            self.text = body
        else:
            self.text = json.dumps(body)

    def json(self):
        return json.loads(self.text)


class FakePost:
    """Stands in for requests.post; records calls and replays a canned answer."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.response = FakeResponse(200, _ok_body())
        self.exc: Optional[Exception] = None

    def respond(self, status_code: int = 200, body: Any = None, headers=None, reason: str = "OK") -> None:
        self.response = FakeResponse(status_code, body, headers, reason)

    def fail(self, exc: Exception) -> None:
        self.exc = exc

    def __call__(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


def _ok_body(content: str = "hi there", model: str = "gpt-4-0613", total_tokens: Any = 12.0) -> Dict[str, Any]:
    return {
        "id": "chatcmpl-abc",
        "object": "chat.completion",
        "model": model,
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 5, "completion_tokens": 7, "total_tokens": total_tokens},
    }


@pytest.fixture
def fake_post(monkeypatch):
    fp = FakePost()
    monkeypatch.setattr(requests, "post", fp)
    return fp


@pytest.fixture
def aeh_env(monkeypatch, tmp_path):
    """Config dir in tmp_path, an API key, no spinner, plain diagnostics, empty stdin."""
    cfg_dir = tmp_path / "äh"
    monkeypatch.setenv("AEH_CONFIG_DIR", str(cfg_dir))
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("AEH_SPIN", raising=False)
    monkeypatch.setenv("AEH_ERR", "plain")
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    return cfg_dir


@pytest.fixture
def ok_body():
    return _ok_body


@pytest.fixture(autouse=True)
def _reset_aeh_logger():
    yield
    logger = logging.getLogger("aeh")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
