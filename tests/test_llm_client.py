from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from twin_chat import llm_client
from twin_chat.config import GenerationConfig
from twin_chat.errors import BackendError, BackendUnavailable
from twin_chat.llm_client import GenerationClient


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


@pytest.fixture
def calls(monkeypatch) -> List[Dict[str, Any]]:
    recorded: List[Dict[str, Any]] = []
    monkeypatch.setattr(llm_client.requests, "post", lambda *a, **kw: pytest.fail("unexpected request"))
    return recorded


def _patch_post(monkeypatch, calls, outcome):
    def fake_post(url, json=None, timeout=None):
        calls.append({"url": url, "json": json, "timeout": timeout})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(llm_client.requests, "post", fake_post)


def test_complete_posts_prompt_and_returns_response(monkeypatch, calls):
    _patch_post(monkeypatch, calls, FakeResponse(payload={"response": " Hello there ", "done": True}))
    client = GenerationClient(GenerationConfig(endpoint="http://llm.local/api/generate", model="llama3", request_timeout=7))

    assert client.complete("User: hi\nAssistant:") == " Hello there "
    assert calls == [
        {
            "url": "http://llm.local/api/generate",
            "json": {"model": "llama3", "prompt": "User: hi\nAssistant:", "stream": False},
            "timeout": 7,
        }
    ]


def test_complete_forwards_model_options(monkeypatch, calls):
    _patch_post(monkeypatch, calls, FakeResponse(payload={"response": "ok"}))
    client = GenerationClient(GenerationConfig(options={"temperature": 0.2}))

    client.complete("prompt")

    assert calls[0]["json"]["options"] == {"temperature": 0.2}


@pytest.mark.parametrize(
    "exc",
    [requests.ConnectionError("refused"), requests.Timeout("slow"), requests.exceptions.ConnectTimeout("slow")],
)
def test_connection_failures_are_backend_unavailable(monkeypatch, calls, exc):
    _patch_post(monkeypatch, calls, exc)

    with pytest.raises(BackendUnavailable):
        GenerationClient(GenerationConfig()).complete("prompt")


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status_code=500, payload={"error": "model crashed"}),
        FakeResponse(status_code=404, payload={"error": "model 'llama3' not found"}),
        FakeResponse(invalid_json=True),
        FakeResponse(payload={"done": True}),
        FakeResponse(payload={"response": 42}),
        FakeResponse(payload=["response"]),
    ],
)
def test_bad_responses_are_backend_errors(monkeypatch, calls, response):
    _patch_post(monkeypatch, calls, response)

    with pytest.raises(BackendError):
        GenerationClient(GenerationConfig()).complete("prompt")


def test_other_request_failures_are_backend_errors(monkeypatch, calls):
    _patch_post(monkeypatch, calls, requests.exceptions.InvalidURL("no host"))

    with pytest.raises(BackendError):
        GenerationClient(GenerationConfig(endpoint="http://")).complete("prompt")
