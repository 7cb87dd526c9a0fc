import pytest

import openrouter_client
from openrouter_client import OpenRouterClient

class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = str(body)
    def json(self):
        return self._body

def test_chat_posts_payload(monkeypatch):
    sent = {}
    def fake_post(url, json, headers, timeout):
        sent.update(url=url, json=json, headers=headers, timeout=timeout)
        return FakeResponse(200, {"choices": [{"message": {"content": "{}"}}]})
    monkeypatch.setattr(openrouter_client.requests, "post", fake_post)

    client = OpenRouterClient(api_key="sk-or-test-key-1234", model="m", api_url="http://llm", title="EconoDecide", timeout=5)
    out = client.chat([{"role": "user", "content": "hi"}], extra={"response_format": {"type": "json_object"}})

    assert out == "{}"
    assert sent["url"] == "http://llm"
    assert sent["timeout"] == 5
    assert sent["json"]["model"] == "m"
    assert sent["json"]["response_format"] == {"type": "json_object"}
    assert sent["headers"]["Authorization"] == "Bearer sk-or-test-key-1234"
    assert sent["headers"]["X-Title"] == "EconoDecide"

def test_non_200_raises(monkeypatch):
    monkeypatch.setattr(openrouter_client.requests, "post", lambda *a, **k: FakeResponse(401, {"error": "no"}))
    client = OpenRouterClient(api_key="sk-or-test-key-1234", api_url="http://llm")
    with pytest.raises(RuntimeError, match="401"):
        client.chat([{"role": "user", "content": "hi"}])

def test_missing_key_raises_on_chat(monkeypatch):
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    client = OpenRouterClient(api_url="http://llm")
    with pytest.raises(RuntimeError, match="OPENROUTER_API_KEY"):
        client.chat([{"role": "user", "content": "hi"}])
