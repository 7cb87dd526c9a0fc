import json

import pytest

from openrouter_client import OpenRouterClient

ADVICE = {
    "summary": "权衡了学费与涨薪",
    "critique": "忽略了沉没成本",
    "recommendation": "先申请再决定",
    "score": 72,
}

class DummyClient(OpenRouterClient):
    def __init__(self, reply=None, error=None, on_chat=None):
        self.reply = json.dumps(ADVICE, ensure_ascii=False) if reply is None else reply
        self.error = error
        self.on_chat = on_chat
        self.calls = []
    def chat(self, messages, **kwargs):
        self.calls.append({"messages": messages, **kwargs})
        if self.on_chat is not None:
            self.on_chat()
        if self.error is not None:
            raise self.error
        return self.reply

@pytest.fixture
def advice_payload():
    return dict(ADVICE)

@pytest.fixture
def make_client():
    return DummyClient

@pytest.fixture
def dummy_client():
    return DummyClient()
