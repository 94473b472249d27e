import os
import tempfile
from types import SimpleNamespace

import pytest

# The API reads its settings at import time
_db_dir = tempfile.mkdtemp(prefix="clipscout-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"


class FakeCompletions:
    """Stands in for `client.chat.completions` of the OpenAI SDK."""

    def __init__(self, content="", error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeLLMClient:
    def __init__(self, content="", error=None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def fake_llm():
    return FakeLLMClient


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
