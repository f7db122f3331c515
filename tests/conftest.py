from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from coach.demo_plan import build_demo_plan  # noqa: E402
from coach.models import Settings, StudyPlan  # noqa: E402

CHAT_URL = "https://api.example.com/v1/chat/completions"


class FakeEndpoint:
    """Serves canned responses through an httpx.MockTransport and records every request."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._handler = handler
        self.client = httpx.Client(transport=httpx.MockTransport(self._serve))

    def _serve(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


def chat_reply(content: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    """Handler returning one chat completion whose message content is `content`."""
    body = {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}
    return lambda request: httpx.Response(status_code, json=body)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="sk-test-0123456789",
        model="gpt-4o-mini",
        base_url=CHAT_URL,
        user_language="English",
        target_language="Spanish (es-ES)",
    )


@pytest.fixture
def demo_plan() -> StudyPlan:
    return build_demo_plan()


@pytest.fixture
def endpoint() -> Iterator[Callable[..., FakeEndpoint]]:
    created: List[FakeEndpoint] = []

    def _make(handler: Optional[Callable[[httpx.Request], httpx.Response]] = None) -> FakeEndpoint:
        fake = FakeEndpoint(handler or chat_reply("ok"))
        created.append(fake)
        return fake

    yield _make
    for fake in created:
        fake.client.close()
