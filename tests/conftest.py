import asyncio
import os
from typing import Any, List, Optional, Tuple

import pytest

# Silence the debug logger before aima is imported
os.environ.setdefault("AIMA_DEBUG", "0")

from aima.models import Completion


class FakeClient:
    """
    Stand-in for CompletionClient.

    Each call pops the next scripted outcome: a str (reply text), a
    Completion, an exception to raise, or an asyncio.Future to await.
    """

    def __init__(self, *outcomes: Any):
        self._outcomes: List[Any] = list(outcomes)
        self.calls: List[Tuple[str, str, Optional[int]]] = []

    def script(self, *outcomes: Any) -> None:
        self._outcomes.extend(outcomes)

    async def complete(self, system_role, user_text, max_tokens=None, timeout=None):
        self.calls.append((system_role, user_text, max_tokens))
        outcome = self._outcomes.pop(0) if self._outcomes else "ok"
        if isinstance(outcome, asyncio.Future):
            outcome = await outcome
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, Completion):
            return outcome
        return Completion(text=outcome)


class RecordingStore(dict):
    """Dict backing store that records cache reads and writes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reads: List[str] = []
        self.writes: List[str] = []

    def get(self, key, default=None):
        self.reads.append(key)
        return super().get(key, default)

    def __setitem__(self, key, value):
        self.writes.append(key)
        super().__setitem__(key, value)


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def store():
    return RecordingStore()
