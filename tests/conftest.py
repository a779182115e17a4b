from typing import List

import pytest
from trello_mcp.core.client import RequestPolicy, TrelloClient

class SleepRecorder:
    """Stands in for asyncio.sleep; records requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(sleeps, clock):
    return TrelloClient(
        api_key="test-key",
        token="test-token",
        policy=RequestPolicy(),
        clock=clock,
        sleep=sleeps,
    )
