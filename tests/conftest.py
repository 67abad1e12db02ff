# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from picker.schemas import CandidateItem  # noqa: E402


class FakeHandle:
    def __init__(self, when: float, callback) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock:
    """Virtual clock usable as a debounce timer factory."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeHandle] = []

    def timer(self, delay: float, callback) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback)
        self.timers.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.timers if not t.cancelled and not t.fired and t.when <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda t: t.when)
            self.now = handle.when
            handle.fired = True
            handle.callback()
        self.now = target

    @property
    def live_timers(self) -> int:
        return sum(1 for t in self.timers if not t.cancelled and not t.fired)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def breed_items() -> list[CandidateItem]:
    return [
        CandidateItem(id="1", name="Labrador"),
        CandidateItem(id="2", name="Golden Retriever"),
        CandidateItem(id="3", name="לברדור"),
    ]
