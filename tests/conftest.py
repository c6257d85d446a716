import pytest
import sys
from datetime import date
from pathlib import Path
from typing import Callable, List, Sequence

# Add src to sys.path so we can import cogniquest
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


class FakeHandle:
    """Scheduled callback that only runs when the test advances time."""

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual tick source: nothing happens until advance() is called."""

    def __init__(self):
        self.handles: List[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def live(self) -> List[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, ticks: int = 1) -> None:
        """Fire every live handle once per tick."""
        for _ in range(ticks):
            for handle in self.live:
                handle.fired = True
                handle.callback()


class RecordingNarrator:
    """Narrator that records calls; completion is triggered by the test."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.stops = 0

    def speak(
        self,
        utterances: Sequence[str],
        inter_utterance_delay: float,
        on_complete: Callable[[], None],
    ) -> None:
        self.calls.append((tuple(utterances), inter_utterance_delay, on_complete))

    def stop(self) -> None:
        self.stops += 1

    def complete_last(self) -> None:
        self.calls[-1][2]()


# Common test fixtures
@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def narrator() -> RecordingNarrator:
    return RecordingNarrator()


@pytest.fixture
def monday() -> date:
    """2024-03-04 was a Monday."""
    return date(2024, 3, 4)


@pytest.fixture
def default_questions():
    """The packaged 11-question bank."""
    from cogniquest.exam.loading import load_questions
    return load_questions()
