"""
Unit Tests for CountdownTimer

Ticks are driven by the FakeScheduler from conftest, one advance() per
second.
"""

import threading

import pytest

from cogniquest.exam.timer import CountdownTimer, ThreadingScheduler, TimerState


@pytest.fixture
def events():
    return {"ticks": [], "expired": 0}


@pytest.fixture
def timer(scheduler, events):
    def on_expire():
        events["expired"] += 1

    return CountdownTimer(scheduler, on_tick=events["ticks"].append, on_expire=on_expire)


class TestCountdown:
    """Tests for start/tick/expiry."""

    def test_start_when_two_seconds_then_counts_down_and_expires_once(self, timer, scheduler, events):
        timer.start(2)
        scheduler.advance()
        assert timer.remaining == 1
        scheduler.advance()
        assert timer.remaining == 0
        assert timer.state is TimerState.EXPIRED
        assert events["expired"] == 1

        scheduler.advance(3)
        assert events["expired"] == 1
        assert timer.remaining == 0
        assert events["ticks"] == [1.0, 0.0]

    def test_start_when_not_positive_then_raises(self, timer):
        with pytest.raises(ValueError, match="duration must be positive"):
            timer.start(0)

    def test_start_when_already_running_then_single_countdown(self, timer, scheduler):
        timer.start(10)
        scheduler.advance()
        timer.start(5)
        assert len(scheduler.live) == 1
        scheduler.advance()
        assert timer.remaining == 4

    def test_tick_when_stale_generation_then_ignored(self, timer, scheduler):
        timer.start(10)
        old = scheduler.live[0]
        timer.start(10)
        # Simulate a tick that was already running when it was cancelled
        old.callback()
        assert timer.remaining == 10


class TestPauseResume:
    """Tests for pause and resume."""

    def test_pause_when_before_second_tick_then_no_expiry_until_resume(self, timer, scheduler, events):
        timer.start(2)
        scheduler.advance()
        assert timer.pause()
        scheduler.advance(5)
        assert timer.remaining == 1
        assert events["expired"] == 0
        assert timer.state is TimerState.PAUSED

        assert timer.resume()
        scheduler.advance()
        assert timer.remaining == 0
        assert events["expired"] == 1

    def test_pause_when_not_running_then_false(self, timer):
        assert not timer.pause()
        assert not timer.resume()

    def test_resume_when_running_then_false(self, timer):
        timer.start(3)
        assert not timer.resume()

    def test_pause_twice_when_running_then_second_is_noop(self, timer, scheduler):
        timer.start(3)
        assert timer.pause()
        assert not timer.pause()
        assert scheduler.live == []


class TestStop:
    """Tests for stop."""

    def test_stop_when_running_then_zeroed_without_expiry(self, timer, scheduler, events):
        timer.start(5)
        timer.stop()
        scheduler.advance(5)
        assert timer.remaining == 0
        assert timer.state is TimerState.STOPPED
        assert events["expired"] == 0

    def test_start_when_stopped_then_runs_again(self, timer, scheduler):
        timer.stop()
        timer.start(3)
        scheduler.advance()
        assert timer.remaining == 2
        assert timer.is_running


class TestCallbacks:
    """Tests for callback wiring."""

    def test_callback_when_reentering_timer_then_no_deadlock(self, scheduler):
        timer = CountdownTimer(scheduler)
        timer.set_callbacks(on_expire=lambda: timer.start(3))
        timer.start(1)
        scheduler.advance()
        assert timer.state is TimerState.RUNNING
        assert timer.remaining == 3


class TestThreadingScheduler:
    """Tests for the real scheduler."""

    def test_call_later_when_elapsed_then_callback_runs(self):
        fired = threading.Event()
        ThreadingScheduler().call_later(0.01, fired.set)
        assert fired.wait(2.0)

    def test_call_later_when_cancelled_then_callback_skipped(self):
        fired = threading.Event()
        handle = ThreadingScheduler().call_later(0.2, fired.set)
        handle.cancel()
        assert not fired.wait(0.4)
