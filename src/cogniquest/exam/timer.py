"""
Module: exam.timer

Purpose:
    Per-question countdown clock with pause/resume.

    The timer is an explicit state machine that owns at most one scheduled
    tick. Every transition that stops counting (pause, stop, a fresh start)
    cancels that tick and bumps a generation counter, so a tick that was
    already in flight when it was cancelled finds a stale generation and
    does nothing. Only one countdown can ever be delivering ticks.

Key Classes:
    - TimerState: IDLE / RUNNING / PAUSED / STOPPED / EXPIRED
    - CountdownTimer: The countdown state machine
    - ThreadingScheduler: Default tick source backed by threading.Timer

Dependencies:
    - threading (std)

Used By:
    - exam.controller: One timer per exam session
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0


class Cancellable(Protocol):
    """Handle for a scheduled callback."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Tick source: run ``callback`` once after ``delay`` seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        ...


class ThreadingScheduler:
    """Scheduler that runs each callback on a daemon ``threading.Timer``."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class TimerState(str, Enum):
    """Countdown lifecycle state."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    EXPIRED = "expired"

    def __str__(self) -> str:
        return self.value


class CountdownTimer:
    """
    Countdown at one-second resolution.

    Transitions:
        start:  any state -> RUNNING (remaining reset to duration)
        pause:  RUNNING -> PAUSED (remaining kept)
        resume: PAUSED -> RUNNING
        stop:   any state -> STOPPED (remaining zeroed, no expiry)
        tick:   RUNNING -> RUNNING, or EXPIRED when remaining reaches 0

    Callbacks run on the scheduler's thread, outside the timer's lock,
    so they may call back into the timer.

    Usage:
        timer = CountdownTimer()
        timer.set_callbacks(on_tick=print, on_expire=advance)
        timer.start(60)
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        *,
        tick_interval: float = TICK_SECONDS,
        on_tick: Optional[Callable[[float], None]] = None,
        on_expire: Optional[Callable[[], None]] = None,
    ):
        self._scheduler = scheduler or ThreadingScheduler()
        self._tick_interval = tick_interval
        self._on_tick = on_tick
        self._on_expire = on_expire

        self._lock = threading.Lock()
        self._state = TimerState.IDLE
        self._remaining = 0.0
        self._handle: Optional[Cancellable] = None
        self._generation = 0

    def set_callbacks(
        self,
        *,
        on_tick: Optional[Callable[[float], None]] = None,
        on_expire: Optional[Callable[[], None]] = None,
    ) -> None:
        """Replace the tick and expiry callbacks."""
        with self._lock:
            self._on_tick = on_tick
            self._on_expire = on_expire

    @property
    def state(self) -> TimerState:
        with self._lock:
            return self._state

    @property
    def remaining(self) -> float:
        """Seconds left; never negative."""
        with self._lock:
            return self._remaining

    @property
    def is_running(self) -> bool:
        return self.state is TimerState.RUNNING

    def start(self, duration: float) -> None:
        """
        Reset remaining time to ``duration`` and start counting down.

        Any countdown already in progress is cancelled first.

        Raises:
            ValueError: If duration is not positive
        """
        if duration <= 0:
            raise ValueError(f"duration must be positive: {duration}")
        with self._lock:
            self._cancel_locked()
            self._remaining = float(duration)
            self._state = TimerState.RUNNING
            self._schedule_locked()
        logger.debug(f"Timer started: {duration}s")

    def pause(self) -> bool:
        """
        Halt the countdown, keeping remaining time.

        Returns:
            True if the timer was running and is now paused
        """
        with self._lock:
            if self._state is not TimerState.RUNNING:
                return False
            self._cancel_locked()
            self._state = TimerState.PAUSED
            remaining = self._remaining
        logger.debug(f"Timer paused at {remaining}s")
        return True

    def resume(self) -> bool:
        """
        Continue counting down from the remaining time.

        Returns:
            True if the timer was paused and is now running
        """
        with self._lock:
            if self._state is not TimerState.PAUSED:
                return False
            self._state = TimerState.RUNNING
            self._schedule_locked()
            remaining = self._remaining
        logger.debug(f"Timer resumed at {remaining}s")
        return True

    def stop(self) -> None:
        """Halt and zero the countdown without firing expiry."""
        with self._lock:
            self._cancel_locked()
            self._remaining = 0.0
            self._state = TimerState.STOPPED

    # Internal -----------------------------------------------------------

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule_locked(self) -> None:
        generation = self._generation
        self._handle = self._scheduler.call_later(
            self._tick_interval, lambda: self._tick(generation)
        )

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._state is not TimerState.RUNNING:
                return
            self._remaining = max(0.0, self._remaining - 1.0)
            remaining = self._remaining
            expired = remaining <= 0.0
            if expired:
                self._state = TimerState.EXPIRED
                self._handle = None
            else:
                self._schedule_locked()
            on_tick, on_expire = self._on_tick, self._on_expire

        if on_tick is not None:
            on_tick(remaining)
        if expired:
            logger.debug("Timer expired")
            if on_expire is not None:
                on_expire()
