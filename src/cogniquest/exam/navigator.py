"""
Module: exam.navigator

Purpose:
    Question navigation state: current index, exam phase and the
    direction of the last move. Not thread-safe on its own; the exam
    controller serializes every call.

Key Classes:
    - ExamPhase: NARRATING / ANSWERING / FINISHED
    - NavigationDirection: FORWARD / BACKWARD (presentation only)
    - NavigationResult: Outcome of next()
    - Navigator: The state machine

Used By:
    - exam.controller
"""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class ExamPhase(str, Enum):
    """Phase of the exam session."""
    NARRATING = "narrating"
    ANSWERING = "answering"
    FINISHED = "finished"

    def __str__(self) -> str:
        return self.value


class NavigationDirection(str, Enum):
    """Direction of the last move; carries no scoring meaning."""
    FORWARD = "forward"
    BACKWARD = "backward"

    def __str__(self) -> str:
        return self.value


class NavigationResult(str, Enum):
    """Outcome of Navigator.next()."""
    ADVANCED = "advanced"
    FINISHED = "finished"

    def __str__(self) -> str:
        return self.value


class Navigator:
    """
    Index/phase state machine over ``total`` questions.

    FINISHED is terminal: once reached, next() keeps reporting FINISHED,
    back() is rejected and set_narrating() is ignored.

    Example:
        >>> nav = Navigator()
        >>> nav.start(3)
        >>> [str(nav.next()) for _ in range(3)]
        ['advanced', 'advanced', 'finished']
        >>> nav.back()
        False
    """

    def __init__(self) -> None:
        self._total = 0
        self._index = 0
        self._phase = ExamPhase.ANSWERING
        self._direction = NavigationDirection.FORWARD
        self._started = False

    @property
    def index(self) -> int:
        return self._index

    @property
    def total(self) -> int:
        return self._total

    @property
    def phase(self) -> ExamPhase:
        return self._phase

    @property
    def direction(self) -> NavigationDirection:
        return self._direction

    @property
    def is_finished(self) -> bool:
        return self._phase is ExamPhase.FINISHED

    def start(self, total: int) -> None:
        """
        Reset to the first of ``total`` questions.

        Raises:
            ValueError: If total < 1
        """
        if total < 1:
            raise ValueError(f"total must be at least 1: {total}")
        self._total = total
        self._index = 0
        self._phase = ExamPhase.ANSWERING
        self._direction = NavigationDirection.FORWARD
        self._started = True

    def next(self) -> NavigationResult:
        """Advance one question, or finish from the last one."""
        self._require_started()
        if self.is_finished:
            return NavigationResult.FINISHED
        self._direction = NavigationDirection.FORWARD
        if self._index < self._total - 1:
            self._index += 1
            self._phase = ExamPhase.ANSWERING
            return NavigationResult.ADVANCED
        self._phase = ExamPhase.FINISHED
        logger.debug("Navigator reached the end of the exam")
        return NavigationResult.FINISHED

    def back(self) -> bool:
        """
        Move back one question.

        Returns:
            False (and no change) on the first question or once finished
        """
        self._require_started()
        if self._index == 0 or self.is_finished:
            return False
        self._direction = NavigationDirection.BACKWARD
        self._index -= 1
        self._phase = ExamPhase.ANSWERING
        return True

    def set_narrating(self, narrating: bool) -> None:
        """Switch between NARRATING and ANSWERING; no-op once finished."""
        self._require_started()
        if self.is_finished:
            return
        self._phase = ExamPhase.NARRATING if narrating else ExamPhase.ANSWERING

    def _require_started(self) -> None:
        if not self._started:
            raise RuntimeError("Navigator used before start()")
