"""Unit tests for the Navigator state machine."""

import pytest

from cogniquest.exam.navigator import (
    ExamPhase,
    NavigationDirection,
    NavigationResult,
    Navigator,
)


@pytest.fixture
def nav() -> Navigator:
    navigator = Navigator()
    navigator.start(3)
    return navigator


def test_next_when_three_questions_then_advances_then_finishes(nav):
    assert nav.next() is NavigationResult.ADVANCED
    assert nav.index == 1
    assert nav.next() is NavigationResult.ADVANCED
    assert nav.index == 2
    assert nav.next() is NavigationResult.FINISHED
    assert nav.index == 2
    assert nav.phase is ExamPhase.FINISHED
    assert nav.back() is False
    assert nav.index == 2


def test_next_when_finished_then_stays_finished(nav):
    for _ in range(3):
        nav.next()
    assert nav.next() is NavigationResult.FINISHED
    assert nav.index == 2


def test_back_when_first_question_then_rejected(nav):
    assert nav.back() is False
    assert nav.direction is NavigationDirection.FORWARD


def test_back_when_later_question_then_moves_backward(nav):
    nav.next()
    assert nav.back() is True
    assert nav.index == 0
    assert nav.direction is NavigationDirection.BACKWARD


def test_set_narrating_when_active_then_toggles_phase(nav):
    nav.set_narrating(True)
    assert nav.phase is ExamPhase.NARRATING
    nav.set_narrating(False)
    assert nav.phase is ExamPhase.ANSWERING


def test_set_narrating_when_finished_then_ignored(nav):
    for _ in range(3):
        nav.next()
    nav.set_narrating(True)
    assert nav.phase is ExamPhase.FINISHED


def test_start_when_zero_questions_then_raises():
    with pytest.raises(ValueError, match="at least 1"):
        Navigator().start(0)


def test_next_when_not_started_then_raises():
    with pytest.raises(RuntimeError):
        Navigator().next()


def test_start_when_single_question_then_first_next_finishes():
    nav = Navigator()
    nav.start(1)
    assert nav.next() is NavigationResult.FINISHED
