"""
Unit Tests for ExamController

The timer runs on the FakeScheduler from conftest and narration on the
RecordingNarrator, so every timer tick and narration completion happens
exactly when the test says so.
"""

import json
import threading

import pytest

from cogniquest.core.models import (
    CalculationAnswer,
    ClockDrawingAnswer,
    DynamicRule,
    ExactMatchRule,
    Interpretation,
    NumberAnswer,
    OrientationRule,
    Question,
    QuestionType,
    Stroke,
    TextAnswer,
)
from cogniquest.exam import (
    AnswerTypeError,
    CountdownTimer,
    ExamConfig,
    ExamController,
    ExamError,
    ExamLoadError,
    ExamPhase,
    NavigationDirection,
    NavigationResult,
    TimerState,
)
from cogniquest.exam.collaborators import JsonQuestionRepository, SilentNarrator, StaticRegionResolver
from cogniquest.exam.loading import LoaderError


DAY = Question(1, "What day is it?", QuestionType.ORIENTATION, 1, OrientationRule(DynamicRule.CURRENT_DAY))
REGISTRATION = Question(
    2, "Remember these.", QuestionType.REGISTRATION, 0,
    narration=("Remember these.", "Apple", "Pen"),
)
CALC = Question(3, "Shop", QuestionType.CALCULATION, 3, ExactMatchRule(("23", "77")))
CLOCK = Question(4, "Draw a clock.", QuestionType.CLOCK_DRAWING, 4)
QUESTIONS = [DAY, REGISTRATION, CALC, CLOCK]


class ListRepository:
    """In-memory question source."""

    def __init__(self, questions=(), error=None):
        self.questions = list(questions)
        self.error = error

    def fetch_questions(self):
        if self.error is not None:
            raise self.error
        return list(self.questions)


@pytest.fixture
def make_controller(scheduler, narrator, monday):
    def _make(questions=QUESTIONS, *, region="VA", repository=None, on_finish=None, **config):
        config.setdefault("timer_duration", 10)
        return ExamController(
            ExamConfig(**config),
            repository or ListRepository(questions),
            narrator=narrator,
            region_resolver=StaticRegionResolver(region),
            timer=CountdownTimer(scheduler),
            clock=lambda: monday,
            on_finish=on_finish,
        )
    return _make


@pytest.fixture
def controller(make_controller):
    c = make_controller()
    c.start()
    return c


def _to_registration(controller):
    controller.update_answer(TextAnswer("Monday"))
    controller.next()


class TestStart:
    """Tests for start()."""

    def test_start_when_loaded_then_first_question_running(self, controller):
        assert controller.current_index == 0
        assert controller.current_question is DAY
        assert controller.phase is ExamPhase.ANSWERING
        assert controller.timer_state is TimerState.RUNNING
        assert controller.time_remaining == 10
        assert controller.score_result is None

    def test_start_when_loader_fails_then_exam_load_error(self, make_controller):
        controller = make_controller(repository=ListRepository(error=LoaderError("bank missing")))
        with pytest.raises(ExamLoadError, match="bank missing") as exc:
            controller.start()
        assert isinstance(exc.value.__cause__, LoaderError)
        assert isinstance(controller.load_error, LoaderError)
        assert not controller.is_started
        assert controller.current_question is None

    def test_start_when_bank_field_mistyped_then_exam_load_error(self, make_controller, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(json.dumps({
            "schema_version": 1,
            "questions": [{"id": 1, "text": "Q", "type": 5, "max_points": 1}],
        }), encoding="utf-8")
        controller = make_controller(repository=JsonQuestionRepository(path))
        with pytest.raises(ExamLoadError):
            controller.start()
        assert isinstance(controller.load_error, LoaderError)
        assert not controller.is_started

    def test_start_when_bank_empty_then_exam_load_error(self, make_controller):
        controller = make_controller([])
        with pytest.raises(ExamLoadError, match="empty"):
            controller.start()
        assert controller.load_error is not None

    def test_start_when_already_started_then_raises(self, controller):
        with pytest.raises(ExamError, match="already started"):
            controller.start()

    def test_next_when_not_started_then_raises(self, make_controller):
        with pytest.raises(ExamError, match="not started"):
            make_controller().next()


class TestAnswers:
    """Tests for update_answer()."""

    def test_update_when_matching_variant_then_recorded(self, controller):
        controller.update_answer(TextAnswer("Mon"))
        controller.update_answer(TextAnswer("Monday"))
        assert controller.answers == {1: TextAnswer("Monday")}

    def test_update_when_wrong_variant_then_answer_type_error(self, controller):
        with pytest.raises(AnswerTypeError):
            controller.update_answer(CalculationAnswer(23, 77))
        with pytest.raises(ValueError):
            controller.update_answer(CalculationAnswer(23, 77))
        assert controller.answers == {}

    def test_update_when_registration_then_rejected(self, controller):
        _to_registration(controller)
        with pytest.raises(AnswerTypeError):
            controller.update_answer(TextAnswer("apple"))

    def test_answers_when_snapshot_taken_then_read_only(self, controller):
        controller.update_answer(NumberAnswer(1))
        snapshot = controller.answers
        with pytest.raises(TypeError):
            snapshot[1] = TextAnswer("x")


class TestNavigation:
    """Tests for next(), back() and timer expiry."""

    def test_next_when_advanced_then_timer_restarted(self, controller, scheduler):
        scheduler.advance(4)
        assert controller.time_remaining == 6
        controller.next()
        controller.next()
        assert controller.current_question is CALC
        assert controller.time_remaining == 10

    def test_timer_when_expired_then_advances(self, controller, scheduler, narrator):
        scheduler.advance(10)
        assert controller.current_index == 1
        assert narrator.calls[-1][0] == REGISTRATION.narration

    def test_timer_expiry_when_timer_already_restarted_then_ignored(self, controller):
        controller._on_timer_expired()
        assert controller.current_index == 0

    def test_back_when_first_question_then_rejected(self, controller):
        assert controller.back() is False
        assert controller.current_index == 0

    def test_back_when_later_question_then_fresh_timer(self, controller, scheduler, narrator):
        _to_registration(controller)
        narrator.complete_last()
        controller.next()
        scheduler.advance(3)
        assert controller.back() is True
        assert controller.current_question is REGISTRATION
        assert controller.direction is NavigationDirection.BACKWARD
        # Re-entering a narrated question narrates again
        assert len(narrator.calls) == 2
        narrator.complete_last()
        assert controller.time_remaining == 10


class TestNarration:
    """Tests for narration and its effect on the timer."""

    def test_enter_when_question_narrated_then_timer_paused_until_complete(self, controller, scheduler, narrator):
        _to_registration(controller)
        utterances, delay, _ = narrator.calls[-1]
        assert utterances == ("Remember these.", "Apple", "Pen")
        assert delay == 1.0
        assert controller.phase is ExamPhase.NARRATING
        assert controller.timer_state is TimerState.PAUSED

        scheduler.advance(20)
        assert controller.time_remaining == 10
        assert controller.current_question is REGISTRATION

        narrator.complete_last()
        assert controller.phase is ExamPhase.ANSWERING
        assert controller.timer_state is TimerState.RUNNING
        scheduler.advance(1)
        assert controller.time_remaining == 9

    def test_leave_when_narrating_then_narration_stopped(self, controller, narrator):
        _to_registration(controller)
        controller.next()
        assert narrator.stops == 1
        assert controller.phase is ExamPhase.ANSWERING

    def test_completion_when_question_already_left_then_noop(self, controller, narrator):
        _to_registration(controller)
        stale = narrator.calls[-1][2]
        controller.back()
        controller.pause_timer()
        stale()
        assert controller.current_question is DAY
        assert controller.timer_state is TimerState.PAUSED
        assert controller.phase is ExamPhase.ANSWERING

    def test_completion_when_delivered_twice_then_second_ignored(self, controller, narrator):
        _to_registration(controller)
        narrator.complete_last()
        controller.pause_timer()
        narrator.complete_last()
        assert controller.timer_state is TimerState.PAUSED

    def test_set_narrating_when_external_then_pauses_and_resumes(self, controller):
        controller.set_narrating(True)
        assert controller.phase is ExamPhase.NARRATING
        assert controller.timer_state is TimerState.PAUSED
        controller.set_narrating(False)
        assert controller.phase is ExamPhase.ANSWERING
        assert controller.timer_state is TimerState.RUNNING

    def test_resume_timer_when_narrating_then_refused(self, controller):
        _to_registration(controller)
        assert controller.resume_timer() is False
        assert controller.timer_state is TimerState.PAUSED


class TestClockDrawing:
    """Tests for pause/resume and submit on the drawing question."""

    @pytest.fixture
    def on_clock(self, controller, narrator):
        _to_registration(controller)
        narrator.complete_last()
        controller.next()
        controller.update_answer(CalculationAnswer(23, 77))
        controller.next()
        assert controller.current_question is CLOCK
        return controller

    def test_pause_when_comparing_reference_then_no_ticks(self, on_clock, scheduler):
        assert on_clock.pause_timer() is True
        scheduler.advance(5)
        assert on_clock.time_remaining == 10
        assert on_clock.resume_timer() is True
        scheduler.advance(1)
        assert on_clock.time_remaining == 9

    def test_submit_when_drawing_given_then_recorded_and_finished(self, on_clock):
        drawing = ClockDrawingAnswer(
            strokes=(Stroke(((0.0, 0.0), (1.0, 1.0))),),
            has_correct_numbers=True,
            has_correct_time=True,
        )
        assert on_clock.submit_drawing(drawing) is NavigationResult.FINISHED
        assert on_clock.answers[4] == drawing
        assert on_clock.score_result.per_question[4] == 4

    def test_submit_when_not_clock_question_then_raises(self, controller):
        with pytest.raises(ExamError, match="not a clock drawing"):
            controller.submit_drawing()


class TestFinish:
    """Tests for finishing and scoring."""

    def _finish(self, controller, narrator):
        controller.update_answer(TextAnswer("monday"))
        controller.next()
        narrator.complete_last()
        controller.next()
        controller.update_answer(CalculationAnswer(23, 77))
        controller.next()
        return controller.next()

    def test_finish_when_last_next_then_scored_once(self, controller, narrator, scheduler):
        assert self._finish(controller, narrator) is NavigationResult.FINISHED
        result = controller.score_result
        assert result.total == 4
        assert result.max_total == 8
        assert result.interpretation is Interpretation.LIKELY_IMPAIRED
        assert controller.is_finished
        assert controller.phase is ExamPhase.FINISHED
        assert controller.timer_state is TimerState.STOPPED
        assert controller.time_remaining == 0

        scheduler.advance(20)
        assert controller.next() is NavigationResult.FINISHED
        assert controller.score_result is result

    def test_finish_when_done_then_further_input_rejected(self, controller, narrator):
        self._finish(controller, narrator)
        with pytest.raises(ExamError, match="already finished"):
            controller.update_answer(TextAnswer("x"))
        assert controller.back() is False
        controller.set_narrating(True)
        assert controller.phase is ExamPhase.FINISHED
        assert controller.pause_timer() is False

    def test_finish_when_callback_given_then_called_once(self, make_controller, narrator):
        results = []
        controller = make_controller(on_finish=results.append)
        controller.start()
        self._finish(controller, narrator)
        controller.next()
        assert results == [controller.score_result]

    def test_finish_when_timer_expires_on_last_question_then_finished(self, make_controller, scheduler):
        controller = make_controller([DAY])
        controller.start()
        scheduler.advance(10)
        assert controller.is_finished
        assert controller.score_result.total == 0

    def test_finish_when_region_resolved_then_region_kept(self, make_controller, default_questions):
        controller = make_controller(default_questions, region="Virginia")
        controller.start()
        controller.update_answer(TextAnswer("Monday"))
        controller.next()
        controller.update_answer(NumberAnswer(2024))
        controller.next()
        controller.update_answer(TextAnswer("va"))
        while controller.next() is NavigationResult.ADVANCED:
            pass
        assert controller.region.abbreviation == "VA"
        assert controller.score_result.total == 3
        assert controller.score_result.unscored_question_ids == frozenset()

    def test_finish_when_region_unavailable_then_unscored(self, make_controller, default_questions):
        controller = make_controller(default_questions, region=None)
        controller.start()
        controller.next()
        controller.next()
        controller.update_answer(TextAnswer("Virginia"))
        while controller.next() is NavigationResult.ADVANCED:
            pass
        assert controller.region is None
        assert controller.score_result.unscored_question_ids == frozenset({3})

    def test_finish_when_no_high_school_then_other_cut_lines(self, make_controller, narrator):
        controller = make_controller(has_high_school_education=False)
        controller.start()
        self._finish(controller, narrator)
        assert controller.score_result.interpretation is Interpretation.LIKELY_IMPAIRED


class TestRealTimer:
    """End-to-end run on the threading scheduler."""

    def test_exam_when_left_alone_then_timer_drives_to_finish(self, monday):
        finished = threading.Event()
        controller = ExamController(
            ExamConfig(timer_duration=10),
            ListRepository([DAY, CALC]),
            narrator=SilentNarrator(),
            timer=CountdownTimer(tick_interval=0.005),
            clock=lambda: monday,
            on_finish=lambda result: finished.set(),
        )
        controller.start()
        try:
            assert finished.wait(5.0)
            assert controller.is_finished
            assert controller.score_result.total == 0
        finally:
            controller.close()
