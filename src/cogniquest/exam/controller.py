"""
Module: exam.controller

Purpose:
    Orchestrate one exam session.
    Load → Navigate (timer, narration, answers) → Finish → Score

Key Classes:
    - ExamController: Owns the session state and its entry points
    - ExamError: Base exception for session errors
    - ExamLoadError: Question bank could not be loaded
    - AnswerTypeError: Answer variant does not fit the current question

Dependencies:
    - threading (std)
    - exam.navigator, exam.timer: Session state machines
    - exam.scoring: Scores the answers once at finish
    - exam.collaborators: Narrator, region resolver, question repository

Used By:
    - Presentation layers (GUI/CLI) driving an exam

Notes:
    Every public method takes one re-entrant lock, so timer expiry,
    narration completion and user actions never interleave. Timer and
    narration callbacks arrive on other threads and re-check that they
    still apply to the current question before acting.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

from cogniquest.core.models import (
    Answer,
    ClockDrawingAnswer,
    Question,
    QuestionType,
    RegionInfo,
    ScoreResult,
    is_answer_accepted,
)

from .collaborators import (
    CachedRegionResolver,
    JsonQuestionRepository,
    Narrator,
    QuestionRepository,
    RegionResolver,
    SilentNarrator,
    StaticRegionResolver,
)
from .config import ExamConfig
from .loading import LoaderError
from .navigator import ExamPhase, NavigationDirection, NavigationResult, Navigator
from .scoring import score_exam
from .timer import CountdownTimer, TimerState

logger = logging.getLogger(__name__)


class ExamError(Exception):
    """Error in the exam session lifecycle."""
    pass


class ExamLoadError(ExamError):
    """Questions could not be loaded; the session cannot proceed."""
    pass


class AnswerTypeError(ExamError, ValueError):
    """Answer variant is not accepted by the current question type."""
    pass


class ExamController:
    """
    Exam session: navigation, per-question timer, narration and scoring.

    Lifecycle:
        1. start(): load questions, start on question 1
        2. update_answer() / next() / back() / submit_drawing()
        3. The last next() (or timer expiry on the last question)
           finishes the exam: timer stopped, region resolved once,
           answers scored once, ``score_result`` set

    Timer expiry advances exactly like next(). Entering a question that
    has narration pauses its timer until the narrator reports completion.

    Example:
        >>> controller = ExamController(ExamConfig(timer_duration=60))
        >>> controller.start()
        >>> controller.update_answer(TextAnswer("Monday"))
        >>> controller.next()
        <NavigationResult.ADVANCED: 'advanced'>
    """

    def __init__(
        self,
        config: Optional[ExamConfig] = None,
        repository: Optional[QuestionRepository] = None,
        *,
        narrator: Optional[Narrator] = None,
        region_resolver: Optional[RegionResolver] = None,
        timer: Optional[CountdownTimer] = None,
        navigator: Optional[Navigator] = None,
        clock: Callable[[], date] = date.today,
        on_finish: Optional[Callable[[ScoreResult], None]] = None,
    ):
        self.config = config or ExamConfig()
        self._repository = repository or JsonQuestionRepository(
            self.config.question_bank_path, strict=self.config.strict_validation
        )
        self._narrator = narrator or SilentNarrator()

        resolver = region_resolver or StaticRegionResolver(None)
        if not isinstance(resolver, CachedRegionResolver):
            resolver = CachedRegionResolver(resolver, timeout=self.config.region_timeout)
        self._region_resolver = resolver

        self._timer = timer or CountdownTimer()
        self._timer.set_callbacks(on_expire=self._on_timer_expired)
        self._navigator = navigator or Navigator()
        self._clock = clock
        self._on_finish = on_finish

        self._lock = threading.RLock()
        self._questions: Tuple[Question, ...] = ()
        self._answers: Dict[int, Answer] = {}
        self._region: Optional[RegionInfo] = None
        self._region_resolved = False
        self._score_result: Optional[ScoreResult] = None
        self._load_error: Optional[Exception] = None
        self._started = False

        # Token of the narration currently allowed to resume the timer
        self._narration_seq = 0
        self._active_narration: Optional[int] = None

    # ─────────────────────────────────────────────────────────────────────
    # Read-only session state
    # ─────────────────────────────────────────────────────────────────────

    @property
    def questions(self) -> Tuple[Question, ...]:
        with self._lock:
            return self._questions

    @property
    def is_started(self) -> bool:
        with self._lock:
            return self._started

    @property
    def current_index(self) -> int:
        with self._lock:
            return self._navigator.index if self._started else 0

    @property
    def current_question(self) -> Optional[Question]:
        with self._lock:
            if not self._started:
                return None
            return self._questions[self._navigator.index]

    @property
    def phase(self) -> ExamPhase:
        with self._lock:
            return self._navigator.phase

    @property
    def direction(self) -> NavigationDirection:
        with self._lock:
            return self._navigator.direction

    @property
    def is_finished(self) -> bool:
        with self._lock:
            return self._started and self._navigator.is_finished

    @property
    def time_remaining(self) -> float:
        return self._timer.remaining

    @property
    def timer_state(self) -> TimerState:
        return self._timer.state

    @property
    def answers(self) -> Mapping[int, Answer]:
        """Snapshot of the answers given so far."""
        with self._lock:
            return MappingProxyType(dict(self._answers))

    @property
    def region(self) -> Optional[RegionInfo]:
        with self._lock:
            return self._region

    @property
    def score_result(self) -> Optional[ScoreResult]:
        with self._lock:
            return self._score_result

    @property
    def load_error(self) -> Optional[Exception]:
        with self._lock:
            return self._load_error

    # ─────────────────────────────────────────────────────────────────────
    # Entry points
    # ─────────────────────────────────────────────────────────────────────

    def start(self) -> None:
        """
        Load questions and enter the first one.

        Raises:
            ExamLoadError: If the bank cannot be loaded or is empty
            ExamError: If the session was already started
        """
        with self._lock:
            if self._started:
                raise ExamError("Exam already started")

            try:
                questions = self._repository.fetch_questions()
            except LoaderError as e:
                self._load_error = e
                logger.error(f"Failed to load questions: {e}")
                raise ExamLoadError(f"Failed to load questions: {e}") from e

            if not questions:
                self._load_error = ExamLoadError("Question bank is empty")
                logger.error("Failed to load questions: question bank is empty")
                raise self._load_error

            self._questions = tuple(questions)
            self._load_error = None
            self._region_resolver.prefetch()
            self._navigator.start(len(self._questions))
            self._started = True
            logger.info(f"Exam started with {len(self._questions)} questions")
            self._enter_question()

    def update_answer(self, answer: Answer) -> None:
        """
        Record the answer for the current question, replacing any earlier one.

        Raises:
            AnswerTypeError: If the variant does not fit the question type
            ExamError: If the exam is not running
        """
        with self._lock:
            question = self._require_active()
            if not is_answer_accepted(question.type, answer):
                logger.warning(
                    f"Rejected {type(answer).__name__} for {question.type} question {question.id}"
                )
                raise AnswerTypeError(
                    f"{question.type} question {question.id} does not accept "
                    f"{type(answer).__name__}"
                )
            self._answers[question.id] = answer
            logger.debug(f"Answer recorded for question {question.id}")

    def next(self) -> NavigationResult:
        """
        Move to the next question, finishing the exam after the last one.

        Calling next() on a finished exam changes nothing and reports
        FINISHED again.
        """
        with self._lock:
            if not self._started:
                raise ExamError("Exam not started")
            if self._navigator.is_finished:
                return NavigationResult.FINISHED

            self._leave_question()
            result = self._navigator.next()
            if result is NavigationResult.ADVANCED:
                self._enter_question()
            else:
                self._finish()
            return result

    def back(self) -> bool:
        """
        Return to the previous question with a fresh timer.

        Returns:
            False (and no change) on the first question or once finished
        """
        with self._lock:
            if not self._started:
                raise ExamError("Exam not started")
            if self._navigator.is_finished or self._navigator.index == 0:
                logger.debug("Back rejected")
                return False
            self._leave_question()
            self._navigator.back()
            self._enter_question()
            return True

    def submit_drawing(self, answer: Optional[ClockDrawingAnswer] = None) -> NavigationResult:
        """
        Submit the clock drawing and move on.

        Args:
            answer: Final drawing, recorded before advancing if given

        Raises:
            ExamError: If the current question is not a clock drawing
        """
        with self._lock:
            question = self._require_active()
            if question.type is not QuestionType.CLOCK_DRAWING:
                raise ExamError(f"Question {question.id} is not a clock drawing")
            if answer is not None:
                self.update_answer(answer)
            return self.next()

    def set_narrating(self, narrating: bool) -> None:
        """
        Mark narration as started or finished from outside.

        Narration pauses the timer; finishing it resumes the timer.
        Ignored once the exam is finished.
        """
        with self._lock:
            if not self._started or self._navigator.is_finished:
                return
            self._navigator.set_narrating(narrating)
            if narrating:
                self._timer.pause()
            else:
                self._active_narration = None
                self._timer.resume()

    def pause_timer(self) -> bool:
        """Pause the countdown (e.g. while comparing a drawing with the reference)."""
        with self._lock:
            if not self._started or self._navigator.is_finished:
                return False
            return self._timer.pause()

    def resume_timer(self) -> bool:
        """Resume a paused countdown; refused while narrating."""
        with self._lock:
            if not self._started or self._navigator.is_finished:
                return False
            if self._navigator.phase is ExamPhase.NARRATING:
                return False
            return self._timer.resume()

    def close(self) -> None:
        """Stop the timer and any narration; the session state is kept."""
        with self._lock:
            self._leave_question()
            self._timer.stop()

    # ─────────────────────────────────────────────────────────────────────
    # Internal
    # ─────────────────────────────────────────────────────────────────────

    def _require_active(self) -> Question:
        if not self._started:
            raise ExamError("Exam not started")
        if self._navigator.is_finished:
            raise ExamError("Exam already finished")
        return self._questions[self._navigator.index]

    def _enter_question(self) -> None:
        question = self._questions[self._navigator.index]
        logger.debug(f"Entering question {question.id} ({question.type})")
        self._timer.start(self.config.timer_duration)
        if question.has_narration:
            self._begin_narration(question)

    def _begin_narration(self, question: Question) -> None:
        self._narration_seq += 1
        token = self._narration_seq
        self._active_narration = token
        self._navigator.set_narrating(True)
        self._timer.pause()
        self._narrator.speak(
            question.narration,
            self.config.narration_delay,
            lambda: self._on_narration_complete(token),
        )

    def _on_narration_complete(self, token: int) -> None:
        with self._lock:
            if token != self._active_narration or self._navigator.is_finished:
                logger.debug(f"Ignoring stale narration completion {token}")
                return
            self._active_narration = None
            self._navigator.set_narrating(False)
            self._timer.resume()

    def _leave_question(self) -> None:
        if self._active_narration is not None:
            self._active_narration = None
            self._narrator.stop()

    def _on_timer_expired(self) -> None:
        with self._lock:
            if not self._started or self._navigator.is_finished:
                return
            # A restart between expiry and this call means the user moved on
            if self._timer.state is not TimerState.EXPIRED:
                return
            question = self._questions[self._navigator.index]
            logger.info(f"Time expired on question {question.id}")
            self.next()

    def _finish(self) -> None:
        self._timer.stop()
        self._leave_question()
        if not self._region_resolved:
            self._region = self._region_resolver.resolve_region()
            self._region_resolved = True

        if self._score_result is None:
            self._score_result = score_exam(
                self._answers,
                self._questions,
                has_high_school_education=self.config.has_high_school_education,
                region=self._region,
                today=self._clock(),
                thresholds=self.config.thresholds,
            )
            result = self._score_result
            logger.info(
                f"Exam finished: {result.total}/{result.max_total} "
                f"({result.interpretation.label})"
            )
            if self._on_finish is not None:
                self._on_finish(result)
