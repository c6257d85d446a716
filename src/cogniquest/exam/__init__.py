"""
Exam Package

Exam engine: question navigation, the per-question timer, narration
handling and scoring, orchestrated by ExamController.
"""

from .config import ExamConfig
from .controller import AnswerTypeError, ExamController, ExamError, ExamLoadError
from .navigator import ExamPhase, NavigationDirection, NavigationResult, Navigator
from .timer import CountdownTimer, ThreadingScheduler, TimerState

__all__ = [
    "ExamConfig",
    "AnswerTypeError",
    "ExamController",
    "ExamError",
    "ExamLoadError",
    "ExamPhase",
    "NavigationDirection",
    "NavigationResult",
    "Navigator",
    "CountdownTimer",
    "ThreadingScheduler",
    "TimerState",
]
