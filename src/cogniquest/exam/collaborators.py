"""
Module: exam.collaborators

Purpose:
    Interfaces the exam controller talks to, with the reference adapters
    used headless (CLI, tests).

Key Classes:
    - Narrator, RegionResolver, QuestionRepository: Protocols
    - SilentNarrator: Completes every narration immediately
    - LoggingNarrator: Logs utterances, completes after the spoken delays
    - StaticRegionResolver: Region fixed by configuration
    - CachedRegionResolver: At-most-once, timeout-bounded resolution
    - JsonQuestionRepository: Question bank file

Dependencies:
    - concurrent.futures: Background region resolution
    - threading (std)
    - common.regions: Region Lookup
    - exam.loading: Question bank loading

Used By:
    - exam.controller
    - cli
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Sequence

from cogniquest.common.regions import lookup_region
from cogniquest.core.models import Question, RegionInfo

from .loading import load_questions

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Protocols
# ─────────────────────────────────────────────────────────────────────────────

class Narrator(Protocol):
    """
    Speech output.

    ``speak`` must call ``on_complete`` exactly once, including when the
    narration is cut short by ``stop``. ``stop`` is idempotent.
    """

    def speak(
        self,
        utterances: Sequence[str],
        inter_utterance_delay: float,
        on_complete: Callable[[], None],
    ) -> None:
        ...

    def stop(self) -> None:
        ...


class RegionResolver(Protocol):
    """Current region, or None if unavailable or denied."""

    def resolve_region(self) -> Optional[RegionInfo]:
        ...


class QuestionRepository(Protocol):
    """Source of the ordered question list; may raise LoaderError."""

    def fetch_questions(self) -> List[Question]:
        ...


# ─────────────────────────────────────────────────────────────────────────────
# Narrators
# ─────────────────────────────────────────────────────────────────────────────

class SilentNarrator:
    """Narrator for headless runs: every narration completes at once."""

    def speak(
        self,
        utterances: Sequence[str],
        inter_utterance_delay: float,
        on_complete: Callable[[], None],
    ) -> None:
        on_complete()

    def stop(self) -> None:
        pass


class LoggingNarrator:
    """
    Narrator that logs each utterance and completes on a timer thread
    once the inter-utterance delays have elapsed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Callable[[], None]] = None

    def speak(
        self,
        utterances: Sequence[str],
        inter_utterance_delay: float,
        on_complete: Callable[[], None],
    ) -> None:
        self.stop()
        for utterance in utterances:
            logger.info(f"Narrating: {utterance}")
        duration = inter_utterance_delay * max(len(utterances) - 1, 0)

        with self._lock:
            self._pending = on_complete
            self._timer = threading.Timer(duration, self._complete)
            self._timer.daemon = True
            self._timer.start()

    def stop(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._complete()

    def _complete(self) -> None:
        with self._lock:
            callback, self._pending = self._pending, None
            self._timer = None
        if callback is not None:
            callback()


# ─────────────────────────────────────────────────────────────────────────────
# Region resolvers
# ─────────────────────────────────────────────────────────────────────────────

class StaticRegionResolver:
    """
    Region supplied up front (configuration, CLI flag).

    An unknown or empty value resolves to None.
    """

    def __init__(self, raw: Optional[str]):
        self._region = lookup_region(raw)
        if raw and self._region is None:
            logger.warning(f"Unknown region {raw!r}; region questions will be unscored")

    def resolve_region(self) -> Optional[RegionInfo]:
        return self._region


class CachedRegionResolver:
    """
    Resolve a region at most once, in the background, with a timeout.

    ``prefetch()`` starts resolution early (e.g. when the exam starts)
    so the result is usually ready by the time it is needed. A timeout,
    a None result or an exception all cache None; the exam continues and
    region questions become unscored.

    Usage:
        resolver = CachedRegionResolver(gps_resolver, timeout=5.0)
        resolver.prefetch()
        ...
        region = resolver.resolve_region()
    """

    def __init__(self, resolver: RegionResolver, timeout: float = 5.0):
        self._resolver = resolver
        self._timeout = timeout
        self._lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._future: Optional[Future] = None
        self._resolved = False
        self._region: Optional[RegionInfo] = None

    def prefetch(self) -> None:
        """Start resolution in the background if not started yet."""
        with self._lock:
            self._ensure_started_locked()

    def resolve_region(self) -> Optional[RegionInfo]:
        """Return the cached region, waiting up to the timeout once."""
        with self._lock:
            if self._resolved:
                return self._region
            future = self._ensure_started_locked()

        try:
            region = future.result(timeout=self._timeout)
        except FutureTimeoutError:
            logger.warning(f"Region resolution timed out after {self._timeout}s")
            region = None
        except Exception as e:
            logger.warning(f"Region resolution failed: {e}")
            region = None

        with self._lock:
            if not self._resolved:
                self._region = region
                self._resolved = True
                if region is not None:
                    logger.info(f"Resolved region: {region}")
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None
            return self._region

    @property
    def is_resolved(self) -> bool:
        with self._lock:
            return self._resolved

    def _ensure_started_locked(self) -> Future:
        if self._future is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="region")
            self._future = self._executor.submit(self._resolver.resolve_region)
        return self._future


# ─────────────────────────────────────────────────────────────────────────────
# Question repository
# ─────────────────────────────────────────────────────────────────────────────

class JsonQuestionRepository:
    """Questions from a JSON bank file (None = packaged bank)."""

    def __init__(self, path: Optional[Path] = None, *, strict: bool = False):
        self.path = path
        self.strict = strict

    def fetch_questions(self) -> List[Question]:
        return load_questions(self.path, strict=self.strict)
