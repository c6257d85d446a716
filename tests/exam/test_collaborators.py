"""
Unit Tests for Exam Collaborators

Tests for the reference narrators, region resolvers and the JSON
question repository.
"""

import threading

import pytest

from cogniquest.common.regions import lookup_region
from cogniquest.exam.collaborators import (
    CachedRegionResolver,
    JsonQuestionRepository,
    LoggingNarrator,
    SilentNarrator,
    StaticRegionResolver,
)
from cogniquest.exam.loading import LoaderError


class CountingResolver:
    """Resolver that counts calls and can block or fail."""

    def __init__(self, region=None, *, block: threading.Event = None, error: Exception = None):
        self.region = region
        self.block = block
        self.error = error
        self.calls = 0

    def resolve_region(self):
        self.calls += 1
        if self.block is not None:
            # Bounded so a never-released resolver cannot hang the test run
            self.block.wait(2.0)
        if self.error is not None:
            raise self.error
        return self.region


class TestNarrators:
    """Tests for SilentNarrator and LoggingNarrator."""

    def test_silent_when_speak_then_completes_immediately(self):
        done = []
        SilentNarrator().speak(["hello"], 1.0, lambda: done.append(True))
        assert done == [True]

    def test_logging_when_speak_then_logs_and_completes_once(self, caplog):
        caplog.set_level("INFO")
        done = threading.Event()
        calls = []

        def on_complete():
            calls.append(1)
            done.set()

        LoggingNarrator().speak(["Apple", "Pen"], 0.01, on_complete)
        assert done.wait(2.0)
        assert calls == [1]
        assert "Narrating: Apple" in caplog.text

    def test_logging_when_stopped_early_then_completes_once(self):
        narrator = LoggingNarrator()
        calls = []
        narrator.speak(["a", "b", "c"], 10.0, lambda: calls.append(1))
        narrator.stop()
        narrator.stop()
        assert calls == [1]

    def test_logging_when_speak_replaces_pending_then_previous_completed(self):
        narrator = LoggingNarrator()
        calls = []
        narrator.speak(["a", "b"], 10.0, lambda: calls.append("first"))
        narrator.speak(["c", "d"], 10.0, lambda: calls.append("second"))
        assert calls == ["first"]
        narrator.stop()
        assert calls == ["first", "second"]


class TestStaticRegionResolver:
    """Tests for StaticRegionResolver."""

    def test_resolve_when_known_then_region(self):
        assert StaticRegionResolver("va").resolve_region() == lookup_region("Virginia")

    def test_resolve_when_unknown_then_none_with_warning(self, caplog):
        assert StaticRegionResolver("Atlantis").resolve_region() is None
        assert "Unknown region" in caplog.text

    def test_resolve_when_not_given_then_none(self):
        assert StaticRegionResolver(None).resolve_region() is None


class TestCachedRegionResolver:
    """Tests for CachedRegionResolver."""

    def test_resolve_when_called_twice_then_resolves_once(self):
        inner = CountingResolver(lookup_region("TX"))
        resolver = CachedRegionResolver(inner, timeout=2.0)
        resolver.prefetch()
        assert resolver.resolve_region() == lookup_region("Texas")
        assert resolver.resolve_region() == lookup_region("Texas")
        assert inner.calls == 1
        assert resolver.is_resolved

    def test_resolve_when_inner_returns_none_then_none_cached(self):
        inner = CountingResolver(None)
        resolver = CachedRegionResolver(inner, timeout=2.0)
        assert resolver.resolve_region() is None
        assert resolver.resolve_region() is None
        assert inner.calls == 1

    def test_resolve_when_timeout_then_none_cached(self, caplog):
        release = threading.Event()
        inner = CountingResolver(lookup_region("TX"), block=release)
        resolver = CachedRegionResolver(inner, timeout=0.05)
        try:
            assert resolver.resolve_region() is None
            assert "timed out" in caplog.text
            release.set()
            assert resolver.resolve_region() is None
        finally:
            release.set()

    def test_resolve_when_inner_raises_then_none(self, caplog):
        inner = CountingResolver(error=PermissionError("location denied"))
        resolver = CachedRegionResolver(inner, timeout=2.0)
        assert resolver.resolve_region() is None
        assert "location denied" in caplog.text


class TestJsonQuestionRepository:
    """Tests for JsonQuestionRepository."""

    def test_fetch_when_default_then_packaged_bank(self):
        assert len(JsonQuestionRepository().fetch_questions()) == 11

    def test_fetch_when_missing_then_loader_error(self, tmp_path):
        with pytest.raises(LoaderError):
            JsonQuestionRepository(tmp_path / "none.json").fetch_questions()
