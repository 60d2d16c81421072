"""Tests for CachedCodeLocation."""

from __future__ import annotations

import inspect
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from clmetrics.cache import CachedCodeLocation
from clmetrics.errors import NotFoundError
from clmetrics.location import CodeLocation, this_code_location
from clmetrics.options import evaluate_options, with_code_location

_WORKERS = 16


def _current_line() -> int:
    """Line number of the caller's current statement."""
    frame = inspect.currentframe()
    assert frame is not None and frame.f_back is not None
    return frame.f_back.f_lineno


def _cached_where(cache: CachedCodeLocation, skip: int) -> CodeLocation:
    return cache.this_code_location(skip)


def _uncached_where(skip: int) -> CodeLocation:
    return this_code_location(skip)


def _handler() -> None:
    pass


def _run_concurrently(fn):  # noqa: ANN001, ANN202
    barrier = threading.Barrier(_WORKERS)

    def _worker():  # noqa: ANN202
        barrier.wait()
        return fn()

    with ThreadPoolExecutor(max_workers=_WORKERS) as pool:
        futures = [pool.submit(_worker) for _ in range(_WORKERS)]
        return [f.result() for f in futures]


class TestCachedThisCodeLocation:
    def test_reports_calling_line(self) -> None:
        """Cached skip=0 matches the uncached call-site semantics."""
        cache = CachedCodeLocation()
        loc = cache.this_code_location()
        expected = _current_line() - 1
        assert loc.line_no == expected
        assert loc.function.endswith("test_reports_calling_line")

    def test_skip_matches_uncached(self) -> None:
        """Wrapper frames are compensated for at every skip depth."""
        cached = _cached_where(CachedCodeLocation(), 1)
        line = _current_line() - 1
        uncached = _uncached_where(1)
        assert cached.line_no == line
        assert uncached.line_no == line + 2
        assert cached.function == uncached.function
        assert cached.file_path == uncached.file_path

    def test_second_call_returns_first_result(self) -> None:
        cache = CachedCodeLocation()
        first = cache.this_code_location()
        second = cache.this_code_location()
        assert second is first

    def test_resolved_flag(self) -> None:
        cache = CachedCodeLocation()
        assert cache.resolved is False
        cache.this_code_location()
        assert cache.resolved is True

    def test_with_this_code_location_reports_call_site(self) -> None:
        cache = CachedCodeLocation()
        option = cache.with_this_code_location()
        expected = _current_line() - 1
        settings = evaluate_options([option])
        assert settings.location_override is not None
        assert settings.location_override.line_no == expected

    def test_with_this_code_location_resolves_once(self) -> None:
        cache = CachedCodeLocation()
        locations = []
        for _ in range(3):
            option = cache.with_this_code_location()
            locations.append(evaluate_options([option]).location_override)
        assert locations[0] is locations[1] is locations[2]


class TestCachedFunctionLocation:
    def test_resolves_function(self) -> None:
        cache = CachedCodeLocation()
        loc = cache.function_location(_handler)
        assert loc.function == f"{__name__}._handler"
        assert cache.location == loc
        assert cache.err is None

    def test_error_is_cached_and_reraised(self) -> None:
        cache = CachedCodeLocation()
        with pytest.raises(NotFoundError):
            cache.function_location(len)
        assert isinstance(cache.err, NotFoundError)
        # A valid function afterwards still sees the stored error.
        with pytest.raises(NotFoundError):
            cache.function_location(_handler)

    def test_with_function_location_sets_override(self) -> None:
        cache = CachedCodeLocation()
        settings = evaluate_options([cache.with_function_location(_handler)])
        assert settings.location_override == cache.location

    def test_with_function_location_failure_is_noop(self) -> None:
        earlier = CodeLocation(1, "app.view", "/app/view.py")
        cache = CachedCodeLocation()
        settings = evaluate_options(
            [with_code_location(earlier), cache.with_function_location(42)]
        )
        assert settings.location_override == earlier

    def test_with_default_function_location_keeps_override(self) -> None:
        """Earlier override wins and the cache is never consulted."""
        earlier = CodeLocation(1, "app.view", "/app/view.py")
        cache = CachedCodeLocation()
        settings = evaluate_options(
            [
                with_code_location(earlier),
                cache.with_default_function_location(_handler),
            ]
        )
        assert settings.location_override == earlier
        assert cache.resolved is False

    def test_with_default_function_location_fills_gap(self) -> None:
        cache = CachedCodeLocation()
        settings = evaluate_options(
            [cache.with_default_function_location(_handler)]
        )
        assert settings.location_override is not None
        assert settings.location_override.function == f"{__name__}._handler"


class TestConcurrency:
    def test_function_location_resolves_once_under_contention(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """N concurrent callers → one resolution, N identical results."""
        calls = 0
        lock = threading.Lock()

        def _counting(fn: object) -> CodeLocation:
            nonlocal calls
            with lock:
                calls += 1
            time.sleep(0.05)
            return CodeLocation(7, "pkg.handlers.run", "/src/pkg/handlers.py")

        monkeypatch.setattr("clmetrics.cache.function_location", _counting)
        cache = CachedCodeLocation()

        results = _run_concurrently(lambda: cache.function_location(_handler))

        assert calls == 1
        assert len(results) == _WORKERS
        assert all(r is results[0] for r in results)

    def test_error_resolved_once_under_contention(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls = 0
        lock = threading.Lock()

        def _failing(fn: object) -> CodeLocation:
            nonlocal calls
            with lock:
                calls += 1
            time.sleep(0.05)
            raise NotFoundError("no metadata")

        monkeypatch.setattr("clmetrics.cache.function_location", _failing)
        cache = CachedCodeLocation()

        def _attempt() -> str:
            try:
                cache.function_location(_handler)
            except NotFoundError as exc:
                return str(exc)
            return "resolved"

        results = _run_concurrently(_attempt)

        assert calls == 1
        assert results == ["no metadata"] * _WORKERS

    def test_this_code_location_resolves_once_under_contention(
        self,
    ) -> None:
        cache = CachedCodeLocation()
        results = _run_concurrently(cache.this_code_location)
        assert all(r is results[0] for r in results)
