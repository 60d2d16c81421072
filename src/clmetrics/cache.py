"""Compute-once storage for a code location.

CachedCodeLocation wraps exactly one resolution. The first caller runs
it under a lock; concurrent callers block on that lock and then read the
stored result; later callers take the fast path without locking.

Usage::

    _HANDLER_LOCATION = CachedCodeLocation()

    def handle(request):
        reporter.report(_HANDLER_LOCATION.with_this_code_location())

Each instance caches a single answer for its whole lifetime. Calling
``this_code_location()`` and ``function_location()`` on the same
instance returns whichever was resolved first.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from clmetrics.constants import (
    CACHED_WRAPPER_FRAMES,
    THIS_CODE_LOCATION_FRAMES,
)
from clmetrics.errors import CodeLocationError
from clmetrics.location import (
    CodeLocation,
    function_location,
    location_at_depth,
)
from clmetrics.options import (
    TraceOption,
    TraceOptionSettings,
    with_code_location,
)

logger = logging.getLogger(__name__)


class CachedCodeLocation:
    """Thread-safe, resolve-once holder for a CodeLocation or its error."""

    def __init__(self) -> None:
        self.location: CodeLocation | None = None
        self.err: CodeLocationError | None = None
        self._done = False
        self._lock = threading.Lock()

    @property
    def resolved(self) -> bool:
        """True once the guarded resolution has run."""
        return self._done

    def _resolve_once(
        self, resolve: Callable[[], CodeLocation]
    ) -> None:
        # Frame count between this method and the caller of the public
        # accessor is CACHED_WRAPPER_FRAMES; keep the two in step.
        if self._done:
            return
        with self._lock:
            if self._done:
                return
            try:
                self.location = resolve()
                self.err = None
            except CodeLocationError as exc:
                self.location = None
                self.err = exc
                logger.debug(
                    "event=cached_location_failed error=%s", exc
                )
            finally:
                self._done = True

    def this_code_location(self, skip: int = 0) -> CodeLocation:
        """Cached equivalent of ``location.this_code_location``.

        ``skip`` has the same meaning as for the uncached function.
        """
        depth = (
            THIS_CODE_LOCATION_FRAMES
            + CACHED_WRAPPER_FRAMES
            + max(skip, 0)
        )
        self._resolve_once(lambda: location_at_depth(depth))
        return self.location or CodeLocation()

    def function_location(self, fn: object) -> CodeLocation:
        """Cached equivalent of ``location.function_location``.

        The stored error, if any, is raised again on every call.
        """
        self._resolve_once(lambda: function_location(fn))
        if self.err is not None:
            raise self.err
        if self.location is None:
            return CodeLocation()
        return self.location

    def with_this_code_location(self) -> TraceOption:
        """Option reporting the call site of this method, resolved once."""
        return with_code_location(self.this_code_location(1))

    def with_function_location(self, fn: object) -> TraceOption:
        """Option reporting ``fn``'s definition site, resolved once."""

        def _option(settings: TraceOptionSettings) -> None:
            try:
                settings.location_override = self.function_location(fn)
            except CodeLocationError:
                logger.debug(
                    "event=function_location_unavailable cached=true"
                )

        return _option

    def with_default_function_location(
        self, fn: object
    ) -> TraceOption:
        """Like ``with_function_location`` unless a location is already set."""

        def _option(settings: TraceOptionSettings) -> None:
            if settings.location_override is not None:
                return
            try:
                settings.location_override = self.function_location(fn)
            except CodeLocationError:
                logger.debug(
                    "event=function_location_unavailable cached=true"
                )

        return _option
