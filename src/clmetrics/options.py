"""Trace options — composable mutators over per-report CLM settings.

A TraceOption is a plain callable that edits a TraceOptionSettings in
place. A report's options are applied strictly in order, so later
options override earlier ones. ``without_code_level_metrics()`` ends
the fold: nothing after it is evaluated, which also avoids paying for
any location lookups the remaining options would have made.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeAlias

from clmetrics.errors import CodeLocationError
from clmetrics.location import (
    CodeLocation,
    function_location,
    this_code_location,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TraceOptionSettings:
    """Accumulated CLM settings for a single report."""

    location_override: CodeLocation | None = None
    suppress_clm: bool = False
    demand_clm: bool = False
    ignored_prefixes: list[str] | None = None
    path_prefixes: list[str] | None = None


TraceOption: TypeAlias = Callable[[TraceOptionSettings], None]


def with_code_location(location: CodeLocation | None) -> TraceOption:
    """Report ``location`` instead of searching the call stack."""

    def _option(settings: TraceOptionSettings) -> None:
        settings.location_override = location

    return _option


def with_ignored_prefix(*prefixes: str) -> TraceOption:
    """Replace the list of function-name prefixes skipped on the stack.

    The reported frame is the first one whose qualified name starts
    with none of ``prefixes``. With no arguments the configured
    defaults apply.
    """

    def _option(settings: TraceOptionSettings) -> None:
        settings.ignored_prefixes = list(prefixes) or None

    return _option


def with_path_prefix(*prefixes: str) -> TraceOption:
    """Replace the list of prefixes used to trim reported file paths."""

    def _option(settings: TraceOptionSettings) -> None:
        settings.path_prefixes = list(prefixes) or None

    return _option


def without_code_level_metrics() -> TraceOption:
    """Suppress CLM for this trace and stop evaluating further options."""

    def _option(settings: TraceOptionSettings) -> None:
        settings.suppress_clm = True

    return _option


def with_code_level_metrics() -> TraceOption:
    """Include this trace even when it falls outside the configured scope.

    Never overrides an explicit suppression or CLM being disabled.
    """

    def _option(settings: TraceOptionSettings) -> None:
        settings.demand_clm = True

    return _option


def with_this_code_location() -> TraceOption:
    """Report the line where this option was constructed."""
    return with_code_location(this_code_location(1))


def _apply_function_location(
    settings: TraceOptionSettings, fn: object
) -> None:
    try:
        settings.location_override = function_location(fn)
    except CodeLocationError as exc:
        logger.debug(
            "event=function_location_unavailable error=%s", exc
        )


def with_function_location(fn: object) -> TraceOption:
    """Report the definition site of ``fn``.

    Resolution failures are not reported; the option is then a no-op.
    """

    def _option(settings: TraceOptionSettings) -> None:
        _apply_function_location(settings, fn)

    return _option


def with_default_function_location(fn: object) -> TraceOption:
    """Fallback form of ``with_function_location``.

    Only resolves ``fn`` if no earlier option has set a location, so it
    belongs at the end of an option list.
    """

    def _option(settings: TraceOptionSettings) -> None:
        if settings.location_override is None:
            _apply_function_location(settings, fn)

    return _option


def with_prepared_options(
    prepared: TraceOptionSettings | None,
) -> TraceOption:
    """Merge an already evaluated settings value into the current one."""

    def _option(settings: TraceOptionSettings) -> None:
        if prepared is None:
            return
        if prepared.location_override is not None:
            settings.location_override = prepared.location_override
        settings.suppress_clm = prepared.suppress_clm
        settings.demand_clm = prepared.demand_clm
        if prepared.ignored_prefixes is not None:
            settings.ignored_prefixes = prepared.ignored_prefixes
        if prepared.path_prefixes is not None:
            settings.path_prefixes = prepared.path_prefixes

    return _option


def evaluate_options(
    options: Iterable[TraceOption | None],
) -> TraceOptionSettings:
    """Fold options left to right into fresh settings.

    Stops at the first option that leaves ``suppress_clm`` set.
    """
    settings = TraceOptionSettings()
    for option in options:
        if option is None:
            continue
        option(settings)
        if settings.suppress_clm:
            break
    return settings
