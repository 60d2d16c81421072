"""Source code locations for the live call stack and for callables.

A ``CodeLocation`` names a line of source: the line number, the
fully-qualified function name (``module.qualname``) and the absolute
path of the file. Locations come from two places:

- the call stack, via ``this_code_location()`` and ``stack_locations()``
  (never raise; a stack that is too short yields the zero location);
- a callable, via ``function_location()`` (raises ``InvalidArgumentError``
  or ``NotFoundError`` when it cannot answer).
"""

from __future__ import annotations

import functools
import inspect
import logging
import os
from dataclasses import dataclass
from types import CodeType, FrameType

from clmetrics.constants import MAX_STACK_DEPTH, THIS_CODE_LOCATION_FRAMES
from clmetrics.errors import InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CodeLocation:
    """Immutable reference to one line of source code."""

    line_no: int = 0
    function: str = ""
    file_path: str = ""


def _absolute(filename: str) -> str:
    # Synthetic names such as "<string>" or "<stdin>" are kept verbatim.
    if not filename or filename.startswith("<"):
        return filename
    return os.path.abspath(filename)


def _qualified(module: str | None, qualname: str) -> str:
    if module:
        return f"{module}.{qualname}"
    return qualname


def frame_location(frame: FrameType) -> CodeLocation:
    """Build a CodeLocation from a live frame."""
    code = frame.f_code
    return CodeLocation(
        line_no=frame.f_lineno or 0,
        function=_qualified(
            frame.f_globals.get("__name__"), code.co_qualname
        ),
        file_path=_absolute(code.co_filename),
    )


def location_at_depth(depth: int) -> CodeLocation:
    """Location of the frame ``depth`` levels outward from our caller."""
    frame: FrameType | None = inspect.currentframe()
    try:
        # +1 steps from this helper's own frame to its caller.
        for _ in range(depth + 1):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return CodeLocation()
        return frame_location(frame)
    finally:
        del frame


def this_code_location(skip: int = 0) -> CodeLocation:
    """Return the location this function was called from.

    With ``skip=0`` this is the caller's own line. ``skip=1`` reports
    the place the caller was called from, and so on outward. If the
    stack is not deep enough, the zero-valued location is returned.
    """
    return location_at_depth(THIS_CODE_LOCATION_FRAMES + max(skip, 0))


def stack_locations(
    skip: int = 0, limit: int = MAX_STACK_DEPTH
) -> list[CodeLocation]:
    """Collect up to ``limit`` locations, innermost first.

    The first entry is the caller of ``stack_locations`` (after
    skipping ``skip`` frames); the list runs outward from there.
    """
    frame: FrameType | None = inspect.currentframe()
    locations: list[CodeLocation] = []
    try:
        for _ in range(max(skip, 0) + 1):
            if frame is None:
                break
            frame = frame.f_back
        while frame is not None and len(locations) < limit:
            locations.append(frame_location(frame))
            frame = frame.f_back
        return locations
    finally:
        del frame


def _unwrap_callable(fn: object) -> object:
    target = fn
    while True:
        if isinstance(target, functools.partial):
            target = target.func
            continue
        if inspect.ismethod(target):
            target = target.__func__
            continue
        try:
            unwrapped = inspect.unwrap(target)  # type: ignore[arg-type]
        except ValueError as exc:
            raise NotFoundError(
                f"cycle in __wrapped__ chain of {fn!r}"
            ) from exc
        if unwrapped is target:
            break
        target = unwrapped

    if not inspect.isfunction(target) and not inspect.isclass(target):
        call = getattr(type(target), "__call__", None)
        if inspect.isfunction(call):
            return call
    return target


def _class_location(cls: type) -> CodeLocation:
    try:
        file_path = inspect.getsourcefile(cls)
        _, line_no = inspect.getsourcelines(cls)
    except (OSError, TypeError) as exc:
        raise NotFoundError(
            f"could not find code location for class {cls.__qualname__}"
        ) from exc
    if not file_path:
        raise NotFoundError(
            f"could not find code location for class {cls.__qualname__}"
        )
    return CodeLocation(
        line_no=line_no,
        function=_qualified(cls.__module__, cls.__qualname__),
        file_path=_absolute(file_path),
    )


def function_location(fn: object) -> CodeLocation:
    """Return the definition site of a callable.

    Decorators that set ``__wrapped__``, bound methods, partials and
    callable instances are unwrapped to the function that actually
    carries the source.

    Raises:
        InvalidArgumentError: ``fn`` is None or not callable.
        NotFoundError: no source metadata exists for ``fn``
            (builtins, C extensions and the like).
    """
    if fn is None:
        raise InvalidArgumentError("None passed to function_location")
    if not callable(fn):
        raise InvalidArgumentError(
            "value passed to function_location is not callable: "
            f"{type(fn).__name__}"
        )

    target = _unwrap_callable(fn)
    if inspect.isclass(target):
        return _class_location(target)

    code = getattr(target, "__code__", None)
    if not isinstance(code, CodeType):
        raise NotFoundError(
            f"could not find code location for {fn!r}"
        )

    qualname = getattr(target, "__qualname__", None) or code.co_qualname
    location = CodeLocation(
        line_no=code.co_firstlineno,
        function=_qualified(getattr(target, "__module__", None), qualname),
        file_path=_absolute(code.co_filename),
    )
    logger.debug(
        "event=function_location_resolved function=%s line=%d",
        location.function,
        location.line_no,
    )
    return location
