"""Resolve and emit the Code Level Metrics attributes for one trace."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeAlias

from clmetrics.config import Settings
from clmetrics.constants import NAMESPACE_SEPARATOR, CodeAttribute
from clmetrics.location import CodeLocation, stack_locations
from clmetrics.options import TraceOptionSettings

logger = logging.getLogger(__name__)

SetAttr: TypeAlias = Callable[[str, str, Any], None]


def select_frame(
    frames: Iterable[CodeLocation], ignored_prefixes: Sequence[str]
) -> CodeLocation:
    """Pick the first frame not owned by an ignored prefix.

    ``frames`` runs innermost to outermost. If every frame is ignored,
    the last one examined is returned; an empty stack gives the zero
    location.
    """
    frame = CodeLocation()
    for frame in frames:
        if not frame.function.startswith(tuple(ignored_prefixes)):
            break
    return frame


def trim_path(path: str, prefixes: Iterable[str]) -> str:
    """Cut ``path`` at the first prefix found anywhere inside it."""
    for prefix in prefixes:
        index = path.find(prefix)
        if index >= 0:
            return path[index:]
    return path


def split_function_name(name: str) -> tuple[str, str]:
    """Split a qualified name into ``(namespace, function)``."""
    namespace, sep, function = name.rpartition(NAMESPACE_SEPARATOR)
    if not sep:
        return "", name
    return namespace, function


def report_code_level_metrics(
    options: TraceOptionSettings,
    defaults: Settings,
    set_attr: SetAttr,
) -> None:
    """Determine the trace's code location and emit it via ``set_attr``.

    Emits nothing when ``options.suppress_clm`` is set. Otherwise
    exactly four attributes are emitted, even if the location could only
    be resolved on a best-effort basis.
    """
    if options.suppress_clm:
        return

    if options.location_override is not None:
        location = options.location_override
    else:
        ignored = (
            options.ignored_prefixes or defaults.default_ignored_prefixes
        )
        location = select_frame(stack_locations(1), ignored)

    path_prefixes = (
        options.path_prefixes or defaults.default_path_prefixes
    )
    file_path = trim_path(location.file_path, path_prefixes)
    namespace, function = split_function_name(location.function)

    logger.debug(
        "event=clm_resolved namespace=%s function=%s line=%d",
        namespace,
        function,
        location.line_no,
    )
    set_attr(CodeAttribute.LINENO, "", location.line_no)
    set_attr(CodeAttribute.NAMESPACE, namespace, None)
    set_attr(CodeAttribute.FILEPATH, file_path, None)
    set_attr(CodeAttribute.FUNCTION, function, None)


def remove_code_level_metrics(rem_attr: Callable[[str], None]) -> None:
    """Remove all four CLM attributes through ``rem_attr``."""
    for attribute in CodeAttribute:
        rem_attr(attribute)
