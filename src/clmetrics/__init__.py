"""Code Level Metrics -- resolve and report the source location of traces."""

from __future__ import annotations

from clmetrics.cache import CachedCodeLocation
from clmetrics.config import Settings
from clmetrics.constants import CodeAttribute, TraceScope
from clmetrics.errors import (
    CodeLocationError,
    InvalidArgumentError,
    NotFoundError,
)
from clmetrics.location import (
    CodeLocation,
    function_location,
    this_code_location,
)
from clmetrics.options import (
    TraceOption,
    TraceOptionSettings,
    evaluate_options,
    with_code_level_metrics,
    with_code_location,
    with_default_function_location,
    with_function_location,
    with_ignored_prefix,
    with_path_prefix,
    with_prepared_options,
    with_this_code_location,
    without_code_level_metrics,
)
from clmetrics.report import (
    remove_code_level_metrics,
    report_code_level_metrics,
)
from clmetrics.reporter import (
    CodeLevelMetricsReporter,
    initialize_reporter,
)
from clmetrics.sinks import (
    AttributeCollector,
    AttributeSink,
    ConsoleAttributeSink,
)

__all__ = [
    "AttributeCollector",
    "AttributeSink",
    "CachedCodeLocation",
    "CodeAttribute",
    "CodeLevelMetricsReporter",
    "CodeLocation",
    "CodeLocationError",
    "ConsoleAttributeSink",
    "InvalidArgumentError",
    "NotFoundError",
    "Settings",
    "TraceOption",
    "TraceOptionSettings",
    "TraceScope",
    "evaluate_options",
    "function_location",
    "initialize_reporter",
    "remove_code_level_metrics",
    "report_code_level_metrics",
    "this_code_location",
    "with_code_level_metrics",
    "with_code_location",
    "with_default_function_location",
    "with_function_location",
    "with_ignored_prefix",
    "with_path_prefix",
    "with_prepared_options",
    "with_this_code_location",
    "without_code_level_metrics",
]
