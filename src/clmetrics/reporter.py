"""Report-triggering entry point binding settings to an attribute sink."""

from __future__ import annotations

import logging

from clmetrics.config import Settings
from clmetrics.constants import TraceScope
from clmetrics.logging_config import setup_logging
from clmetrics.options import (
    TraceOption,
    TraceOptionSettings,
    evaluate_options,
)
from clmetrics.report import (
    remove_code_level_metrics,
    report_code_level_metrics,
)
from clmetrics.sinks import (
    AttributeCollector,
    AttributeSink,
    ConsoleAttributeSink,
)

logger = logging.getLogger(__name__)


class CodeLevelMetricsReporter:
    """Evaluates trace options and reports CLM attributes into a sink.

    The stack search skips this class's frames on its own, since they
    live under the agent's project-root prefix.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        sink: AttributeSink | None = None,
    ) -> None:
        self._settings = settings if settings is not None else Settings()
        self._sink: AttributeSink = (
            sink if sink is not None else AttributeCollector()
        )

    @property
    def settings(self) -> Settings:
        """Agent defaults consulted for prefixes and scope."""
        return self._settings

    @property
    def sink(self) -> AttributeSink:
        """Destination of reported attributes."""
        return self._sink

    def should_report(
        self,
        options: TraceOptionSettings,
        kind: str = TraceScope.TRANSACTION,
    ) -> bool:
        """Apply the enabled switch, suppression, demand and scope rules."""
        if not self._settings.clm_enabled or options.suppress_clm:
            return False
        if options.demand_clm:
            return True
        scope = self._settings.clm_scope
        return TraceScope.ALL in scope or kind in scope

    def report(
        self,
        *options: TraceOption | None,
        kind: str = TraceScope.TRANSACTION,
    ) -> TraceOptionSettings:
        """Evaluate ``options`` and report CLM for one trace if in scope."""
        evaluated = evaluate_options(options)
        if not self.should_report(evaluated, kind):
            logger.debug(
                "event=clm_skipped sink=%s kind=%s suppressed=%s",
                self._sink.name,
                kind,
                evaluated.suppress_clm,
            )
            return evaluated
        logger.debug(
            "event=clm_report sink=%s kind=%s", self._sink.name, kind
        )
        report_code_level_metrics(
            evaluated, self._settings, self._sink.set_attr
        )
        return evaluated

    def retract(self) -> None:
        """Remove previously reported CLM attributes from the sink."""
        remove_code_level_metrics(self._sink.remove_attr)


def initialize_reporter(
    settings: Settings | None = None,
) -> CodeLevelMetricsReporter:
    """Configure logging and create a reporter that logs to the console.

    Logging is set up at ``settings.log_level`` so the console sink's
    INFO lines are visible.
    """
    resolved = settings if settings is not None else Settings()
    setup_logging(resolved.log_level)
    return CodeLevelMetricsReporter(resolved, ConsoleAttributeSink())
