"""Pluggable attribute sinks that receive resolved CLM attributes."""

from __future__ import annotations

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class AttributeSink(Protocol):
    """Destination for trace attributes -- implement for each backend."""

    @property
    def name(self) -> str: ...

    def set_attr(
        self, name: str, str_value: str, other_value: Any
    ) -> None: ...

    def remove_attr(self, name: str) -> None: ...


class AttributeCollector:
    """Keeps attributes in memory, keyed by attribute name.

    Non-string values (``other_value``) win over ``str_value`` when
    given, matching how the line number is emitted.
    """

    def __init__(self) -> None:
        self._attributes: dict[str, Any] = {}

    @property
    def name(self) -> str:
        return "collector"

    def set_attr(
        self, name: str, str_value: str, other_value: Any
    ) -> None:
        self._attributes[name] = (
            other_value if other_value is not None else str_value
        )

    def remove_attr(self, name: str) -> None:
        self._attributes.pop(name, None)

    def get(self, name: str) -> Any:
        return self._attributes.get(name)

    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)


class ConsoleAttributeSink:
    """Logs attributes as key=value messages."""

    @property
    def name(self) -> str:
        return "console"

    def set_attr(
        self, name: str, str_value: str, other_value: Any
    ) -> None:
        value = other_value if other_value is not None else str_value
        logger.info("attribute=%s value=%s", name, value)

    def remove_attr(self, name: str) -> None:
        logger.info("attribute=%s removed=true", name)
