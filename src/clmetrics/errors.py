"""Errors raised while resolving the code location of a callable.

Only function-based resolution surfaces these. Stack-walk resolution
degrades to zero-valued locations instead of raising, and the option
helpers swallow them (leaving any earlier override in place).
"""

from __future__ import annotations


class CodeLocationError(Exception):
    """Base class for code location resolution failures."""


class InvalidArgumentError(CodeLocationError):
    """The value passed for resolution is None or not callable."""


class NotFoundError(CodeLocationError):
    """No source location metadata exists for an otherwise valid callable."""
