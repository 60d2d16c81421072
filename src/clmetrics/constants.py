"""Shared constants — single source of truth for cross-module values.

Frame-count constants compensate for the resolver's own call frames.
Any refactor that adds or removes a call between the public entry point
and the frame walk must update the matching constant here; the
line-number regression tests in tests/test_location and tests/test_cache
pin the current values.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class CodeAttribute(StrEnum):
    """Attribute names emitted for Code Level Metrics."""

    LINENO = "code.lineno"
    NAMESPACE = "code.namespace"
    FILEPATH = "code.filepath"
    FUNCTION = "code.function"


class TraceScope(StrEnum):
    """Trace kinds that may appear in the CLM scope setting."""

    ALL = "all"
    TRANSACTION = "transaction"


# ── Agent Identity ───────────────────────────────────────

# Import-path root of this package; frames whose qualified name starts
# with it belong to the agent, not the instrumented application.
DEFAULT_AGENT_PROJECT_ROOT = "clmetrics."

# Separator between namespace and bare function name.
NAMESPACE_SEPARATOR = "."

# ── Frame Counts ─────────────────────────────────────────

# this_code_location() itself sits between its caller and the walk.
THIS_CODE_LOCATION_FRAMES = 1

# CachedCodeLocation adds the resolver thunk and _resolve_once().
CACHED_WRAPPER_FRAMES = 2

# Upper bound on frames examined by a single stack walk.
MAX_STACK_DEPTH = 10
