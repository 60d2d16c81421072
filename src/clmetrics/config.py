"""Environment-based configuration for Code Level Metrics."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from clmetrics.constants import DEFAULT_AGENT_PROJECT_ROOT, TraceScope

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Code Level Metrics
    clm_enabled: bool = True
    clm_scope: Annotated[list[str], NoDecode] = [TraceScope.ALL]

    # Function-name prefixes skipped while searching the call stack
    clm_ignored_prefixes: Annotated[list[str], NoDecode] = []
    clm_ignored_prefix: str = ""  # deprecated single-value form

    # Prefixes used to trim reported file paths
    clm_path_prefixes: Annotated[list[str], NoDecode] = []
    clm_path_prefix: str = ""  # deprecated single-value form

    # Logging
    log_level: str = "INFO"

    @field_validator(
        "clm_scope",
        "clm_ignored_prefixes",
        "clm_path_prefixes",
        mode="before",
    )
    @classmethod
    def _parse_list(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("clm_scope")
    @classmethod
    def _validate_scope(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError(
                "clm_scope must contain at least one trace kind"
            )
        unknown = [s for s in v if s not in set(TraceScope)]
        if unknown:
            logger.warning(
                "Unrecognized CLM_SCOPE entries: %s",
                ", ".join(unknown),
            )
        return v

    @property
    def default_ignored_prefixes(self) -> list[str]:
        """Ignore list used when a report does not supply its own."""
        prefixes = list(self.clm_ignored_prefixes)
        if self.clm_ignored_prefix:
            prefixes.append(self.clm_ignored_prefix)
        if not prefixes:
            prefixes.append(DEFAULT_AGENT_PROJECT_ROOT)
        return prefixes

    @property
    def default_path_prefixes(self) -> list[str]:
        """Path-prefix list used when a report does not supply its own."""
        prefixes = list(self.clm_path_prefixes)
        if self.clm_path_prefix:
            prefixes.append(self.clm_path_prefix)
        return prefixes

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }
