"""Shared test fixtures — isolated settings and an in-memory sink."""

import os

# Drop any CLM configuration inherited from the shell so Settings()
# always starts from its declared defaults.
for _name in list(os.environ):
    if _name.startswith("CLM_"):
        del os.environ[_name]

import pytest

from clmetrics.config import Settings
from clmetrics.sinks import AttributeCollector


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def collector() -> AttributeCollector:
    return AttributeCollector()
