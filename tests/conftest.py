"""
Shared fixtures for the access policy test suite.
"""

import pytest

from shared.config import PolicySettings
from shared.metrics import PolicyMetrics
from access_policy import Builder, PolicyEngine
from access_policy import engine as engine_module


@pytest.fixture
def settings():
    """Create explicit engine settings."""
    return PolicySettings(
        env="test",
        log_level="debug",
        max_inheritance_depth=10,
        wildcard_query_policy="evaluate",
        enable_metrics=True
    )


@pytest.fixture
def metrics():
    """Create metrics bound to a private registry."""
    return PolicyMetrics()


@pytest.fixture
def engine(settings, metrics):
    """Create PolicyEngine instance."""
    return PolicyEngine(settings=settings, metrics=metrics)


@pytest.fixture
def builder(settings):
    """Create an authoring Builder."""
    return Builder(settings=settings)


@pytest.fixture
def default_engine(monkeypatch, engine):
    """Swap the process-wide engine for a fresh one."""
    monkeypatch.setattr(engine_module, "_default_engine", engine)
    return engine
