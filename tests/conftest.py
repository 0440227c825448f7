"""Shared fixtures for Agent Studio tests."""

import logging

import pytest
import structlog

from agent_studio.catalog import AgentDescriptor, CapabilityCatalog
from agent_studio.config import Settings
from agent_studio.selection import ProjectProfile


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep AGENT_STUDIO_* variables from the host out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("AGENT_STUDIO_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by CLI and logging tests."""
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def make_catalog():
    """Factory building an isolated catalog from id -> descriptor fields."""

    def _make(agents: dict) -> CapabilityCatalog:
        return CapabilityCatalog(
            AgentDescriptor(id=agent_id, **fields) for agent_id, fields in agents.items()
        )

    return _make


@pytest.fixture
def default_catalog():
    """The built-in catalog."""
    return CapabilityCatalog.default()


@pytest.fixture
def marketplace_catalog(make_catalog):
    """Small marketplace catalog with one direct conflict."""
    return make_catalog({
        "marketplace-architect": {
            "requires": ("cultural-expert", "payment-specialist"),
            "conflicts": ("simple-architect",),
            "provides": ("marketplace_architecture", "vendor_management"),
            "priority": 10,
        },
        "cultural-expert": {
            "provides": ("cultural_analysis", "diaspora_insights"),
            "priority": 8,
        },
        "payment-specialist": {
            "requires": ("security-expert",),
            "provides": ("payment_integration", "financial_compliance"),
            "priority": 9,
        },
        "security-expert": {
            "provides": ("security_expertise", "data_protection"),
            "priority": 7,
        },
        "simple-architect": {
            "provides": ("basic_architecture",),
            "priority": 5,
        },
    })


@pytest.fixture
def settings():
    """Settings with the cache disabled and default scoring."""
    return Settings(_env_file=None, cache_enabled=False)


@pytest.fixture
def marketplace_profile():
    """Marketplace project profile."""
    return ProjectProfile.model_validate({
        "context": {"domain": "marketplace"},
        "business": {"complexity": "moderate"},
        "technical": {"stack": ["nextjs"]},
    })


@pytest.fixture
def web_app_profile():
    """Plain web application profile."""
    return ProjectProfile.model_validate({
        "business": {"complexity": "simple", "description": "A company website"},
        "technical": {"stack": ["react"]},
    })
