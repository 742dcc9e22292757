"""
Pytest configuration and shared fixtures for the FIRE planner tests.
"""

import os
from unittest.mock import patch

import pytest

from fire_planner import create_app
from fire_planner.config import reset_global_settings
from fire_planner.models.projection import run_projection
from fire_planner.models.scenario import ScenarioParameters


@pytest.fixture
def app():
    """Create an application configured for testing."""
    reset_global_settings()
    with patch.dict(
        os.environ,
        {"SECRET_KEY": "test-secret-key-123", "APP_ENV": "testing"},
        clear=True,
    ):
        yield create_app()
    reset_global_settings()


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def default_params():
    """Default scenario parameters."""
    return ScenarioParameters()


@pytest.fixture
def default_projection(default_params):
    """Deterministic projection for the default scenario."""
    return run_projection(default_params)


def _make_params(**sections):
    defaults = ScenarioParameters()
    data = {}
    for name, overrides in sections.items():
        if overrides is None:
            data[name] = None
            continue
        current = getattr(defaults, name)
        base = current.model_dump() if current is not None else {}
        base.update(overrides)
        data[name] = base
    return ScenarioParameters(**data)


@pytest.fixture
def make_params():
    """Factory building ScenarioParameters with section overrides.

    Each keyword is a section name mapped to a dict of field overrides, or
    None to clear an optional section.
    """
    return _make_params
