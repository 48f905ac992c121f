"""
Module: conftest.py

Date: 2026-10-19

Global pytest configuration and fixtures for the scenedrop test suite.
Includes CI-friendly setup for PyQt5 testing and common fixtures.
The QApplication and qtbot fixtures come from pytest-qt.
"""

import os
import sys

# Add project root to sys.path so 'scenedrop' and 'tests.mocks' can be imported
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Headless Qt for the feedback adapter tests
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from scenedrop.core.drag.drag_debug import DragDebugLogger


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add custom markers if not already added via pyproject.toml
    config.addinivalue_line("markers", "gui: mark test as requiring GUI")
    config.addinivalue_line("markers", "local_only: mark test as local environment only")


def pytest_collection_modifyitems(session, config, items):
    """Modify test collection to handle CI environment."""
    _ = session
    _ = config

    is_ci = "CI" in os.environ or "GITHUB_ACTIONS" in os.environ

    if is_ci:
        skip_gui = pytest.mark.skip(reason="GUI tests don't work on CI")
        skip_local = pytest.mark.skip(reason="Local-only tests skipped on CI")

        for item in items:
            if "gui" in item.keywords:
                item.add_marker(skip_gui)
            if "local_only" in item.keywords:
                item.add_marker(skip_local)


@pytest.fixture(scope="session")
def ci_environment():
    """Fixture to detect CI environment."""
    return "CI" in os.environ or "GITHUB_ACTIONS" in os.environ


@pytest.fixture(autouse=True)
def reset_drag_debug():
    """Keep the class-level debug logger state from leaking between tests."""
    enabled = DragDebugLogger.enabled
    throttle_ms = DragDebugLogger.throttle_ms
    DragDebugLogger.reset_throttle()
    yield
    DragDebugLogger.enabled = enabled
    DragDebugLogger.throttle_ms = throttle_ms
    DragDebugLogger.reset_throttle()
