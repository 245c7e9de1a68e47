"""
Global test configuration and fixtures for the experimental flags test suite.

This module provides:
- Pytest collection hooks for automatic test categorization based on file location
- Shared fixtures for flag declarations and persistence gateways
"""

import os
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from experimental_flags import AliasDeclaration, FlagDeclaration, IPersistenceGateway  # noqa: E402


# ============================================================================
# PYTEST CONFIGURATION AND HOOKS
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, isolated)")
    config.addinivalue_line("markers", "fast: marks tests as fast-running tests")
    config.addinivalue_line("markers", "cli: marks tests that drive the command line interface")


def pytest_collection_modifyitems(config, items):
    """Automatically add markers to tests based on path and file name."""
    tests_root = Path(__file__).parent

    for item in items:
        try:
            test_file = Path(item.fspath).relative_to(tests_root)
        except ValueError:
            test_file = Path(item.fspath)

        if "unit" in test_file.parts:
            item.add_marker(pytest.mark.unit)
            item.add_marker(pytest.mark.fast)
        if "cli" in test_file.name:
            item.add_marker(pytest.mark.cli)


# ============================================================================
# SHARED FIXTURES
# ============================================================================

SCOPE = "tests.flags"


@pytest.fixture
def declarations():
    """FooBar, Baz and LegacyFoo -> FooBar, all declared in one scope."""
    return [
        FlagDeclaration("FooBar", SCOPE),
        FlagDeclaration("Baz", SCOPE),
        AliasDeclaration("LegacyFoo", "FooBar", SCOPE),
    ]


@pytest.fixture
def gateway():
    """Persistence gateway mock that has nothing stored."""
    mock = Mock(spec=IPersistenceGateway)
    mock.read_document.return_value = None
    mock.write_document.return_value = True
    return mock
