"""
Pytest configuration and shared fixtures for ProofX tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

# Import fixture modules
_common = importlib.import_module("fixtures.common")
_registry = importlib.import_module("fixtures.registry_fixtures")

# Extract factory functions
make_address = _common.make_address
make_addresses = _common.make_addresses
make_registry = _registry.make_registry


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def addresses():
    """Provide five distinct lowercase addresses."""
    return make_addresses(5)


@pytest.fixture
def alice():
    return make_address("alice")


@pytest.fixture
def bob():
    return make_address("bob")


@pytest.fixture
def registry_setup():
    """Provide (registry, treasury sink, clock) with the default test fee."""
    return make_registry()


@pytest.fixture
def registry(registry_setup):
    """Provide just the TreeRegistry from registry_setup."""
    reg, _, _ = registry_setup
    return reg


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every PROOFX_* variable so config tests start from defaults."""
    for name in [
        "PROOFX_PLATFORM_FEE",
        "PROOFX_TREASURY_ADDRESS",
        "PROOFX_OWNER_ADDRESS",
        "PROOFX_ALLOW_REREGISTRATION",
        "PROOFX_STORE_PATH",
        "PROOFX_LOG_LEVEL",
        "PROOFX_LOG_FILE",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
