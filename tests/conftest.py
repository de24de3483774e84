"""
Pytest configuration and shared fixtures for Ruuvi Collector tests.
Provides common test fixtures, collaborators and test utilities.
"""

import pytest
from pathlib import Path
from unittest.mock import Mock

# Import the modules we're testing
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from ruuvi_collector.utils.config import Config
from ruuvi_collector.storage.sink import RecordingSink
from tests.fixtures.hcidump_lines import HCIDumpFixtures
from tests.utils.test_helpers import FixedClock


CONFIG_KEYS = (
    "RUUVI_UPDATE_LIMIT_MS",
    "RUUVI_UPDATE_LIMIT_INCLUSIVE",
    "RUUVI_MOTION_THRESHOLD",
    "RUUVI_HISTORY_SIZE",
    "RUUVI_LIMITING_STRATEGY",
    "RUUVI_TAG_STRATEGIES",
    "RUUVI_RECEIVER",
    "RUUVI_TAG_NAMES",
    "RUUVI_FILTER_MODE",
    "RUUVI_FILTER_MACS",
    "RUUVI_STORAGE_VALUES",
    "RUUVI_STORAGE_VALUES_LIST",
    "LOG_LEVEL",
    "LOG_DIR",
    "LOG_MAX_FILE_SIZE",
    "LOG_BACKUP_COUNT",
    "LOG_ENABLE_CONSOLE",
    "LOG_ENABLE_FILE",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every collector setting from the environment for the test."""
    for key in CONFIG_KEYS:
        # setenv first so the prior state is restored afterwards
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def test_config(clean_env, tmp_path):
    """Real Config reading a clean environment, no .env file."""
    clean_env.setenv("LOG_ENABLE_CONSOLE", "false")
    return Config(env_file=str(tmp_path / "missing.env"))


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    logger = Mock()
    logger.debug = Mock()
    logger.info = Mock()
    logger.warning = Mock()
    logger.error = Mock()
    return logger


@pytest.fixture
def frozen_clock():
    """Clock standing still at 0 ms until advanced."""
    return FixedClock()


@pytest.fixture
def recording_sink():
    """Sink keeping saved measurements in memory."""
    return RecordingSink()


@pytest.fixture
def hcidump():
    """Dump line fixtures."""
    return HCIDumpFixtures()


@pytest.fixture
def reference_line():
    """The reference format 5 advertisement of tag FE1E8AADD7BF."""
    return HCIDumpFixtures.REFERENCE_LINE


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test location."""
    for item in items:
        # Add unit marker to tests in unit/ directory
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Add integration marker to tests in integration/ directory
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

        # Add slow marker to tests that might be slow
        if "concurrent" in item.name or "long" in item.name:
            item.add_marker(pytest.mark.slow)
