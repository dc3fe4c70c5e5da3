"""Shared pytest configuration and fixtures for the agrinav test suite."""

import pytest

from agrinav.nav_core.models import ReferenceLine, VehiclePosition

from helpers import FakeClock


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "hardware: mark test as requiring a physical receiver"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-hardware",
        action="store_true",
        default=False,
        help="Run tests that require a physical receiver",
    )


def pytest_collection_modifyitems(config, items):
    """Skip hardware tests unless --run-hardware is specified."""
    if config.getoption("--run-hardware"):
        return

    skip_hardware = pytest.mark.skip(reason="Need --run-hardware option to run")
    for item in items:
        if "hardware" in item.keywords:
            item.add_marker(skip_hardware)


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def gga_sentence() -> str:
    return "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"


@pytest.fixture
def rmc_sentence() -> str:
    return "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"


@pytest.fixture
def north_line() -> ReferenceLine:
    """A ~111 m line running due north from (45, 0)."""
    return ReferenceLine(
        id="line1",
        name="Field",
        point_a=VehiclePosition(latitude=45.0, longitude=0.0),
        point_b=VehiclePosition(latitude=45.001, longitude=0.0),
        created=0.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
