"""Test configuration and shared fixtures."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from client.controller import DashboardConfig, DonorDashboardController
from service.storage.database import DonorDatabase
from helpers import FakeDonorApi, ManualExecutor


@pytest.fixture
def temp_data_dir():
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db(temp_data_dir):
    """Empty donor database in a temporary directory."""
    return DonorDatabase(temp_data_dir / "donors.db")


@pytest.fixture
def today():
    return date(2026, 10, 18)


@pytest.fixture
def executor():
    return ManualExecutor()


@pytest.fixture
def fake_api():
    return FakeDonorApi()


@pytest.fixture
def controller(fake_api, executor):
    """Controller for donor 7 with polling disabled and manual completion."""
    config = DashboardConfig(user_id=7, enable_polling=False)
    ctrl = DonorDashboardController(config, api=fake_api, executor=executor)
    yield ctrl
    ctrl.unmount()
