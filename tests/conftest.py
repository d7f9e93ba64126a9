"""Shared pytest fixtures for CapyTimer tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from capytimer.database.db import configure_engine, init_db
from capytimer.timer.engine import TimerEngine
from capytimer.timer.session import TimerConfiguration


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def config():
    """One-minute focus, 30 s break, two loops, no prep."""
    return TimerConfiguration(
        focus_duration=60, break_duration=30, loop_count=2,
    )


@pytest.fixture
def config_no_break():
    return TimerConfiguration(
        focus_duration=60, break_duration=0, loop_count=2,
    )


@pytest.fixture
def config_prep():
    return TimerConfiguration(
        focus_duration=60, break_duration=30, loop_count=2,
        has_preparation_phase=True,
    )


@pytest.fixture
def engine(qapp, config):
    """Fresh TimerEngine on the default test configuration."""
    eng = TimerEngine(config)
    yield eng
    eng.close()


@pytest.fixture
def engine_no_break(qapp, config_no_break):
    eng = TimerEngine(config_no_break)
    yield eng
    eng.close()


@pytest.fixture
def engine_prep(qapp, config_prep):
    eng = TimerEngine(config_prep)
    yield eng
    eng.close()
