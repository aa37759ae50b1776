"""Pytest configuration and fixtures for vetted tests."""

import shutil
import tempfile
from pathlib import Path

import pytest
import structlog

from vetted import number, object_, string
from vetted.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env overrides in a test never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp = tempfile.mkdtemp()
    yield Path(temp)
    shutil.rmtree(temp)


@pytest.fixture
def user_schema():
    """Name/email/age object used across suites."""
    return object_({
        "name": string().min(2).max(50),
        "email": string().email(),
        "age": number().int().non_negative().optional(),
    })


@pytest.fixture
def captured_logs():
    """Capture structlog events emitted during the test."""
    with structlog.testing.capture_logs() as logs:
        yield logs
