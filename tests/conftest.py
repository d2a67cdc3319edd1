"""
Shared fixtures for the test suite.
"""

from datetime import datetime, timedelta

import pytest


class FakeClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + timedelta(seconds=1)
        return now


@pytest.fixture
def clock():
    """Provide a fresh deterministic clock."""
    return FakeClock()
