"""Shared test configuration."""

import pytest

from literal_tables.log import setup_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep debug and info events out of captured output."""
    setup_logging(level="WARNING", log_format="console")
