import logging

import pytest


@pytest.fixture(autouse=True)
def debug_logging(caplog):
    """Capture client debug output so failing tests show the exchanged frames."""
    caplog.set_level(logging.DEBUG, logger="epmdlib")
    yield
