import os
import time
from datetime import datetime, timezone

import pytest


@pytest.fixture(autouse=True)
def set_timezone():
    """Pin the process-local timezone to UTC; call the fixture to switch zones."""
    original = os.environ.get("TZ")

    def apply(name):
        os.environ["TZ"] = name
        time.tzset()

    apply("UTC")
    yield apply

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()


@pytest.fixture
def period():
    return (
        datetime(2025, 3, 10, 0, 0, 0, tzinfo=timezone.utc),
        datetime(2025, 6, 10, 23, 59, 59, tzinfo=timezone.utc),
    )
