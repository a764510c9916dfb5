"""
Clock Module

Date-bucket filters and statistics depend on "now". Services receive it from
their caller instead of reading the wall clock, so tests can pin it.
"""
from datetime import datetime, timezone
from typing import Callable

# A clock is any zero-argument callable returning a naive UTC datetime
Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Current time as naive UTC, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
