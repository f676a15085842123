"""UTC datetime utilities."""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """MongoDB returns naive datetimes unless tz_aware is set; treat them as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@contextmanager
def time_track(name: str) -> Iterator[None]:
    """Log the wall-clock duration of the wrapped block."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("function execution time: name=%s time=%.0fms", name, elapsed_ms)


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
    # BSON dates keep milliseconds, so this stores as 23:59:59.999
    return value.replace(hour=23, minute=59, second=59, microsecond=999999)
