"""Challenge numbers: number 1 is the configured start date, one new number per day."""

from __future__ import annotations

import time
from datetime import date, datetime, timedelta, timezone
from typing import Callable


def challenge_number_for_date(
    moment: datetime,
    start_date: date,
    utc_offset_hours: float = 0.0,
) -> int:
    """
    Number of the challenge running at *moment*.

    The day boundary is midnight in the ``utc_offset_hours`` timezone. Naive
    datetimes are read as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local_day = moment.astimezone(timezone(timedelta(hours=utc_offset_hours))).date()
    return (local_day - start_date).days + 1


def date_for_challenge_number(number: int, start_date: date) -> date:
    return start_date + timedelta(days=number - 1)


def next_challenge_number(last_id: int | None) -> int:
    return last_id + 1 if last_id else 1


def random_challenge_number(clock: Callable[[], float] = time.time) -> int:
    """Millisecond timestamp, used as the number of an on-demand challenge."""
    return int(clock() * 1000)
