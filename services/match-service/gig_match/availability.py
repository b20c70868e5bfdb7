import re
from datetime import datetime
from typing import Iterable, List

from dateutil import parser

from .schemas import AvailabilityWindow

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
TIME_OF_DAY = re.compile(r"\d{1,2}:\d{2}")


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and a_end > b_start


def weekday_token(moment: datetime) -> str:
    return WEEKDAYS[moment.weekday()]


def _covers_day(days: Iterable[str], token: str) -> bool:
    # "Mon", "mon" and "Monday" all name the same day
    wanted = token.lower()
    return any((d or "").strip()[:3].lower() == wanted for d in days)


def window_bounds(window: AvailabilityWindow, on: datetime) -> tuple[datetime, datetime]:
    """
    Concrete start/end instants for a recurring window on the date (and in the
    timezone) of `on`. Raises ValueError for unreadable times of day.
    """
    return _time_on(window.start_time, on), _time_on(window.end_time, on)


def _time_on(value: str, on: datetime) -> datetime:
    # dateutil would read a bare "5" as the 5th of the month
    if not TIME_OF_DAY.fullmatch((value or "").strip()):
        raise ValueError(f"not an HH:MM time: {value!r}")
    return parser.parse(value, default=on).replace(second=0, microsecond=0)


def spans_multiple_days(start: datetime | None, end: datetime | None) -> bool:
    if start is None or end is None:
        return False
    return end.date() > start.date()


def is_worker_available(
    windows: List[AvailabilityWindow],
    gig_start: datetime | None,
    gig_end: datetime | None,
) -> bool:
    """
    No windows at all means the worker never told us, so assume available.

    Only the weekday of the gig start is considered; a gig running past
    midnight is compared against that first day's windows only.
    """
    if not windows:
        return True

    if gig_start is None or gig_end is None:
        return False

    day = weekday_token(gig_start)
    for window in windows:
        if not _covers_day(window.days, day):
            continue
        try:
            w_start, w_end = window_bounds(window, gig_start)
        except (ValueError, OverflowError):
            continue
        if overlaps(gig_start, gig_end, w_start, w_end):
            return True

    return False
