"""Calendar boundary helpers and the due-date classifier."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .models import Bucket

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(days=7)


@dataclass(frozen=True)
class WeekBoundaries:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def to_local(moment: datetime) -> datetime:
    """Return ``moment`` as a naive local-time value with millisecond precision.

    Aware values are converted to the host's local zone first; naive values are
    assumed to be local already.
    """

    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment.replace(microsecond=moment.microsecond - moment.microsecond % 1000)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def week_boundaries(moment: datetime) -> WeekBoundaries:
    """Monday 00:00:00.000 through Sunday 23:59:59.999 of the week holding ``moment``.

    Sunday counts as the seventh day of the week that began the Monday before.
    """

    monday = moment - timedelta(days=moment.isoweekday() - 1)
    sunday = monday + timedelta(days=6)
    return WeekBoundaries(start=start_of_day(monday), end=end_of_day(sunday))


def classify(due: datetime | None, now: datetime) -> Bucket:
    """Map a due timestamp to its bucket relative to ``now``.

    The first matching window wins. A value that lands in none of the windows,
    including any space between the current week's end and the start of the
    week computed from ``now + 7 days``, is ``Later``.
    """

    if due is None:
        return Bucket.LATER

    due = to_local(due)
    now = to_local(now)

    today = start_of_day(now)
    tomorrow = today + ONE_DAY
    current_week = week_boundaries(now)
    next_week = week_boundaries(now + ONE_WEEK)

    if due < today:
        return Bucket.OVERDUE
    if today <= due < end_of_day(today):
        return Bucket.TODAY
    if tomorrow <= due < end_of_day(tomorrow):
        return Bucket.TOMORROW
    if end_of_day(tomorrow) <= due <= current_week.end:
        return Bucket.THIS_WEEK
    if next_week.contains(due):
        return Bucket.NEXT_WEEK
    return Bucket.LATER


__all__ = [
    "WeekBoundaries",
    "classify",
    "end_of_day",
    "start_of_day",
    "to_local",
    "week_boundaries",
]
