from __future__ import annotations

from datetime import datetime, timedelta

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from duebuckets.domain.buckets import (
    Bucket,
    classify,
    end_of_day,
    start_of_day,
    to_local,
    week_boundaries,
)

DAY_MS = 86_400_000
NOWS = st.datetimes(min_value=datetime(2000, 1, 1), max_value=datetime(2099, 12, 31))
OFFSETS = st.integers(min_value=-60 * DAY_MS, max_value=60 * DAY_MS)


@given(now=NOWS)
def test_absent_due_is_always_later(now: datetime) -> None:
    assert classify(None, now) is Bucket.LATER


@settings(max_examples=200)
@given(now=NOWS, offset_ms=OFFSETS)
def test_overdue_exactly_when_before_start_of_day(now: datetime, offset_ms: int) -> None:
    due = now + timedelta(milliseconds=offset_ms)
    bucket = classify(due, now)
    assert isinstance(bucket, Bucket)
    assert (bucket is Bucket.OVERDUE) == (due < start_of_day(now))


@given(now=NOWS, offset_ms=st.integers(min_value=0, max_value=DAY_MS - 2))
def test_any_instant_of_today_is_today(now: datetime, offset_ms: int) -> None:
    due = start_of_day(now) + timedelta(milliseconds=offset_ms)
    assert classify(due, now) is Bucket.TODAY


@given(now=NOWS, offset_ms=st.integers(min_value=0, max_value=DAY_MS - 2))
def test_any_instant_of_tomorrow_is_tomorrow(now: datetime, offset_ms: int) -> None:
    due = start_of_day(now) + timedelta(days=1, milliseconds=offset_ms)
    assert classify(due, now) is Bucket.TOMORROW


@given(now=NOWS, offset_ms=st.integers(min_value=0, max_value=7 * DAY_MS - 1))
def test_next_week_window(now: datetime, offset_ms: int) -> None:
    next_week = week_boundaries(now + timedelta(days=7))
    due = next_week.start + timedelta(milliseconds=offset_ms)
    tomorrow = start_of_day(now) + timedelta(days=1)
    expected = Bucket.TOMORROW if tomorrow <= due < end_of_day(tomorrow) else Bucket.NEXT_WEEK
    assert classify(due, now) is expected


@given(now=NOWS, data=st.data())
def test_this_week_window(now: datetime, data: st.DataObject) -> None:
    tomorrow = start_of_day(now) + timedelta(days=1)
    week = week_boundaries(now)
    span_ms = (week.end - end_of_day(tomorrow)) // timedelta(milliseconds=1)
    assume(span_ms >= 0)
    offset_ms = data.draw(st.integers(min_value=0, max_value=span_ms), label="offset_ms")
    due = end_of_day(tomorrow) + timedelta(milliseconds=offset_ms)
    assert classify(due, now) is Bucket.THIS_WEEK


@given(now=NOWS, offset_ms=st.integers(min_value=1, max_value=365 * DAY_MS))
def test_beyond_next_week_is_later(now: datetime, offset_ms: int) -> None:
    due = week_boundaries(now + timedelta(days=7)).end + timedelta(milliseconds=offset_ms)
    assert classify(due, now) is Bucket.LATER


@given(now=NOWS)
def test_week_boundaries_shape(now: datetime) -> None:
    week = week_boundaries(now)
    assert week.start.isoweekday() == 1
    assert week.start == start_of_day(week.start)
    assert week.end - week.start == timedelta(days=7) - timedelta(milliseconds=1)
    assert week.start <= to_local(now) <= week.end
