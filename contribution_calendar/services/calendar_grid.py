from collections.abc import Sequence
from datetime import UTC
from datetime import date
from datetime import datetime
from datetime import timedelta

from contribution_calendar.models import DailyRecord


def utc_today() -> date:
    """Return the current calendar day in UTC."""

    return datetime.now(UTC).date()


def _one_year_before(day: date) -> date:
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        # Feb 29 has no counterpart in the previous year.
        return day.replace(year=day.year - 1, day=28)


def _empty_day(day: date) -> DailyRecord:
    return DailyRecord(date=day, count=0, level=0)


def sunday_offset(day: date) -> int:
    """Return the weekday index of a date with Sunday as 0."""

    return (day.weekday() + 1) % 7


def date_range(
    days: Sequence[DailyRecord], today: date | None = None
) -> tuple[date, date]:
    """Return the earliest and latest date present in the series.

    An empty series falls back to the year ending today (UTC).
    """

    if not days:
        end = today or utc_today()
        return _one_year_before(end), end

    dates = [record.date for record in days]
    return min(dates), max(dates)


def fill_gaps(
    days: Sequence[DailyRecord], start: date, end: date
) -> list[DailyRecord]:
    """Return one record per day from start to end inclusive.

    Days missing from the input are synthesized with a zero count and
    level. Records outside the range are not included.
    """

    records_by_date = {record.date: record for record in days}

    filled: list[DailyRecord] = []
    current_day = start
    while current_day <= end:
        existing = records_by_date.get(current_day)
        filled.append(existing if existing is not None else _empty_day(current_day))
        current_day += timedelta(days=1)

    return filled


def group_into_weeks(days: Sequence[DailyRecord]) -> list[list[DailyRecord]]:
    """Split a contiguous daily series into Sunday-to-Saturday weeks.

    The first week is padded backwards to Sunday and the last week forwards
    to Saturday with zero records. Input is expected to be gap-free, as
    produced by `fill_gaps`.
    """

    if not days:
        return []

    first_day = days[0].date
    leading = sunday_offset(first_day)
    current_week = [
        _empty_day(first_day - timedelta(days=leading - index))
        for index in range(leading)
    ]

    weeks: list[list[DailyRecord]] = []
    for record in days:
        current_week.append(record)
        if len(current_week) == 7:
            weeks.append(current_week)
            current_week = []

    if current_week:
        last_day = current_week[-1].date
        for offset in range(1, 8 - len(current_week)):
            current_week.append(_empty_day(last_day + timedelta(days=offset)))
        weeks.append(current_week)

    return weeks
