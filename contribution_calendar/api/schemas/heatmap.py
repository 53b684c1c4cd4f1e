from datetime import date

from pydantic import BaseModel

from contribution_calendar.models import DailyRecord
from contribution_calendar.models import MergedCalendar
from contribution_calendar.services.calendar_grid import sunday_offset


class CalendarDay(BaseModel):
    """Single grid cell; weekday counts from Sunday as 0."""

    date: date
    weekday: int
    count: int
    level: int


class CalendarWeek(BaseModel):
    """One grid column of seven days, Sunday to Saturday."""

    week_start: date
    days: list[CalendarDay]


class MergedCalendarResponse(BaseModel):
    """Merged contribution calendar payload for the rendering surface."""

    contributors: list[str]
    accounts: dict[str, int]
    per_year_total: dict[int, int]
    total: int
    start: date | None
    end: date | None
    weeks: list[CalendarWeek]


def _calendar_day(record: DailyRecord) -> CalendarDay:
    return CalendarDay(
        date=record.date,
        weekday=sunday_offset(record.date),
        count=record.count,
        level=record.level,
    )


def to_response(calendar: MergedCalendar) -> MergedCalendarResponse:
    """Convert a pipeline result into the API response model."""

    return MergedCalendarResponse(
        contributors=calendar.contributors,
        accounts=calendar.accounts,
        per_year_total=calendar.per_year_total,
        total=calendar.total,
        start=calendar.start,
        end=calendar.end,
        weeks=[
            CalendarWeek(
                week_start=week[0].date,
                days=[_calendar_day(record) for record in week],
            )
            for week in calendar.weeks
        ],
    )
