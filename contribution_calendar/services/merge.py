from collections.abc import Mapping
from datetime import date

from contribution_calendar.models import AccountSeries
from contribution_calendar.models import DailyRecord
from contribution_calendar.models import MergedSeries
from contribution_calendar.services.levels import merged_contribution_level


def merge_account_series(
    series_by_account: Mapping[str, AccountSeries],
) -> MergedSeries:
    """Sum daily counts across accounts into one series sorted by date."""

    counts_by_date: dict[date, int] = {}
    per_year_total: dict[int, int] = {}

    for series in series_by_account.values():
        for record in series.days:
            counts_by_date[record.date] = (
                counts_by_date.get(record.date, 0) + record.count
            )
            per_year_total[record.date.year] = (
                per_year_total.get(record.date.year, 0) + record.count
            )

    days = [
        DailyRecord(date=day, count=count, level=merged_contribution_level(count))
        for day, count in sorted(counts_by_date.items())
    ]
    return MergedSeries(per_year_total=dict(sorted(per_year_total.items())), days=days)
