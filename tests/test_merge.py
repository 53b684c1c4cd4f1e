import random
from datetime import date

from contribution_calendar.models import AccountSeries
from contribution_calendar.models import DailyRecord
from contribution_calendar.services.levels import raw_contribution_level
from contribution_calendar.services.merge import merge_account_series


def make_series(account_id: str, counts: dict[str, int]) -> AccountSeries:
    days = [
        DailyRecord(
            date=date.fromisoformat(raw_day),
            count=count,
            level=raw_contribution_level(count),
        )
        for raw_day, count in counts.items()
    ]
    return AccountSeries(account_id=account_id, days=days)


def test_merge_sums_counts_per_date_and_reclassifies() -> None:
    merged = merge_account_series(
        {
            "alice": make_series("alice", {"2024-01-01": 3}),
            "bob": make_series("bob", {"2024-01-01": 4, "2024-01-02": 2}),
        }
    )

    assert merged.days == [
        DailyRecord(date=date(2024, 1, 1), count=7, level=2),
        DailyRecord(date=date(2024, 1, 2), count=2, level=1),
    ]
    assert merged.per_year_total == {2024: 9}


def test_merge_is_independent_of_account_order() -> None:
    alice = make_series("alice", {"2024-03-01": 5, "2024-03-04": 1})
    bob = make_series("bob", {"2024-03-04": 12, "2023-12-31": 2})

    forward = merge_account_series({"alice": alice, "bob": bob})
    backward = merge_account_series({"bob": bob, "alice": alice})

    assert forward == backward


def test_merge_is_independent_of_record_order() -> None:
    counts = {f"2024-02-{day:02d}": day for day in range(1, 29)}
    ordered = make_series("alice", counts)

    shuffled_days = list(ordered.days)
    random.Random(7).shuffle(shuffled_days)
    shuffled = AccountSeries(account_id="alice", days=shuffled_days)

    assert merge_account_series({"alice": ordered}) == merge_account_series(
        {"alice": shuffled}
    )


def test_merged_days_are_strictly_ascending() -> None:
    merged = merge_account_series(
        {
            "alice": make_series("alice", {"2024-05-02": 1, "2024-05-01": 1}),
            "bob": make_series("bob", {"2024-05-01": 1, "2024-04-30": 3}),
        }
    )

    dates = [record.date for record in merged.days]
    assert dates == sorted(set(dates))


def test_per_year_total_matches_days_across_year_boundary() -> None:
    merged = merge_account_series(
        {
            "alice": make_series("alice", {"2023-12-31": 4, "2024-01-01": 6}),
            "bob": make_series("bob", {"2023-12-31": 1}),
        }
    )

    assert merged.per_year_total == {2023: 5, 2024: 6}
    for year, total in merged.per_year_total.items():
        assert total == sum(r.count for r in merged.days if r.date.year == year)


def test_accounts_without_records_are_ignored() -> None:
    with_empty = merge_account_series(
        {
            "alice": make_series("alice", {"2024-01-01": 2}),
            "idle": AccountSeries(account_id="idle"),
        }
    )
    without_empty = merge_account_series(
        {"alice": make_series("alice", {"2024-01-01": 2})}
    )

    assert with_empty == without_empty


def test_merge_of_nothing_is_empty() -> None:
    merged = merge_account_series({})

    assert merged.days == []
    assert merged.per_year_total == {}
