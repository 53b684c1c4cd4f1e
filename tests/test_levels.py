import pytest

from contribution_calendar.services.levels import merged_contribution_level
from contribution_calendar.services.levels import raw_contribution_level


@pytest.mark.parametrize(
    ("count", "expected"),
    [(0, 0), (1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (9, 3), (10, 4), (250, 4)],
)
def test_raw_contribution_level_buckets(count: int, expected: int) -> None:
    assert raw_contribution_level(count) == expected


@pytest.mark.parametrize(
    ("count", "expected"),
    [(0, 0), (1, 1), (5, 1), (6, 2), (10, 2), (11, 3), (15, 3), (16, 4), (999, 4)],
)
def test_merged_contribution_level_buckets(count: int, expected: int) -> None:
    assert merged_contribution_level(count) == expected


@pytest.mark.parametrize(
    "classify", [raw_contribution_level, merged_contribution_level]
)
def test_levels_are_monotonic_and_bounded(classify) -> None:
    """Levels never decrease as counts grow and stay within 0..4."""

    levels = [classify(count) for count in range(0, 60)]

    assert all(0 <= level <= 4 for level in levels)
    assert levels == sorted(levels)


def test_merged_table_saturates_later_than_raw_table() -> None:
    assert raw_contribution_level(12) == 4
    assert merged_contribution_level(12) == 3
