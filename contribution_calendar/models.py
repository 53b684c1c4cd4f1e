from datetime import date

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class DailyRecord(BaseModel):
    """Contribution count and intensity level for one UTC calendar day."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int = Field(ge=0)
    level: int = Field(ge=0, le=4)


class AccountSeries(BaseModel):
    """Daily activity fetched for a single GitHub account."""

    model_config = ConfigDict(frozen=True)

    account_id: str
    days: list[DailyRecord] = Field(default_factory=list)
    total_contributions: int = 0


class MergedSeries(BaseModel):
    """Daily activity summed across accounts, one record per date."""

    model_config = ConfigDict(frozen=True)

    per_year_total: dict[int, int] = Field(default_factory=dict)
    days: list[DailyRecord] = Field(default_factory=list)


class MergedCalendar(BaseModel):
    """Week-aligned calendar grid plus the totals needed to render it.

    `contributors` lists every resolved account, while `accounts` only holds
    the ones whose activity was fetched successfully.
    """

    model_config = ConfigDict(frozen=True)

    contributors: list[str]
    accounts: dict[str, int]
    per_year_total: dict[int, int]
    total: int
    start: date | None
    end: date | None
    weeks: list[list[DailyRecord]]
