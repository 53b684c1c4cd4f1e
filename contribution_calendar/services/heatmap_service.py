import logging
from collections.abc import Iterable

from contribution_calendar.clients.github_client import fetch_contributors
from contribution_calendar.clients.github_client import fetch_multiple_account_series
from contribution_calendar.core.exceptions import InvalidArgumentError
from contribution_calendar.models import MergedCalendar
from contribution_calendar.services.calendar_grid import date_range
from contribution_calendar.services.calendar_grid import fill_gaps
from contribution_calendar.services.calendar_grid import group_into_weeks
from contribution_calendar.services.calendar_grid import utc_today
from contribution_calendar.services.merge import merge_account_series
from contribution_calendar.settings import Settings

logger = logging.getLogger(__name__)


def resolve_accounts(
    logins: Iterable[str] | None,
    repo: str | None,
    token: str | None,
    *,
    settings: Settings,
) -> list[str]:
    """Return the accounts to merge, either given directly or a repo's contributors.

    Raises:
        InvalidArgumentError: If both or neither of logins and repo are given.
    """

    if logins is not None:
        logins = list(logins)
    has_logins = logins is not None and any(
        login.strip() for login in logins
    )
    has_repo = bool(repo and repo.strip())

    if has_logins == has_repo:
        raise InvalidArgumentError("Provide either logins or repo, but not both")

    if has_repo:
        return fetch_contributors(
            repo,
            token,
            api_base_url=settings.github_api_base_url,
            page_size=settings.contributors_page_size,
            timeout=settings.request_timeout_seconds,
        )

    cleaned = (login.strip() for login in logins)
    return list(dict.fromkeys(login for login in cleaned if login))


def build_merged_calendar(
    logins: Iterable[str] | None = None,
    repo: str | None = None,
    years: Iterable[int] | None = None,
    token: str | None = None,
    *,
    settings: Settings,
    prefer_viewer: bool = True,
) -> MergedCalendar:
    """Fetch, merge and lay out contributions for a set of accounts.

    Accounts that fail to load are dropped from the merge; contributor
    resolution errors are raised to the caller. `prefer_viewer` must be
    False when the token is not the caller's own credential, so the token
    owner's private counts are never exposed.
    """

    contributors = resolve_accounts(logins, repo, token, settings=settings)
    target_years = sorted(set(years)) if years else [utc_today().year]

    if not contributors:
        logger.info("No accounts to fetch, returning an empty calendar")
        return MergedCalendar(
            contributors=[],
            accounts={},
            per_year_total={},
            total=0,
            start=None,
            end=None,
            weeks=[],
        )

    series_by_account = fetch_multiple_account_series(
        contributors,
        target_years,
        token,
        graphql_url=settings.github_graphql_url,
        timeout=settings.request_timeout_seconds,
        prefer_viewer=prefer_viewer,
    )
    merged = merge_account_series(series_by_account)

    start = end = None
    weeks = []
    if merged.days:
        start, end = date_range(merged.days)
        weeks = group_into_weeks(fill_gaps(merged.days, start, end))

    return MergedCalendar(
        contributors=contributors,
        accounts={
            account_id: series.total_contributions
            for account_id, series in series_by_account.items()
        },
        per_year_total=merged.per_year_total,
        total=sum(merged.per_year_total.values()),
        start=start,
        end=end,
        weeks=weeks,
    )
