import logging
import re
from collections.abc import Iterable
from collections.abc import Mapping
from datetime import date
from typing import Any

import httpx

from contribution_calendar.core.exceptions import ContributionCalendarError
from contribution_calendar.core.exceptions import InvalidArgumentError
from contribution_calendar.core.exceptions import NotFoundError
from contribution_calendar.core.exceptions import UpstreamError
from contribution_calendar.models import AccountSeries
from contribution_calendar.models import DailyRecord
from contribution_calendar.services.calendar_grid import utc_today
from contribution_calendar.services.levels import raw_contribution_level

logger = logging.getLogger(__name__)

USER_AGENT = "merged-contribution-calendar"
REPO_REF_PATTERN = re.compile(r"^([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)$")
USER_NOT_FOUND_MESSAGE = "Could not resolve to a User"

CALENDAR_FIELDS = """
        contributionsCollection(from: $from, to: $to) {
          contributionCalendar {
            totalContributions
            weeks {
              contributionDays {
                date
                contributionCount
                color
              }
            }
          }
        }
"""

USER_QUERY = """
    query($login: String!, $from: DateTime!, $to: DateTime!) {
      user(login: $login) {%s}
    }
""" % CALENDAR_FIELDS

USER_AND_VIEWER_QUERY = """
    query($login: String!, $from: DateTime!, $to: DateTime!) {
      user(login: $login) {%s}
      viewer {
        login%s}
    }
""" % (CALENDAR_FIELDS, CALENDAR_FIELDS)


def _headers(token: str | None, accept: str | None = None) -> dict[str, str]:
    headers = {"User-Agent": USER_AGENT}
    if accept:
        headers["Accept"] = accept
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _is_not_found_error(error: Any) -> bool:
    if not isinstance(error, Mapping):
        return False
    message = error.get("message")
    return error.get("type") == "NOT_FOUND" or (
        isinstance(message, str) and USER_NOT_FOUND_MESSAGE in message
    )


def _select_calendar(
    data: Mapping[str, Any], account_id: str, prefer_viewer: bool
) -> Mapping[str, Any] | None:
    """Pick the viewer calendar for the token owner, else the public one."""

    viewer = data.get("viewer")
    if prefer_viewer and isinstance(viewer, Mapping):
        viewer_login = viewer.get("login")
        if (
            isinstance(viewer_login, str)
            and viewer_login.lower() == account_id.lower()
        ):
            return viewer

    user = data.get("user")
    if isinstance(user, Mapping):
        return user

    return None


def _parse_calendar(
    owner: Mapping[str, Any], account_id: str
) -> AccountSeries:
    collection = owner.get("contributionsCollection")
    if not isinstance(collection, Mapping):
        raise UpstreamError("GitHub contributionsCollection is missing")

    calendar = collection.get("contributionCalendar")
    if not isinstance(calendar, Mapping):
        raise UpstreamError("GitHub contributionCalendar is missing")

    weeks = calendar.get("weeks")
    if not isinstance(weeks, list):
        raise UpstreamError("GitHub contribution weeks are missing")

    days: list[DailyRecord] = []
    for week in weeks:
        if not isinstance(week, Mapping):
            continue
        contribution_days = week.get("contributionDays")
        if not isinstance(contribution_days, list):
            continue
        for item in contribution_days:
            if not isinstance(item, Mapping):
                continue
            raw_date = item.get("date")
            raw_count = item.get("contributionCount")
            if not isinstance(raw_date, str) or not isinstance(raw_count, int):
                continue
            try:
                parsed_day = date.fromisoformat(raw_date[:10])
            except ValueError:
                continue
            count = max(raw_count, 0)
            days.append(
                DailyRecord(
                    date=parsed_day,
                    count=count,
                    level=raw_contribution_level(count),
                )
            )

    raw_total = calendar.get("totalContributions")
    total = raw_total if isinstance(raw_total, int) else sum(d.count for d in days)

    days.sort(key=lambda record: record.date)
    return AccountSeries(account_id=account_id, days=days, total_contributions=total)


def fetch_account_series(
    account_id: str,
    year: int,
    token: str | None = None,
    *,
    graphql_url: str,
    timeout: float = 20.0,
    prefer_viewer: bool = True,
) -> AccountSeries:
    """Fetch one calendar year of daily contributions for an account.

    When a token is supplied and `prefer_viewer` is set, the viewer's own
    calendar is requested as well and preferred if the token belongs to the
    requested account. Pass `prefer_viewer=False` for tokens that are not
    the caller's own, such as a server-wide fallback credential.

    Raises:
        NotFoundError: If GitHub cannot resolve the account.
        UpstreamError: If the request fails or GitHub reports other errors.
    """

    variables = {
        "login": account_id,
        "from": f"{year}-01-01T00:00:00Z",
        "to": f"{year}-12-31T23:59:59Z",
    }
    use_viewer = bool(token) and prefer_viewer
    query = USER_AND_VIEWER_QUERY if use_viewer else USER_QUERY
    headers = _headers(token)
    headers["Content-Type"] = "application/json"

    logger.debug("Fetching %s contributions for %s", year, account_id)
    try:
        response = httpx.post(
            graphql_url,
            json={"query": query, "variables": variables},
            headers=headers,
            timeout=timeout,
        )
    except httpx.HTTPError as exc:
        raise UpstreamError(f"GitHub GraphQL request failed: {exc}") from exc

    if response.is_error:
        raise UpstreamError(
            f"GitHub GraphQL returned HTTP {response.status_code}",
            status_code=response.status_code,
        )

    try:
        payload: Any = response.json()
    except ValueError as exc:
        raise UpstreamError("GitHub GraphQL response is not JSON") from exc
    if not isinstance(payload, Mapping):
        raise UpstreamError("GitHub GraphQL response is invalid")

    errors = payload.get("errors")
    if errors:
        if not isinstance(errors, list) or not all(
            _is_not_found_error(error) for error in errors
        ):
            raise UpstreamError(f"GitHub GraphQL returned errors: {errors}")

    data = payload.get("data")
    if not isinstance(data, Mapping):
        if errors:
            raise NotFoundError(f"GitHub user {account_id} not found")
        raise UpstreamError("GitHub GraphQL data is missing")

    owner = _select_calendar(data, account_id, use_viewer)
    if owner is None:
        raise NotFoundError(f"GitHub user {account_id} not found")

    return _parse_calendar(owner, account_id)


def fetch_multiple_account_series(
    account_ids: Iterable[str],
    years: Iterable[int] | None = None,
    token: str | None = None,
    *,
    graphql_url: str,
    timeout: float = 20.0,
    prefer_viewer: bool = True,
) -> dict[str, AccountSeries]:
    """Fetch and concatenate yearly series for every account.

    An account whose fetch fails is logged and left out of the result, so
    one bad login never hides the activity of the others.
    """

    target_years = sorted(set(years)) if years else [utc_today().year]
    unique_ids = list(dict.fromkeys(account_ids))
    results: dict[str, AccountSeries] = {}

    for account_id in unique_ids:
        try:
            yearly = [
                fetch_account_series(
                    account_id,
                    year,
                    token,
                    graphql_url=graphql_url,
                    timeout=timeout,
                    prefer_viewer=prefer_viewer,
                )
                for year in target_years
            ]
        except ContributionCalendarError as exc:
            logger.warning(
                "Skipping %s, contributions could not be fetched: %s",
                account_id,
                exc,
            )
            continue

        results[account_id] = AccountSeries(
            account_id=account_id,
            days=[record for series in yearly for record in series.days],
            total_contributions=sum(
                series.total_contributions for series in yearly
            ),
        )

    logger.info(
        "Fetched contributions for %d of %d accounts",
        len(results),
        len(unique_ids),
    )
    return results


def parse_repo_ref(repo_ref: str) -> tuple[str, str]:
    """Split an `owner/name` reference into its two parts.

    Raises:
        InvalidArgumentError: If the reference is not in `owner/name` form.
    """

    match = REPO_REF_PATTERN.match(repo_ref.strip()) if repo_ref else None
    if match is None:
        raise InvalidArgumentError(
            'Invalid repository name. Format should be "owner/repo"'
        )
    return match.group(1), match.group(2)


def fetch_contributors(
    repo_ref: str,
    token: str | None = None,
    *,
    api_base_url: str,
    page_size: int = 100,
    timeout: float = 20.0,
) -> list[str]:
    """Return logins of human contributors to a repository, in GitHub order.

    Pages through the REST listing until a short or empty page. Bots and
    other non-user identities are skipped.

    Raises:
        InvalidArgumentError: If repo_ref is not `owner/name`.
        NotFoundError: If GitHub does not know the repository.
        UpstreamError: If any page request fails.
    """

    owner, name = parse_repo_ref(repo_ref)
    url = f"{api_base_url.rstrip('/')}/repos/{owner}/{name}/contributors"
    headers = _headers(token, accept="application/vnd.github+json")

    contributors: list[str] = []
    page = 1
    while True:
        try:
            response = httpx.get(
                url,
                params={"per_page": page_size, "page": page},
                headers=headers,
                timeout=timeout,
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"GitHub contributors request failed: {exc}") from exc

        if response.status_code == 404:
            raise NotFoundError(f"Repository {owner}/{name} not found")
        if response.is_error:
            raise UpstreamError(
                f"GitHub contributors request returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        # Empty repositories answer with 204 and no body.
        if response.status_code == 204:
            break

        try:
            entries: Any = response.json()
        except ValueError as exc:
            raise UpstreamError("GitHub contributors response is not JSON") from exc
        if not isinstance(entries, list):
            raise UpstreamError("GitHub contributors response is invalid")
        if not entries:
            break

        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            login = entry.get("login")
            if isinstance(login, str) and login and entry.get("type") == "User":
                contributors.append(login)

        if len(entries) < page_size:
            break
        page += 1

    logger.info("Resolved %d contributors for %s/%s", len(contributors), owner, name)
    return contributors
