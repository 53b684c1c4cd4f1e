from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials

from contribution_calendar.api.schemas.heatmap import MergedCalendarResponse
from contribution_calendar.api.schemas.heatmap import to_response
from contribution_calendar.core.exceptions import InvalidArgumentError
from contribution_calendar.core.exceptions import NotFoundError
from contribution_calendar.core.exceptions import UpstreamError
from contribution_calendar.core.security import bearer_scheme
from contribution_calendar.core.security import extract_optional_bearer_token
from contribution_calendar.services.heatmap_service import build_merged_calendar
from contribution_calendar.settings import Settings


router = APIRouter()


def get_settings() -> Settings:
    return Settings()


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "Merged contribution calendar"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/calendar", response_model=MergedCalendarResponse)
def get_merged_calendar(
    logins: list[str] | None = Query(default=None),
    repo: str | None = Query(default=None),
    years: list[int] | None = Query(default=None),
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> MergedCalendarResponse:
    """Return the merged calendar for explicit logins or a repository's contributors."""

    request_token = extract_optional_bearer_token(credentials)
    # The fallback token belongs to the server, not to the caller.
    token = request_token or settings.github_token

    try:
        calendar = build_merged_calendar(
            logins=logins,
            repo=repo,
            years=years,
            token=token,
            settings=settings,
            prefer_viewer=request_token is not None,
        )
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UpstreamError as exc:
        raise HTTPException(
            status_code=502, detail="GitHub API request failed"
        ) from exc

    return to_response(calendar)
