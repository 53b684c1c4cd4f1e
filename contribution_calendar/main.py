from fastapi import FastAPI

from contribution_calendar.api.routes.heatmap import router
from contribution_calendar.core.middleware import CalendarRateLimitMiddleware
from contribution_calendar.core.observability import configure_logging
from contribution_calendar.core.observability import init_sentry
from contribution_calendar.settings import Settings


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application with logging, Sentry and rate limiting."""

    app_settings = app_settings or Settings()
    configure_logging(app_settings)
    init_sentry(app_settings)

    application = FastAPI(title="Merged Contribution Calendar")
    application.add_middleware(
        CalendarRateLimitMiddleware,
        requests_per_window=app_settings.rate_limit_per_minute,
        window_seconds=app_settings.rate_limit_window_seconds,
        max_clients=app_settings.rate_limit_max_clients,
    )
    application.include_router(router)
    return application


app = create_app()
