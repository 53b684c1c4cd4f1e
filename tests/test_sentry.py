import logging

import pytest

from contribution_calendar.core.observability import configure_logging
from contribution_calendar.core.observability import init_sentry
from contribution_calendar.settings import Settings


DSN = "https://examplePublicKey@o0.ingest.sentry.io/0"


@pytest.mark.parametrize(
    ("settings", "expected_calls"),
    [
        (Settings(sentry_dsn=None), []),
        (
            Settings(
                sentry_dsn=DSN,
                environment="staging",
                release="calendar-1.2.0",
                sentry_traces_sample_rate=0.5,
            ),
            [
                {
                    "dsn": DSN,
                    "environment": "staging",
                    "release": "calendar-1.2.0",
                    "traces_sample_rate": 0.5,
                    "send_default_pii": False,
                }
            ],
        ),
    ],
    ids=["no-dsn", "configured"],
)
def test_init_sentry_follows_dsn_setting(
    monkeypatch, settings: Settings, expected_calls: list[dict[str, object]]
) -> None:
    """Sentry only starts when a DSN is set, and never sends PII."""

    calls: list[dict[str, object]] = []
    monkeypatch.setattr(
        "contribution_calendar.core.observability.sentry_sdk.init",
        lambda **kwargs: calls.append(kwargs),
    )

    init_sentry(settings)

    assert calls == expected_calls


def test_configure_logging_applies_level_to_package_logger() -> None:
    configure_logging(Settings(log_level="debug"))

    assert logging.getLogger("contribution_calendar").level == logging.DEBUG


def test_configure_logging_falls_back_to_info_for_unknown_level() -> None:
    configure_logging(Settings(log_level="chatty"))

    assert logging.getLogger("contribution_calendar").level == logging.INFO
