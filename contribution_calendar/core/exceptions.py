class ContributionCalendarError(Exception):
    """Base class for errors raised while building a contribution calendar."""


class InvalidArgumentError(ContributionCalendarError):
    """Raised when caller input is malformed, before any network call."""


class NotFoundError(ContributionCalendarError):
    """Raised when an account or repository cannot be resolved on GitHub."""


class UpstreamError(ContributionCalendarError):
    """Raised when GitHub rejects a request or returns an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
