"""
Error taxonomy for the trading core.

ValidationError is local and raised before any network call.
VenueError and its subclasses are the only errors that cross the
VenueClient boundary; raw httpx exceptions never escape it.
"""


class TradingError(Exception):
    """Base for every error raised by the trading core."""


class ValidationError(TradingError):
    """Trade request rejected locally; nothing was sent to the venue."""


class VenueError(TradingError):
    """Normalized failure of a venue call."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class TransportError(VenueError):
    """Network failure or request timeout."""


class ServerError(VenueError):
    """Venue answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message, cause)
        self.status_code = status_code
        self.server_message = server_message


class PayloadError(VenueError):
    """Venue answered 2xx but the body is undecodable or missing required fields."""


class SubmitError(TradingError):
    """A trade submission failed after validation. Never retried automatically."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
