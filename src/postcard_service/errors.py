"""Error taxonomy for the postcard service."""

from enum import StrEnum


class PostcardServiceError(Exception):
    """Base class for service errors."""


class ValidationError(PostcardServiceError):
    """Raised when input is missing or malformed."""


class StorageError(PostcardServiceError):
    """Raised when the persistence layer cannot be reached."""


class NotFoundError(PostcardServiceError):
    """Raised when a record id is unknown."""


class ConfigurationError(PostcardServiceError):
    """Raised at startup when required settings are missing."""


class InvalidTransitionError(PostcardServiceError):
    """Raised when a status change would skip or leave a terminal state."""


class GatewayErrorReason(StrEnum):
    """Classification of messaging gateway failures."""

    BAD_REQUEST = "bad_request"
    AUTH_FAILURE = "auth_failure"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"


_RETRYABLE_REASONS = {GatewayErrorReason.RATE_LIMITED, GatewayErrorReason.SERVER_ERROR}


class GatewayError(PostcardServiceError):
    """Raised when the messaging gateway refuses or fails a send."""

    def __init__(
        self,
        reason: GatewayErrorReason,
        http_status: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.reason = reason
        self.http_status = http_status
        self.detail = detail
        message = f"Messaging gateway error: {reason}"
        if http_status is not None:
            message = f"{message} (HTTP {http_status})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """Return true when the caller may retry the send with backoff."""
        return self.reason in _RETRYABLE_REASONS

    @classmethod
    def from_status(cls, http_status: int, detail: str | None = None) -> "GatewayError":
        """Build an error from a non-2xx HTTP status."""
        return cls(classify_status(http_status), http_status=http_status, detail=detail)


def classify_status(http_status: int) -> GatewayErrorReason:
    """Map a non-2xx HTTP status to a gateway error reason."""
    if http_status in {401, 403}:
        return GatewayErrorReason.AUTH_FAILURE
    if http_status == 429:  # noqa: PLR2004
        return GatewayErrorReason.RATE_LIMITED
    if http_status >= 500:  # noqa: PLR2004
        return GatewayErrorReason.SERVER_ERROR
    return GatewayErrorReason.BAD_REQUEST
