"""Domain errors raised by the issuance and query services.

Each error carries a short `error` title and a human-readable `message`;
app/api/errors.py maps them onto HTTP status codes and `{error, message}`
bodies. Validation and authorization errors are raised before any side
effect, so the caller may retry after correcting the input. Nothing in
this service retries automatically.
"""

from __future__ import annotations


class IssuanceError(Exception):
    """Base class for every error the service layer surfaces to callers."""

    status_code = 500
    title = "Internal server error"

    def __init__(self, message: str, *, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error or self.title
        # Set by the issuance service to the stage that failed.
        self.stage: str | None = None


class ValidationError(IssuanceError):
    status_code = 400
    title = "Invalid request"


class AuthorizationError(IssuanceError):
    status_code = 403
    title = "Unauthorized issuer"


class NotFoundError(IssuanceError):
    status_code = 404
    title = "Not found"


class PersistenceError(IssuanceError):
    status_code = 500
    title = "Failed to store certificate"


class UpstreamError(IssuanceError):
    status_code = 500
    title = "Upstream service failure"
