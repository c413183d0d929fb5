"""HTTP-facing errors.

Routers translate service-layer exceptions into these; the handler in
``main.py`` renders them as the ``{"error": {"code", "message"}}`` envelope.
Each subclass fixes the status; the code tells the client which rule failed.
"""


class APIError(Exception):
    """Error with a machine-readable code and an HTTP status.

    Attributes:
        code: Machine-readable error code (e.g., "CODE_EXPIRED").
        message: Human-readable message, safe to show to the caller.
        status_code: HTTP status returned to the caller.
    """

    status_code: int = 500

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class BadRequestError(APIError):
    """Request broke a rule the caller can fix (400)."""

    status_code = 400


class UnauthorizedError(APIError):
    """Missing, invalid or expired credentials (401)."""

    status_code = 401

    def __init__(
        self,
        code: str = "UNAUTHORIZED",
        message: str = "Authentication required",
    ) -> None:
        super().__init__(code, message)


class NotFoundError(APIError):
    """Referenced account or zip code does not exist (404)."""

    status_code = 404


class ConflictError(APIError):
    """Request conflicts with current state (409)."""

    status_code = 409


class ServiceUnavailableError(APIError):
    """An upstream provider could not be reached (503). Retry later."""

    status_code = 503

    def __init__(self, message: str = "Upstream service unavailable") -> None:
        super().__init__("UPSTREAM_UNAVAILABLE", message)
