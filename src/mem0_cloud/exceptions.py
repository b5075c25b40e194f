"""Custom exceptions for the Mem0 cloud SDK."""

from typing import Optional


class Mem0Error(Exception):
    """Base exception for all Mem0 client errors.

    Raised directly for transport failures (timeouts, connection errors),
    where no HTTP status exists.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class APIError(Mem0Error):
    """Raised when the API answers with a non-success HTTP status."""

    def __init__(self, status: int, detail: str) -> None:
        super().__init__(f"API request failed with status {status}: {detail}", status_code=status)
        self.status = status
        self.detail = detail


class AuthenticationError(APIError):
    """Raised when authentication fails (401)."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(401, detail)


class AuthorizationError(APIError):
    """Raised when authorization is denied (403)."""

    def __init__(self, detail: str = "Authorization denied") -> None:
        super().__init__(403, detail)


class NotFoundError(APIError):
    """Raised when a resource is not found (404)."""

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(404, detail)


class RateLimitError(APIError):
    """Raised when rate limit is exceeded (429)."""

    def __init__(self, detail: str = "Rate limit exceeded") -> None:
        super().__init__(429, detail)


class ServerError(APIError):
    """Raised when server returns 5xx error."""

    def __init__(self, detail: str = "Server error", status_code: int = 500) -> None:
        super().__init__(status_code, detail)


def api_error_for_status(status: int, detail: str) -> APIError:
    """Pick the APIError subclass matching an HTTP status."""
    if status == 401:
        return AuthenticationError(detail)
    elif status == 403:
        return AuthorizationError(detail)
    elif status == 404:
        return NotFoundError(detail)
    elif status == 429:
        return RateLimitError(detail)
    elif status >= 500:
        return ServerError(detail, status_code=status)
    return APIError(status, detail)
