"""
Exceptions for the web3.storage client.

The subclass of a raised (or returned) error tells the caller which kind of
failure occurred: a non-success HTTP status, a transport problem, or a local
precondition such as an unreadable file or a malformed CID.
"""

import copy
from typing import Any, Optional


class Web3StorageError(Exception):
    """Base exception for the web3.storage client."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message

    def with_prefix(self, prefix: str) -> "Web3StorageError":
        """Return a copy of this error, same type and status, with a prefixed message."""
        error = copy.copy(self)
        error.message = f"{prefix}: {self.message}"
        error.args = (error.message,)
        return error


class APIError(Web3StorageError):
    """Raised for non-success HTTP statuses without a more specific class."""


class AuthenticationError(APIError):
    """Raised when the token is rejected (401/403)."""


class NotFoundError(APIError):
    """Raised when the requested content or endpoint does not exist (404)."""


class RateLimitError(APIError):
    """Raised when the rate limit is exceeded (429)."""

    def __init__(self, message: str, retry_after: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ConnectionError(Web3StorageError):
    """Raised when the service or gateway cannot be reached."""


class TimeoutError(ConnectionError):
    """Raised when a request times out."""


class ValidationError(Web3StorageError):
    """Raised for requests rejected locally (bad CID, unencodable header) or by a 4xx."""


class FileReadError(Web3StorageError):
    """Raised when a local file cannot be read for upload."""


# Statuses with a dedicated class; anything else in 4xx is a ValidationError,
# everything else an APIError.
STATUS_ERRORS = {
    401: AuthenticationError,
    403: AuthenticationError,
    404: NotFoundError,
    429: RateLimitError,
}


def error_message(body: Any) -> str:
    """
    Pull a human-readable message out of an error body.

    The API answers errors as ``{"name": ..., "message": ...}``; older
    deployments and proxies use ``{"error": ...}`` or plain text.
    """
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, dict):
                value = value.get("message")
            if value:
                return str(value)
        return "Unknown error"
    return str(body) if body else "Unknown error"


def error_for_status(status_code: int, body: Any) -> Optional[Web3StorageError]:
    """Return the error describing a non-2xx status, or None for 2xx."""
    if 200 <= status_code < 300:
        return None

    error_class = STATUS_ERRORS.get(status_code)
    if error_class is None:
        error_class = ValidationError if 400 <= status_code < 500 else APIError

    error = error_class(error_message(body), status_code=status_code, response=body)
    if isinstance(error, RateLimitError) and isinstance(body, dict):
        error.retry_after = body.get("retry_after")
    return error


def raise_for_status(status_code: int, body: Any) -> None:
    """Raise the error matching a non-2xx status code."""
    error = error_for_status(status_code, body)
    if error is not None:
        raise error
