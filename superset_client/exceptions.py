"""Exceptions for the Superset client."""

from typing import Optional


class SupersetError(Exception):
    """Base exception for all Superset client errors.

    Only its subclasses are raised by the client: UnexpectedResponseError for
    a bad status or an unreadable body, AuthenticationError when login fails.
    Catch this type to handle every server-side failure of a call.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """Initialize SupersetError.

        Args:
            message: Error message
            status_code: HTTP status code if applicable
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UnexpectedResponseError(SupersetError):
    """Raised when the server answers with a status outside the expected range."""

    def __init__(self, endpoint: str, status_code: int, message: str) -> None:
        """Initialize UnexpectedResponseError.

        Args:
            endpoint: URL of the request that failed
            status_code: HTTP status code returned by the server
            message: Response body or a description of the failure
        """
        super().__init__(
            f"endpoint={endpoint}, code={status_code}, message={message}",
            status_code=status_code,
        )
        self.endpoint = endpoint
        self.message = message


class AuthenticationError(UnexpectedResponseError):
    """Raised when the login call fails or returns no access token."""
