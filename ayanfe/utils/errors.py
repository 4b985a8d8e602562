"""
Client Errors
Failure taxonomy shared by the API client and the state managers.

    ClientError
    ├── NetworkError          transport failure or timeout
    └── ApiError              backend answered with a non-success status
        ├── SessionAbsent     401, no session cookie / expired session
        ├── AuthenticationError  login or register rejected
        └── MalformedResponse    success status, unusable body
"""

from typing import Optional


class ClientError(Exception):
    """Base class for every error raised by the client"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(ClientError):
    """Backend could not be reached"""


class ApiError(ClientError):
    """Non-success HTTP response"""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: str = ""):
        super().__init__(message)
        self.status_code = status_code
        # message from the response body, empty when unreadable
        self.detail = detail

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, message={self.message!r})"


class SessionAbsent(ApiError):
    """401 from the backend. Not a failure for session probes."""

    def __init__(self, message: str = "Not authenticated", status_code: int = 401, detail: str = ""):
        super().__init__(message, status_code, detail)


class AuthenticationError(ApiError):
    """Credentials or registration data rejected by the backend"""

    @classmethod
    def from_api_error(cls, error: ApiError, fallback: str) -> "AuthenticationError":
        return cls(error.detail or fallback, error.status_code, error.detail)


class MalformedResponse(ApiError):
    """Success status but the body does not have the expected shape"""

    def __init__(self, endpoint: str, detail: str = ""):
        super().__init__(f"Malformed response from {endpoint}", None, detail)
        self.endpoint = endpoint
