from .api_client import APIClient, get_client
from .errors import (
    ClientError,
    NetworkError,
    ApiError,
    SessionAbsent,
    AuthenticationError,
    MalformedResponse,
)

__all__ = [
    "APIClient",
    "get_client",
    "ClientError",
    "NetworkError",
    "ApiError",
    "SessionAbsent",
    "AuthenticationError",
    "MalformedResponse",
]
