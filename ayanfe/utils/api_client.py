"""
Backend API Client
Connects the client state managers to the REST backend.

The underlying requests.Session keeps the backend's session cookie, so every
call after a successful login is made on behalf of the signed-in user.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from ..config import Settings, get_settings
from ..models import (
    Achievement,
    ApiKey,
    ApiUsage,
    Badge,
    Identity,
    LoginData,
    NewUser,
    ProgressUpdateResult,
    UserAchievementProgress,
    UserBadge,
)
from .errors import ApiError, AuthenticationError, MalformedResponse, NetworkError, SessionAbsent

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _error_message(resp: requests.Response) -> str:
    """Human readable message from an error response, empty if there is none"""
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "").strip()
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
        return ""
    if isinstance(body, str):
        return body
    return ""


class APIClient:
    """Client for backend API communication"""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.base_url
        self.origin = self.settings.api_url
        self.timeout = self.settings.request_timeout
        self.session = session or requests.Session()

    def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict] = None,
        params: Optional[dict] = None,
        prefixed: bool = True,
    ) -> Any:
        """Send a request and return the decoded body, raising ClientError subclasses"""
        url = f"{self.base_url if prefixed else self.origin}{endpoint}"
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(method, url, json=data, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"Request to {endpoint} timed out") from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError("Backend not connected") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(str(e)) from e

        if not resp.ok:
            detail = _error_message(resp)
            if resp.status_code == 401:
                raise SessionAbsent(detail or "Not authenticated", detail=detail)
            raise ApiError(detail or f"Request failed ({resp.status_code})", resp.status_code, detail)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def _decode(self, endpoint: str, data: Any, parse: Callable[[Any], T]) -> T:
        """Build one model from a response body, raising MalformedResponse on a bad shape"""
        if not isinstance(data, dict):
            raise MalformedResponse(endpoint, f"expected an object, got {type(data).__name__}")
        try:
            return parse(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("Malformed response from %s: %r", endpoint, e)
            raise MalformedResponse(endpoint, str(e)) from e

    def _decode_list(self, endpoint: str, data: Any, parse: Callable[[Any], T]) -> List[T]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise MalformedResponse(endpoint, f"expected a list, got {type(data).__name__}")
        return [self._decode(endpoint, item, parse) for item in data]

    def _get(self, endpoint: str, params: dict = None) -> Any:
        return self._request("GET", endpoint, params=params)

    def _post(self, endpoint: str, data: dict = None, params: dict = None) -> Any:
        return self._request("POST", endpoint, data=data, params=params)

    def _patch(self, endpoint: str, data: dict = None) -> Any:
        return self._request("PATCH", endpoint, data=data)

    def _delete(self, endpoint: str) -> Any:
        return self._request("DELETE", endpoint)

    # =========================================================================
    # Health & Status
    # =========================================================================

    def health(self) -> dict:
        """Check backend health"""
        try:
            return self._request("GET", "/health", prefixed=False) or {}
        except NetworkError:
            return {"error": "Backend not connected"}
        except ApiError as e:
            return {"error": e.message}

    def is_connected(self) -> bool:
        """Check if backend is reachable"""
        result = self.health()
        return "error" not in result

    # =========================================================================
    # Session
    # =========================================================================

    def get_current_user(self) -> Optional[Identity]:
        """Probe the session cookie. None when the backend answers 401."""
        try:
            data = self._get("/user")
        except SessionAbsent:
            return None
        return self._decode("/user", data, Identity.from_dict)

    def login(self, credentials: LoginData) -> Identity:
        try:
            data = self._post("/login", credentials.to_payload())
        except ApiError as e:
            raise AuthenticationError.from_api_error(e, "Login failed") from e
        return self._decode("/login", data, Identity.from_dict)

    def register(self, new_user: NewUser) -> Identity:
        try:
            data = self._post("/register", new_user.to_payload())
        except ApiError as e:
            raise AuthenticationError.from_api_error(e, "Registration failed") from e
        return self._decode("/register", data, Identity.from_dict)

    def logout(self) -> None:
        self._post("/logout")

    # =========================================================================
    # Badges & Achievements
    # =========================================================================

    def get_badges(self) -> List[Badge]:
        """Badge catalog, available without a session"""
        return self._decode_list("/badges", self._get("/badges"), Badge.from_dict)

    def get_achievements(self) -> List[Achievement]:
        """Achievement catalog; secret entries are filtered server-side"""
        return self._decode_list("/achievements", self._get("/achievements"), Achievement.from_dict)

    def get_user_badges(self) -> List[UserBadge]:
        return self._decode_list("/user/badges", self._get("/user/badges"), UserBadge.from_dict)

    def get_user_achievements(self) -> List[UserAchievementProgress]:
        endpoint = "/user/achievements"
        return self._decode_list(endpoint, self._get(endpoint), UserAchievementProgress.from_dict)

    def update_user_badge(self, user_badge_id: int, displayed: bool) -> Optional[UserBadge]:
        data = self._patch(f"/user/badges/{user_badge_id}", {"displayed": displayed})
        if isinstance(data, dict) and "badgeId" in data:
            return self._decode(f"/user/badges/{user_badge_id}", data, UserBadge.from_dict)
        return None

    def update_achievement_progress(
        self,
        achievement_id: int,
        progress: int,
        current_count: Optional[int] = None,
    ) -> ProgressUpdateResult:
        payload: Dict[str, Any] = {"progress": progress}
        if current_count is not None:
            payload["currentCount"] = current_count
        endpoint = f"/user/achievements/{achievement_id}"
        return self._decode(endpoint, self._patch(endpoint, payload), ProgressUpdateResult.from_dict)

    def complete_achievement(self, achievement_id: int, test_mode: bool = False) -> ProgressUpdateResult:
        params = {"test": "true"} if test_mode else None
        endpoint = f"/user/achievements/{achievement_id}/complete"
        data = self._post(endpoint, {}, params=params)
        return self._decode(endpoint, data, lambda d: ProgressUpdateResult.from_dict(d, completed=True))

    # =========================================================================
    # API Access
    # =========================================================================

    def get_api_keys(self) -> List[ApiKey]:
        return self._decode_list("/apikeys", self._get("/apikeys"), ApiKey.from_dict)

    def create_api_key(self, name: str) -> ApiKey:
        return self._decode("/apikeys", self._post("/apikeys", {"name": name}), ApiKey.from_dict)

    def delete_api_key(self, key_id: int) -> None:
        self._delete(f"/apikeys/{key_id}")

    def get_api_usage(self) -> List[ApiUsage]:
        return self._decode_list("/user/usage", self._get("/user/usage"), ApiUsage.from_dict)


# Global client instance
_client: Optional[APIClient] = None


def get_client(settings: Optional[Settings] = None) -> APIClient:
    """Get or create API client singleton"""
    global _client
    if _client is None:
        _client = APIClient(settings)
    return _client
