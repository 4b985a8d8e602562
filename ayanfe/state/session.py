"""
Session State Management
Owns the signed-in identity and keeps it in step with the backend session.

Lifecycle:
    construction  → one probe of GET /user (200 = signed in, 401 = anonymous)
    login()       → POST /login, identity replaced on success
    register()    → POST /register, new account becomes the identity
    logout()      → POST /logout, identity cleared on success
    expire()      → backend reported 401 mid-session, identity cleared locally

Other managers subscribe with on_identity_change() instead of polling, so
"user signed in" and "user signed out" are explicit state transitions.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Union

from ..models import Identity, LoginData, NewUser
from ..utils.api_client import APIClient
from ..utils.errors import ClientError, SessionAbsent
from .notifications import Notifier

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[Identity], Optional[Identity]], None]


class SessionManager:
    """
    Current identity plus the operations that change it.

    Usage:
        session = SessionManager(client, notifier)
        if not session.is_authenticated:
            session.login({"identifier": "alice", "secret": "pw1"})
        session.logout()
    """

    def __init__(self, client: APIClient, notifier: Optional[Notifier] = None):
        self._client = client
        self.notifier = notifier or Notifier()
        self._identity: Optional[Identity] = None
        self._listeners: List[IdentityListener] = []
        self.is_loading = True
        self._probe()

    # =========================================================================
    # Read model
    # =========================================================================

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def on_identity_change(self, callback: IdentityListener) -> None:
        """Register callback(previous, current), fired on every identity change"""
        self._listeners.append(callback)

    # =========================================================================
    # Operations
    # =========================================================================

    def login(self, credentials: Union[LoginData, Mapping]) -> Identity:
        """Sign in. Raises AuthenticationError or NetworkError after notifying."""
        if not isinstance(credentials, LoginData):
            credentials = LoginData.model_validate(dict(credentials))

        try:
            identity = self._client.login(credentials)
        except ClientError as e:
            logger.warning("Login failed for %r: %s", credentials.identifier, e.message)
            self.notifier.error("Login failed", e.message or "Login failed")
            raise

        self._set_identity(identity)
        logger.info("Signed in as %s (id=%s)", identity.username, identity.id)
        self.notifier.success("Login successful", f"Welcome back, {identity.display_name}!")
        return identity

    def register(self, new_user: Union[NewUser, Mapping]) -> Identity:
        """Create an account and sign in as it"""
        if not isinstance(new_user, NewUser):
            new_user = NewUser.model_validate(dict(new_user))

        try:
            identity = self._client.register(new_user)
        except ClientError as e:
            logger.warning("Registration failed for %r: %s", new_user.username, e.message)
            self.notifier.error("Registration failed", e.message or "Registration failed")
            raise

        self._set_identity(identity)
        logger.info("Registered %s (id=%s)", identity.username, identity.id)
        self.notifier.success("Registration successful", f"Welcome to AYANFE AI, {identity.display_name}!")
        return identity

    def logout(self) -> None:
        """Invalidate the backend session. Identity is kept if the call fails."""
        try:
            self._client.logout()
        except ClientError as e:
            logger.warning("Logout failed: %s", e.message)
            self.notifier.error("Logout failed", e.message or "Logout failed")
            raise

        self._set_identity(None)
        logger.info("Signed out")
        self.notifier.success("Logged out", "You have been successfully logged out.")

    def scoped(self, fetcher: Callable[[], Any]) -> Callable[[], Any]:
        """Wrap a user-scoped fetcher so a 401 expires the session and yields None"""
        def fetch():
            try:
                return fetcher()
            except SessionAbsent:
                self.expire()
                return None
        return fetch

    def expire(self) -> None:
        """Drop the identity after the backend answered 401 for a signed-in call"""
        if self._identity is None:
            return
        logger.info("Session for %s expired", self._identity.username)
        self._set_identity(None)

    # =========================================================================
    # Internals
    # =========================================================================

    def _probe(self) -> None:
        identity = None
        try:
            identity = self._client.get_current_user()
        except ClientError as e:
            logger.warning("Session check failed: %s", e.message)
        finally:
            self.is_loading = False
        self._set_identity(identity)

    def _set_identity(self, identity: Optional[Identity]) -> None:
        previous = self._identity
        self._identity = identity

        if previous is None and identity is None:
            return
        if previous is not None and identity is not None and previous.id == identity.id:
            return
        for callback in self._listeners:
            callback(previous, identity)
