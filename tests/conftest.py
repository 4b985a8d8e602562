import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from ayanfe.config import Settings
from ayanfe.state import Notifier
from ayanfe.utils import APIClient

BASE = "http://testserver"

Reply = Tuple[int, Any]
Route = Union[Reply, Callable[[Optional[Any]], Reply]]


@dataclass
class Call:
    method: str
    path: str
    body: Any
    query: Dict[str, List[str]]


class FakeBackend(BaseAdapter):
    """
    Transport adapter answering from a route table.

    A route is either a (status, body) pair or a callable taking the
    decoded JSON request body and returning one. Bodies that are dicts or
    lists go out as JSON, strings as text/plain, None as an empty body.
    """

    def __init__(self):
        super().__init__()
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.calls: List[Call] = []
        self.offline = False

    def add(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        self.routes[(method, path)] = (status, body)

    def handle(self, method: str, path: str, handler: Callable[[Optional[Any]], Reply]) -> None:
        self.routes[(method, path)] = handler

    def count(self, method: str, path: str) -> int:
        return sum(1 for c in self.calls if c.method == method and c.path == path)

    def last(self, method: str, path: str) -> Call:
        return [c for c in self.calls if c.method == method and c.path == path][-1]

    def send(self, request, **kwargs):
        if self.offline:
            raise requests.exceptions.ConnectionError("connection refused")

        parsed = urlparse(request.url)
        body = json.loads(request.body) if request.body else None
        self.calls.append(Call(request.method, parsed.path, body, parse_qs(parsed.query)))

        route = self.routes.get((request.method, parsed.path))
        if route is None:
            status, payload = 404, {"message": "Not found"}
        elif callable(route):
            status, payload = route(body)
        else:
            status, payload = route

        resp = requests.Response()
        resp.status_code = status
        resp.reason = "OK" if status < 400 else "Error"
        resp.url = request.url
        resp.request = request
        resp.encoding = "utf-8"
        if isinstance(payload, (dict, list)):
            resp._content = json.dumps(payload).encode()
            resp.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
        elif isinstance(payload, str):
            resp._content = payload.encode()
            resp.headers = CaseInsensitiveDict({"Content-Type": "text/plain"})
        else:
            resp._content = b""
            resp.headers = CaseInsensitiveDict()
        return resp

    def close(self):
        pass


ALICE = {"id": 1, "username": "alice"}

BADGES = [
    {"id": 9, "name": "Centurion", "description": "Reach 100", "icon": "💯"},
    {"id": 10, "name": "Early Bird", "description": "Join early", "rarity": "rare"},
]

ACHIEVEMENTS = [
    {"id": 5, "name": "Hundred Chats", "description": "Send 100 messages", "badgeId": 9},
    {"id": 6, "name": "Night Owl", "description": "Chat after midnight", "isSecret": True},
]

USER_BADGES = [
    {"id": 100, "userId": 1, "badgeId": 10, "progress": 40, "displayed": False, "badge": BADGES[1]},
]

USER_ACHIEVEMENTS = [
    {"id": 200, "userId": 1, "achievementId": 5, "progress": 20, "completed": False},
]


@pytest.fixture
def settings():
    return Settings(api_url=BASE, api_prefix="/api", request_timeout=1)


@pytest.fixture
def backend():
    backend = FakeBackend()
    backend.add("GET", "/api/user", 401, "Unauthorized")
    backend.add("GET", "/api/badges", 200, BADGES)
    backend.add("GET", "/api/achievements", 200, ACHIEVEMENTS)
    backend.add("GET", "/api/user/badges", 200, USER_BADGES)
    backend.add("GET", "/api/user/achievements", 200, USER_ACHIEVEMENTS)
    backend.add("GET", "/api/apikeys", 200, [])
    backend.add("GET", "/api/user/usage", 200, [])
    return backend


@pytest.fixture
def signed_in(backend):
    """Backend with a live session cookie for alice"""
    backend.add("GET", "/api/user", 200, ALICE)
    return backend


@pytest.fixture
def client(settings, backend):
    client = APIClient(settings)
    client.session.mount(BASE, backend)
    return client


@pytest.fixture
def notifier():
    return Notifier()
