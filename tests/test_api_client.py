import pytest

from ayanfe.config import Settings
from ayanfe.models import LoginData, NewUser
from ayanfe.utils import (
    APIClient,
    ApiError,
    AuthenticationError,
    MalformedResponse,
    NetworkError,
    SessionAbsent,
)

from conftest import ALICE, BASE


def test_current_user_none_on_401(client):
    assert client.get_current_user() is None


def test_current_user_parses_identity(client, signed_in):
    identity = client.get_current_user()
    assert identity.id == 1
    assert identity.username == "alice"


def test_login_sends_username_and_password(client, backend):
    backend.add("POST", "/api/login", 200, ALICE)

    identity = client.login(LoginData(identifier="alice", secret="pw1"))

    assert identity.username == "alice"
    assert backend.last("POST", "/api/login").body == {"username": "alice", "password": "pw1"}


def test_login_rejection_keeps_server_text(client, backend):
    backend.add("POST", "/api/login", 401, "Invalid credentials")

    with pytest.raises(AuthenticationError) as exc:
        client.login(LoginData(identifier="alice", secret="bad"))

    assert exc.value.message == "Invalid credentials"
    assert exc.value.status_code == 401


def test_register_rejection_reads_json_message(client, backend):
    backend.add("POST", "/api/register", 400, {"message": "Username already exists"})

    with pytest.raises(AuthenticationError, match="Username already exists"):
        client.register(NewUser(username="alice", password="pw1"))


def test_register_omits_empty_optional_fields(client, backend):
    backend.add("POST", "/api/register", 200, {"id": 2, "username": "bob"})

    client.register(NewUser(username=" bob ", password="pw"))

    assert backend.last("POST", "/api/register").body == {"username": "bob", "password": "pw"}


def test_empty_error_body_falls_back_to_generic_message(client, backend):
    backend.add("POST", "/api/login", 500, None)

    with pytest.raises(AuthenticationError, match="Login failed"):
        client.login(LoginData(identifier="alice", secret="pw1"))


def test_server_error_raises_api_error(client, backend):
    backend.add("GET", "/api/badges", 503, {"detail": "Maintenance"})

    with pytest.raises(ApiError) as exc:
        client.get_badges()

    assert exc.value.status_code == 503
    assert exc.value.message == "Maintenance"
    assert not isinstance(exc.value, SessionAbsent)


def test_user_collection_401_raises_session_absent(client, backend):
    backend.add("GET", "/api/user/badges", 401, {"message": "Not authenticated"})

    with pytest.raises(SessionAbsent):
        client.get_user_badges()


@pytest.mark.parametrize("body", [{"data": []}, "<html>index</html>", [{"name": "no id"}], [None]])
def test_badly_shaped_collection_raises_malformed_response(client, backend, body):
    backend.add("GET", "/api/badges", 200, body)

    with pytest.raises(MalformedResponse) as exc:
        client.get_badges()

    assert exc.value.endpoint == "/badges"
    assert isinstance(exc.value, ApiError)


def test_empty_collection_body_is_empty_list(client, backend):
    backend.add("GET", "/api/achievements", 200, None)

    assert client.get_achievements() == []


def test_login_reply_without_identity_is_malformed(client, backend):
    backend.add("POST", "/api/login", 200, {"ok": True})

    with pytest.raises(MalformedResponse):
        client.login(LoginData(identifier="alice", secret="pw1"))


def test_offline_backend_raises_network_error(client, backend):
    backend.offline = True

    with pytest.raises(NetworkError):
        client.get_badges()


def test_progress_update_payload_and_result(client, backend):
    backend.add("PATCH", "/api/user/achievements/5", 200, {
        "progress": {"achievementId": 5, "progress": 100},
        "completed": True,
        "badge": {"id": 9, "name": "Centurion"},
    })

    result = client.update_achievement_progress(5, 100, current_count=100)

    assert backend.last("PATCH", "/api/user/achievements/5").body == {"progress": 100, "currentCount": 100}
    assert result.completed is True
    assert result.badge.id == 9
    assert result.progress.achievement_id == 5


def test_progress_update_without_count_sends_progress_only(client, backend):
    backend.add("PATCH", "/api/user/achievements/5", 200, {
        "progress": {"achievementId": 5, "progress": 30},
        "completed": False,
    })

    result = client.update_achievement_progress(5, 30)

    assert backend.last("PATCH", "/api/user/achievements/5").body == {"progress": 30}
    assert result.completed is False
    assert result.badge is None


def test_complete_achievement_test_flag_only_when_asked(client, backend):
    backend.add("POST", "/api/user/achievements/5/complete", 200, {
        "progress": {"achievementId": 5, "progress": 100, "completed": True},
        "badge": {"id": 9, "name": "Centurion"},
    })

    client.complete_achievement(5)
    assert backend.last("POST", "/api/user/achievements/5/complete").query == {}

    result = client.complete_achievement(5, test_mode=True)
    assert backend.last("POST", "/api/user/achievements/5/complete").query == {"test": ["true"]}
    assert result.completed is True


def test_api_key_routes(client, backend):
    backend.add("POST", "/api/apikeys", 201, {"id": 3, "name": "ci", "key": "ak_123456789"})
    backend.add("DELETE", "/api/apikeys/3", 204, None)

    api_key = client.create_api_key("ci")
    client.delete_api_key(3)

    assert api_key.key == "ak_123456789"
    assert backend.last("POST", "/api/apikeys").body == {"name": "ci"}
    assert backend.count("DELETE", "/api/apikeys/3") == 1


def test_health_is_unprefixed(client, backend):
    backend.add("GET", "/health", 200, {"status": "healthy"})

    assert client.is_connected() is True
    assert backend.count("GET", "/health") == 1


def test_health_reports_offline(client, backend):
    backend.offline = True

    assert client.health() == {"error": "Backend not connected"}
    assert client.is_connected() is False


def test_base_url_from_settings():
    client = APIClient(Settings(api_url=BASE + "/", api_prefix="api/"))
    assert client.base_url == "http://testserver/api"
