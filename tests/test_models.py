from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from ayanfe.models import (
    Achievement,
    Badge,
    CompletedAchievement,
    Identity,
    LoginData,
    NewUser,
    ProgressUpdateResult,
    UserAchievementProgress,
    UserBadge,
)


def test_identity_display_name_falls_back_to_username():
    assert Identity(id=1, username="alice").display_name == "alice"
    assert Identity(id=1, username="alice", name="Alice").display_name == "Alice"


def test_identity_admin_from_role():
    identity = Identity.from_dict({"id": "7", "username": "root", "role": "admin"})

    assert identity.id == 7
    assert identity.is_admin is True


def test_login_data_accepts_both_spellings():
    assert LoginData(identifier="alice", secret="pw1").to_payload() == {"username": "alice", "password": "pw1"}
    assert LoginData.model_validate({"username": "alice", "password": "pw1"}).identifier == "alice"


def test_login_data_hides_secret_in_repr():
    assert "pw1" not in repr(LoginData(identifier="alice", secret="pw1"))


@pytest.mark.parametrize("payload", [
    {"identifier": "", "secret": "pw"},
    {"identifier": "alice", "secret": ""},
    {"identifier": "alice"},
])
def test_login_data_validation(payload):
    with pytest.raises(ValidationError):
        LoginData.model_validate(payload)


def test_new_user_validation():
    with pytest.raises(ValidationError):
        NewUser(username="   ", password="pw")
    assert NewUser(username="bob", password="pw", email="b@x.io").to_payload() == {
        "username": "bob", "password": "pw", "email": "b@x.io",
    }


def test_badge_keeps_unknown_fields_as_metadata():
    badge = Badge.from_dict({"id": 10, "name": "Early Bird", "rarity": "rare", "points": 50})

    assert badge.metadata == {"rarity": "rare", "points": 50}
    assert badge.to_dict()["rarity"] == "rare"


def test_achievement_from_dict():
    achievement = Achievement.from_dict({"id": 6, "name": "Night Owl", "isSecret": True, "badgeId": 9})

    assert achievement.is_secret is True
    assert achievement.badge_id == 9
    assert achievement.required_count == 1


def test_user_badge_joins_catalog_entry():
    user_badge = UserBadge.from_dict({
        "id": 100,
        "badgeId": 10,
        "progress": None,
        "earnedAt": "2024-05-01T10:00:00Z",
        "badge": {"id": 10, "name": "Early Bird"},
    })

    assert user_badge.progress == 0
    assert user_badge.displayed is False
    assert user_badge.earned_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
    assert user_badge.badge.name == "Early Bird"


def test_progress_record_round_trip_keys():
    record = UserAchievementProgress.from_dict({"achievementId": 5, "progress": 40, "completedAt": "not a date"})

    assert record.completed is False
    assert record.completed_at is None
    assert record.to_dict()["achievementId"] == 5


def test_progress_update_result_completed_defaults_to_record():
    result = ProgressUpdateResult.from_dict({"progress": {"achievementId": 5, "progress": 100, "completed": True}})

    assert result.completed is True
    assert result.badge is None


def test_completed_achievement_title():
    assert CompletedAchievement(5).title == "Achievement #5"
    named = CompletedAchievement(5, achievement=Achievement(id=5, name="Hundred Chats"))
    assert named.title == "Hundred Chats"
