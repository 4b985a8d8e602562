"""
Typed Models
Records exchanged with the backend and the payloads sent to it.
"""

from .identity import (
    Identity,
    LoginData,
    NewUser,
)
from .gamification import (
    Badge,
    Achievement,
    UserBadge,
    UserAchievementProgress,
    ProgressUpdateResult,
    CompletedAchievement,
    AchievementStatus,
)
from .api_access import (
    ApiKey,
    ApiUsage,
)

__all__ = [
    "Identity",
    "LoginData",
    "NewUser",
    "Badge",
    "Achievement",
    "UserBadge",
    "UserAchievementProgress",
    "ProgressUpdateResult",
    "CompletedAchievement",
    "AchievementStatus",
    "ApiKey",
    "ApiUsage",
]
