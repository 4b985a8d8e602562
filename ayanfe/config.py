"""
Client Settings
Environment-driven configuration for the API client and state managers.

Values are read from the process environment after loading a local `.env`
file, so a deployment only has to export the variables it wants to change.

    AYANFE_API_URL                 backend origin
    AYANFE_API_PREFIX              prefix of every REST route
    AYANFE_REQUEST_TIMEOUT         per-request timeout in seconds
    AYANFE_ACHIEVEMENT_TEST_MODE   send ?test=true on achievement completion
    AYANFE_NOTIFICATION_HISTORY    notifications kept by the Notifier
    AYANFE_LOG_LEVEL               root log level
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass
class Settings:
    """Resolved client configuration"""
    api_url: str = "http://localhost:5000"
    api_prefix: str = "/api"
    request_timeout: float = 10.0
    achievement_test_mode: bool = False
    notification_history: int = 50
    log_level: str = "INFO"

    def __post_init__(self):
        self.api_url = self.api_url.rstrip("/")
        if self.api_prefix and not self.api_prefix.startswith("/"):
            self.api_prefix = "/" + self.api_prefix
        self.api_prefix = self.api_prefix.rstrip("/")

    @property
    def base_url(self) -> str:
        """Origin plus route prefix"""
        return f"{self.api_url}{self.api_prefix}"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            api_url=os.environ.get("AYANFE_API_URL", cls.api_url),
            api_prefix=os.environ.get("AYANFE_API_PREFIX", cls.api_prefix),
            request_timeout=float(os.environ.get("AYANFE_REQUEST_TIMEOUT", cls.request_timeout)),
            achievement_test_mode=_env_bool("AYANFE_ACHIEVEMENT_TEST_MODE", cls.achievement_test_mode),
            notification_history=int(os.environ.get("AYANFE_NOTIFICATION_HISTORY", cls.notification_history)),
            log_level=os.environ.get("AYANFE_LOG_LEVEL", cls.log_level).upper(),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings singleton"""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Apply the configured log level to the root logger"""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
