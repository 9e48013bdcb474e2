from datetime import tzinfo
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Basic auth settings
    auth_username: str
    auth_password: str

    # Remote service settings
    sync_backend: Literal["local", "appsync"] = "local"
    local_store_path: str = "data/notes.json"
    appsync_url: str = ""
    appsync_api_key: str = ""
    appsync_timeout: float = 30.0

    # Display settings
    timezone: str | None = None  # IANA name; the server's local zone when unset

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL

    @property
    def display_tz(self) -> tzinfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None


settings = Settings()  # type: ignore
