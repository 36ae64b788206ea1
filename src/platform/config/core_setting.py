from enum import StrEnum
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.platform.constant.path import STORAGE_DIR


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class StorageBackend(StrEnum):
    FILE = 'file'
    MEMORY = 'memory'


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Showbook'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Remote booking service (empty URL = offline, local storage only)
    BOOKING_API_URL: str = ''
    BOOKING_API_TIMEOUT: float = 5.0  # Request timeout (seconds)
    BOOKING_API_MAX_RETRIES: int = 3  # Attempts per pending write during sync
    BOOKING_API_RETRY_DELAY: float = 1.0  # Base backoff (seconds), multiplied by attempt

    # Local mirror
    STORAGE_BACKEND: StorageBackend = StorageBackend.FILE
    STORAGE_DIR: Path = STORAGE_DIR

    # Background reconciliation of locally committed writes
    PENDING_SYNC_INTERVAL: float = 30.0  # seconds, 0 disables; see di.start_pending_sync

    # Logging
    LOG_TO_FILE: bool = False

    @field_validator('BOOKING_API_URL', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str:
        if not v:
            return ''
        return str(v).strip().rstrip('/')

    @property
    def is_offline(self) -> bool:
        return not self.BOOKING_API_URL


settings = Settings()  # type: ignore
