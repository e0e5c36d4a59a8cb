# src/admin_dashboard/config.py

import logging
from pathlib import Path
from typing import Any, List, Union

from dotenv import load_dotenv
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("dashboard.config")

# .env is at the project root, two levels up from src/admin_dashboard/
CONFIG_FILE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT_DIR = CONFIG_FILE_DIR.parent.parent
ENV_FILE_PATH = PROJECT_ROOT_DIR / ".env"

if ENV_FILE_PATH.exists():
    load_dotenv(dotenv_path=ENV_FILE_PATH, override=True)
    logger.info("Loaded .env file from %s", ENV_FILE_PATH)
else:
    logger.info(".env file not found at %s, relying on environment variables", ENV_FILE_PATH)

VERIFY_EMAIL_NOTICE = "Va rugam sa verificati email-ul inainte de a va loga"


class Settings(BaseSettings):
    # === Remote API ===
    API_BASE_URL: str = "http://localhost:5000/api"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # === Credential Store ===
    CREDENTIAL_STORE_PATH: Path = Path.home() / ".admin_dashboard" / "credentials.json"

    # === Login notices ===
    NOTICE_DISMISS_SECONDS: float = 3.0
    # Comes in from the env as a comma-separated string, the validator turns it into List[str]
    STICKY_NOTICES: Union[str, List[str]] = [VERIFY_EMAIL_NOTICE]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("API_BASE_URL", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("STICKY_NOTICES", mode="before")
    @classmethod
    def parse_comma_separated_notices(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            if not v.strip():
                return []
            return [notice.strip() for notice in v.split(",") if notice.strip()]
        if isinstance(v, list):
            return v
        raise TypeError("STICKY_NOTICES: Expected a comma-separated string or a list.")

    @model_validator(mode="after")
    def check_final_notices_type(self) -> "Settings":
        if not all(isinstance(item, str) for item in self.STICKY_NOTICES):
            raise ValueError("All items in STICKY_NOTICES must be strings.")
        if self.NOTICE_DISMISS_SECONDS < 0:
            raise ValueError("NOTICE_DISMISS_SECONDS must not be negative.")
        return self


try:
    settings = Settings()
except Exception as e:
    logger.error("Error instantiating Settings: %s", e)
    raise
