import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime configuration read from the environment (and .env)."""

    database_url: str = "sqlite:///./devcamper.db"
    sql_echo: bool = False
    max_file_upload: int = 1_000_000
    file_upload_path: str = "./public/uploads"
    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "DevCamperAPI/1.0"
    geocoder_timeout: float = 10.0
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            sql_echo=_env_bool("SQL_ECHO"),
            max_file_upload=int(os.getenv("MAX_FILE_UPLOAD", str(cls.max_file_upload))),
            file_upload_path=os.getenv("FILE_UPLOAD_PATH", cls.file_upload_path),
            geocoder_base_url=os.getenv("GEOCODER_BASE_URL", cls.geocoder_base_url).rstrip("/"),
            geocoder_user_agent=os.getenv("GEOCODER_USER_AGENT", cls.geocoder_user_agent),
            geocoder_timeout=float(os.getenv("GEOCODER_TIMEOUT", str(cls.geocoder_timeout))),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            cors_origins=_env_list("CORS_ORIGINS"),
        )


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings (overridable as a FastAPI dependency)."""
    return Settings.from_env()
