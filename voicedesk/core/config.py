"""Configuration system for the voice desk back office."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


@dataclass(slots=True)
class DatabaseSettings:
    """Connection details for the transactional database."""

    driver: str
    host: str
    port: int
    user: str
    password: str
    name: str

    @property
    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy compatible URL."""

        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(slots=True)
class VoicePlatformSettings:
    """Access details for the hosted voice-agent platform API."""

    base_url: str
    api_key: str
    timeout: float = 30.0

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    voice_platform: VoicePlatformSettings
    sqlalchemy_echo: bool = False
    log_level: str = "INFO"
    log_dir: Path | None = Path("logs")

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        db = DatabaseSettings(
            driver=_get_env("DB_DRIVER", "mysql+pymysql"),
            host=_get_env("DB_HOST", "127.0.0.1"),
            port=int(_get_env("DB_PORT", "3306")),
            user=_get_env("DB_USER", "voicedesk"),
            password=_get_env("DB_PASSWORD", "voicedesk"),
            name=_get_env("DB_NAME", "voicedesk"),
        )
        voice_platform = VoicePlatformSettings(
            base_url=_get_env("VOICE_PLATFORM_BASE_URL", "https://api.retellai.com").rstrip("/"),
            api_key=_get_env("VOICE_PLATFORM_API_KEY", ""),
            timeout=float(_get_env("VOICE_PLATFORM_TIMEOUT", "30")),
        )
        echo_flag = _get_env("SQLALCHEMY_ECHO", "0")
        log_dir = _get_env("LOG_DIR", "logs")
        return cls(
            database=db,
            voice_platform=voice_platform,
            sqlalchemy_echo=echo_flag not in {"0", "false", "False"},
            log_level=_get_env("LOG_LEVEL", "INFO").upper(),
            log_dir=Path(log_dir) if log_dir else None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .logger import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": {
                "driver": settings.database.driver,
                "host": settings.database.host,
                "port": settings.database.port,
                "name": settings.database.name,
                "user": settings.database.user,
            },
            "voice_platform": {
                "base_url": settings.voice_platform.base_url,
                "configured": settings.voice_platform.configured,
                "timeout": settings.voice_platform.timeout,
            },
        },
    )
    return settings
