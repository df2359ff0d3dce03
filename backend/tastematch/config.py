import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(slots=True)
class BaseConfig:
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")
    FLASK_ENV: str = os.getenv("FLASK_ENV", "development")
    DEBUG: bool = os.getenv("FLASK_DEBUG", "0") == "1"
    TESTING: bool = False
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Spotify
    SPOTIFY_CLIENT_ID: str | None = os.getenv("SPOTIFY_CLIENT_ID")
    SPOTIFY_CLIENT_SECRET: str | None = os.getenv("SPOTIFY_CLIENT_SECRET")
    SPOTIFY_REDIRECT_URI: str | None = os.getenv("SPOTIFY_REDIRECT_URI")
    SPOTIFY_TIMEOUT_SECONDS: int = _env_int("SPOTIFY_TIMEOUT_SECONDS", 10)

    # Share links and post-login redirects
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:3000")

    # Comparison sessions live in memory only
    SESSION_TTL_SECONDS: int = _env_int("SESSION_TTL_SECONDS", 30 * 60)
    PLAYLIST_MAX_TRACKS: int = _env_int("PLAYLIST_MAX_TRACKS", 50)

    DEBUG_KEY: str | None = os.getenv("DEBUG_KEY")


@dataclass(slots=True)
class DevelopmentConfig(BaseConfig):
    DEBUG: bool = True


@dataclass(slots=True)
class ProductionConfig(BaseConfig):
    DEBUG: bool = False


@dataclass(slots=True)
class TestingConfig(BaseConfig):
    TESTING: bool = True
    SECRET_KEY: str = "test-secret"
    SPOTIFY_CLIENT_ID: str | None = "test-client-id"
    SPOTIFY_CLIENT_SECRET: str | None = "test-client-secret"
    SPOTIFY_REDIRECT_URI: str | None = "http://localhost/api/auth/callback/spotify"
    PUBLIC_BASE_URL: str = "http://localhost:3000"


_CONFIG_MAP = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(name: str | None) -> type[BaseConfig]:
    env_name = name or os.getenv("FLASK_ENV", "development").lower()
    return _CONFIG_MAP.get(env_name, DevelopmentConfig)
