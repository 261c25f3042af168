import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


_ENV_PATH = os.path.join(os.path.dirname(__file__), "..", ".env")
load_dotenv(dotenv_path=_ENV_PATH, override=False)


def _get_env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _get_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return float(v)


def _get_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return int(v)


class Settings(BaseModel):
    GOOGLE_API_KEY: str
    GEMINI_MODEL: str
    LLM_TIMEOUT_S: float
    DATABASE_URL: str
    JWT_SECRET: str
    JWT_ALGORITHM: str
    CORS_ORIGINS: list[str]
    LOG_LEVEL: str
    DEBUG: bool
    APP_ENV: str
    HOST: str
    PORT: int

    @property
    def llm_enabled(self) -> bool:
        return bool(self.GOOGLE_API_KEY)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = _get_env("CORS_ORIGINS", "http://localhost:5173")
    return Settings(
        GOOGLE_API_KEY=_get_env("GOOGLE_API_KEY", ""),
        GEMINI_MODEL=_get_env("GEMINI_MODEL", "gemini-1.5-flash"),
        LLM_TIMEOUT_S=_get_float("LLM_TIMEOUT_S", 30.0),
        DATABASE_URL=_get_env("DATABASE_URL", "sqlite:///./fintrack.db"),
        JWT_SECRET=_get_env("JWT_SECRET", "change-me"),
        JWT_ALGORITHM=_get_env("JWT_ALGORITHM", "HS256"),
        CORS_ORIGINS=[o.strip() for o in origins.split(",") if o.strip()],
        LOG_LEVEL=_get_env("LOG_LEVEL", "INFO"),
        DEBUG=_get_bool("DEBUG", True),
        APP_ENV=_get_env("APP_ENV", "development"),
        HOST=_get_env("HOST", "0.0.0.0"),
        PORT=_get_int("PORT", 8000),
    )


settings = get_settings()
