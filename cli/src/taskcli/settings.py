"""Settings loaded from environment variables (and a local .env)."""

import os

from dotenv import load_dotenv

DEFAULT_HOME = "~/.tasktrack"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_home() -> str:
    return os.path.expanduser(os.getenv("TASKTRACK_HOME", DEFAULT_HOME))


def load_config() -> dict:
    load_dotenv(override=False)
    home = get_home()
    return {
        "home": home,
        "database_url": os.getenv("TASKTRACK_DATABASE_URL") or f"sqlite:///{os.path.join(home, 'tasktrack.db')}",
        "pool_size": max(1, _env_int("TASKTRACK_POOL_SIZE", 5)),
        "pool_timeout": max(0.0, _env_float("TASKTRACK_POOL_TIMEOUT", 5.0)),
        "log_level": os.getenv("TASKTRACK_LOG_LEVEL", "WARNING").upper(),
    }
