import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///data/wichteln.db"


@dataclass(frozen=True)
class Settings:
    bot_token: str
    database_url: str
    deadline: Optional[str]
    log_level: str
    log_path: str
    rate_limit_calls: int
    rate_limit_period: int


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a whole number, got {raw!r}.") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def load_settings() -> Settings:
    bot_token = os.getenv("BOT_TOKEN")
    database_url = os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
    deadline = os.getenv("DEADLINE")
    log_level = os.getenv("LOG_LEVEL", "INFO")
    log_path = os.getenv("LOG_PATH", "logs/wichteln.log")

    if not bot_token:
        raise ValueError("BOT_TOKEN is required. Set it in the environment or .env file.")

    return Settings(
        bot_token=bot_token,
        database_url=database_url,
        deadline=deadline,
        log_level=log_level,
        log_path=log_path,
        rate_limit_calls=_positive_int("RATE_LIMIT_CALLS", 5),
        rate_limit_period=_positive_int("RATE_LIMIT_PERIOD", 10),
    )
