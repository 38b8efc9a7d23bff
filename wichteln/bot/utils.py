from __future__ import annotations

from typing import Optional

from loguru import logger

from wichteln.services.rate_limit import RateLimiter

SLOW_DOWN_TEXT = "You're doing that too often. Please slow down."
GENERIC_ERROR_TEXT = "Something went wrong. Please try again later."


def check_rate_limit(rate_limiter: RateLimiter, user_id: int, action: str) -> bool:
    result = rate_limiter.check(user_id, action)
    if not result.allowed:
        logger.bind(user_id=user_id, action=action, retry_after=round(result.retry_after, 1)).debug(
            "Rate limited"
        )
    return result.allowed


def log_handler_exception(action: str, user_id: Optional[int], chat_id: Optional[int], error: Exception) -> None:
    logger.bind(action=action, user_id=user_id, chat_id=chat_id).exception(
        "Handler error: {error}", error=str(error)
    )
