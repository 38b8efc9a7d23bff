from __future__ import annotations

import html

from aiogram import Router, types
from aiogram.filters import Command, CommandObject
from loguru import logger

from wichteln.bot.utils import GENERIC_ERROR_TEXT, SLOW_DOWN_TEXT, check_rate_limit, log_handler_exception
from wichteln.db import get_session
from wichteln.services import exchange
from wichteln.services.pairing import PairingError
from wichteln.services.rate_limit import RateLimiter
from wichteln.services.schedule import Deadline

router = Router()


@router.message(Command("join"))
async def join_command_handler(
    message: types.Message,
    command: CommandObject,
    deadline: Deadline,
    rate_limiter: RateLimiter,
) -> None:
    if not check_rate_limit(rate_limiter, message.from_user.id, "join"):
        await message.answer(SLOW_DOWN_TEXT)
        return

    try:
        with get_session() as session:
            result = exchange.register_participant(session, command.args, deadline)

        if result.added:
            logger.bind(user_id=message.from_user.id).info("Joined via bot")
        await message.answer(html.escape(result.message))
    except Exception as exc:
        log_handler_exception("join", message.from_user.id, message.chat.id, exc)
        await message.answer("Error saving your name. Please try again later.")


@router.message(Command("reveal"))
async def reveal_command_handler(
    message: types.Message,
    command: CommandObject,
    deadline: Deadline,
    rate_limiter: RateLimiter,
) -> None:
    if not check_rate_limit(rate_limiter, message.from_user.id, "reveal"):
        await message.answer(SLOW_DOWN_TEXT)
        return

    try:
        with get_session() as session:
            result = exchange.reveal_recipients(session, command.args, deadline)
        await message.answer(exchange.format_reveal(result))
    except PairingError as exc:
        await message.answer(html.escape(str(exc)))
    except Exception as exc:
        log_handler_exception("reveal", message.from_user.id, message.chat.id, exc)
        await message.answer(GENERIC_ERROR_TEXT)
