from aiogram import Router, types
from aiogram.filters import Command, CommandStart

from wichteln.bot.utils import GENERIC_ERROR_TEXT, SLOW_DOWN_TEXT, check_rate_limit, log_handler_exception
from wichteln.db import get_session
from wichteln.services import exchange
from wichteln.services.rate_limit import RateLimiter
from wichteln.services.schedule import Deadline

router = Router()

HELP_TEXT = (
    "Hello! I run the Wichteln gift exchange.\n\n"
    "Before the deadline, register with /join followed by your nickname, "
    "e.g. <code>/join Starlight</code>.\n\n"
    "After the deadline the draw happens automatically. Send /reveal with "
    "the same nickname to see who you are gifting.\n\n"
    "Use /status to see the deadline and how many people have joined."
)


@router.message(CommandStart())
async def command_start_handler(message: types.Message, rate_limiter: RateLimiter) -> None:
    if not check_rate_limit(rate_limiter, message.from_user.id, "start"):
        await message.answer(SLOW_DOWN_TEXT)
        return

    await message.answer(HELP_TEXT)


@router.message(Command("status"))
async def status_command_handler(
    message: types.Message,
    deadline: Deadline,
    rate_limiter: RateLimiter,
) -> None:
    if not check_rate_limit(rate_limiter, message.from_user.id, "status"):
        await message.answer(SLOW_DOWN_TEXT)
        return

    try:
        with get_session() as session:
            snapshot = exchange.get_status(session, deadline)
        await message.answer(exchange.format_status(snapshot))
    except Exception as exc:
        log_handler_exception("status", message.from_user.id, message.chat.id, exc)
        await message.answer(GENERIC_ERROR_TEXT)
