from __future__ import annotations

import asyncio
import sys

from aiogram.types import BotCommand, BotCommandScopeDefault
from loguru import logger

from wichteln.bot import bot, dp, settings
from wichteln.core.logging import setup_logging
from wichteln.db import init_engine
from wichteln.services.schedule import parse_deadline


USERS_COMMANDS: dict[str, str] = {
    "start": "how the exchange works",
    "status": "deadline and participant count",
    "join": "register your nickname",
    "reveal": "see who you are gifting",
}


async def set_default_commands() -> None:
    await bot.set_my_commands(
        [
            BotCommand(command=command, description=description)
            for command, description in USERS_COMMANDS.items()
        ],
        scope=BotCommandScopeDefault(),
    )


async def on_startup() -> None:
    logger.info("bot starting...")

    await set_default_commands()

    bot_info = await bot.get_me()

    logger.info("Name     - {name}", name=bot_info.full_name)
    logger.info("Username - @{username}", username=bot_info.username)
    logger.info("ID       - {id}", id=bot_info.id)

    deadline = parse_deadline(settings.deadline)
    logger.info("Deadline - {status} {value}", status=deadline.status.value, value=deadline.value or "")

    logger.info("bot started")


async def on_shutdown() -> None:
    logger.info("bot stopping...")

    await dp.storage.close()

    await bot.session.close()

    logger.info("bot stopped")


async def main() -> None:
    setup_logging(settings.log_level, settings.log_path)
    init_engine(settings.database_url, create_schema=True)

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())


if __name__ == "__main__":
    if sys.platform != "win32" and not getattr(asyncio, "debug", False):
        import uvloop

        uvloop.install()

    asyncio.run(main())
