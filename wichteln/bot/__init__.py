from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from wichteln.bot.handlers import router as handlers_router
from wichteln.core.config import load_settings
from wichteln.services.rate_limit import RateLimiter
from wichteln.services.schedule import parse_deadline

settings = load_settings()

bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))

# Handlers receive these as keyword arguments by name.
dp = Dispatcher(
    settings=settings,
    deadline=parse_deadline(settings.deadline),
    rate_limiter=RateLimiter(settings.rate_limit_calls, settings.rate_limit_period),
)
dp.include_router(handlers_router)
