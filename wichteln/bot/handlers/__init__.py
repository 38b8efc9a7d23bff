from aiogram import Router

from wichteln.bot.handlers import draw, start

router = Router()
router.include_router(start.router)
router.include_router(draw.router)
