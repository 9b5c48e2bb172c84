from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from .config import get_settings
from .db import create_schema
from .routers import interval, menu, presets, rest
from .ticker import get_ticker

logger = logging.getLogger(__name__)


async def main() -> None:
    app_settings = get_settings()
    logging.basicConfig(level=app_settings.log_level.upper())
    create_schema()
    bot = Bot(
        token=app_settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = Dispatcher()

    dp.include_router(menu.router)
    dp.include_router(interval.router)
    dp.include_router(rest.router)
    dp.include_router(presets.router)
    dp.include_router(menu.fallback_router)

    ticker = get_ticker()
    ticker.start()
    logger.info("Interval bot started")
    try:
        await dp.start_polling(bot)
    finally:
        ticker.shutdown()


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
