from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from ..db import get_db
from ..keyboards import main_menu_keyboard
from ..services.users import get_or_create_user
from ..ticker import get_ticker

router = Router(name="menu")
fallback_router = Router(name="fallback")
logger = logging.getLogger(__name__)


@router.message(CommandStart())
async def handle_start(message: Message) -> None:
    db = get_db()
    telegram_id = message.from_user.id

    await db.run(lambda session: get_or_create_user(session, telegram_id))
    await message.answer(
        "Привет! Я веду интервальные тренировки и отсчитываю отдых между подходами.",
        reply_markup=main_menu_keyboard(),
    )


@router.message(Command("menu"))
async def handle_menu(message: Message) -> None:
    await message.answer("Главное меню:", reply_markup=main_menu_keyboard())


@router.message(Command("cancel"))
async def handle_cancel(message: Message, state: FSMContext) -> None:
    ticker = get_ticker()
    chat_id = message.chat.id
    stopped_run = ticker.stop_run(chat_id) is not None
    stopped_rest = ticker.stop_rest(chat_id) is not None
    await state.clear()
    if stopped_run or stopped_rest:
        logger.info("Timers cancelled by /cancel in chat %s", chat_id)
        await message.answer("Таймеры остановлены.", reply_markup=main_menu_keyboard())
    else:
        await message.answer("Активных таймеров нет.", reply_markup=main_menu_keyboard())


@router.message(F.text == "Главное меню")
async def handle_explicit_menu(message: Message) -> None:
    await message.answer("Возвращаю меню.", reply_markup=main_menu_keyboard())


@fallback_router.message()
async def handle_unknown(message: Message) -> None:
    await message.answer(
        "Не понял сообщение. Используйте меню для выбора действия.",
        reply_markup=main_menu_keyboard(),
    )
