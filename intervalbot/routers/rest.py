from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from ..config import get_settings
from ..keyboards import NOT_MENU_BUTTON, rest_control_keyboard, rest_quick_keyboard
from ..services.formatting import parse_duration, render_rest
from ..services.rest import RestCountdown
from ..states import RestSetup
from ..ticker import RestRun, get_ticker

router = Router(name="rest")
logger = logging.getLogger(__name__)


async def _launch_rest(message: Message, seconds: int) -> None:
    countdown = RestCountdown(seconds)
    card = await message.answer(render_rest(countdown), reply_markup=rest_control_keyboard())

    async def on_update(rest: RestRun) -> None:
        await card.edit_text(render_rest(rest.countdown), reply_markup=rest_control_keyboard())

    async def on_finish(rest: RestRun) -> None:
        await card.edit_text(render_rest(rest.countdown))

    get_ticker().start_rest(card.chat.id, countdown, on_update, on_finish)


def _validate_rest(seconds: int) -> bool:
    return 1 <= seconds <= get_settings().max_phase_seconds


@router.message(F.text == "Таймер отдыха")
async def show_rest_menu(message: Message, state: FSMContext) -> None:
    await state.clear()
    await message.answer("Сколько отдыхаем?", reply_markup=rest_quick_keyboard())


@router.message(Command("rest"))
async def rest_command(message: Message, command: CommandObject) -> None:
    if not command.args:
        await message.answer("Сколько отдыхаем?", reply_markup=rest_quick_keyboard())
        return
    try:
        seconds = parse_duration(command.args)
    except ValueError:
        await message.answer("Пример: /rest 90 или /rest 2м")
        return
    if not _validate_rest(seconds):
        await message.answer(f"Отдых должен длиться от 1 до {get_settings().max_phase_seconds} секунд")
        return
    await _launch_rest(message, seconds)


@router.callback_query(F.data.startswith("rest:start:"))
async def quick_rest(callback: CallbackQuery) -> None:
    if callback.message is None:
        return
    seconds = int(callback.data.split(":")[2])
    await callback.answer()
    await _launch_rest(callback.message, seconds)


@router.callback_query(F.data == "rest:custom")
async def ask_custom_rest(callback: CallbackQuery, state: FSMContext) -> None:
    if callback.message is None:
        return
    await callback.answer()
    await callback.message.answer("Введите время отдыха (например, 75 или 1:15)")
    await state.set_state(RestSetup.seconds)


@router.message(RestSetup.seconds, NOT_MENU_BUTTON)
async def handle_custom_rest(message: Message, state: FSMContext) -> None:
    try:
        seconds = parse_duration(message.text or "")
    except ValueError:
        await message.answer("Не понял время. Примеры: 75, 1:15, 2м")
        return
    if not _validate_rest(seconds):
        await message.answer(f"Отдых должен длиться от 1 до {get_settings().max_phase_seconds} секунд")
        return
    await state.clear()
    await _launch_rest(message, seconds)


@router.callback_query(F.data.startswith("rest:extend:"))
async def extend_rest(callback: CallbackQuery) -> None:
    if callback.message is None:
        return
    seconds = int(callback.data.split(":")[2])
    rest = await get_ticker().extend_rest(callback.message.chat.id, seconds)
    if rest is None:
        await callback.answer("Отдых уже закончился")
        return
    await callback.answer(f"+{seconds}с")


@router.callback_query(F.data == "rest:skip")
async def skip_rest(callback: CallbackQuery) -> None:
    if callback.message is None:
        return
    countdown = get_ticker().stop_rest(callback.message.chat.id)
    if countdown is None:
        await callback.answer("Отдых уже закончился")
        return
    await callback.answer("Отдых пропущен")
    await callback.message.edit_text("Отдых пропущен. Следующий подход!")
