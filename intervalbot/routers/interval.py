from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from ..config import get_settings
from ..db import get_db
from ..keyboards import (
    NOT_MENU_BUTTON,
    interval_confirm_keyboard,
    interval_control_keyboard,
    interval_result_keyboard,
    interval_start_keyboard,
)
from ..services.formatting import (
    describe_config,
    format_duration,
    parse_duration,
    parse_rounds,
    render_interval,
    render_result,
    render_transition,
)
from ..services.interval import IntervalConfig, start
from ..services.presets import PresetError, save_preset
from ..services.users import last_interval, remember_last_interval
from ..states import IntervalSetup, PresetNaming
from ..ticker import IntervalRun, Transition, get_ticker

router = Router(name="interval")
logger = logging.getLogger(__name__)


def _config_from_data(data: Dict[str, Any], lead_in_seconds: int = 0) -> Optional[IntervalConfig]:
    try:
        return IntervalConfig(
            rounds=int(data["rounds"]),
            work_seconds=int(data["work_seconds"]),
            rest_seconds=int(data["rest_seconds"]),
            lead_in_seconds=lead_in_seconds,
        )
    except (KeyError, TypeError, ValueError):
        return None


def _config_to_data(config: IntervalConfig) -> Dict[str, int]:
    return {
        "rounds": config.rounds,
        "work_seconds": config.work_seconds,
        "rest_seconds": config.rest_seconds,
    }


async def _load_last_interval(telegram_id: int) -> Optional[IntervalConfig]:
    db = get_db()

    def load(session) -> Optional[IntervalConfig]:
        return last_interval(session, telegram_id)

    return await db.run(load)


async def launch_interval(message: Message, state: FSMContext, telegram_id: int, config: IntervalConfig) -> None:
    """Send the timer card and hand the run over to the ticker."""
    settings = get_settings()
    config = IntervalConfig(
        rounds=config.rounds,
        work_seconds=config.work_seconds,
        rest_seconds=config.rest_seconds,
        lead_in_seconds=settings.lead_in_seconds,
    )
    controller = start(config, countdown_from=settings.countdown_seconds)
    card = await message.answer(render_interval(controller), reply_markup=interval_control_keyboard(False))

    async def on_update(run: IntervalRun, transitions: List[Transition]) -> None:
        await card.edit_text(
            render_interval(run.controller, run.title),
            reply_markup=interval_control_keyboard(run.controller.is_paused),
        )
        # edits are silent, a new message makes the phone buzz on a phase change
        if transitions:
            await card.answer(render_transition(transitions[-1][1], run.controller))

    async def on_finish(run: IntervalRun, durations: List[int], transitions: List[Transition]) -> None:
        await card.edit_text(render_interval(run.controller, run.title))
        await card.answer(render_result(durations, run.controller.config), reply_markup=interval_result_keyboard())

    get_ticker().start_run(card.chat.id, controller, on_update, on_finish)
    await state.set_state(None)
    await state.update_data(**_config_to_data(config))
    await get_db().run(lambda session: remember_last_interval(session, telegram_id, config))


@router.message(F.text == "Интервальный таймер")
async def show_interval_menu(message: Message, state: FSMContext) -> None:
    await state.clear()
    last = await _load_last_interval(message.from_user.id)
    text = "Интервальный таймер"
    if last is not None:
        text += f"\nПрошлый раз: {describe_config(last)}"
    await message.answer(text, reply_markup=interval_start_keyboard(last is not None))


@router.callback_query(F.data == "interval:setup")
async def ask_rounds(callback: CallbackQuery, state: FSMContext) -> None:
    if callback.message is None:
        return
    settings = get_settings()
    await callback.answer()
    await callback.message.answer(
        f"Сколько раундов? (1-{settings.max_rounds}, «-» — {settings.default_rounds} по умолчанию)"
    )
    await state.set_state(IntervalSetup.rounds)


@router.message(IntervalSetup.rounds, NOT_MENU_BUTTON)
async def handle_rounds(message: Message, state: FSMContext) -> None:
    settings = get_settings()
    try:
        rounds = parse_rounds(message.text or "", settings.default_rounds, settings.max_rounds)
    except ValueError:
        await message.answer(f"Введите целое число от 1 до {settings.max_rounds} или «-»")
        return
    await state.update_data(rounds=rounds)
    await message.answer(
        "Длительность работы (например, 30, 0:45 или 2м; "
        f"«-» — {format_duration(settings.default_work_seconds)})"
    )
    await state.set_state(IntervalSetup.work)


@router.message(IntervalSetup.work, NOT_MENU_BUTTON)
async def handle_work(message: Message, state: FSMContext) -> None:
    settings = get_settings()
    try:
        work_seconds = parse_duration(message.text or "", default=settings.default_work_seconds)
    except ValueError:
        await message.answer("Не понял время. Примеры: 30, 0:45, 2м")
        return
    if not 1 <= work_seconds <= settings.max_phase_seconds:
        await message.answer(f"Работа должна длиться от 1 до {settings.max_phase_seconds} секунд")
        return
    await state.update_data(work_seconds=work_seconds)
    await message.answer(
        f"Длительность отдыха (0 — без отдыха, «-» — {format_duration(settings.default_rest_seconds)})"
    )
    await state.set_state(IntervalSetup.rest)


@router.message(IntervalSetup.rest, NOT_MENU_BUTTON)
async def handle_rest(message: Message, state: FSMContext) -> None:
    settings = get_settings()
    try:
        rest_seconds = parse_duration(message.text or "", default=settings.default_rest_seconds)
    except ValueError:
        await message.answer("Не понял время. Примеры: 15, 1:00, 1м")
        return
    if not 0 <= rest_seconds <= settings.max_phase_seconds:
        await message.answer(f"Отдых должен длиться от 0 до {settings.max_phase_seconds} секунд")
        return
    await state.update_data(rest_seconds=rest_seconds)
    config = _config_from_data(await state.get_data())
    if config is None:
        await message.answer("Не удалось собрать таймер, начните заново")
        await state.clear()
        return
    await message.answer(describe_config(config), reply_markup=interval_confirm_keyboard())
    await state.set_state(IntervalSetup.confirm)


@router.callback_query(F.data == "interval:go")
async def confirm_interval(callback: CallbackQuery, state: FSMContext) -> None:
    if callback.message is None:
        return
    config = _config_from_data(await state.get_data())
    if config is None:
        await callback.answer("Сначала настройте таймер", show_alert=True)
        return
    await callback.answer()
    await launch_interval(callback.message, state, callback.from_user.id, config)


@router.callback_query(F.data == "interval:repeat")
async def repeat_interval(callback: CallbackQuery, state: FSMContext) -> None:
    if callback.message is None:
        return
    config = await _load_last_interval(callback.from_user.id)
    if config is None:
        await callback.answer("Нет прошлого таймера", show_alert=True)
        return
    await callback.answer()
    await launch_interval(callback.message, state, callback.from_user.id, config)


@router.callback_query(F.data == "interval:cancel")
async def cancel_interval(callback: CallbackQuery, state: FSMContext) -> None:
    await state.clear()
    await callback.answer("Отменено")
    if callback.message is not None:
        await callback.message.edit_reply_markup(reply_markup=None)


@router.callback_query(F.data == "interval:pause")
async def pause_interval(callback: CallbackQuery) -> None:
    if callback.message is None:
        return
    paused = await get_ticker().toggle_pause(callback.message.chat.id)
    if paused is None:
        await callback.answer("Таймер уже остановлен")
        return
    await callback.answer("Пауза" if paused else "Продолжаем")


@router.callback_query(F.data == "interval:skip")
async def skip_phase(callback: CallbackQuery) -> None:
    if callback.message is None:
        return
    if not await get_ticker().skip(callback.message.chat.id):
        await callback.answer("Таймер уже остановлен")
        return
    await callback.answer()


@router.callback_query(F.data == "interval:stop")
async def stop_interval(callback: CallbackQuery) -> None:
    if callback.message is None:
        return
    ticker = get_ticker()
    chat_id = callback.message.chat.id
    run = ticker.get_run(chat_id)
    durations = ticker.stop_run(chat_id)
    if run is None or durations is None:
        await callback.answer("Таймер уже остановлен")
        return
    await callback.answer("Остановлено")
    await callback.message.edit_reply_markup(reply_markup=None)
    await callback.message.answer(render_result(durations, run.controller.config), reply_markup=interval_result_keyboard())


@router.callback_query(F.data == "interval:save")
async def ask_preset_name(callback: CallbackQuery, state: FSMContext) -> None:
    if callback.message is None:
        return
    if _config_from_data(await state.get_data()) is None:
        await callback.answer("Нечего сохранять", show_alert=True)
        return
    await callback.answer()
    await callback.message.answer("Как назвать пресет?")
    await state.set_state(PresetNaming.name)


@router.message(PresetNaming.name, NOT_MENU_BUTTON)
async def handle_preset_name(message: Message, state: FSMContext) -> None:
    config = _config_from_data(await state.get_data())
    if config is None:
        await message.answer("Нечего сохранять, настройте таймер заново")
        await state.clear()
        return
    name = message.text or ""
    telegram_id = message.from_user.id
    try:
        preset = await get_db().run(lambda session: save_preset(session, telegram_id, name, config))
    except PresetError as exc:
        await message.answer(str(exc))
        return
    await message.answer(f"Пресет «{preset.name}» сохранён: {describe_config(config)}")
    await state.set_state(None)
