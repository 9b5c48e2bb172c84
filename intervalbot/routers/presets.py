from __future__ import annotations

from typing import List, Optional, Tuple

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from ..db import get_db
from ..keyboards import presets_keyboard
from ..models import IntervalPreset
from ..services.formatting import describe_config
from ..services.interval import IntervalConfig
from ..services.presets import delete_preset, get_preset, list_presets, preset_config
from .interval import launch_interval

router = Router(name="presets")


def _presets_text(presets: List[IntervalPreset]) -> str:
    if not presets:
        return "Пресетов пока нет. Сохраните таймер после настройки или тренировки."
    lines = ["Мои пресеты:"]
    for preset in presets:
        lines.append(f"• {preset.name}: {describe_config(preset_config(preset))}")
    return "\n".join(lines)


async def _load_presets(telegram_id: int) -> List[IntervalPreset]:
    db = get_db()

    def load(session) -> List[IntervalPreset]:
        return list_presets(session, telegram_id)

    return await db.run(load)


async def _load_preset(telegram_id: int, preset_id: int) -> Optional[Tuple[str, IntervalConfig]]:
    db = get_db()

    def load(session) -> Optional[Tuple[str, IntervalConfig]]:
        preset = get_preset(session, telegram_id, preset_id)
        if preset is None:
            return None
        return preset.name, preset_config(preset)

    return await db.run(load)


@router.message(F.text == "Мои пресеты")
async def show_presets(message: Message, state: FSMContext) -> None:
    await state.clear()
    presets = await _load_presets(message.from_user.id)
    await message.answer(_presets_text(presets), reply_markup=presets_keyboard(presets))


@router.callback_query(F.data == "presets:list")
async def list_presets_callback(callback: CallbackQuery) -> None:
    if callback.message is None:
        return
    presets = await _load_presets(callback.from_user.id)
    await callback.answer()
    await callback.message.answer(_presets_text(presets), reply_markup=presets_keyboard(presets))


@router.callback_query(F.data.startswith("presets:start:"))
async def start_preset(callback: CallbackQuery, state: FSMContext) -> None:
    if callback.message is None:
        return
    preset_id = int(callback.data.split(":")[2])
    loaded = await _load_preset(callback.from_user.id, preset_id)
    if loaded is None:
        await callback.answer("Пресет не найден", show_alert=True)
        return
    name, config = loaded
    await callback.answer(f"Запускаю «{name}»")
    await launch_interval(callback.message, state, callback.from_user.id, config)


@router.callback_query(F.data.startswith("presets:delete:"))
async def remove_preset(callback: CallbackQuery) -> None:
    if callback.message is None:
        return
    preset_id = int(callback.data.split(":")[2])
    telegram_id = callback.from_user.id
    deleted = await get_db().run(lambda session: delete_preset(session, telegram_id, preset_id))
    await callback.answer("Удалено" if deleted else "Пресет не найден")
    presets = await _load_presets(telegram_id)
    await callback.message.edit_text(_presets_text(presets), reply_markup=presets_keyboard(presets))
