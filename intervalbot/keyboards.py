from typing import Iterable

from aiogram import F
from aiogram.types import InlineKeyboardMarkup, ReplyKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder, ReplyKeyboardBuilder

from .models import IntervalPreset
from .services.formatting import format_duration

MAIN_MENU_BUTTONS = [
    "Интервальный таймер",
    "Таймер отдыха",
    "Мои пресеты",
]

# reply buttons stay clickable while a text prompt is waiting for input
NOT_MENU_BUTTON = ~F.text.in_(MAIN_MENU_BUTTONS)

REST_QUICK_SECONDS = (60, 90, 120, 180)
REST_EXTEND_SECONDS = 15


def main_menu_keyboard() -> ReplyKeyboardMarkup:
    builder = ReplyKeyboardBuilder()
    for text in MAIN_MENU_BUTTONS:
        builder.button(text=text)
    builder.adjust(1, 2)
    return builder.as_markup(resize_keyboard=True, input_field_placeholder="Выберите действие")


def interval_start_keyboard(has_last: bool) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    if has_last:
        builder.button(text="Повторить прошлый", callback_data="interval:repeat")
    builder.button(text="Настроить", callback_data="interval:setup")
    builder.button(text="Пресеты", callback_data="presets:list")
    builder.adjust(1, 2)
    return builder.as_markup()


def interval_confirm_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text="Старт", callback_data="interval:go")
    builder.button(text="Сохранить пресет", callback_data="interval:save")
    builder.button(text="Отмена", callback_data="interval:cancel")
    builder.adjust(1, 2)
    return builder.as_markup()


def interval_control_keyboard(paused: bool) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text="⏹ Стоп", callback_data="interval:stop")
    builder.button(
        text="▶️ Продолжить" if paused else "⏸ Пауза",
        callback_data="interval:pause",
    )
    builder.button(text="⏭ Пропустить", callback_data="interval:skip")
    builder.adjust(3)
    return builder.as_markup()


def interval_result_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text="Ещё раз", callback_data="interval:repeat")
    builder.button(text="Сохранить пресет", callback_data="interval:save")
    builder.adjust(2)
    return builder.as_markup()


def rest_quick_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for seconds in REST_QUICK_SECONDS:
        builder.button(text=format_duration(seconds), callback_data=f"rest:start:{seconds}")
    builder.button(text="Своё время", callback_data="rest:custom")
    builder.adjust(4, 1)
    return builder.as_markup()


def rest_control_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.button(text=f"+{REST_EXTEND_SECONDS}с", callback_data=f"rest:extend:{REST_EXTEND_SECONDS}")
    builder.button(text="Пропустить", callback_data="rest:skip")
    builder.adjust(2)
    return builder.as_markup()


def presets_keyboard(presets: Iterable[IntervalPreset]) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for preset in presets:
        builder.button(text=f"▶️ {preset.name}", callback_data=f"presets:start:{preset.id}")
        builder.button(text="🗑", callback_data=f"presets:delete:{preset.id}")
    builder.adjust(2)
    return builder.as_markup()
