from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import IntervalPreset
from .interval import IntervalConfig
from .users import get_or_create_user

MAX_PRESETS = 10
MAX_NAME_LENGTH = 64


class PresetError(ValueError):
    """Raised when a preset cannot be stored."""


def save_preset(session: Session, telegram_id: int, name: str, config: IntervalConfig) -> IntervalPreset:
    """Create or overwrite a named preset for the user."""
    clean_name = " ".join((name or "").split())
    if not clean_name:
        raise PresetError("Название не может быть пустым")
    if len(clean_name) > MAX_NAME_LENGTH:
        raise PresetError(f"Название длиннее {MAX_NAME_LENGTH} символов")

    user = get_or_create_user(session, telegram_id)
    preset = (
        session.query(IntervalPreset)
        .filter(IntervalPreset.user_id == user.id, IntervalPreset.name == clean_name)
        .one_or_none()
    )
    if preset is None:
        count = session.query(IntervalPreset).filter(IntervalPreset.user_id == user.id).count()
        if count >= MAX_PRESETS:
            raise PresetError(f"Можно хранить не больше {MAX_PRESETS} пресетов")
        preset = IntervalPreset(user_id=user.id, name=clean_name)
        session.add(preset)
    preset.rounds = config.rounds
    preset.work_seconds = config.work_seconds
    preset.rest_seconds = config.rest_seconds
    session.flush()
    return preset


def list_presets(session: Session, telegram_id: int) -> List[IntervalPreset]:
    user = get_or_create_user(session, telegram_id)
    return (
        session.query(IntervalPreset)
        .filter(IntervalPreset.user_id == user.id)
        .order_by(IntervalPreset.name)
        .all()
    )


def get_preset(session: Session, telegram_id: int, preset_id: int) -> Optional[IntervalPreset]:
    user = get_or_create_user(session, telegram_id)
    return (
        session.query(IntervalPreset)
        .filter(IntervalPreset.id == preset_id, IntervalPreset.user_id == user.id)
        .one_or_none()
    )


def delete_preset(session: Session, telegram_id: int, preset_id: int) -> bool:
    preset = get_preset(session, telegram_id, preset_id)
    if preset is None:
        return False
    session.delete(preset)
    return True


def preset_config(preset: IntervalPreset, lead_in_seconds: int = 0) -> IntervalConfig:
    return IntervalConfig(
        rounds=preset.rounds,
        work_seconds=preset.work_seconds,
        rest_seconds=preset.rest_seconds,
        lead_in_seconds=lead_in_seconds,
    )
