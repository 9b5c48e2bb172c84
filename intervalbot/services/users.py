from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from ..models import User
from .interval import IntervalConfig


def get_or_create_user(session: Session, telegram_id: int) -> User:
    user = session.query(User).filter_by(telegram_id=telegram_id).one_or_none()
    if user is None:
        user = User(telegram_id=telegram_id)
        session.add(user)
        session.flush()
    return user


def remember_last_interval(session: Session, telegram_id: int, config: IntervalConfig) -> User:
    user = get_or_create_user(session, telegram_id)
    user.last_rounds = config.rounds
    user.last_work_seconds = config.work_seconds
    user.last_rest_seconds = config.rest_seconds
    return user


def last_interval(session: Session, telegram_id: int) -> Optional[IntervalConfig]:
    user = session.query(User).filter_by(telegram_id=telegram_id).one_or_none()
    if user is None or not user.has_last_interval:
        return None
    return IntervalConfig(
        rounds=user.last_rounds,
        work_seconds=user.last_work_seconds,
        rest_seconds=user.last_rest_seconds,
    )
