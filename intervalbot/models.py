from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    telegram_id: Mapped[int] = mapped_column(Integer, unique=True, index=True, nullable=False)
    last_rounds: Mapped[Optional[int]] = mapped_column(Integer)
    last_work_seconds: Mapped[Optional[int]] = mapped_column(Integer)
    last_rest_seconds: Mapped[Optional[int]] = mapped_column(Integer)

    presets: Mapped[List["IntervalPreset"]] = relationship(
        "IntervalPreset", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def has_last_interval(self) -> bool:
        return None not in (self.last_rounds, self.last_work_seconds, self.last_rest_seconds)


class IntervalPreset(Base):
    __tablename__ = "interval_presets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    rounds: Mapped[int] = mapped_column(Integer, nullable=False)
    work_seconds: Mapped[int] = mapped_column(Integer, nullable=False)
    rest_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    user: Mapped[User] = relationship("User", back_populates="presets")

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_preset_user_name"),)
