from __future__ import annotations

import re
from typing import List, Optional, Sequence

from .interval import IntervalConfig, IntervalPhase, IntervalPhaseController
from .rest import RestCountdown

_DURATION_RE = re.compile(r"^(?:(\d+):([0-5]\d)|(\d+)\s*(s|с|сек|m|м|мин)?)$")
DEFAULT_REPLIES = {"-", "—", "по умолчанию"}


def format_time(seconds: int) -> str:
    seconds = max(seconds, 0)
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_duration(seconds: int) -> str:
    seconds = max(seconds, 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    if minutes:
        return f"{minutes}:{secs:02d}"
    return f"{secs}с"


def parse_duration(text: str, default: Optional[int] = None) -> int:
    """Parse '90', '1:30', '90с' or '2м' into seconds; '-' means ``default`` when one is given."""
    value = (text or "").strip().lower()
    if default is not None and value in DEFAULT_REPLIES:
        return default
    match = _DURATION_RE.match(value)
    if match is None:
        raise ValueError(f"not a duration: {text!r}")
    minutes, secs, amount, unit = match.groups()
    if minutes is not None:
        return int(minutes) * 60 + int(secs)
    if unit in {"m", "м", "мин"}:
        return int(amount) * 60
    return int(amount)


def parse_rounds(text: str, default: int, max_rounds: int) -> int:
    value = (text or "").strip().lower()
    if value in DEFAULT_REPLIES:
        return default
    if not value.isdigit() or not 1 <= int(value) <= max_rounds:
        raise ValueError(f"not a round count: {text!r}")
    return int(value)


def describe_config(config: IntervalConfig) -> str:
    return (
        f"{config.rounds} × {format_duration(config.work_seconds)} работа / "
        f"{format_duration(config.rest_seconds)} отдых"
    )


def _round_dots(controller: IntervalPhaseController) -> str:
    dots: List[str] = []
    for round_no in range(1, controller.config.rounds + 1):
        if round_no < controller.current_round or controller.is_complete:
            dots.append("●")
        elif round_no == controller.current_round:
            dots.append("◉")
        else:
            dots.append("○")
    return "".join(dots)


def render_interval(controller: IntervalPhaseController, title: str = "Интервалы") -> str:
    phase = controller.phase
    lines = [f"<b>{title}</b>", f"<b>{phase.label}</b>"]
    if phase is IntervalPhase.COMPLETE:
        lines.append(f"Раундов записано: {len(controller.round_durations)} из {controller.config.rounds}")
        return "\n".join(lines)

    lines.append(f"<code>{format_time(controller.seconds_remaining)}</code>")
    if phase is IntervalPhase.GET_READY:
        lines.append(describe_config(controller.config))
    else:
        lines.append(_round_dots(controller))
        lines.append(f"Раунд {controller.current_round} из {controller.config.rounds}")
        lines.append(f"Всего осталось: {format_time(controller.total_remaining())}")
    if controller.is_paused:
        lines.append("⏸ Пауза")
    return "\n".join(lines)


def render_rest(countdown: RestCountdown) -> str:
    if not countdown.is_running:
        return "Отдых окончен. Следующий подход!"
    display = format_time(countdown.remaining) if countdown.is_long else str(countdown.remaining)
    filled = round(countdown.progress * 10)
    bar = "▓" * filled + "░" * (10 - filled)
    marker = "⚠️ " if countdown.is_urgent else ""
    return f"{marker}Отдых: {display}\n{bar}"


def render_result(durations: Sequence[int], config: IntervalConfig) -> str:
    if not durations:
        return "Интервалы остановлены, раунды не записаны."
    # rounds ended with zero work are not recorded, so entries are not numbered
    lines = [f"Интервалы завершены: записано {len(durations)} из {config.rounds} раундов"]
    for seconds in durations:
        partial = "" if seconds >= config.work_seconds else " (неполный)"
        lines.append(f"• {format_duration(seconds)}{partial}")
    lines.append(f"Время работы: {format_duration(sum(durations))}")
    return "\n".join(lines)


def render_transition(phase: IntervalPhase, controller: IntervalPhaseController) -> str:
    if phase is IntervalPhase.WORK:
        return f"🔥 {phase.label}! Раунд {controller.current_round} из {controller.config.rounds}"
    if phase is IntervalPhase.REST:
        return f"😮‍💨 {phase.label}: {format_duration(controller.config.rest_seconds)}"
    return phase.label
