from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Tuple

DEFAULT_COUNTDOWN_FROM = 3


class IntervalPhase(str, Enum):
    GET_READY = "get_ready"
    WORK = "work"
    REST = "rest"
    COMPLETE = "complete"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]


_PHASE_LABELS = {
    IntervalPhase.GET_READY: "ПРИГОТОВЬТЕСЬ",
    IntervalPhase.WORK: "РАБОТА",
    IntervalPhase.REST: "ОТДЫХ",
    IntervalPhase.COMPLETE: "ГОТОВО",
}


@dataclass(frozen=True)
class IntervalConfig:
    rounds: int
    work_seconds: int
    rest_seconds: int = 0
    lead_in_seconds: int = 0

    def __post_init__(self) -> None:
        if self.rounds <= 0:
            raise ValueError("rounds must be positive")
        if self.work_seconds <= 0:
            raise ValueError("work_seconds must be positive")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must not be negative")
        if self.lead_in_seconds < 0:
            raise ValueError("lead_in_seconds must not be negative")

    @property
    def total_seconds(self) -> int:
        """Planned length of all rounds, lead-in excluded; the last round has no rest."""
        return self.rounds * self.work_seconds + (self.rounds - 1) * self.rest_seconds


@dataclass
class IntervalRunState:
    current_round: int = 1
    phase: IntervalPhase = IntervalPhase.WORK
    seconds_remaining: int = 0
    is_paused: bool = False
    work_elapsed: int = 0
    round_durations: List[int] = field(default_factory=list)


PhaseListener = Callable[[IntervalPhase, IntervalPhase], None]
CountdownListener = Callable[[int], None]


class IntervalPhaseController:
    """
    Round based work/rest countdown.

    The controller never schedules anything itself: an external source calls
    ``tick()`` once per second. User actions are ``toggle_pause()``, ``skip()``
    and ``stop()``. Every call after the run is complete or stopped is a no-op.

    ``round_durations`` receives one entry per round when its work phase ends,
    holding the seconds actually worked. Rounds that end with zero work time
    are not recorded.
    """

    def __init__(self, config: IntervalConfig, countdown_from: int = DEFAULT_COUNTDOWN_FROM):
        self.config = config
        self.countdown_from = max(countdown_from, 0)
        if config.lead_in_seconds > 0:
            self._state = IntervalRunState(
                phase=IntervalPhase.GET_READY, seconds_remaining=config.lead_in_seconds
            )
        else:
            self._state = IntervalRunState(
                phase=IntervalPhase.WORK, seconds_remaining=config.work_seconds
            )
        self._stopped = False
        self._phase_listeners: List[PhaseListener] = []
        self._countdown_listeners: List[CountdownListener] = []

    # read-only view

    @property
    def phase(self) -> IntervalPhase:
        return self._state.phase

    @property
    def current_round(self) -> int:
        return self._state.current_round

    @property
    def seconds_remaining(self) -> int:
        return self._state.seconds_remaining

    @property
    def is_paused(self) -> bool:
        return self._state.is_paused

    @property
    def work_elapsed(self) -> int:
        return self._state.work_elapsed

    @property
    def round_durations(self) -> Tuple[int, ...]:
        return tuple(self._state.round_durations)

    @property
    def is_complete(self) -> bool:
        return self._state.phase is IntervalPhase.COMPLETE

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    @property
    def is_finished(self) -> bool:
        return self._stopped or self.is_complete

    def snapshot(self) -> IntervalRunState:
        return replace(self._state, round_durations=list(self._state.round_durations))

    # events

    def on_phase_change(self, listener: PhaseListener) -> None:
        self._phase_listeners.append(listener)

    def on_countdown(self, listener: CountdownListener) -> None:
        self._countdown_listeners.append(listener)

    # operations

    def tick(self) -> None:
        if self._state.is_paused or self.is_finished:
            return
        state = self._state
        if state.phase is IntervalPhase.WORK:
            state.work_elapsed += 1
        state.seconds_remaining -= 1
        if state.seconds_remaining <= 0:
            self.advance_phase()
        elif state.phase in (IntervalPhase.WORK, IntervalPhase.REST) and state.seconds_remaining <= self.countdown_from:
            for listener in list(self._countdown_listeners):
                listener(state.seconds_remaining)

    def advance_phase(self) -> None:
        """Move to the next phase, recording the work time of a round that just ended."""
        if self.is_finished:
            return
        state = self._state
        previous = state.phase

        if previous is IntervalPhase.GET_READY:
            self._enter(IntervalPhase.WORK, self.config.work_seconds)
        elif previous is IntervalPhase.WORK:
            self._record_round()
            if state.current_round < self.config.rounds:
                self._enter(IntervalPhase.REST, self.config.rest_seconds)
            else:
                self._enter(IntervalPhase.COMPLETE, 0)
                return
        elif previous is IntervalPhase.REST:
            state.current_round += 1
            self._enter(IntervalPhase.WORK, self.config.work_seconds)
            return

        # zero-length rest is passed straight through to the next round
        if state.phase is IntervalPhase.REST and state.seconds_remaining <= 0:
            self.advance_phase()

    def toggle_pause(self) -> bool:
        if not self.is_finished:
            self._state.is_paused = not self._state.is_paused
        return self._state.is_paused

    def skip(self) -> None:
        if self.is_finished:
            return
        self._state.seconds_remaining = 0
        self.advance_phase()

    def stop(self) -> List[int]:
        """Terminate the run early and return the recorded round durations."""
        if not self.is_finished:
            if self._state.phase is IntervalPhase.WORK:
                self._record_round()
            self._stopped = True
        return list(self._state.round_durations)

    # progress

    def elapsed_seconds(self) -> int:
        """Seconds of the planned schedule already behind us, lead-in excluded."""
        config = self.config
        state = self._state
        if state.phase is IntervalPhase.COMPLETE:
            return config.total_seconds
        elapsed = (state.current_round - 1) * (config.work_seconds + config.rest_seconds)
        if state.phase is IntervalPhase.WORK:
            elapsed += config.work_seconds - state.seconds_remaining
        elif state.phase is IntervalPhase.REST:
            elapsed += config.work_seconds + (config.rest_seconds - state.seconds_remaining)
        return elapsed

    def total_remaining(self) -> int:
        return max(self.config.total_seconds - self.elapsed_seconds(), 0)

    # internals

    def _record_round(self) -> None:
        if self._state.work_elapsed > 0:
            self._state.round_durations.append(self._state.work_elapsed)
        self._state.work_elapsed = 0

    def _enter(self, phase: IntervalPhase, seconds: int) -> None:
        previous = self._state.phase
        self._state.phase = phase
        self._state.seconds_remaining = seconds
        for listener in list(self._phase_listeners):
            listener(previous, phase)


def start(config: IntervalConfig, countdown_from: int = DEFAULT_COUNTDOWN_FROM) -> IntervalPhaseController:
    return IntervalPhaseController(config, countdown_from=countdown_from)
