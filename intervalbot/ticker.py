from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config import get_settings
from .services.interval import IntervalPhase, IntervalPhaseController
from .services.rest import RestCountdown

logger = logging.getLogger(__name__)

Transition = Tuple[IntervalPhase, IntervalPhase]
IntervalUpdate = Callable[["IntervalRun", List[Transition]], Awaitable[None]]
IntervalFinish = Callable[["IntervalRun", List[int], List[Transition]], Awaitable[None]]
RestUpdate = Callable[["RestRun"], Awaitable[None]]


@dataclass
class IntervalRun:
    chat_id: int
    controller: IntervalPhaseController
    on_update: IntervalUpdate
    on_finish: IntervalFinish
    last_tick: float
    last_render: float
    title: str = "Интервалы"
    dirty: bool = False
    transitions: List[Transition] = field(default_factory=list)

    def flush_transitions(self) -> List[Transition]:
        pending, self.transitions = self.transitions, []
        return pending


@dataclass
class RestRun:
    chat_id: int
    countdown: RestCountdown
    on_update: RestUpdate
    on_finish: RestUpdate
    last_tick: float
    last_render: float


def _interval_job_id(chat_id: int) -> str:
    return f"interval-{chat_id}"


def _rest_job_id(chat_id: int) -> str:
    return f"rest-{chat_id}"


class IntervalTicker:
    """
    One-second tick source for interval runs and rest countdowns.

    Every chat gets at most one interval run and one rest countdown; each is
    driven by its own APScheduler job. A job firing late is not lost: the
    elapsed monotonic time is converted into whole ticks and replayed.
    """

    def __init__(
        self,
        scheduler: Optional[AsyncIOScheduler] = None,
        clock: Callable[[], float] = time.monotonic,
        refresh_seconds: int = 5,
    ):
        self.scheduler = scheduler or AsyncIOScheduler()
        self._clock = clock
        self.refresh_seconds = max(refresh_seconds, 1)
        self._runs: Dict[int, IntervalRun] = {}
        self._rests: Dict[int, RestRun] = {}

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self._runs.clear()
        self._rests.clear()

    # interval runs

    def get_run(self, chat_id: int) -> Optional[IntervalRun]:
        return self._runs.get(chat_id)

    def start_run(
        self,
        chat_id: int,
        controller: IntervalPhaseController,
        on_update: IntervalUpdate,
        on_finish: IntervalFinish,
        title: str = "Интервалы",
    ) -> IntervalRun:
        if chat_id in self._runs:
            self.stop_run(chat_id)
        now = self._clock()
        run = IntervalRun(
            chat_id=chat_id,
            controller=controller,
            on_update=on_update,
            on_finish=on_finish,
            last_tick=now,
            last_render=now,
            title=title,
        )

        def _phase_changed(old: IntervalPhase, new: IntervalPhase) -> None:
            run.dirty = True
            run.transitions.append((old, new))
            logger.debug("Chat %s: %s -> %s (round %s)", chat_id, old.value, new.value, controller.current_round)

        def _countdown(_seconds: int) -> None:
            run.dirty = True

        controller.on_phase_change(_phase_changed)
        controller.on_countdown(_countdown)
        self._runs[chat_id] = run
        self.scheduler.add_job(
            self.tick_interval,
            IntervalTrigger(seconds=1),
            args=(chat_id,),
            id=_interval_job_id(chat_id),
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        config = controller.config
        logger.info(
            "Interval run started for chat %s: %s rounds, %ss work, %ss rest",
            chat_id,
            config.rounds,
            config.work_seconds,
            config.rest_seconds,
        )
        return run

    async def tick_interval(self, chat_id: int) -> None:
        run = self._runs.get(chat_id)
        if run is None:
            self._remove_job(_interval_job_id(chat_id))
            return
        now = self._clock()
        steps = int(now - run.last_tick)
        if steps <= 0:
            return
        run.last_tick += steps
        for _ in range(steps):
            run.controller.tick()
            if run.controller.is_finished:
                break
        await self._after_interval_change(run, now)

    async def toggle_pause(self, chat_id: int) -> Optional[bool]:
        run = self._runs.get(chat_id)
        if run is None:
            return None
        paused = run.controller.toggle_pause()
        run.dirty = True
        await self._after_interval_change(run, self._clock())
        return paused

    async def skip(self, chat_id: int) -> bool:
        run = self._runs.get(chat_id)
        if run is None:
            return False
        run.controller.skip()
        run.last_tick = self._clock()
        await self._after_interval_change(run, run.last_tick)
        return True

    def stop_run(self, chat_id: int) -> Optional[List[int]]:
        """Cancel the tick job and return the durations recorded so far."""
        run = self._runs.pop(chat_id, None)
        self._remove_job(_interval_job_id(chat_id))
        if run is None:
            return None
        durations = run.controller.stop()
        logger.info("Interval run stopped for chat %s after %s rounds", chat_id, len(durations))
        return durations

    async def _after_interval_change(self, run: IntervalRun, now: float) -> None:
        if run.controller.is_complete:
            self._runs.pop(run.chat_id, None)
            self._remove_job(_interval_job_id(run.chat_id))
            durations = list(run.controller.round_durations)
            logger.info("Interval run complete for chat %s: %s", run.chat_id, durations)
            await self._deliver(run.on_finish(run, durations, run.flush_transitions()), run.chat_id)
            return
        if run.dirty or now - run.last_render >= self.refresh_seconds:
            run.dirty = False
            run.last_render = now
            await self._deliver(run.on_update(run, run.flush_transitions()), run.chat_id)

    # rest countdowns

    def get_rest(self, chat_id: int) -> Optional[RestRun]:
        return self._rests.get(chat_id)

    def start_rest(
        self,
        chat_id: int,
        countdown: RestCountdown,
        on_update: RestUpdate,
        on_finish: RestUpdate,
    ) -> RestRun:
        now = self._clock()
        rest = RestRun(
            chat_id=chat_id,
            countdown=countdown,
            on_update=on_update,
            on_finish=on_finish,
            last_tick=now,
            last_render=now,
        )
        self._rests[chat_id] = rest
        self.scheduler.add_job(
            self.tick_rest,
            IntervalTrigger(seconds=1),
            args=(chat_id,),
            id=_rest_job_id(chat_id),
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info("Rest countdown of %ss started for chat %s", countdown.total, chat_id)
        return rest

    async def tick_rest(self, chat_id: int) -> None:
        rest = self._rests.get(chat_id)
        if rest is None:
            self._remove_job(_rest_job_id(chat_id))
            return
        now = self._clock()
        steps = int(now - rest.last_tick)
        if steps <= 0:
            return
        rest.last_tick += steps
        finished = False
        for _ in range(steps):
            if rest.countdown.tick():
                finished = True
                break
        if finished or not rest.countdown.is_running:
            self._rests.pop(chat_id, None)
            self._remove_job(_rest_job_id(chat_id))
            await self._deliver(rest.on_finish(rest), chat_id)
            return
        if rest.countdown.is_urgent or now - rest.last_render >= self.refresh_seconds:
            rest.last_render = now
            await self._deliver(rest.on_update(rest), chat_id)

    async def extend_rest(self, chat_id: int, seconds: int) -> Optional[RestRun]:
        rest = self._rests.get(chat_id)
        if rest is None:
            return None
        rest.countdown.extend(seconds)
        rest.last_render = self._clock()
        await self._deliver(rest.on_update(rest), chat_id)
        return rest

    def stop_rest(self, chat_id: int) -> Optional[RestCountdown]:
        rest = self._rests.pop(chat_id, None)
        self._remove_job(_rest_job_id(chat_id))
        if rest is None:
            return None
        rest.countdown.stop()
        return rest.countdown

    # helpers

    def _remove_job(self, job_id: str) -> None:
        if self.scheduler.get_job(job_id) is not None:
            self.scheduler.remove_job(job_id)

    async def _deliver(self, pending: Awaitable[None], chat_id: int) -> None:
        try:
            await pending
        except TelegramBadRequest as exc:
            logger.debug("Skipped timer update for chat %s: %s", chat_id, exc)
        except TelegramAPIError as exc:
            logger.warning("Failed to update timer for chat %s: %s", chat_id, exc)


_ticker_instance: Optional[IntervalTicker] = None


def get_ticker() -> IntervalTicker:
    global _ticker_instance
    if _ticker_instance is None:
        _ticker_instance = IntervalTicker(refresh_seconds=get_settings().refresh_seconds)
    return _ticker_instance
