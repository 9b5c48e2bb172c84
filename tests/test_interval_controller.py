import pytest

from intervalbot.services.interval import (
    IntervalConfig,
    IntervalPhase,
    IntervalPhaseController,
    start,
)


def _tick(controller: IntervalPhaseController, times: int) -> None:
    for _ in range(times):
        controller.tick()


def test_new_run_starts_in_work_without_lead_in():
    controller = start(IntervalConfig(rounds=3, work_seconds=30, rest_seconds=15))

    assert controller.phase is IntervalPhase.WORK
    assert controller.current_round == 1
    assert controller.seconds_remaining == 30
    assert controller.is_paused is False
    assert controller.round_durations == ()


def test_work_then_rest_then_next_round():
    controller = start(IntervalConfig(rounds=3, work_seconds=30, rest_seconds=15))

    _tick(controller, 30)
    assert controller.phase is IntervalPhase.REST
    assert controller.current_round == 1
    assert controller.seconds_remaining == 15
    assert controller.round_durations == (30,)

    _tick(controller, 15)
    assert controller.phase is IntervalPhase.WORK
    assert controller.current_round == 2
    assert controller.seconds_remaining == 30


def test_single_round_completes_without_rest():
    controller = start(IntervalConfig(rounds=1, work_seconds=10, rest_seconds=10))
    phases = []
    controller.on_phase_change(lambda old, new: phases.append(new))

    _tick(controller, 10)

    assert controller.phase is IntervalPhase.COMPLETE
    assert controller.round_durations == (10,)
    assert IntervalPhase.REST not in phases


def test_full_run_visits_every_work_and_rest_phase():
    config = IntervalConfig(rounds=4, work_seconds=5, rest_seconds=3)
    controller = start(config)
    entered = []
    controller.on_phase_change(lambda old, new: entered.append(new))

    _tick(controller, config.total_seconds)

    assert controller.is_complete
    # the initial work phase is not a transition
    assert entered.count(IntervalPhase.WORK) + 1 == config.rounds
    assert entered.count(IntervalPhase.REST) == config.rounds - 1
    assert entered[-1] is IntervalPhase.COMPLETE
    assert controller.round_durations == (5, 5, 5, 5)


def test_ticks_after_complete_are_ignored():
    controller = start(IntervalConfig(rounds=1, work_seconds=3))
    _tick(controller, 10)

    assert controller.is_complete
    assert controller.seconds_remaining == 0
    assert controller.round_durations == (3,)


def test_pause_freezes_counters():
    controller = start(IntervalConfig(rounds=2, work_seconds=20, rest_seconds=10))
    _tick(controller, 4)

    assert controller.toggle_pause() is True
    _tick(controller, 7)
    assert controller.seconds_remaining == 16
    assert controller.work_elapsed == 4

    assert controller.toggle_pause() is False
    controller.tick()
    assert controller.seconds_remaining == 15
    assert controller.work_elapsed == 5


def test_skip_during_work_records_partial_round_once():
    controller = start(IntervalConfig(rounds=3, work_seconds=30, rest_seconds=15))
    _tick(controller, 5)

    controller.skip()

    assert controller.phase is IntervalPhase.REST
    assert controller.round_durations == (5,)
    assert controller.work_elapsed == 0


def test_double_skip_does_not_duplicate_round():
    controller = start(IntervalConfig(rounds=3, work_seconds=30, rest_seconds=15))
    _tick(controller, 5)

    controller.skip()
    controller.skip()

    assert controller.phase is IntervalPhase.WORK
    assert controller.current_round == 2
    assert controller.seconds_remaining == 30
    assert controller.round_durations == (5,)


def test_skip_with_zero_work_omits_round():
    controller = start(IntervalConfig(rounds=2, work_seconds=30, rest_seconds=15))

    controller.skip()

    assert controller.phase is IntervalPhase.REST
    assert controller.round_durations == ()


def test_skip_on_last_round_completes():
    controller = start(IntervalConfig(rounds=1, work_seconds=30))
    _tick(controller, 12)

    controller.skip()
    controller.skip()

    assert controller.is_complete
    assert controller.round_durations == (12,)


def test_stop_during_work_credits_partial_round():
    controller = start(IntervalConfig(rounds=3, work_seconds=30, rest_seconds=15))
    _tick(controller, 30 + 15 + 8)

    result = controller.stop()

    assert result == [30, 8]
    assert controller.is_stopped
    assert controller.is_finished


def test_stop_during_rest_gives_no_rest_credit():
    controller = start(IntervalConfig(rounds=3, work_seconds=30, rest_seconds=15))
    _tick(controller, 30 + 6)
    before = list(controller.round_durations)

    assert controller.stop() == before == [30]


def test_stop_is_idempotent_and_freezes_run():
    controller = start(IntervalConfig(rounds=2, work_seconds=10, rest_seconds=5))
    _tick(controller, 3)

    first = controller.stop()
    _tick(controller, 20)
    controller.skip()
    controller.toggle_pause()

    assert controller.stop() == first == [3]
    assert controller.phase is IntervalPhase.WORK
    assert controller.is_paused is False


def test_operations_after_complete_are_noops():
    controller = start(IntervalConfig(rounds=1, work_seconds=2))
    _tick(controller, 2)

    controller.skip()
    controller.advance_phase()

    assert controller.toggle_pause() is False
    assert controller.stop() == [2]
    assert controller.is_complete


def test_lead_in_counts_down_before_first_round():
    controller = start(IntervalConfig(rounds=2, work_seconds=10, rest_seconds=5, lead_in_seconds=3))

    assert controller.phase is IntervalPhase.GET_READY
    assert controller.seconds_remaining == 3

    _tick(controller, 3)
    assert controller.phase is IntervalPhase.WORK
    assert controller.current_round == 1
    assert controller.seconds_remaining == 10
    assert controller.work_elapsed == 0
    assert controller.round_durations == ()


def test_skip_lead_in_records_nothing():
    controller = start(IntervalConfig(rounds=2, work_seconds=10, lead_in_seconds=10))
    controller.tick()

    controller.skip()

    assert controller.phase is IntervalPhase.WORK
    assert controller.round_durations == ()


def test_stop_during_lead_in_returns_empty_result():
    controller = start(IntervalConfig(rounds=2, work_seconds=10, lead_in_seconds=10))
    controller.tick()

    assert controller.stop() == []


def test_zero_rest_goes_straight_to_next_round():
    controller = start(IntervalConfig(rounds=3, work_seconds=4, rest_seconds=0))
    transitions = []
    controller.on_phase_change(lambda old, new: transitions.append((old, new)))

    _tick(controller, 4)

    assert controller.phase is IntervalPhase.WORK
    assert controller.current_round == 2
    assert controller.seconds_remaining == 4
    assert transitions == [
        (IntervalPhase.WORK, IntervalPhase.REST),
        (IntervalPhase.REST, IntervalPhase.WORK),
    ]

    _tick(controller, 8)
    assert controller.is_complete
    assert controller.round_durations == (4, 4, 4)


def test_countdown_events_in_last_seconds():
    controller = start(IntervalConfig(rounds=2, work_seconds=6, rest_seconds=4))
    beeps = []
    controller.on_countdown(beeps.append)

    _tick(controller, 6)
    assert beeps == [3, 2, 1]

    _tick(controller, 4)
    assert beeps == [3, 2, 1, 3, 2, 1]


def test_no_countdown_during_lead_in():
    controller = IntervalPhaseController(
        IntervalConfig(rounds=1, work_seconds=10, lead_in_seconds=3), countdown_from=3
    )
    beeps = []
    controller.on_countdown(beeps.append)

    _tick(controller, 3)

    assert beeps == []


def test_round_durations_never_exceed_work_seconds():
    config = IntervalConfig(rounds=5, work_seconds=7, rest_seconds=2)
    controller = start(config)
    _tick(controller, 3)
    controller.skip()
    _tick(controller, 2 + 7 + 2 + 1)
    controller.skip()

    durations = controller.round_durations
    assert len(durations) <= config.rounds
    assert all(0 < value <= config.work_seconds for value in durations)
    assert durations == (3, 7, 1)


def test_total_remaining_follows_schedule():
    config = IntervalConfig(rounds=3, work_seconds=30, rest_seconds=15)
    controller = start(config)
    assert config.total_seconds == 120
    assert controller.total_remaining() == 120

    _tick(controller, 40)
    assert controller.elapsed_seconds() == 40
    assert controller.total_remaining() == 80

    _tick(controller, 80)
    assert controller.is_complete
    assert controller.total_remaining() == 0


def test_snapshot_is_detached_from_controller():
    controller = start(IntervalConfig(rounds=2, work_seconds=3, rest_seconds=1))
    _tick(controller, 3)

    snapshot = controller.snapshot()
    snapshot.round_durations.append(99)
    snapshot.phase = IntervalPhase.COMPLETE

    assert controller.round_durations == (3,)
    assert controller.phase is IntervalPhase.REST


@pytest.mark.parametrize(
    "kwargs",
    [
        {"rounds": 0, "work_seconds": 10},
        {"rounds": 2, "work_seconds": 0},
        {"rounds": 2, "work_seconds": 10, "rest_seconds": -1},
        {"rounds": 2, "work_seconds": 10, "lead_in_seconds": -5},
    ],
)
def test_invalid_config_is_rejected(kwargs):
    with pytest.raises(ValueError):
        IntervalConfig(**kwargs)
