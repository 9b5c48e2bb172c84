import pytest

from intervalbot.services.rest import RestCountdown


def test_countdown_finishes_exactly_once():
    countdown = RestCountdown(3)

    results = [countdown.tick() for _ in range(5)]

    assert results == [False, False, True, False, False]
    assert countdown.remaining == 0
    assert countdown.is_running is False


def test_extend_adds_to_remaining_and_total():
    countdown = RestCountdown(60)
    countdown.tick()

    countdown.extend(15)

    assert countdown.remaining == 74
    assert countdown.total == 75


def test_extend_after_stop_is_ignored():
    countdown = RestCountdown(30)
    countdown.stop()

    countdown.extend(15)

    assert countdown.remaining == 30
    assert countdown.tick() is False


def test_progress_and_urgency():
    countdown = RestCountdown(20)
    assert countdown.progress == 1.0
    assert countdown.is_urgent is False

    for _ in range(10):
        countdown.tick()

    assert countdown.progress == 0.5
    assert countdown.is_urgent is True
    assert countdown.is_long is False
    assert RestCountdown(90).is_long is True


@pytest.mark.parametrize("seconds", [0, -10])
def test_non_positive_rest_is_rejected(seconds):
    with pytest.raises(ValueError):
        RestCountdown(seconds)
