import pytest

from intervalbot.db import Base, SessionLocal, engine, get_db
from intervalbot.models import IntervalPreset, User
from intervalbot.services.interval import IntervalConfig
from intervalbot.services.presets import (
    MAX_PRESETS,
    PresetError,
    delete_preset,
    get_preset,
    list_presets,
    preset_config,
    save_preset,
)
from intervalbot.services.users import get_or_create_user, last_interval, remember_last_interval

TABATA = IntervalConfig(rounds=8, work_seconds=20, rest_seconds=10)


@pytest.fixture(autouse=True)
def _setup_database():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


def test_save_and_list_presets_sorted_by_name():
    with SessionLocal() as session:
        save_preset(session, 1, "Табата", TABATA)
        save_preset(session, 1, "  Берпи   EMOM ", IntervalConfig(rounds=10, work_seconds=60))
        session.commit()

    with SessionLocal() as session:
        presets = list_presets(session, 1)
        assert [p.name for p in presets] == ["Берпи EMOM", "Табата"]
        assert preset_config(presets[1]) == TABATA
        assert preset_config(presets[0], lead_in_seconds=10).lead_in_seconds == 10


def test_save_preset_overwrites_same_name():
    with SessionLocal() as session:
        first = save_preset(session, 1, "Табата", TABATA)
        second = save_preset(session, 1, "Табата", IntervalConfig(rounds=4, work_seconds=40, rest_seconds=20))
        session.commit()
        assert first.id == second.id

    with SessionLocal() as session:
        preset = session.query(IntervalPreset).one()
        assert (preset.rounds, preset.work_seconds, preset.rest_seconds) == (4, 40, 20)


@pytest.mark.parametrize("name", ["", "   ", "x" * 65])
def test_invalid_names_are_rejected(name):
    with SessionLocal() as session:
        with pytest.raises(PresetError):
            save_preset(session, 1, name, TABATA)


def test_preset_limit_per_user():
    with SessionLocal() as session:
        for index in range(MAX_PRESETS):
            save_preset(session, 1, f"Пресет {index}", TABATA)
        with pytest.raises(PresetError):
            save_preset(session, 1, "Лишний", TABATA)
        # overwriting an existing name is still allowed
        save_preset(session, 1, "Пресет 0", TABATA)
        # limit is per user
        save_preset(session, 2, "Лишний", TABATA)


def test_presets_are_private_to_user():
    with SessionLocal() as session:
        preset = save_preset(session, 1, "Табата", TABATA)
        session.commit()
        preset_id = preset.id

    with SessionLocal() as session:
        assert get_preset(session, 2, preset_id) is None
        assert delete_preset(session, 2, preset_id) is False
        assert delete_preset(session, 1, preset_id) is True
        session.commit()

    with SessionLocal() as session:
        assert session.query(IntervalPreset).count() == 0


def test_deleting_user_removes_presets():
    with SessionLocal() as session:
        save_preset(session, 1, "Табата", TABATA)
        session.commit()

    with SessionLocal() as session:
        session.delete(get_or_create_user(session, 1))
        session.commit()

    with SessionLocal() as session:
        assert session.query(IntervalPreset).count() == 0


def test_last_interval_round_trip():
    with SessionLocal() as session:
        assert last_interval(session, 5) is None
        get_or_create_user(session, 5)
        assert last_interval(session, 5) is None
        remember_last_interval(
            session, 5, IntervalConfig(rounds=3, work_seconds=45, rest_seconds=15, lead_in_seconds=10)
        )
        session.commit()

    with SessionLocal() as session:
        # lead-in is a bot setting, not part of the remembered interval
        assert last_interval(session, 5) == IntervalConfig(rounds=3, work_seconds=45, rest_seconds=15)


@pytest.mark.asyncio
async def test_database_run_commits_and_rolls_back():
    db = get_db()

    preset = await db.run(lambda session: save_preset(session, 7, "Табата", TABATA))
    assert preset.name == "Табата"

    def failing(session):
        save_preset(session, 7, "Второй", TABATA)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await db.run(failing)

    with SessionLocal() as session:
        assert [p.name for p in list_presets(session, 7)] == ["Табата"]
        assert session.query(User).count() == 1
