from aiogram.fsm.state import State, StatesGroup


class IntervalSetup(StatesGroup):
    rounds = State()
    work = State()
    rest = State()
    confirm = State()


class PresetNaming(StatesGroup):
    name = State()


class RestSetup(StatesGroup):
    seconds = State()
