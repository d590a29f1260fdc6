import itertools

import pytest

from academy.config import GameSettings
from academy.engine import AcademyEngine
from academy.objectives import (
    FIND_TOP_TALENTS,
    HIRE_TOP_COACHES,
    SCOUT_REGIONS_DEEP,
    UPGRADE_KEY_FACILITY,
)
from academy.randomness import RandomValueProvider


class ScriptedRandom(RandomValueProvider):
    """Replays a fixed sequence of random() values, cycling when exhausted."""

    def __init__(self, values):
        super().__init__(seed=0)
        self.values = list(values)
        self._cycle = itertools.cycle(self.values)

    def random(self) -> float:
        return next(self._cycle)

    def reseed(self, seed) -> None:
        self._cycle = itertools.cycle(self.values)


@pytest.fixture
def settings():
    return GameSettings(seed=1234)


@pytest.fixture
def engine(settings):
    return AcademyEngine(settings, start_events=False)


@pytest.fixture
def scripted_engine():
    """Factory for engines whose every roll comes from a fixed sequence."""
    def _make(values, total_seasons=5, start_events=False):
        settings = GameSettings(seed=0, total_seasons=total_seasons)
        return AcademyEngine(settings, rng=ScriptedRandom(values), start_events=start_events)
    return _make


def _meet_gate(engine):
    """Complete the four objectives worth 80% of the weight without spending anything."""
    tracker = engine.tracker
    for objective_id in (HIRE_TOP_COACHES, SCOUT_REGIONS_DEEP, FIND_TOP_TALENTS, UPGRADE_KEY_FACILITY):
        objective = tracker.get(objective_id)
        tracker.record_progress(objective_id, objective.required_value, absolute=True)
    assert engine.is_season_completable()


@pytest.fixture
def meet_gate():
    return _meet_gate
