import pytest
from pydantic import ValidationError

from academy.config import GameSettings, load_settings
from academy.engine import AcademyEngine
from academy.models import Prospect, ScoutingReport, StaffCandidate
from academy.objectives import FIND_TOP_TALENTS, HIRE_TOP_COACHES


def _candidate(skill=4, salary=5000):
    return StaffCandidate(name="Ivan Petrov", skill=skill, salary=salary, experience=8)


def _add_report(engine, *potentials):
    prospects = [
        Prospect(id=f"prospect_x{i}", name="Dias Orazov", age=14, position="ST", position_name="Striker",
                 potential=p, region="Almaty")
        for i, p in enumerate(potentials)
    ]
    engine.state.scouting_reports.append(ScoutingReport(
        mission_id="mission_x", region_id="almaty", region_name="Almaty", season=1, duration_weeks=2,
        prospects=prospects,
    ))
    return prospects


def test_new_game_opening_state(engine):
    state = engine.state
    assert state.current_season == 1
    assert state.phase == "season_in_progress"
    assert state.budget == 2_500_000
    assert state.scouting_budget == 150_000
    assert len(state.teams) == 6
    assert len(state.facilities) == 5
    assert len(state.objectives) == 6
    assert len(state.staff) <= 15
    assert any(s.category == "scouts" for s in state.staff)
    assert engine.progress_percent() == 0


def test_same_seed_replays_whole_game():
    a = AcademyEngine(GameSettings(seed=99), start_events=False)
    b = AcademyEngine(GameSettings(seed=99), start_events=False)
    assert a.state.model_dump() == b.state.model_dump()


def test_reset_rebuilds_from_seed(engine):
    fresh = AcademyEngine(GameSettings(seed=5), start_events=False)
    engine.upgrade_facility("gym", 5)

    state = engine.reset(seed=5)

    assert state is engine.state
    assert state.model_dump() == fresh.state.model_dump()
    assert engine.tasks.pending_keys() == []


def test_reset_cancels_pending_missions(engine):
    scout = engine.scouting.available_scouts()[0]
    engine.dispatch_scouts("almaty", [scout.id], 2)
    engine.reset()
    assert engine.state.missions == []
    assert engine.advance_time(2) == []


def test_hiring_does_not_debit_budget(engine):
    staff_before = len(engine.state.staff)

    member = engine.hire_staff("coaches", "headCoach", _candidate())

    assert member.title == "Head coach"
    assert engine.state.budget == 2_500_000
    assert len(engine.state.staff) == staff_before + 1
    assert engine.tracker.get(HIRE_TOP_COACHES).current_value == 1


def test_only_top_coaches_count(engine):
    engine.hire_staff("coaches", "assistantCoach", _candidate(skill=3))
    engine.hire_staff("scouts", "headScout", _candidate(skill=5))
    assert engine.tracker.get(HIRE_TOP_COACHES).current_value == 0


def test_hire_needs_annual_salary(engine):
    engine.state.budget = 59_999
    staff_before = len(engine.state.staff)

    result = engine.hire_staff("coaches", "headCoach", _candidate(salary=5000))

    assert result.code == "InsufficientFunds"
    assert len(engine.state.staff) == staff_before


def test_unknown_role(engine):
    assert engine.hire_staff("coaches", "kitManager", _candidate()).code == "NotFound"
    assert engine.generate_candidates("coaches", "kitManager").code == "NotFound"
    assert len(engine.generate_candidates("medical", "doctor")) == 3


def test_fire_pays_severance(engine):
    member = engine.state.staff[0]

    engine.fire_staff(member.id)

    assert engine.state.budget == 2_500_000 - 3 * member.salary
    assert engine.state.find_staff(member.id) is None
    assert engine.fire_staff(member.id).code == "NotFound"


def test_fire_without_severance_funds(engine):
    member = engine.state.staff[0]
    engine.state.budget = 0
    assert engine.fire_staff(member.id).code == "InsufficientFunds"
    assert engine.state.find_staff(member.id) is not None


def test_young_players_cannot_be_sold(engine):
    player = next(p for p in engine.state.players if p.age < 16)

    result = engine.sell_player(player.id)

    assert result.code == "AgeIneligible"
    assert engine.state.find_player(player.id) is not None
    assert engine.state.budget == 2_500_000


def test_sale_credits_budget_and_revenue(engine):
    player = next(p for p in engine.state.players if p.age >= 16)

    offer = engine.sell_player(player.id)

    assert 0.8 * player.value <= offer <= 1.2 * player.value
    assert engine.state.budget == 2_500_000 + offer
    assert engine.state.achievements.revenue_from_transfers == offer
    assert engine.state.find_player(player.id) is None
    assert engine.sell_player(player.id).code == "NotFound"


def test_five_star_invite_counts_once(engine):
    star, average = _add_report(engine, 5, 3)

    engine.invite_prospect(star.id)
    engine.invite_prospect(star.id)
    engine.invite_prospect(average.id)

    assert star.invited and average.invited
    assert engine.tracker.get(FIND_TOP_TALENTS).current_value == 1
    assert engine.invite_prospect("prospect_missing").code == "NotFound"


def test_prospects_from_a_closed_season_cannot_be_invited(engine, meet_gate):
    star, = _add_report(engine, 5)
    meet_gate(engine)
    engine.attempt_complete_season()
    engine.acknowledge_summary()

    result = engine.invite_prospect(star.id)

    assert result.code == "NotFound"
    assert not star.invited
    assert engine.tracker.get(FIND_TOP_TALENTS).current_value == 0


def test_budget_distribution_must_sum_to_100(engine):
    bad = {"salaries": 40, "scouting": 15, "infrastructure": 30, "tournaments": 10, "medical": 10}
    result = engine.set_budget_distribution(bad)
    assert result.code == "InvalidDistribution"
    assert engine.state.budget_distribution.salaries == 35

    assert engine.set_budget_distribution({"salaries": 100}).code == "InvalidDistribution"
    extra = {"salaries": 35, "scouting": 15, "infrastructure": 30, "tournaments": 10, "medical": 10, "bogus": 99}
    assert engine.set_budget_distribution(extra).code == "InvalidDistribution"

    good = {"salaries": 30, "scouting": 20, "infrastructure": 30, "tournaments": 10, "medical": 10}
    assert engine.set_budget_distribution(good).scouting == 20
    assert engine.state.budget_distribution.scouting == 20


def test_advance_time_moves_the_clock(engine):
    engine.advance_time(3)
    engine.advance_time(0.5)
    assert engine.state.clock == 3.5


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("ACADEMY_SEED", "17")
    monkeypatch.setenv("ACADEMY_TOTAL_SEASONS", "3")
    monkeypatch.setenv("ACADEMY_INITIAL_BUDGET", "1000000")
    monkeypatch.delenv("ACADEMY_SCOUTING_BUDGET", raising=False)

    settings = load_settings()

    assert settings.seed == 17
    assert settings.total_seasons == 3
    assert settings.initial_budget == 1_000_000
    assert settings.scouting_budget == 150_000


def test_load_settings_names_the_malformed_variable(monkeypatch):
    monkeypatch.setenv("ACADEMY_TOTAL_SEASONS", "five")

    with pytest.raises(ValidationError) as exc_info:
        load_settings()

    assert exc_info.value.errors()[0]["loc"] == ("total_seasons",)
