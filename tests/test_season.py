from academy.engine import AcademyEngine
from academy.models import FinalReport
from academy.objectives import (
    FIND_TOP_TALENTS,
    HIRE_TOP_COACHES,
    POSITIVE_BALANCE,
    SCOUT_REGIONS_DEEP,
    UPGRADE_KEY_FACILITY,
    WIN_YOUTH_LEAGUE,
)


def test_gate_blocks_completion(engine):
    result = engine.attempt_complete_season()

    assert result.code == "GateNotMet"
    assert result.detail["threshold"] == 80
    assert engine.state.phase == "season_in_progress"
    assert engine.state.budget == 2_500_000


def test_completing_a_season_credits_income(engine, meet_gate):
    meet_gate(engine)
    budget = engine.state.budget

    summary = engine.attempt_complete_season()

    assert engine.state.phase == "season_complete"
    assert summary.season == 1
    assert summary.budget_before_income == budget
    assert engine.state.budget == budget + summary.income.total
    assert summary.balance_positive
    assert engine.tracker.get(POSITIVE_BALANCE).completed
    assert len(summary.team_finishes) == len(engine.state.teams)
    assert engine.state.last_summary == summary


def test_scripted_title_season_income(scripted_engine, meet_gate):
    # Every roll is 0.0, so every team finishes first
    engine = scripted_engine([0.0])
    meet_gate(engine)

    summary = engine.attempt_complete_season()

    assert all(f.position == 1 for f in summary.team_finishes)
    assert engine.tracker.get(WIN_YOUTH_LEAGUE).completed
    # Three eligible champions still count as one championship
    assert engine.state.achievements.championships_won == 1
    assert summary.income.performance_bonus == 6 * 150_000
    assert summary.income.objectives_bonus == 100_000
    assert summary.income.total == 500_000 + 900_000 + 100_000
    assert summary.progress_percent == 100


def test_transfer_revenue_is_paid_then_reset(engine, meet_gate):
    player = next(p for p in engine.state.players if p.age >= 16)
    offer = engine.sell_player(player.id)
    meet_gate(engine)

    summary = engine.attempt_complete_season()

    assert summary.transfer_revenue == offer
    assert summary.income.transfer_revenue == offer
    assert engine.state.achievements.revenue_from_transfers == 0


def test_mutations_rejected_between_seasons(engine, meet_gate):
    meet_gate(engine)
    engine.attempt_complete_season()

    assert engine.upgrade_facility("gym", 5).code == "SeasonNotInProgress"
    assert engine.attempt_complete_season().code == "SeasonNotInProgress"
    assert engine.set_budget_distribution({}).code == "SeasonNotInProgress"


def test_acknowledge_requires_a_summary(engine):
    assert engine.acknowledge_summary().code == "SeasonNotInProgress"


def test_rollover_resets_and_escalates(engine, meet_gate):
    meet_gate(engine)
    engine.attempt_complete_season()

    new_season = engine.acknowledge_summary()

    assert new_season == 2
    assert engine.state.phase == "season_in_progress"
    by_id = {o.id: o for o in engine.state.objectives}
    assert by_id[HIRE_TOP_COACHES].required_value == 4
    assert by_id[SCOUT_REGIONS_DEEP].required_value == 4
    assert by_id[FIND_TOP_TALENTS].required_value == 3
    assert by_id[UPGRADE_KEY_FACILITY].required_value == 20
    assert by_id[WIN_YOUTH_LEAGUE].required_value == 1
    assert all(o.current_value == 0 and not o.completed for o in engine.state.objectives)
    assert engine.progress_percent() == 0


def test_rollover_cancels_open_missions(engine, meet_gate):
    scout = engine.scouting.available_scouts()[0]
    mission = engine.dispatch_scouts("almaty", [scout.id], 4)
    meet_gate(engine)
    engine.attempt_complete_season()

    engine.acknowledge_summary()

    assert engine.state.missions == []
    assert not scout.is_busy
    assert engine.advance_time(4) == []
    assert all(r.mission_id != mission.id for r in engine.state.scouting_reports)


def test_championships_survive_rollover(scripted_engine, meet_gate):
    engine = scripted_engine([0.0])
    meet_gate(engine)
    engine.attempt_complete_season()
    engine.acknowledge_summary()

    assert engine.state.achievements.championships_won == 1


def test_last_season_ends_the_run(meet_gate, settings):
    engine = AcademyEngine(settings.model_copy(update={"total_seasons": 1}), start_events=False)
    meet_gate(engine)
    engine.attempt_complete_season()

    report = engine.acknowledge_summary()

    assert isinstance(report, FinalReport)
    assert engine.state.phase == "run_complete"
    assert engine.state.final_report == report
    assert report.final_budget == engine.state.budget


def test_terminal_state_accepts_nothing(meet_gate, settings):
    engine = AcademyEngine(settings.model_copy(update={"total_seasons": 1}), start_events=False)
    meet_gate(engine)
    engine.attempt_complete_season()
    engine.acknowledge_summary()

    assert engine.attempt_complete_season().code == "SeasonNotInProgress"
    assert engine.acknowledge_summary().code == "SeasonNotInProgress"
    assert engine.upgrade_facility("gym", 5).code == "SeasonNotInProgress"
    assert engine.advance_time(10) == []
    assert engine.state.current_season == 1
