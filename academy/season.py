"""
Season state machine.

  season_in_progress --attempt_complete_season--> season_complete
  season_complete    --acknowledge_summary------> season_in_progress (next season)
                                               `-> run_complete (after the last season, terminal)

Closing a season: balance objective -> league finishes -> income -> transfer revenue reset.
Opening the next one: cancel stale tasks -> season + 1 -> reset objectives -> escalate.
"""

from typing import Callable, Union

from academy.config import LEAGUE_ELIGIBLE_TEAMS, SEASON_COMPLETION_THRESHOLD
from academy.economy import final_score, seasonal_income
from academy.models import FinalReport, SeasonSummary, SimulationState, TeamFinish
from academy.objectives import (
    FIND_TOP_TALENTS,
    HIRE_TOP_COACHES,
    POSITIVE_BALANCE,
    WIN_YOUTH_LEAGUE,
    ObjectiveTracker,
)
from academy.randomness import RandomValueProvider
from academy.rejections import Rejection, gate_not_met, season_not_in_progress


class SeasonScheduler:
    """Validates the completion gate and performs seasonal rollover."""

    def __init__(
        self,
        state: SimulationState,
        tracker: ObjectiveTracker,
        rng: RandomValueProvider,
        on_rollover: Callable[[], None] | None = None,
    ):
        self.state = state
        self.tracker = tracker
        self.rng = rng
        # Hook for cancelling deferred work that belongs to the closing season
        self.on_rollover = on_rollover

    def attempt_complete_season(self) -> Union[SeasonSummary, Rejection]:
        if self.state.phase != "season_in_progress":
            return season_not_in_progress(self.state.phase)

        progress = self.tracker.progress_percent()
        if not self.tracker.is_season_completable():
            return gate_not_met(progress, SEASON_COMPLETION_THRESHOLD)

        budget_before = self.state.budget
        balance_ok = self.tracker.finalize_balance(POSITIVE_BALANCE, budget_before)

        finishes = self.play_league_season()
        transfer_revenue = self.state.achievements.revenue_from_transfers
        income = seasonal_income(finishes, transfer_revenue, self.state.objectives)
        self.state.budget += income.total
        print(
            f"[Season] Season {self.state.current_season} income: base €{income.base:,} + "
            f"performance €{income.performance_bonus:,} + transfers €{income.transfer_revenue:,} + "
            f"objectives €{income.objectives_bonus:,} = €{income.total:,}"
        )

        summary = SeasonSummary(
            season=self.state.current_season,
            team_finishes=finishes,
            completed_objectives=self.tracker.completed_count(),
            total_objectives=len(self.state.objectives),
            progress_percent=self.tracker.progress_percent(),
            balance_positive=balance_ok,
            budget_before_income=budget_before,
            income=income,
            budget_after_income=self.state.budget,
            transfer_revenue=transfer_revenue,
            top_talents_found=self.tracker.get(FIND_TOP_TALENTS).current_value,
            top_coaches_hired=self.tracker.get(HIRE_TOP_COACHES).current_value,
            next_requirements=self.tracker.preview_escalation(),
        )

        # Transfer revenue is the only per-season achievement counter
        self.state.achievements.revenue_from_transfers = 0
        self.state.last_summary = summary
        self.state.phase = "season_complete"
        return summary

    def play_league_season(self) -> list[TeamFinish]:
        """
        Roll a league finish for every academy team.

        A title for an eligible youth team completes the league objective and
        counts one championship, at most once per season.
        """
        finishes = []
        for team in self.state.teams:
            position = self.rng.randint(1, team.max_teams)
            team.position = position
            finishes.append(TeamFinish(team_id=team.id, team_name=team.name, position=position, max_teams=team.max_teams))

            if position == 1 and team.id in LEAGUE_ELIGIBLE_TEAMS:
                if not self.tracker.get(WIN_YOUTH_LEAGUE).completed:
                    self.tracker.record_progress(WIN_YOUTH_LEAGUE, 1, absolute=True)
                    self.state.achievements.championships_won += 1
                    print(f"[Season] {team.name} won the league!")
        return finishes

    def acknowledge_summary(self) -> Union[int, FinalReport, Rejection]:
        """Leave the summary screen: start the next season, or finish the run after the last one."""
        if self.state.phase != "season_complete":
            return season_not_in_progress(self.state.phase)

        if self.on_rollover is not None:
            self.on_rollover()

        if self.state.current_season >= self.state.total_seasons:
            report = final_score(self.state.achievements, self.state.budget, self.state.facilities)
            self.state.final_report = report
            self.state.phase = "run_complete"
            print(f"[Season] Run complete — {report.total_points:.0f} points, rating {report.rating}/5")
            return report

        self.state.current_season += 1
        # Escalation starts with the rollover into season 2
        self.tracker.reset_for_new_season(escalate=self.state.current_season > 1)
        self.state.phase = "season_in_progress"
        print(f"[Season] Season {self.state.current_season} of {self.state.total_seasons} started")
        return self.state.current_season
