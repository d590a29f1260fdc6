"""
Academy engine — owner of SimulationState and the operation surface.

Presentation collaborators (HTTP routes, the CLI autopilot) call the methods
below and read `engine.state` to render. Every mutating method checks first and
then acts: a returned Rejection means nothing changed.

Wiring:
  RandomValueProvider -> ProceduralGenerator, SeasonScheduler, RandomEventEngine
  TaskScheduler       -> ScoutingSession (mission resolution), RandomEventEngine (cadence)
  ObjectiveTracker    -> every operation with an objective side effect
"""

from typing import Optional, Union

from pydantic import ValidationError

from academy.config import (
    ACADEMY_TEAMS,
    BUDGET_DEFAULTS,
    FACILITIES,
    MIN_SALE_AGE,
    STAFF_ROLES,
    GameSettings,
)
from academy.economy import check_facility_upgrade, check_fire, check_hire, sale_offer, severance
from academy.events import RandomEventEngine
from academy.generator import ProceduralGenerator
from academy.models import (
    AcademyTeam,
    BudgetDistribution,
    EventInstance,
    EventOutcome,
    Facility,
    FinalReport,
    Prospect,
    ScoutingMission,
    ScoutingReport,
    SeasonSummary,
    SimulationState,
    StaffCandidate,
    StaffMember,
)
from academy.objectives import FIND_TOP_TALENTS, HIRE_TOP_COACHES, ObjectiveTracker, default_objectives
from academy.randomness import RandomValueProvider
from academy.rejections import Rejection, invalid, not_found, season_not_in_progress
from academy.scouting import ScoutingSession
from academy.season import SeasonScheduler
from academy.tasks import TaskScheduler

# Hiring a coach at or above this skill counts toward the top-coaches objective
TOP_COACH_SKILL = 4
TOP_TALENT_POTENTIAL = 5


def new_state(settings: GameSettings, generator: ProceduralGenerator) -> SimulationState:
    """Build the opening state: config entities plus generated players and staff."""
    return SimulationState(
        total_seasons=settings.total_seasons,
        budget=settings.initial_budget,
        scouting_budget=settings.scouting_budget,
        budget_distribution=BudgetDistribution(**BUDGET_DEFAULTS),
        teams=[AcademyTeam(**t) for t in ACADEMY_TEAMS],
        facilities=[
            Facility(
                id=f["id"],
                name=f["name"],
                level=f["level"],
                max_level=f["max_level"],
                base_cost_per_level=f["cost"],
                effect=f["effect"],
            )
            for f in FACILITIES
        ],
        objectives=default_objectives(),
        players=generator.academy_players(ACADEMY_TEAMS),
        staff=generator.initial_staff(),
    )


class AcademyEngine:
    """One game. Not thread-safe: the host serializes calls."""

    def __init__(
        self,
        settings: GameSettings | None = None,
        rng: RandomValueProvider | None = None,
        start_events: bool = True,
    ):
        self.settings = settings or GameSettings()
        self.start_events = start_events
        self.rng = rng or RandomValueProvider(self.settings.seed)
        self._build()

    def _build(self) -> None:
        self.generator = ProceduralGenerator(self.rng)
        self.state = new_state(self.settings, self.generator)
        self.tasks = TaskScheduler(now=self.state.clock)
        self.tracker = ObjectiveTracker(self.state)
        self.scouting = ScoutingSession(self.state, self.generator, self.tracker, self.tasks)
        self.events = RandomEventEngine(self.state, self.rng, self.tasks)
        self.season = SeasonScheduler(self.state, self.tracker, self.rng, on_rollover=self._cancel_season_tasks)
        if self.start_events:
            self.events.start()
        print(
            f"[Engine] New game: {self.state.total_seasons} seasons | Budget: €{self.state.budget:,} | "
            f"{len(self.state.players)} players, {len(self.state.staff)} staff"
        )

    def reset(self, seed: int | None = None) -> SimulationState:
        """Start a new game. Every pending task of the old game is cancelled first."""
        self.tasks.cancel_all()
        if seed is not None:
            self.settings = self.settings.model_copy(update={"seed": seed})
        self.rng.reseed(self.settings.seed)
        self._build()
        return self.state

    def _cancel_season_tasks(self) -> None:
        self.scouting.cancel_all()
        self.events.cancel()
        if self.start_events:
            self.events.start()

    def _guard(self) -> Optional[Rejection]:
        if self.state.phase != "season_in_progress":
            return season_not_in_progress(self.state.phase)
        return None

    # --- Read access ---

    def progress_percent(self) -> int:
        return self.tracker.progress_percent()

    def is_season_completable(self) -> bool:
        return self.tracker.is_season_completable()

    # --- Staff ---

    def generate_candidates(self, category: str, role_id: str) -> Union[list[StaffCandidate], Rejection]:
        if role_id not in STAFF_ROLES.get(category, {}):
            return not_found("Role", f"{category}/{role_id}")
        return self.generator.staff_candidates(category, role_id)

    def hire_staff(self, category: str, role_id: str, candidate: StaffCandidate) -> Union[StaffMember, Rejection]:
        """Hire a candidate. The annual salary must be covered, but nothing is debited now."""
        rejection = self._guard()
        if rejection is not None:
            return rejection
        if role_id not in STAFF_ROLES.get(category, {}):
            return not_found("Role", f"{category}/{role_id}")
        rejection = check_hire(candidate.salary, self.state.budget)
        if rejection is not None:
            return rejection

        member = self.generator.staff_member(category, role_id, candidate)
        self.state.staff.append(member)
        print(f"[Engine] Hired {member.name} ({member.title}) | Salary: €{member.salary:,}/month")

        if category == "coaches" and member.skill >= TOP_COACH_SKILL:
            self.tracker.record_progress(HIRE_TOP_COACHES, 1)
        return member

    def fire_staff(self, staff_id: str) -> Union[StaffMember, Rejection]:
        """Dismiss a staff member, paying three months of salary as severance."""
        rejection = self._guard()
        if rejection is not None:
            return rejection
        member = self.state.find_staff(staff_id)
        if member is None:
            return not_found("Staff member", staff_id)
        if member.is_busy:
            return invalid("ScoutBusy", f"{member.name} is on a scouting mission", staff_id=staff_id)
        rejection = check_fire(member.salary, self.state.budget)
        if rejection is not None:
            return rejection

        pay = severance(member.salary)
        self.state.budget -= pay
        self.state.staff.remove(member)
        print(f"[Engine] Dismissed {member.name} | Severance: €{pay:,} | Budget now: €{self.state.budget:,}")
        return member

    # --- Facilities ---

    def upgrade_facility(self, facility_id: str, amount: int) -> Union[Facility, Rejection]:
        rejection = self._guard()
        if rejection is not None:
            return rejection
        facility = self.state.find_facility(facility_id)
        if facility is None:
            return not_found("Facility", facility_id)

        cost, rejection = check_facility_upgrade(facility, amount, self.state.budget)
        if rejection is not None:
            return rejection

        facility.level += amount
        self.state.budget -= cost
        print(
            f"[Engine] {facility.name} upgraded by {amount}% to {facility.level}% | "
            f"Cost: €{cost:,} | Budget now: €{self.state.budget:,}"
        )
        self.tracker.record_facility_upgrade(facility_id, amount)
        return facility

    # --- Scouting ---

    def dispatch_scouts(self, region_id: str, scout_ids: list[str], duration_weeks: int) -> Union[ScoutingMission, Rejection]:
        rejection = self._guard()
        if rejection is not None:
            return rejection
        return self.scouting.dispatch(region_id, scout_ids, duration_weeks)

    def resolve_scouting_mission(self, mission_id: str) -> Union[ScoutingReport, Rejection]:
        return self.scouting.resolve(mission_id)

    def invite_prospect(self, prospect_id: str) -> Union[Prospect, Rejection]:
        """Invite a scouted prospect for a trial. Five-star invitations count toward the talent objective."""
        rejection = self._guard()
        if rejection is not None:
            return rejection
        # Prospects from earlier seasons cannot be invited once the season has rolled over
        prospect = self.state.find_prospect(prospect_id, season=self.state.current_season)
        if prospect is None:
            return not_found("Prospect", prospect_id)
        if prospect.invited:
            return prospect

        prospect.invited = True
        if prospect.potential == TOP_TALENT_POTENTIAL:
            self.tracker.record_progress(FIND_TOP_TALENTS, 1)
        return prospect

    # --- Players ---

    def sell_player(self, player_id: str) -> Union[int, Rejection]:
        """Sell a player at an offer within ±20% of their value. Returns the fee received."""
        rejection = self._guard()
        if rejection is not None:
            return rejection
        player = self.state.find_player(player_id)
        if player is None:
            return not_found("Player", player_id)
        if player.age < MIN_SALE_AGE:
            return invalid(
                "AgeIneligible",
                f"{player.name} is {player.age}; players under {MIN_SALE_AGE} cannot be sold",
                age=player.age,
                min_age=MIN_SALE_AGE,
            )

        offer = sale_offer(player.value, self.rng)
        self.state.budget += offer
        self.state.achievements.revenue_from_transfers += offer
        self.state.players.remove(player)
        print(f"[Engine] Sold {player.name} for €{offer:,} | Budget now: €{self.state.budget:,}")
        return offer

    # --- Finance ---

    def set_budget_distribution(self, shares: dict[str, int]) -> Union[BudgetDistribution, Rejection]:
        rejection = self._guard()
        if rejection is not None:
            return rejection
        try:
            distribution = BudgetDistribution(**shares)
        except ValidationError as e:
            return invalid("InvalidDistribution", "Budget shares must be five percentages summing to 100",
                           errors=[err["msg"] for err in e.errors()])
        self.state.budget_distribution = distribution
        return distribution

    # --- Season ---

    def attempt_complete_season(self) -> Union[SeasonSummary, Rejection]:
        return self.season.attempt_complete_season()

    def acknowledge_summary(self) -> Union[int, FinalReport, Rejection]:
        return self.season.acknowledge_summary()

    # --- Events ---

    def trigger_random_event(self) -> Optional[EventInstance]:
        return self.events.trigger()

    def apply_event_option(self, event_id: str, option_index: int) -> Union[EventOutcome, Rejection]:
        return self.events.apply_option(event_id, option_index)

    def dismiss_event(self, event_id: str) -> Optional[Rejection]:
        return self.events.dismiss(event_id)

    # --- Time ---

    def advance_time(self, weeks: float) -> list[str]:
        """Advance the simulation clock, running every deferred task that falls due."""
        if self.state.phase == "run_complete":
            return []
        executed = self.tasks.advance(weeks)
        self.state.clock = self.tasks.now
        return executed
