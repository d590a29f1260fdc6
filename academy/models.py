"""
Pydantic schemas for the academy simulation.

SimulationState is the root aggregate; every other model is either an entity it
owns or a result returned by an engine operation.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

StaffCategory = Literal["coaches", "scouts", "medical"]
ObjectiveKind = Literal["counting", "breadth", "percentage", "fixed", "balance"]
SeasonPhase = Literal["season_in_progress", "season_complete", "run_complete"]
MissionStatus = Literal["dispatched", "resolving", "resolved", "cancelled"]
TransferEffect = Literal["none", "full", "partial", "retain"]


class BudgetDistribution(BaseModel):
    """Percentage split of the budget across five spending areas."""

    model_config = ConfigDict(extra="forbid")

    salaries: int = Field(..., ge=0, le=100)
    scouting: int = Field(..., ge=0, le=100)
    infrastructure: int = Field(..., ge=0, le=100)
    tournaments: int = Field(..., ge=0, le=100)
    medical: int = Field(..., ge=0, le=100)

    @model_validator(mode="after")
    def _shares_sum_to_100(self) -> "BudgetDistribution":
        total = self.salaries + self.scouting + self.infrastructure + self.tournaments + self.medical
        if total != 100:
            raise ValueError(f"Budget shares must sum to 100, got {total}")
        return self


class Objective(BaseModel):
    """A weighted, binary-completable season goal."""

    id: str
    text: str
    required_value: int
    current_value: int = 0
    weight: int
    completed: bool = False
    kind: ObjectiveKind = "counting"
    increment: int = Field(default=0, description="Added to required_value at each season rollover")
    ceiling: Optional[int] = Field(default=None, description="Upper bound for escalated required_value")
    facility_choices: list[str] = Field(default_factory=list, description="Nominated facilities, if facility-bound")
    auxiliary_tag: Optional[str] = Field(default=None, description="Facility this objective locked onto")

    def describe(self) -> str:
        return self.text.replace("{required}", str(self.required_value))


class Player(BaseModel):
    """An academy player. `value` is computed once at creation."""

    id: str
    name: str
    age: int
    position: str
    position_name: str
    team: str
    potential: int = Field(..., ge=1, le=5)
    technical: int = Field(..., ge=0, le=100)
    physical: int = Field(..., ge=0, le=100)
    tactical: int = Field(..., ge=0, le=100)
    mental: int = Field(..., ge=0, le=100)
    value: int


class StaffCandidate(BaseModel):
    """An offer from the hiring pool, not yet on the payroll."""

    name: str
    skill: int = Field(..., ge=1, le=5)
    salary: int = Field(..., gt=0, description="Monthly salary in euros")
    experience: int = Field(..., ge=0, description="Years of experience")


class StaffMember(BaseModel):
    id: str
    name: str
    title: str
    role_id: str
    category: StaffCategory
    skill: int = Field(..., ge=1, le=5)
    salary: int = Field(..., description="Monthly salary in euros")
    experience: int
    effect: str = ""
    # Only scouts are ever busy, and only while assigned to an open mission
    is_busy: bool = False


class Facility(BaseModel):
    id: str
    name: str
    level: int = Field(..., ge=0)
    max_level: int
    base_cost_per_level: int = Field(..., description="Cost of a full 100% improvement at level 0")
    effect: str = ""


class AcademyTeam(BaseModel):
    id: str
    name: str
    player_count: int
    rating: int
    position: Optional[int] = Field(default=None, description="Last league finish")
    max_teams: int


class Region(BaseModel):
    id: str
    name: str
    talent_rating: int = Field(..., ge=1)
    population: int


class ScoutingMission(BaseModel):
    id: str
    region_id: str
    scout_ids: list[str]
    duration_weeks: int
    cost: int
    dispatched_at: float
    due_at: float
    season: int
    status: MissionStatus = "dispatched"


class Prospect(BaseModel):
    id: str
    name: str
    age: int
    position: str
    position_name: str
    potential: int = Field(..., ge=1, le=5)
    region: str
    invited: bool = False


class ScoutingReport(BaseModel):
    mission_id: str
    region_id: str
    region_name: str
    season: int
    duration_weeks: int
    prospects: list[Prospect] = Field(default_factory=list)
    counted_for_objective: bool = False


class EventOption(BaseModel):
    text: str
    budget: int = 0
    reputation: int = 0
    morale: int = 0
    injuries: int = 0
    experience: int = 0
    coaching_level: int = 0
    infrastructure: int = 0
    chance: int = Field(default=100, ge=0, le=100, description="Success chance in percent for coaching_level")
    transfer: TransferEffect = "none"


class RandomEventTemplate(BaseModel):
    """Static catalogue entry. Never mutated after loading."""

    id: str
    title: str
    description: str
    requires_transfer_target: bool = False
    options: list[EventOption]


class EventInstance(BaseModel):
    """A parameterized copy of a template, produced fresh for each trigger."""

    id: str
    template_id: str
    title: str
    description: str
    options: list[EventOption]
    target_player_id: Optional[str] = None
    triggered_at: float = 0.0


class EventOutcome(BaseModel):
    event_id: str
    option_index: int
    budget_delta: int = 0
    removed_player_id: Optional[str] = None
    facility_id: Optional[str] = None
    facility_improvement: int = 0
    coaching_applied: bool = False
    messages: list[str] = Field(default_factory=list)


class Achievements(BaseModel):
    """Run-long counters. Only transfer revenue resets each season."""

    top_players_produced: int = 0
    championships_won: int = 0
    international_tournaments_won: int = 0
    players_in_national_team: int = 0
    revenue_from_transfers: int = 0


class IncomeBreakdown(BaseModel):
    base: int
    performance_bonus: int
    transfer_revenue: int
    objectives_bonus: int
    total: int


class TeamFinish(BaseModel):
    team_id: str
    team_name: str
    position: int
    max_teams: int


class SeasonSummary(BaseModel):
    season: int
    team_finishes: list[TeamFinish]
    completed_objectives: int
    total_objectives: int
    progress_percent: int
    balance_positive: bool
    budget_before_income: int
    income: IncomeBreakdown
    budget_after_income: int
    transfer_revenue: int
    top_talents_found: int
    top_coaches_hired: int
    next_requirements: dict[str, int] = Field(default_factory=dict)


class FinalReport(BaseModel):
    total_points: float
    rating: int = Field(..., ge=1, le=5)
    championships_won: int
    top_players_produced: int
    international_tournaments_won: int
    players_in_national_team: int
    final_budget: int
    avg_facility_level: float


class SimulationState(BaseModel):
    """Root aggregate. Owned and mutated exclusively by one AcademyEngine."""

    current_season: int = 1
    total_seasons: int
    phase: SeasonPhase = "season_in_progress"
    clock: float = Field(default=0.0, description="Weeks elapsed since the game started")
    budget: int
    scouting_budget: int
    budget_distribution: BudgetDistribution
    teams: list[AcademyTeam] = Field(default_factory=list)
    players: list[Player] = Field(default_factory=list)
    staff: list[StaffMember] = Field(default_factory=list)
    facilities: list[Facility] = Field(default_factory=list)
    objectives: list[Objective] = Field(default_factory=list)
    missions: list[ScoutingMission] = Field(default_factory=list)
    scouting_reports: list[ScoutingReport] = Field(default_factory=list)
    scouted_regions: list[str] = Field(default_factory=list, description="Regions counted this season")
    pending_event: Optional[EventInstance] = None
    achievements: Achievements = Field(default_factory=Achievements)
    reputation: int = 50
    morale: int = 50
    injury_risk: int = 50
    coaching_level: int = 0
    team_experience: int = 0
    last_summary: Optional[SeasonSummary] = None
    final_report: Optional[FinalReport] = None

    def find_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def find_staff(self, staff_id: str) -> Optional[StaffMember]:
        return next((s for s in self.staff if s.id == staff_id), None)

    def find_facility(self, facility_id: str) -> Optional[Facility]:
        return next((f for f in self.facilities if f.id == facility_id), None)

    def find_objective(self, objective_id: str) -> Optional[Objective]:
        return next((o for o in self.objectives if o.id == objective_id), None)

    def find_mission(self, mission_id: str) -> Optional[ScoutingMission]:
        return next((m for m in self.missions if m.id == mission_id), None)

    def find_prospect(self, prospect_id: str, season: Optional[int] = None) -> Optional[Prospect]:
        """Look a prospect up across reports, optionally only those from `season`."""
        for report in self.scouting_reports:
            if season is not None and report.season != season:
                continue
            for prospect in report.prospects:
                if prospect.id == prospect_id:
                    return prospect
        return None


StrategyMode = Literal["balanced", "conservative", "win_now"]


class AutopilotReport(BaseModel):
    """Full output of an autopilot run."""

    strategy_mode: StrategyMode
    seed: Optional[int] = None
    seasons: list[SeasonSummary] = Field(default_factory=list)
    final_report: Optional[FinalReport] = None
    stalled_season: Optional[int] = Field(default=None, description="Season whose gate could not be met, if any")
    stalled_progress: Optional[int] = None
    weeks_played: float = 0.0
    staff_hired: int = 0
    missions_dispatched: int = 0
    prospects_invited: int = 0
    players_sold: int = 0
    events_answered: int = 0
