"""
Season objective tracking and the completion gate.

The tracker works on the objective list inside SimulationState; it never holds
objectives of its own, so the state stays the single source of truth.
"""

from typing import Literal, Optional

from academy.config import OBJECTIVES, SEASON_COMPLETION_THRESHOLD
from academy.economy import round_half_up
from academy.models import Objective, SimulationState

HIRE_TOP_COACHES = "hire_top_coaches"
SCOUT_REGIONS_DEEP = "scout_regions_deep"
FIND_TOP_TALENTS = "find_top_talents"
UPGRADE_KEY_FACILITY = "upgrade_key_facility"
WIN_YOUTH_LEAGUE = "win_youth_league"
POSITIVE_BALANCE = "positive_balance"

# Percentage objectives never accumulate beyond a full 100%
PERCENTAGE_CAP = 100

FacilityProgress = Literal["counted", "locked_out", "not_nominated", "already_completed"]


def default_objectives() -> list[Objective]:
    """Fresh objective set for the first season."""
    return [Objective(**entry) for entry in OBJECTIVES]


def progress_percent(objectives: list[Objective]) -> int:
    """Completed weight as a share of total weight, 0-100."""
    total_weight = sum(o.weight for o in objectives)
    if total_weight <= 0:
        return 0
    completed_weight = sum(o.weight for o in objectives if o.completed)
    return round_half_up(100 * completed_weight / total_weight)


def escalated_requirement(objective: Objective) -> int:
    """Next season's required_value for an objective."""
    if objective.kind in ("fixed", "balance"):
        return objective.required_value
    nxt = objective.required_value + objective.increment
    if objective.ceiling is not None:
        nxt = min(objective.ceiling, nxt)
    return nxt


class ObjectiveTracker:
    """Owns the rules for progressing, completing and rolling over objectives."""

    def __init__(self, state: SimulationState):
        self.state = state

    @property
    def objectives(self) -> list[Objective]:
        return self.state.objectives

    def get(self, objective_id: str) -> Objective:
        objective = self.state.find_objective(objective_id)
        if objective is None:
            raise KeyError(f"Unknown objective '{objective_id}'")
        return objective

    def record_progress(self, objective_id: str, amount: int = 1, absolute: bool = False) -> bool:
        """
        Add `amount` to an objective (or set it when `absolute`).

        Completed objectives ignore further progress. Returns True when this call completed it.
        """
        objective = self.get(objective_id)
        if objective.completed:
            return False

        objective.current_value = amount if absolute else objective.current_value + amount
        if objective.kind == "percentage":
            objective.current_value = min(PERCENTAGE_CAP, objective.current_value)

        if objective.current_value >= objective.required_value:
            objective.completed = True
            print(f"[Objectives] Completed: {objective.describe()}")
            return True
        return False

    def record_facility_upgrade(self, facility_id: str, amount: int) -> FacilityProgress:
        """
        Credit an upgrade toward the facility-bound objective.

        The first nominated facility upgraded this season locks the objective;
        upgrades to the other nominated facility are then ignored.
        """
        objective = self._facility_objective()
        if objective is None or facility_id not in objective.facility_choices:
            return "not_nominated"
        if objective.completed:
            return "already_completed"

        if objective.auxiliary_tag is None:
            objective.auxiliary_tag = facility_id
        if objective.auxiliary_tag != facility_id:
            print(
                f"[Objectives] '{objective.id}' is locked to {objective.auxiliary_tag} this season — "
                f"upgrade of {facility_id} not counted"
            )
            return "locked_out"

        self.record_progress(objective.id, amount)
        return "counted"

    def record_region_scouted(self, objective_id: str, region_id: str) -> bool:
        """Count a region toward a breadth objective once per season. Returns True if counted."""
        objective = self.get(objective_id)
        if region_id in self.state.scouted_regions or objective.completed:
            return False
        self.state.scouted_regions.append(region_id)
        self.record_progress(objective_id, 1)
        return True

    def finalize_balance(self, objective_id: str, budget: int) -> bool:
        """Close the balance objective from the live budget sign."""
        objective = self.get(objective_id)
        objective.current_value = 1 if budget >= 0 else 0
        objective.completed = budget >= 0
        return objective.completed

    def progress_percent(self) -> int:
        return progress_percent(self.objectives)

    def is_season_completable(self) -> bool:
        return self.progress_percent() >= SEASON_COMPLETION_THRESHOLD

    def completed_count(self) -> int:
        return sum(1 for o in self.objectives if o.completed)

    def preview_escalation(self) -> dict[str, int]:
        """Next season's requirements, without touching state."""
        return {o.id: escalated_requirement(o) for o in self.objectives}

    def reset_for_new_season(self, escalate: bool) -> None:
        """Zero progress, release facility locks, clear counted regions and optionally escalate."""
        for objective in self.objectives:
            objective.current_value = 0
            objective.completed = False
            objective.auxiliary_tag = None
            if escalate:
                objective.required_value = escalated_requirement(objective)
        self.state.scouted_regions = []

    def _facility_objective(self) -> Optional[Objective]:
        return next((o for o in self.objectives if o.facility_choices), None)
