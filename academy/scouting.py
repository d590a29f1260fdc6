"""
Scouting missions: dispatch, deferred resolution and cancellation.

Mission lifecycle: dispatched -> resolving -> resolved (or cancelled on rollover).
A scout belongs to at most one open mission; `is_busy` is set at dispatch and
cleared only by the matching resolution or cancellation.
"""

import itertools
from typing import Union

from academy.config import DEEP_SCOUTING_WEEKS, REGIONS, SCOUTING_COSTS
from academy.generator import DEFAULT_SCOUT_SKILL, ProceduralGenerator
from academy.models import Region, ScoutingMission, ScoutingReport, SimulationState, StaffMember
from academy.objectives import SCOUT_REGIONS_DEEP, ObjectiveTracker
from academy.rejections import Rejection, insufficient_funds, invalid, not_found
from academy.tasks import TaskScheduler

TASK_PREFIX = "scouting:"


def load_regions() -> dict[str, Region]:
    return {r["id"]: Region(**r) for r in REGIONS}


def mission_cost(duration_weeks: int) -> int:
    return SCOUTING_COSTS[duration_weeks]


class ScoutingSession:
    """Scout assignment and mission resolution against the shared state."""

    def __init__(
        self,
        state: SimulationState,
        generator: ProceduralGenerator,
        tracker: ObjectiveTracker,
        scheduler: TaskScheduler,
    ):
        self.state = state
        self.generator = generator
        self.tracker = tracker
        self.scheduler = scheduler
        self.regions = load_regions()
        self._ids = itertools.count(1)

    def available_scouts(self) -> list[StaffMember]:
        return [s for s in self.state.staff if s.category == "scouts" and not s.is_busy]

    def dispatch(self, region_id: str, scout_ids: list[str], duration_weeks: int) -> Union[ScoutingMission, Rejection]:
        """
        Send scouts to a region.

        All checks run before any mutation: a rejected dispatch debits nothing
        and leaves every scout free.
        """
        region = self.regions.get(region_id)
        if region is None:
            return not_found("Region", region_id)

        if duration_weeks not in SCOUTING_COSTS:
            return invalid(
                "InvalidDuration",
                f"Mission duration must be one of {sorted(SCOUTING_COSTS)} weeks, got {duration_weeks}",
                duration_weeks=duration_weeks,
            )

        if not self.available_scouts():
            return invalid("NoAvailableScouts", "All scouts are busy or none are hired")

        unique_ids = list(dict.fromkeys(scout_ids))
        if not unique_ids:
            return invalid("NoAvailableScouts", "Select at least one scout")

        scouts = []
        for scout_id in unique_ids:
            scout = self.state.find_staff(scout_id)
            if scout is None or scout.category != "scouts":
                return not_found("Scout", scout_id)
            if scout.is_busy:
                return invalid("ScoutBusy", f"{scout.name} is already on a mission", scout_id=scout_id)
            scouts.append(scout)

        cost = mission_cost(duration_weeks)
        if self.state.scouting_budget < cost:
            return insufficient_funds(cost, self.state.scouting_budget, pool="scouting budget")
        if self.state.budget < cost:
            return insufficient_funds(cost, self.state.budget)

        # --- checks passed, commit ---
        # The scouting budget is an allowance cap per mission; only the main budget is debited
        self.state.budget -= cost
        for scout in scouts:
            scout.is_busy = True

        mission_id = f"mission_{self.state.current_season}_{next(self._ids)}"
        due = self.scheduler.schedule(TASK_PREFIX + mission_id, duration_weeks, lambda: self.resolve(mission_id))
        mission = ScoutingMission(
            id=mission_id,
            region_id=region_id,
            scout_ids=unique_ids,
            duration_weeks=duration_weeks,
            cost=cost,
            dispatched_at=self.scheduler.now,
            due_at=due,
            season=self.state.current_season,
        )
        self.state.missions.append(mission)
        print(
            f"[Scouting] {len(scouts)} scout(s) sent to {region.name} for {duration_weeks} week(s) | "
            f"Cost: €{cost:,} | Budget now: €{self.state.budget:,}"
        )
        return mission

    def resolve(self, mission_id: str) -> Union[ScoutingReport, Rejection]:
        """
        Resolve a mission: generate prospects, free the scouts, count the region.

        Safe to call directly before the deferred task fires; the pending task is cancelled.
        """
        mission = self.state.find_mission(mission_id)
        if mission is None or mission.status != "dispatched":
            return not_found("Mission", mission_id)

        self.scheduler.cancel(TASK_PREFIX + mission_id)
        mission.status = "resolving"

        region = self.regions[mission.region_id]
        scouts = [s for s in (self.state.find_staff(i) for i in mission.scout_ids) if s is not None]
        avg_skill = sum(s.skill for s in scouts) / len(scouts) if scouts else DEFAULT_SCOUT_SKILL
        prospects = self.generator.scouting_prospects(
            region,
            mission.duration_weeks,
            scout_count=len(mission.scout_ids),
            avg_scout_skill=avg_skill,
        )

        for scout in scouts:
            scout.is_busy = False

        counted = False
        if mission.duration_weeks >= DEEP_SCOUTING_WEEKS:
            counted = self.tracker.record_region_scouted(SCOUT_REGIONS_DEEP, region.id)

        report = ScoutingReport(
            mission_id=mission.id,
            region_id=region.id,
            region_name=region.name,
            season=mission.season,
            duration_weeks=mission.duration_weeks,
            prospects=prospects,
            counted_for_objective=counted,
        )
        self.state.scouting_reports.append(report)

        mission.status = "resolved"
        self.state.missions.remove(mission)
        print(f"[Scouting] {region.name}: {len(prospects)} prospect(s) found")
        return report

    def cancel_all(self) -> list[str]:
        """Drop every open mission without results. Scouts are released, nothing is refunded."""
        cancelled = []
        for mission in list(self.state.missions):
            self.scheduler.cancel(TASK_PREFIX + mission.id)
            for scout_id in mission.scout_ids:
                scout = self.state.find_staff(scout_id)
                if scout is not None:
                    scout.is_busy = False
            mission.status = "cancelled"
            self.state.missions.remove(mission)
            cancelled.append(mission.id)
        if cancelled:
            print(f"[Scouting] Cancelled {len(cancelled)} open mission(s)")
        return cancelled
