"""
API route definitions.

Every endpoint delegates to the AcademyEngine held in `app.state.engine`.
Engine rejections become HTTP errors whose detail is the serialized Rejection:
  NotFound  -> 404
  GateNotMet -> 409
  anything else -> 422

Endpoints:
  GET    /health                                  — liveness check
  GET    /state                                   — full simulation state
  GET    /objectives                              — objectives with progress and the gate
  POST   /staff/candidates                        — candidate pool for a role
  POST   /staff/hire                              — hire a candidate
  DELETE /staff/{staff_id}                        — fire a staff member
  POST   /facilities/{facility_id}/upgrade        — upgrade a facility
  POST   /scouting/missions                       — dispatch scouts
  POST   /scouting/missions/{mission_id}/resolve  — resolve a mission now
  POST   /prospects/{prospect_id}/invite          — invite a prospect
  POST   /players/{player_id}/sell                — sell a player
  PUT    /budget/distribution                     — set the budget split
  POST   /season/complete                         — close the season
  POST   /season/acknowledge                      — start the next season or finish the run
  POST   /events/trigger                          — force a random event
  POST   /events/{event_id}/options/{option_index} — answer an event
  POST   /events/{event_id}/dismiss               — close an event unanswered
  POST   /time/advance                            — advance the clock
  POST   /reset                                   — start a new game
  POST   /simulate                                — run the autopilot on a fresh game
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from academy.autopilot import run_autopilot
from academy.config import SEASON_COMPLETION_THRESHOLD
from academy.engine import AcademyEngine
from academy.models import (
    AutopilotReport,
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
    StrategyMode,
)
from academy.rejections import Rejection

router = APIRouter()


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------

class CandidateRequest(BaseModel):
    category: str
    role_id: str


class HireRequest(BaseModel):
    category: str
    role_id: str
    candidate: StaffCandidate


class UpgradeRequest(BaseModel):
    amount: int


class DispatchRequest(BaseModel):
    region_id: str
    scout_ids: list[str]
    duration_weeks: int


class AdvanceRequest(BaseModel):
    weeks: float = Field(..., gt=0, description="Weeks to move the clock forward")


class AdvanceResponse(BaseModel):
    clock: float
    executed: list[str]


class ResetRequest(BaseModel):
    seed: Optional[int] = None


class SimulateRequest(BaseModel):
    seed: Optional[int] = None
    total_seasons: Optional[int] = Field(default=None, ge=1)
    strategy_mode: StrategyMode = "balanced"


class ObjectiveView(BaseModel):
    id: str
    text: str
    required_value: int
    current_value: int
    weight: int
    completed: bool
    locked_facility: Optional[str] = None


class ObjectivesResponse(BaseModel):
    season: int
    progress_percent: int
    threshold: int
    completable: bool
    objectives: list[ObjectiveView]


class SaleResponse(BaseModel):
    player_id: str
    offer: int
    budget: int


class AcknowledgeResponse(BaseModel):
    phase: str
    season: int
    final_report: Optional[FinalReport] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_STATUS_BY_CODE = {
    "NotFound": 404,
    "GateNotMet": 409,
}


def _engine(request: Request) -> AcademyEngine:
    return request.app.state.engine


def _unwrap(result):
    """Pass results through; turn a Rejection into an HTTPException."""
    if isinstance(result, Rejection):
        raise HTTPException(
            status_code=_STATUS_BY_CODE.get(result.code, 422),
            detail=result.model_dump(),
        )
    return result


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/state", response_model=SimulationState)
def get_state(request: Request):
    return _engine(request).state


@router.get("/objectives", response_model=ObjectivesResponse)
def get_objectives(request: Request):
    engine = _engine(request)
    return ObjectivesResponse(
        season=engine.state.current_season,
        progress_percent=engine.progress_percent(),
        threshold=SEASON_COMPLETION_THRESHOLD,
        completable=engine.is_season_completable(),
        objectives=[
            ObjectiveView(
                id=o.id,
                text=o.describe(),
                required_value=o.required_value,
                current_value=o.current_value,
                weight=o.weight,
                completed=o.completed,
                locked_facility=o.auxiliary_tag,
            )
            for o in engine.state.objectives
        ],
    )


@router.post("/staff/candidates", response_model=list[StaffCandidate])
def staff_candidates(body: CandidateRequest, request: Request):
    return _unwrap(_engine(request).generate_candidates(body.category, body.role_id))


@router.post("/staff/hire", response_model=StaffMember)
def hire_staff(body: HireRequest, request: Request):
    return _unwrap(_engine(request).hire_staff(body.category, body.role_id, body.candidate))


@router.delete("/staff/{staff_id}", response_model=StaffMember)
def fire_staff(staff_id: str, request: Request):
    return _unwrap(_engine(request).fire_staff(staff_id))


@router.post("/facilities/{facility_id}/upgrade", response_model=Facility)
def upgrade_facility(facility_id: str, body: UpgradeRequest, request: Request):
    return _unwrap(_engine(request).upgrade_facility(facility_id, body.amount))


@router.post("/scouting/missions", response_model=ScoutingMission)
def dispatch_scouts(body: DispatchRequest, request: Request):
    return _unwrap(_engine(request).dispatch_scouts(body.region_id, body.scout_ids, body.duration_weeks))


@router.post("/scouting/missions/{mission_id}/resolve", response_model=ScoutingReport)
def resolve_mission(mission_id: str, request: Request):
    return _unwrap(_engine(request).resolve_scouting_mission(mission_id))


@router.post("/prospects/{prospect_id}/invite", response_model=Prospect)
def invite_prospect(prospect_id: str, request: Request):
    return _unwrap(_engine(request).invite_prospect(prospect_id))


@router.post("/players/{player_id}/sell", response_model=SaleResponse)
def sell_player(player_id: str, request: Request):
    engine = _engine(request)
    offer = _unwrap(engine.sell_player(player_id))
    return SaleResponse(player_id=player_id, offer=offer, budget=engine.state.budget)


@router.put("/budget/distribution", response_model=BudgetDistribution)
def set_budget_distribution(shares: dict[str, int], request: Request):
    # Raw dict so a bad split reaches the engine and comes back as InvalidDistribution
    return _unwrap(_engine(request).set_budget_distribution(shares))


@router.post("/season/complete", response_model=SeasonSummary)
def complete_season(request: Request):
    return _unwrap(_engine(request).attempt_complete_season())


@router.post("/season/acknowledge", response_model=AcknowledgeResponse)
def acknowledge_summary(request: Request):
    engine = _engine(request)
    result = _unwrap(engine.acknowledge_summary())
    return AcknowledgeResponse(
        phase=engine.state.phase,
        season=engine.state.current_season,
        final_report=result if isinstance(result, FinalReport) else None,
    )


@router.post("/events/trigger", response_model=Optional[EventInstance])
def trigger_event(request: Request):
    """Returns null when the trigger was skipped (an event is pending, or no transfer target exists)."""
    return _engine(request).trigger_random_event()


@router.post("/events/{event_id}/options/{option_index}", response_model=EventOutcome)
def apply_event_option(event_id: str, option_index: int, request: Request):
    return _unwrap(_engine(request).apply_event_option(event_id, option_index))


@router.post("/events/{event_id}/dismiss")
def dismiss_event(event_id: str, request: Request):
    _unwrap(_engine(request).dismiss_event(event_id))
    return {"status": "dismissed"}


@router.post("/time/advance", response_model=AdvanceResponse)
def advance_time(body: AdvanceRequest, request: Request):
    engine = _engine(request)
    executed = engine.advance_time(body.weeks)
    return AdvanceResponse(clock=engine.state.clock, executed=executed)


@router.post("/reset", response_model=SimulationState)
def reset(request: Request, body: Optional[ResetRequest] = None):
    seed = body.seed if body else None
    return _engine(request).reset(seed)


@router.post("/simulate", response_model=AutopilotReport)
def simulate(body: SimulateRequest, request: Request):
    """
    Run the autopilot on a throwaway game built from the app's settings.

    The interactive game in app.state is left untouched.
    """
    settings = _engine(request).settings
    update = {"seed": body.seed}
    if body.total_seasons is not None:
        update["total_seasons"] = body.total_seasons
    engine = AcademyEngine(settings.model_copy(update=update))
    try:
        return run_autopilot(engine, body.strategy_mode)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
