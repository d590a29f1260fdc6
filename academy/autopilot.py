"""
Rule-based autopilot: plays a whole run through the engine's public operations.

Each season runs the same deterministic pipeline, week by week:
  1. Hire rule     — request coach candidates and hire top coaches until the objective is met.
  2. Facility rule — upgrade the cheaper nominated facility by the remaining requirement.
  3. Scout rule    — send every free scout, one per mission, to unvisited regions in talent order.
  4. Advance rule  — move the clock one week; missions resolve and events fire.
  5. Invite rule   — invite every uninvited five-star prospect.
  6. Event rule    — answer a pending event with the option the mode scores highest.
  7. Sell rule     — conservative mode only: sell 16-18 year olds while the budget is below reserve.
The season is closed as soon as the gate is met. A season that still misses the
gate after the week budget is reported as stalled and the run stops there.

Strategy modes:
  balanced     — two-week missions, moderate cash reserve, events weighed evenly
  conservative — two-week missions, large reserve, events judged mostly by cash, sells to stay liquid
  win_now      — four-week missions, no reserve, events judged by sporting effect
"""

from academy.config import MIN_SALE_AGE, SCOUTING_COSTS, TRANSFER_TARGET_AGES
from academy.economy import facility_upgrade_cost
from academy.engine import TOP_COACH_SKILL, TOP_TALENT_POTENTIAL, AcademyEngine
from academy.models import AutopilotReport, EventOption, StrategyMode
from academy.objectives import HIRE_TOP_COACHES, SCOUT_REGIONS_DEEP, UPGRADE_KEY_FACILITY
from academy.rejections import Rejection

# Weeks the autopilot may spend on one season before giving up on the gate
WEEKS_PER_SEASON = 40

# Coach roles tried in turn when looking for top coaches
COACH_ROLES = ["headCoach", "technicalCoach", "assistantCoach", "fitnessCoach", "goalkeepingCoach"]

# Candidate requests per week; keeps the hiring rule from spinning on bad luck
MAX_CANDIDATE_REQUESTS = 5

# Never sell more than this many players in one season
MAX_SELLS_PER_SEASON = 4

# Sell rule only touches players at or below this potential
SELL_MAX_POTENTIAL = 3

# Per-mode parameters: (mission_weeks, budget_reserve, event_budget_weight)
#   budget_reserve: spending that would leave less than this in the budget is skipped
#   event_budget_weight: points per euro when scoring event options against status effects
_MODE_PARAMS: dict[str, tuple[int, int, float]] = {
    "balanced":     (2, 400_000, 1 / 10_000),
    "conservative": (2, 1_000_000, 1 / 2_000),
    "win_now":      (4, 0, 1 / 50_000),
}


def _get_mode_params(mode: StrategyMode) -> tuple[int, int, float]:
    return _MODE_PARAMS.get(mode, _MODE_PARAMS["balanced"])  # type: ignore[arg-type]


def run_autopilot(
    engine: AcademyEngine,
    mode: StrategyMode = "balanced",
    weeks_per_season: int = WEEKS_PER_SEASON,
) -> AutopilotReport:
    """
    Play every remaining season of `engine` with the given strategy mode.

    Args:
        engine: A fresh or in-progress engine; it is mutated in place
        mode: Strategy mode controlling mission length, cash reserve and event choices
        weeks_per_season: Week budget per season before the run counts as stalled

    Returns:
        AutopilotReport with every season summary and, if the run finished, the final score
    """
    report = AutopilotReport(strategy_mode=mode, seed=engine.settings.seed)
    state = engine.state

    while state.phase != "run_complete":
        if state.phase == "season_in_progress":
            print(f"\n[Autopilot] Season {state.current_season} ({mode} mode)")
            _play_season(engine, mode, weeks_per_season, report)

            summary = engine.attempt_complete_season()
            if isinstance(summary, Rejection):
                report.stalled_season = state.current_season
                report.stalled_progress = engine.progress_percent()
                print(f"[Autopilot] Stalled in season {state.current_season}: {summary.message}")
                break
            report.seasons.append(summary)
            print(
                f"[Autopilot] Season {summary.season} closed at {summary.progress_percent}% | "
                f"Budget now: €{summary.budget_after_income:,}"
            )

        engine.acknowledge_summary()

    report.final_report = state.final_report
    report.weeks_played = state.clock
    return report


def _play_season(engine: AcademyEngine, mode: StrategyMode, weeks_per_season: int, report: AutopilotReport) -> None:
    sells_this_season = 0
    for _ in range(weeks_per_season):
        report.staff_hired += hire_top_coaches(engine, mode)
        upgrade_key_facility(engine, mode)
        report.missions_dispatched += dispatch_free_scouts(engine, mode)

        engine.advance_time(1)

        report.prospects_invited += invite_top_prospects(engine)
        if answer_pending_event(engine, mode):
            report.events_answered += 1
        if mode == "conservative" and sells_this_season < MAX_SELLS_PER_SEASON:
            sold = sell_surplus_players(engine, mode, MAX_SELLS_PER_SEASON - sells_this_season)
            sells_this_season += sold
            report.players_sold += sold

        if engine.is_season_completable():
            return


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def hire_top_coaches(engine: AcademyEngine, mode: StrategyMode) -> int:
    """Hire rule: cheapest top-skill candidate from each request until the objective is done."""
    _, reserve, _ = _get_mode_params(mode)
    objective = engine.tracker.get(HIRE_TOP_COACHES)
    hired = 0
    for i in range(MAX_CANDIDATE_REQUESTS):
        if objective.completed:
            break
        role_id = COACH_ROLES[i % len(COACH_ROLES)]
        candidates = engine.generate_candidates("coaches", role_id)
        if isinstance(candidates, Rejection):
            continue
        top = [c for c in candidates if c.skill >= TOP_COACH_SKILL]
        if not top:
            continue
        candidate = min(top, key=lambda c: c.salary)
        # Hiring commits a year of salary; keep the reserve intact
        if engine.state.budget - candidate.salary * 12 < reserve:
            continue
        member = engine.hire_staff("coaches", role_id, candidate)
        if not isinstance(member, Rejection):
            hired += 1
    return hired


def upgrade_key_facility(engine: AcademyEngine, mode: StrategyMode) -> bool:
    """
    Facility rule: one upgrade that completes the facility objective outright.

    The locked facility is used when the objective already has one; otherwise
    the cheaper nominated facility with enough headroom.
    """
    _, reserve, _ = _get_mode_params(mode)
    objective = engine.tracker.get(UPGRADE_KEY_FACILITY)
    if objective.completed:
        return False

    remaining = objective.required_value - objective.current_value
    choices = [objective.auxiliary_tag] if objective.auxiliary_tag else objective.facility_choices
    options = []
    for facility_id in choices:
        facility = engine.state.find_facility(facility_id)
        if facility is None or facility.level + remaining > facility.max_level:
            continue
        cost = facility_upgrade_cost(facility.base_cost_per_level, remaining, facility.level)
        options.append((cost, facility_id))
    if not options:
        return False

    cost, facility_id = min(options)
    if engine.state.budget - cost < reserve:
        return False
    result = engine.upgrade_facility(facility_id, remaining)
    return not isinstance(result, Rejection)


def dispatch_free_scouts(engine: AcademyEngine, mode: StrategyMode) -> int:
    """Scout rule: one free scout per mission, best unvisited regions first."""
    weeks, reserve, _ = _get_mode_params(mode)
    cost = SCOUTING_COSTS[weeks]
    state = engine.state

    busy_regions = {m.region_id for m in state.missions}
    ranked = sorted(engine.scouting.regions.values(), key=lambda r: (-r.talent_rating, r.id))
    if engine.tracker.get(SCOUT_REGIONS_DEEP).completed:
        # Breadth is done; keep working the richest regions for talent
        targets = [r for r in ranked if r.id not in busy_regions]
    else:
        targets = [r for r in ranked if r.id not in busy_regions and r.id not in state.scouted_regions]

    dispatched = 0
    for scout, region in zip(engine.scouting.available_scouts(), targets):
        if state.budget - cost < reserve:
            break
        mission = engine.dispatch_scouts(region.id, [scout.id], weeks)
        if isinstance(mission, Rejection):
            break
        dispatched += 1
    return dispatched


def invite_top_prospects(engine: AcademyEngine) -> int:
    """Invite rule: every five-star prospect from this season's reports."""
    invited = 0
    for report in engine.state.scouting_reports:
        if report.season != engine.state.current_season:
            continue
        for prospect in report.prospects:
            if prospect.invited or prospect.potential < TOP_TALENT_POTENTIAL:
                continue
            result = engine.invite_prospect(prospect.id)
            if not isinstance(result, Rejection):
                invited += 1
    return invited


def score_event_option(option: EventOption, mode: StrategyMode) -> float:
    """Weigh an option's cash against its status effects; higher is better."""
    _, _, budget_weight = _get_mode_params(mode)
    score = option.budget * budget_weight
    score += option.reputation + option.morale + option.experience + option.infrastructure
    score += option.coaching_level * option.chance / 100
    score -= option.injuries
    return score


def answer_pending_event(engine: AcademyEngine, mode: StrategyMode) -> bool:
    """Event rule: pick the best-scoring option the budget can pay for."""
    event = engine.state.pending_event
    if event is None:
        return False

    _, reserve, _ = _get_mode_params(mode)
    budget = engine.state.budget
    affordable = [i for i, opt in enumerate(event.options) if opt.budget >= 0 or budget + opt.budget >= reserve]
    if not affordable:
        affordable = [max(range(len(event.options)), key=lambda i: event.options[i].budget)]

    choice = max(affordable, key=lambda i: score_event_option(event.options[i], mode))
    outcome = engine.apply_event_option(event.id, choice)
    if isinstance(outcome, Rejection):
        # The transfer target is gone; nothing can be applied to this event any more
        engine.dismiss_event(event.id)
        return False
    print(f"[Autopilot] Answered '{event.title}' with: {event.options[choice].text}")
    return True


def sell_surplus_players(engine: AcademyEngine, mode: StrategyMode, limit: int) -> int:
    """
    Sell rule: while the budget sits below the reserve, sell eligible
    low-potential players, cheapest first.
    """
    _, reserve, _ = _get_mode_params(mode)
    _, max_age = TRANSFER_TARGET_AGES
    candidates = sorted(
        (
            p for p in engine.state.players
            if MIN_SALE_AGE <= p.age <= max_age and p.potential <= SELL_MAX_POTENTIAL
        ),
        key=lambda p: p.value,
    )
    sold = 0
    for player in candidates:
        if sold >= limit or engine.state.budget >= reserve:
            break
        offer = engine.sell_player(player.id)
        if not isinstance(offer, Rejection):
            sold += 1
    return sold
