"""
Economic formulas.

Pure functions: they take current values in and return a number, a breakdown
or a Rejection. Callers apply budget deltas themselves, after the check passed.
"""

import math
from typing import Iterable, Optional

from academy.config import (
    BASE_SEASON_INCOME,
    FINAL_BUDGET_DIVISOR,
    FINAL_SCORE_WEIGHTS,
    INFRASTRUCTURE_BASELINE,
    INFRASTRUCTURE_MULTIPLIER,
    OBJECTIVE_BONUS_PER_WEIGHT,
    PODIUM_BONUS_UNIT,
    RATING_THRESHOLDS,
)
from academy.models import (
    Achievements,
    Facility,
    FinalReport,
    IncomeBreakdown,
    Objective,
    StaffMember,
    TeamFinish,
)
from academy.randomness import RandomValueProvider
from academy.rejections import Rejection, insufficient_funds, invalid, level_exceeds_max

# Hiring must cover a full year of salary; firing pays three months
ANNUAL_MONTHS = 12
SEVERANCE_MONTHS = 3

# Player valuation: 5000 + age*1000 + potential*10000 + avg_skill*500, then noise
VALUE_BASE = 5000
VALUE_PER_YEAR = 1000
VALUE_PER_POTENTIAL = 10_000
VALUE_PER_SKILL_POINT = 500
VALUE_NOISE = (0.8, 1.2)
VALUE_ROUNDING = 100

# A sale offer lands within ±20% of the player's value
SALE_OFFER_NOISE = (0.8, 1.2)


def round_half_up(x: float) -> int:
    """Round to nearest integer with .5 going up (Python's round() is banker's rounding)."""
    return int(math.floor(x + 0.5))


# --- Facilities ---

def facility_upgrade_cost(base_cost: int, amount: int, current_level: int) -> int:
    """
    Cost of raising a facility by `amount` percentage points.

    The (1 + level/100) multiplier makes every upgrade pricier than the last.
    e.g. base 100000, level 75, amount 10 -> 1000 * 10 * 1.75 = 17500
    """
    return round_half_up((base_cost / 100) * amount * (1 + current_level / 100))


def check_facility_upgrade(facility: Facility, amount: int, budget: int) -> tuple[int, Optional[Rejection]]:
    """
    Validate an upgrade without applying it.

    Returns (cost, rejection). rejection is None when the upgrade is legal.
    Funds are checked before the level cap.
    """
    if amount <= 0:
        return 0, invalid("InvalidAmount", f"Upgrade amount must be positive, got {amount}", amount=amount)

    cost = facility_upgrade_cost(facility.base_cost_per_level, amount, facility.level)
    if budget < cost:
        return cost, insufficient_funds(cost, budget)

    if facility.level + amount > facility.max_level:
        return cost, level_exceeds_max(facility.max_level, facility.max_level - facility.level)

    return cost, None


# --- Staff ---

def annual_commitment(monthly_salary: int) -> int:
    return monthly_salary * ANNUAL_MONTHS


def check_hire(monthly_salary: int, budget: int) -> Optional[Rejection]:
    """Hiring is allowed only when the budget covers a full year of salary. Nothing is debited."""
    required = annual_commitment(monthly_salary)
    if budget < required:
        return insufficient_funds(required, budget)
    return None


def severance(monthly_salary: int) -> int:
    return monthly_salary * SEVERANCE_MONTHS


def check_fire(monthly_salary: int, budget: int) -> Optional[Rejection]:
    pay = severance(monthly_salary)
    if budget < pay:
        return insufficient_funds(pay, budget)
    return None


def monthly_payroll(staff: Iterable[StaffMember]) -> int:
    return sum(s.salary for s in staff)


# --- Players ---

def player_value(
    age: int,
    potential: int,
    technical: int,
    physical: int,
    tactical: int,
    mental: int,
    rng: RandomValueProvider,
) -> int:
    """Market value of an academy player, rounded to the nearest 100."""
    avg_skill = (technical + physical + tactical + mental) / 4
    base = VALUE_BASE + age * VALUE_PER_YEAR + potential * VALUE_PER_POTENTIAL + avg_skill * VALUE_PER_SKILL_POINT
    base *= rng.uniform(*VALUE_NOISE)
    return round_half_up(base / VALUE_ROUNDING) * VALUE_ROUNDING


def sale_offer(value: int, rng: RandomValueProvider) -> int:
    return round_half_up(value * rng.uniform(*SALE_OFFER_NOISE))


# --- Season income ---

def performance_bonus(finishes: Iterable[TeamFinish]) -> int:
    """50000 * (4 - position) for every podium finish."""
    return sum(PODIUM_BONUS_UNIT * (4 - f.position) for f in finishes if f.position <= 3)


def objectives_bonus(objectives: Iterable[Objective]) -> int:
    return sum(o.weight * OBJECTIVE_BONUS_PER_WEIGHT for o in objectives if o.completed)


def seasonal_income(
    finishes: list[TeamFinish],
    transfer_revenue: int,
    objectives: list[Objective],
) -> IncomeBreakdown:
    """
    Income credited when a season closes.

    The objectives bonus reads completion flags as they are at call time, so any
    objective completed by the league finishes must be recorded before calling this.
    """
    perf = performance_bonus(finishes)
    obj_bonus = objectives_bonus(objectives)
    total = BASE_SEASON_INCOME + perf + transfer_revenue + obj_bonus
    return IncomeBreakdown(
        base=BASE_SEASON_INCOME,
        performance_bonus=perf,
        transfer_revenue=transfer_revenue,
        objectives_bonus=obj_bonus,
        total=total,
    )


# --- Final scoring ---

def average_facility_level(facilities: list[Facility]) -> float:
    if not facilities:
        return 0.0
    return sum(f.level for f in facilities) / len(facilities)


def final_rating(points: float) -> int:
    """Highest rating whose threshold is met."""
    rating = 1
    for level, threshold in sorted(RATING_THRESHOLDS.items()):
        if points >= threshold:
            rating = level
    return rating


def final_score(achievements: Achievements, budget: int, facilities: list[Facility]) -> FinalReport:
    points = 0.0
    points += achievements.championships_won * FINAL_SCORE_WEIGHTS["championships_won"]
    points += achievements.top_players_produced * FINAL_SCORE_WEIGHTS["top_players_produced"]
    points += achievements.international_tournaments_won * FINAL_SCORE_WEIGHTS["international_tournaments_won"]
    points += achievements.players_in_national_team * FINAL_SCORE_WEIGHTS["players_in_national_team"]
    points += max(0.0, budget / FINAL_BUDGET_DIVISOR)

    avg_level = average_facility_level(facilities)
    points += max(0.0, avg_level - INFRASTRUCTURE_BASELINE) * INFRASTRUCTURE_MULTIPLIER

    return FinalReport(
        total_points=round(points, 2),
        rating=final_rating(points),
        championships_won=achievements.championships_won,
        top_players_produced=achievements.top_players_produced,
        international_tournaments_won=achievements.international_tournaments_won,
        players_in_national_team=achievements.players_in_national_team,
        final_budget=budget,
        avg_facility_level=round(avg_level, 1),
    )
