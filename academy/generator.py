"""
Procedural generation of players, staff and scouting prospects.

All rolls go through the injected RandomValueProvider. Ids come from counters
owned by the generator, so two generators seeded alike produce identical output.
"""

import itertools
import math

from academy.config import (
    ACADEMY_TEAMS,
    CANDIDATES_PER_REQUEST,
    MAX_INITIAL_STAFF,
    PLAYER_FIRST_NAMES,
    PLAYER_LAST_NAMES,
    PLAYER_POSITIONS,
    STAFF_FIRST_NAMES,
    STAFF_LAST_NAMES,
    STAFF_ROLES,
)
from academy.economy import player_value, round_half_up
from academy.models import Player, Prospect, Region, StaffCandidate, StaffMember
from academy.randomness import RandomValueProvider

# Cumulative skill tables: (upper bound of roll, skill). Anything above the last bound is skill 2.
CANDIDATE_SKILL_TABLE: list[tuple[float, int]] = [(0.10, 5), (0.30, 4), (0.60, 3)]
INITIAL_STAFF_SKILL_TABLE: list[tuple[float, int]] = [(0.05, 5), (0.20, 4), (0.50, 3)]
FALLBACK_SKILL = 2

# Experience ranges in years: (minimum, spread) -> minimum + randint(0, spread - 1)
CANDIDATE_EXPERIENCE = (3, 15)
INITIAL_STAFF_EXPERIENCE = (5, 10)

# Probability that a role starts with a second member
SECOND_MEMBER_CHANCE = 0.3

# Player attributes: base roll once per player, potential bonus re-rolled per attribute
ATTRIBUTE_BASE_RANGE = (20.0, 50.0)
AGE_BONUS_PER_YEAR = 1.5
AGE_BONUS_PIVOT = 10
POTENTIAL_BONUS = 5
POTENTIAL_NOISE = (0.8, 1.2)
ATTRIBUTE_BOUNDS = (10, 100)
ATTRIBUTES = ("technical", "physical", "tactical", "mental")

# Academy players are up to this many years younger than their age group
TEAM_AGE_SPREAD = 2

# Scouting yield
PROSPECTS_PER_TALENT_POINT = 0.5
DURATION_MULTIPLIERS: dict[int, float] = {1: 0.8, 2: 1.5, 4: 2.5}
EXTRA_SCOUT_BONUS = 0.3
SKILL_MULTIPLIER_BASE = 0.7
SKILL_MULTIPLIER_PER_POINT = 0.1
DEFAULT_SCOUT_SKILL = 3
YIELD_NOISE = (0.8, 1.2)
PROSPECT_AGE_RANGE = (6, 18)

# Base cumulative cutoffs for prospect potential, scaled by mission quality. Tier 1 is the residual.
POTENTIAL_CUTOFFS: list[tuple[float, int]] = [(0.05, 5), (0.15, 4), (0.40, 3), (0.70, 2)]


def roll_from_table(roll: float, table: list[tuple[float, int]], fallback: int) -> int:
    """Return the value of the first cumulative bound the roll falls under."""
    for bound, value in table:
        if roll < bound:
            return value
    return fallback


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def scouting_quality(duration_weeks: int, talent_rating: int) -> float:
    """Multiplier on the potential cutoffs: longer missions in richer regions find better players."""
    return 0.5 + 0.1 * (duration_weeks - 1) + 0.05 * (talent_rating - 1)


class ProceduralGenerator:
    """Builds entities from weighted distributions."""

    def __init__(self, rng: RandomValueProvider):
        self.rng = rng
        self._ids = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._ids)}"

    def _name(self, first_names: list[str], last_names: list[str]) -> str:
        return f"{self.rng.choice(first_names)} {self.rng.choice(last_names)}"

    def _position(self) -> tuple[str, str]:
        key = self.rng.choice(list(PLAYER_POSITIONS))
        return PLAYER_POSITIONS[key]["code"], PLAYER_POSITIONS[key]["name"]

    def _salary(self, salary_range: tuple[int, int]) -> int:
        low, high = salary_range
        # Upper bound is exclusive
        return low + int(self.rng.random() * (high - low))

    # --- Staff ---

    def staff_candidates(self, category: str, role_id: str, count: int = CANDIDATES_PER_REQUEST) -> list[StaffCandidate]:
        """Hiring pool for one role. Raises KeyError for an unknown category/role."""
        role = STAFF_ROLES[category][role_id]
        candidates = []
        for _ in range(count):
            name = self._name(STAFF_FIRST_NAMES, STAFF_LAST_NAMES)
            min_exp, spread = CANDIDATE_EXPERIENCE
            experience = min_exp + self.rng.randint(0, spread - 1)
            skill = roll_from_table(self.rng.random(), CANDIDATE_SKILL_TABLE, FALLBACK_SKILL)
            candidates.append(StaffCandidate(
                name=name,
                skill=skill,
                salary=self._salary(role["salary_range"]),
                experience=experience,
            ))
        return candidates

    def staff_member(self, category: str, role_id: str, candidate: StaffCandidate) -> StaffMember:
        """Turn an accepted candidate into a staff member."""
        role = STAFF_ROLES[category][role_id]
        return StaffMember(
            id=self._next_id(f"{category}_{role_id}"),
            name=candidate.name,
            title=role["title"],
            role_id=role_id,
            category=category,
            skill=candidate.skill,
            salary=candidate.salary,
            experience=candidate.experience,
            effect=role["effect"],
        )

    def initial_staff(self) -> list[StaffMember]:
        """Starting roster: one member per role, sometimes two, capped at MAX_INITIAL_STAFF."""
        staff: list[StaffMember] = []
        for category, roles in STAFF_ROLES.items():
            for role_id, role in roles.items():
                count = 1 if self.rng.random() > SECOND_MEMBER_CHANCE else 2
                for _ in range(count):
                    if len(staff) >= MAX_INITIAL_STAFF:
                        break
                    name = self._name(STAFF_FIRST_NAMES, STAFF_LAST_NAMES)
                    min_exp, spread = INITIAL_STAFF_EXPERIENCE
                    experience = min_exp + self.rng.randint(0, spread - 1)
                    skill = roll_from_table(self.rng.random(), INITIAL_STAFF_SKILL_TABLE, FALLBACK_SKILL)
                    staff.append(StaffMember(
                        id=self._next_id(f"{category}_{role_id}"),
                        name=name,
                        title=role["title"],
                        role_id=role_id,
                        category=category,
                        skill=skill,
                        salary=self._salary(role["salary_range"]),
                        experience=experience,
                        effect=role["effect"],
                    ))
        print(f"[Generator] Generated {len(staff)} initial staff members")
        return staff

    # --- Players ---

    def academy_player(self, team_id: str) -> Player:
        """One player for an age group, e.g. 'u17' -> aged 15-17."""
        team_age = int(team_id.lstrip("u"))
        name = self._name(PLAYER_FIRST_NAMES, PLAYER_LAST_NAMES)
        age = team_age - self.rng.randint(0, TEAM_AGE_SPREAD)
        position, position_name = self._position()
        potential = self.rng.randint(1, 5)

        base = self.rng.uniform(*ATTRIBUTE_BASE_RANGE)
        age_bonus = (age - AGE_BONUS_PIVOT) * AGE_BONUS_PER_YEAR
        potential_bonus = potential * POTENTIAL_BONUS
        attrs = {}
        for attr in ATTRIBUTES:
            raw = base + age_bonus + potential_bonus * self.rng.uniform(*POTENTIAL_NOISE)
            attrs[attr] = clamp(round_half_up(raw), *ATTRIBUTE_BOUNDS)

        value = player_value(age, potential, rng=self.rng, **attrs)
        return Player(
            id=self._next_id(f"{team_id}_player"),
            name=name,
            age=age,
            position=position,
            position_name=position_name,
            team=team_id,
            potential=potential,
            value=value,
            **attrs,
        )

    def academy_players(self, teams: list[dict] | None = None) -> list[Player]:
        players = []
        for team in teams or ACADEMY_TEAMS:
            for _ in range(team["player_count"]):
                players.append(self.academy_player(team["id"]))
        print(f"[Generator] Generated {len(players)} players")
        return players

    # --- Scouting ---

    def prospect_count(self, region: Region, duration_weeks: int, scout_count: int, avg_scout_skill: float) -> int:
        base = region.talent_rating * PROSPECTS_PER_TALENT_POINT
        duration_mult = DURATION_MULTIPLIERS[duration_weeks]
        scout_mult = 1 + EXTRA_SCOUT_BONUS * (scout_count - 1)
        skill_mult = SKILL_MULTIPLIER_BASE + avg_scout_skill * SKILL_MULTIPLIER_PER_POINT
        noise = self.rng.uniform(*YIELD_NOISE)
        return max(0, math.floor(base * duration_mult * scout_mult * skill_mult * noise))

    def prospect_potential(self, quality: float) -> int:
        cutoffs = [(bound * quality, tier) for bound, tier in POTENTIAL_CUTOFFS]
        return roll_from_table(self.rng.random(), cutoffs, 1)

    def scouting_prospects(
        self,
        region: Region,
        duration_weeks: int,
        scout_count: int,
        avg_scout_skill: float = DEFAULT_SCOUT_SKILL,
    ) -> list[Prospect]:
        """Prospects found by one mission, best potential first."""
        count = self.prospect_count(region, duration_weeks, scout_count, avg_scout_skill)
        quality = scouting_quality(duration_weeks, region.talent_rating)
        prospects = []
        for _ in range(count):
            name = self._name(PLAYER_FIRST_NAMES, PLAYER_LAST_NAMES)
            age = self.rng.randint(*PROSPECT_AGE_RANGE)
            position, position_name = self._position()
            prospects.append(Prospect(
                id=self._next_id("prospect"),
                name=name,
                age=age,
                position=position,
                position_name=position_name,
                potential=self.prospect_potential(quality),
                region=region.name,
            ))
        # Stable sort keeps generation order within a tier
        prospects.sort(key=lambda p: p.potential, reverse=True)
        return prospects
