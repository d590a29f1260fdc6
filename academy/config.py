"""
Configuration constants for the academy simulation.

Single source of truth for teams, facilities, staff roles, regions, objectives,
event templates and the runtime settings read from the environment.
"""

import os

from pydantic import BaseModel, Field

# Default runtime settings, overridable through ACADEMY_* environment variables
INITIAL_BUDGET = 2_500_000
INITIAL_SCOUTING_BUDGET = 150_000
TOTAL_SEASONS = 5

# Academy age groups. `position` is last season's league finish, `max_teams` the league size.
ACADEMY_TEAMS: list[dict] = [
    {"id": "u21", "name": "U21", "player_count": 22, "rating": 3, "position": 3, "max_teams": 12},
    {"id": "u19", "name": "U19", "player_count": 24, "rating": 4, "position": 1, "max_teams": 10},
    {"id": "u17", "name": "U17", "player_count": 20, "rating": 3, "position": 4, "max_teams": 8},
    {"id": "u15", "name": "U15", "player_count": 18, "rating": 4, "position": 2, "max_teams": 8},
    {"id": "u13", "name": "U13", "player_count": 16, "rating": 3, "position": 3, "max_teams": 8},
    {"id": "u11", "name": "U11", "player_count": 14, "rating": 2, "position": 5, "max_teams": 8},
]

# Only these teams can satisfy the youth league objective
LEAGUE_ELIGIBLE_TEAMS = ("u17", "u19", "u21")

# `cost` is the price of a full 100% improvement at level 0; see economy.facility_upgrade_cost
FACILITIES: list[dict] = [
    {
        "id": "trainingFields", "name": "Training fields", "level": 75, "max_level": 100, "cost": 100_000,
        "effect": "Speeds up technical development",
    },
    {
        "id": "medicalCenter", "name": "Medical center", "level": 60, "max_level": 100, "cost": 80_000,
        "effect": "Lowers injury risk and recovery time",
    },
    {
        "id": "gym", "name": "Gym", "level": 80, "max_level": 100, "cost": 70_000,
        "effect": "Speeds up physical development",
    },
    {
        "id": "dormitory", "name": "Dormitory", "level": 50, "max_level": 100, "cost": 120_000,
        "effect": "Improves morale and recovery",
    },
    {
        "id": "classrooms", "name": "Classrooms", "level": 65, "max_level": 100, "cost": 50_000,
        "effect": "Improves tactical and mental development",
    },
]

# category -> role_id -> role. Salaries are monthly, (min, max) in euros.
STAFF_ROLES: dict[str, dict[str, dict]] = {
    "coaches": {
        "headCoach":        {"title": "Head coach",         "salary_range": (5000, 15000), "effect": "Overall player development"},
        "assistantCoach":   {"title": "Assistant coach",    "salary_range": (2000, 7000),  "effect": "Training support"},
        "goalkeepingCoach": {"title": "Goalkeeping coach",  "salary_range": (2500, 8000),  "effect": "Goalkeeper development"},
        "fitnessCoach":     {"title": "Fitness coach",      "salary_range": (2000, 7000),  "effect": "Physical development"},
        "technicalCoach":   {"title": "Technical coach",    "salary_range": (2500, 8000),  "effect": "Technical development"},
    },
    "scouts": {
        "headScout":          {"title": "Head scout",          "salary_range": (4000, 10000), "effect": "Scouting coordination"},
        "regionalScout":      {"title": "Regional scout",      "salary_range": (2000, 6000),  "effect": "Finds talent in the region"},
        "internationalScout": {"title": "International scout", "salary_range": (3000, 9000),  "effect": "Finds talent abroad"},
    },
    "medical": {
        "doctor":          {"title": "Doctor",          "salary_range": (3000, 9000), "effect": "Treats injuries"},
        "physiotherapist": {"title": "Physiotherapist", "salary_range": (2000, 6000), "effect": "Injury rehabilitation"},
        "nutritionist":    {"title": "Nutritionist",    "salary_range": (1500, 5000), "effect": "Nutrition and recovery"},
    },
}

# Initial roster never grows past this many staff members
MAX_INITIAL_STAFF = 15

# Candidates offered per hiring request
CANDIDATES_PER_REQUEST = 3

PLAYER_POSITIONS: dict[str, dict[str, str]] = {
    "goalkeeper":   {"code": "GK", "name": "Goalkeeper"},
    "rightBack":    {"code": "RB", "name": "Right back"},
    "centerBack":   {"code": "CB", "name": "Centre back"},
    "leftBack":     {"code": "LB", "name": "Left back"},
    "defensiveMid": {"code": "DM", "name": "Defensive midfielder"},
    "centralMid":   {"code": "CM", "name": "Central midfielder"},
    "attackingMid": {"code": "AM", "name": "Attacking midfielder"},
    "rightWinger":  {"code": "RW", "name": "Right winger"},
    "leftWinger":   {"code": "LW", "name": "Left winger"},
    "striker":      {"code": "ST", "name": "Striker"},
}

REGIONS: list[dict] = [
    {"id": "almaty",    "name": "Almaty",          "talent_rating": 4, "population": 2_000_000},
    {"id": "nursultan", "name": "Nur-Sultan",      "talent_rating": 3, "population": 1_200_000},
    {"id": "shymkent",  "name": "Shymkent",        "talent_rating": 3, "population": 1_000_000},
    {"id": "karaganda", "name": "Karaganda",       "talent_rating": 2, "population": 500_000},
    {"id": "aktobe",    "name": "Aktobe",          "talent_rating": 2, "population": 400_000},
    {"id": "taraz",     "name": "Taraz",           "talent_rating": 2, "population": 350_000},
    {"id": "pavlodar",  "name": "Pavlodar",        "talent_rating": 2, "population": 330_000},
    {"id": "uskemen",   "name": "Ust-Kamenogorsk", "talent_rating": 2, "population": 310_000},
    {"id": "semey",     "name": "Semey",           "talent_rating": 2, "population": 300_000},
    {"id": "kyzylorda", "name": "Kyzylorda",       "talent_rating": 1, "population": 280_000},
    {"id": "uralsk",    "name": "Uralsk",          "talent_rating": 1, "population": 270_000},
    {"id": "kostanay",  "name": "Kostanay",        "talent_rating": 1, "population": 250_000},
    {"id": "atyrau",    "name": "Atyrau",          "talent_rating": 1, "population": 230_000},
    {"id": "aktau",     "name": "Aktau",           "talent_rating": 1, "population": 220_000},
]

PLAYER_FIRST_NAMES = ["Askar", "Arman", "Bauyrzhan", "Timur", "Yerlan", "Nurlan", "Daniyar", "Ruslan", "Alikhan", "Dias"]
PLAYER_LAST_NAMES = ["Zhumabekov", "Orazov", "Aliev", "Nurpeisov", "Suleimenov", "Baitasov", "Akhmetov", "Kasymov", "Zhanibekov", "Aitzhanov"]
STAFF_FIRST_NAMES = ["Alexander", "Sergey", "Dmitry", "Andrey", "Maxim", "Ivan", "Artem", "Nikolay", "Mikhail", "Yegor"]
STAFF_LAST_NAMES = ["Ivanov", "Smirnov", "Kuznetsov", "Popov", "Vasiliev", "Petrov", "Sokolov", "Mikhailov", "Novikov", "Fedorov"]

BUDGET_DEFAULTS: dict[str, int] = {
    "salaries": 35,
    "scouting": 15,
    "infrastructure": 30,
    "tournaments": 10,
    "medical": 10,
}

# Flat mission cost per duration class (weeks)
SCOUTING_COSTS: dict[int, int] = {1: 5000, 2: 9000, 4: 15000}

# Missions of at least this many weeks count toward the scouting-breadth objective
DEEP_SCOUTING_WEEKS = 2

# Players inside this age window can be sold or courted by top clubs
MIN_SALE_AGE = 16
TRANSFER_TARGET_AGES = (16, 18)
TRANSFER_TARGET_MIN_POTENTIAL = 4

# Season objectives. `kind` drives escalation:
#   counting   : +increment each season
#   breadth    : +increment, capped at `ceiling` (number of regions)
#   percentage : +increment, capped at `ceiling`
#   fixed, balance : never escalate
OBJECTIVES: list[dict] = [
    {
        "id": "hire_top_coaches", "text": "Hire at least {required} coaches rated 4+ stars",
        "required_value": 3, "weight": 15, "kind": "counting", "increment": 1,
    },
    {
        "id": "scout_regions_deep", "text": "Run deep scouting (2+ weeks) in at least {required} different regions",
        "required_value": 3, "weight": 20, "kind": "breadth", "increment": 1, "ceiling": len(REGIONS),
    },
    {
        "id": "find_top_talents", "text": "Find and invite at least {required} five-star prospects",
        "required_value": 2, "weight": 25, "kind": "counting", "increment": 1,
    },
    {
        "id": "upgrade_key_facility", "text": "Improve one key facility (training fields or medical center) by {required}%",
        "required_value": 15, "weight": 20, "kind": "percentage", "increment": 5, "ceiling": 50,
        "facility_choices": ["trainingFields", "medicalCenter"],
    },
    {
        "id": "win_youth_league", "text": "Win the league with at least one youth team (U17, U19 or U21)",
        "required_value": 1, "weight": 15, "kind": "fixed",
    },
    {
        "id": "positive_balance", "text": "Finish the season with a non-negative budget",
        "required_value": 1, "weight": 5, "kind": "balance",
    },
]

# Weighted progress needed before a season may be closed
SEASON_COMPLETION_THRESHOLD = 80

# Seasonal income constants
BASE_SEASON_INCOME = 500_000
PODIUM_BONUS_UNIT = 50_000
OBJECTIVE_BONUS_PER_WEIGHT = 1000

# Final scoring
FINAL_SCORE_WEIGHTS: dict[str, int] = {
    "championships_won": 20,
    "top_players_produced": 10,
    "international_tournaments_won": 30,
    "players_in_national_team": 25,
}
FINAL_BUDGET_DIVISOR = 50_000
INFRASTRUCTURE_BASELINE = 60
INFRASTRUCTURE_MULTIPLIER = 2
RATING_THRESHOLDS: dict[int, int] = {1: 0, 2: 80, 3: 150, 4: 250, 5: 400}

# Random event cadence, in weeks on the simulation clock
EVENT_FIRST_DELAY = 2.0
EVENT_INTERVAL_RANGE = (6.0, 9.0)
EVENT_RETRY_DELAY = 0.5

# Transfer offers in the catalogue are written against this reference fee
EVENT_REFERENCE_OFFER = 200_000

# Static event catalogue. Never mutated at runtime; each trigger builds its own instance.
EVENT_TEMPLATES: list[dict] = [
    {
        "id": "talentDiscovery",
        "title": "A scout found a talent!",
        "description": (
            "Our scout reports an incredibly gifted young footballer from {region}. "
            "His family is not well off and will need support to relocate to Almaty."
        ),
        "options": [
            {"text": "Offer a full scholarship (€5,000)", "budget": -5000, "morale": 10},
            {"text": "Offer partial support (€2,000)", "budget": -2000, "morale": 5},
            {"text": "Decline — we cannot afford extra costs", "budget": 0, "morale": -5},
        ],
    },
    {
        "id": "injuryCrisis",
        "title": "Injuries in the U19 team",
        "description": (
            "Three key U19 players got injured at the same time. "
            "The doctor suggests buying new rehabilitation equipment."
        ),
        "options": [
            {"text": "Buy top-class equipment (€30,000)", "budget": -30000, "injuries": -30, "infrastructure": 10},
            {"text": "Buy basic equipment (€10,000)", "budget": -10000, "injuries": -15, "infrastructure": 5},
            {"text": "Make do with what we have", "budget": 0},
        ],
    },
    {
        "id": "coachingOffer",
        "title": "Offer from an experienced coach",
        "description": (
            "A highly qualified youth coach from Europe wants to join the academy. "
            "His salary expectations exceed our budget, but his methods are proven."
        ),
        "options": [
            {"text": "Hire the coach (€8,000/month)", "budget": -96000, "coaching_level": 20},
            {"text": "Offer a lower salary (€5,000/month)", "budget": -60000, "coaching_level": 10, "chance": 50},
            {"text": "Decline the offer", "budget": 0},
        ],
    },
    {
        "id": "internationalTournament",
        "title": "Invitation to an international tournament",
        "description": (
            "Our U17 team was invited to a prestigious international tournament. "
            "Taking part is invaluable experience but requires extra spending."
        ),
        "options": [
            {"text": "Accept and allocate extra budget (€15,000)", "budget": -15000, "experience": 15, "reputation": 10},
            {"text": "Accept within the standard budget", "budget": -5000, "experience": 10, "reputation": 5},
            {"text": "Decline the invitation", "budget": 0, "reputation": -5},
        ],
    },
    {
        "id": "topClubInterest",
        "title": "Top club interested in an academy player",
        "description": (
            "A European top club is interested in {player}. "
            "They offer a transfer, but the player has huge potential."
        ),
        "requires_transfer_target": True,
        "options": [
            {"text": "Sell the player", "budget": 200000, "reputation": 5, "transfer": "full"},
            {"text": "Reject the offer and keep the player", "budget": 0, "transfer": "retain"},
            {"text": "Deal with future bonuses and a sell-on percentage", "budget": 100000, "reputation": 10, "transfer": "partial"},
        ],
    },
]


class GameSettings(BaseModel):
    """Runtime settings for a new game."""

    initial_budget: int = Field(default=INITIAL_BUDGET, description="Starting main budget in euros")
    scouting_budget: int = Field(default=INITIAL_SCOUTING_BUDGET, description="Starting scouting allowance in euros")
    total_seasons: int = Field(default=TOTAL_SEASONS, ge=1, description="Seasons in one run")
    seed: int | None = Field(default=None, description="Random seed, None means non-deterministic")


def load_settings() -> GameSettings:
    """
    Build GameSettings from ACADEMY_* environment variables.

    Entry points call load_dotenv() first, so values from a .env file apply too.
    """
    # Raw strings; GameSettings coerces them and names the field on a bad value
    overrides: dict = {}
    env_map = {
        "ACADEMY_INITIAL_BUDGET": "initial_budget",
        "ACADEMY_SCOUTING_BUDGET": "scouting_budget",
        "ACADEMY_TOTAL_SEASONS": "total_seasons",
        "ACADEMY_SEED": "seed",
    }
    for env_name, field_name in env_map.items():
        raw = os.environ.get(env_name)
        if raw not in (None, ""):
            overrides[field_name] = raw
    return GameSettings(**overrides)
