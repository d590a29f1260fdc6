import pytest

from academy.config import ACADEMY_TEAMS, MAX_INITIAL_STAFF, STAFF_ROLES
from academy.generator import (
    CANDIDATE_SKILL_TABLE,
    FALLBACK_SKILL,
    ProceduralGenerator,
    roll_from_table,
    scouting_quality,
)
from academy.models import Region
from academy.randomness import RandomValueProvider

from conftest import ScriptedRandom

ALMATY = Region(id="almaty", name="Almaty", talent_rating=4, population=2_000_000)


def test_same_seed_replays_players_and_prospects():
    a = ProceduralGenerator(RandomValueProvider(42))
    b = ProceduralGenerator(RandomValueProvider(42))

    assert [p.model_dump() for p in a.academy_players()] == [p.model_dump() for p in b.academy_players()]
    assert (
        [p.model_dump() for p in a.scouting_prospects(ALMATY, 4, scout_count=2)]
        == [p.model_dump() for p in b.scouting_prospects(ALMATY, 4, scout_count=2)]
    )


def test_different_seeds_diverge():
    a = ProceduralGenerator(RandomValueProvider(1)).academy_players()
    b = ProceduralGenerator(RandomValueProvider(2)).academy_players()
    assert [p.model_dump() for p in a] != [p.model_dump() for p in b]


def test_academy_players_respect_bounds():
    players = ProceduralGenerator(RandomValueProvider(7)).academy_players()

    assert len(players) == sum(t["player_count"] for t in ACADEMY_TEAMS)
    for p in players:
        team_age = int(p.team.lstrip("u"))
        assert team_age - 2 <= p.age <= team_age
        assert 1 <= p.potential <= 5
        for attr in (p.technical, p.physical, p.tactical, p.mental):
            assert 10 <= attr <= 100
        assert p.value > 0 and p.value % 100 == 0


def test_player_ids_are_unique():
    players = ProceduralGenerator(RandomValueProvider(3)).academy_players()
    assert len({p.id for p in players}) == len(players)


def test_skill_table_bounds_are_exclusive():
    assert roll_from_table(0.0999, CANDIDATE_SKILL_TABLE, FALLBACK_SKILL) == 5
    assert roll_from_table(0.10, CANDIDATE_SKILL_TABLE, FALLBACK_SKILL) == 4
    assert roll_from_table(0.30, CANDIDATE_SKILL_TABLE, FALLBACK_SKILL) == 3
    assert roll_from_table(0.60, CANDIDATE_SKILL_TABLE, FALLBACK_SKILL) == FALLBACK_SKILL


def test_candidates_follow_skill_table():
    top = ProceduralGenerator(ScriptedRandom([0.05])).staff_candidates("coaches", "headCoach")
    weak = ProceduralGenerator(ScriptedRandom([0.95])).staff_candidates("coaches", "headCoach")

    assert len(top) == 3
    assert {c.skill for c in top} == {5}
    assert {c.skill for c in weak} == {FALLBACK_SKILL}


def test_candidate_salary_and_experience_in_range():
    low, high = STAFF_ROLES["coaches"]["headCoach"]["salary_range"]
    for c in ProceduralGenerator(RandomValueProvider(11)).staff_candidates("coaches", "headCoach", count=20):
        assert low <= c.salary < high
        assert 3 <= c.experience <= 17


def test_unknown_role_raises():
    with pytest.raises(KeyError):
        ProceduralGenerator(RandomValueProvider(1)).staff_candidates("coaches", "kitManager")


def test_initial_staff_is_capped():
    # A roll of 0.0 gives every role a second member
    staff = ProceduralGenerator(ScriptedRandom([0.0])).initial_staff()
    assert len(staff) == MAX_INITIAL_STAFF


def test_initial_staff_has_one_per_role_at_minimum():
    staff = ProceduralGenerator(ScriptedRandom([0.99])).initial_staff()
    total_roles = sum(len(roles) for roles in STAFF_ROLES.values())
    assert len(staff) == total_roles
    assert all(not s.is_busy for s in staff)


def test_scouting_quality():
    assert scouting_quality(1, 1) == pytest.approx(0.5)
    assert scouting_quality(4, 4) == pytest.approx(0.95)


def test_longer_missions_find_more_prospects():
    # noise roll 0.75 -> multiplier 1.1
    gen = ProceduralGenerator(ScriptedRandom([0.75]))
    two_weeks = gen.prospect_count(ALMATY, 2, scout_count=1, avg_scout_skill=3)
    four_weeks = gen.prospect_count(ALMATY, 4, scout_count=1, avg_scout_skill=3)

    assert two_weeks == 3
    assert four_weeks == 5


def test_skilled_scouts_find_at_least_as_many():
    gen = ProceduralGenerator(ScriptedRandom([0.75]))
    weak = gen.prospect_count(ALMATY, 4, scout_count=1, avg_scout_skill=1)
    strong = gen.prospect_count(ALMATY, 4, scout_count=1, avg_scout_skill=5)
    assert strong >= weak


def test_prospects_sorted_by_potential():
    prospects = ProceduralGenerator(RandomValueProvider(5)).scouting_prospects(ALMATY, 4, scout_count=3)
    potentials = [p.potential for p in prospects]
    assert potentials == sorted(potentials, reverse=True)
    for p in prospects:
        assert 6 <= p.age <= 18
        assert p.region == "Almaty"
        assert not p.invited


def test_low_roll_yields_five_star_prospect():
    gen = ProceduralGenerator(ScriptedRandom([0.0]))
    assert gen.prospect_potential(0.95) == 5
    assert ProceduralGenerator(ScriptedRandom([0.99])).prospect_potential(0.95) == 1
