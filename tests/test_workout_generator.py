"""Tests for the template-driven workout plan generator.

Covers input coercion (level/goal/days), the per-day draw rules, and the
ownership wrapper.
"""

import random
from collections import Counter
from datetime import datetime, timezone

import pytest

from livora_api.workouts.catalog import exercise_names, get_bucket
from livora_api.workouts.generator import (
    draw_count,
    generate_default_workout_plan,
    generate_workout_plan,
    normalize_days,
    normalize_goal,
    normalize_level,
    wrap_plan,
)
from livora_api.workouts.templates import PROGRAM_TEMPLATES, SUPPORTED_GOALS


LEVELS = ["beginner", "intermediate", "advanced", "debutant", "intermediaire", "avance"]


def _max_exercises(goal: str, days: int) -> int:
    return sum(
        draw_count(tag)
        for training_day in PROGRAM_TEMPLATES[goal].days_for(days)
        for tag in training_day.focus
    )


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalizeLevel:
    @pytest.mark.parametrize("value", LEVELS)
    def test_accepted_spellings_are_echoed(self, value):
        assert normalize_level(value) == value

    def test_case_and_whitespace_ignored(self):
        assert normalize_level("  Advanced ") == "advanced"
        assert normalize_level("INTERMEDIAIRE") == "intermediaire"

    @pytest.mark.parametrize("value", [None, "", "expert", 3, ["beginner"], {"level": "advanced"}])
    def test_unknown_values_default_to_beginner(self, value):
        assert normalize_level(value) == "beginner"


class TestNormalizeGoal:
    @pytest.mark.parametrize("goal", SUPPORTED_GOALS)
    def test_known_goals_kept(self, goal):
        assert normalize_goal(goal) == goal

    @pytest.mark.parametrize("value", [None, "", "devenir_immortel", 42, "muscle_gain"])
    def test_unknown_goals_default_to_general(self, value):
        assert normalize_goal(value) == "general"


class TestNormalizeDays:
    @pytest.mark.parametrize("value,expected", [
        (1, 3),
        (3, 3),
        (4, 5),
        (5, 5),
        (7, 5),
        (10, 5),
        ("4", 5),
        ("3", 3),
        (3.5, 5),
        (0, 3),
        (-2, 3),
        (None, 3),
        ("abc", 3),
        (True, 3),
        ([5], 3),
    ])
    def test_snaps_to_supported_cadence(self, value, expected):
        assert normalize_days(value) == expected


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_muscle_gain_five_days(self):
        plan = generate_workout_plan(
            {"level": "intermediaire", "goal": "prise_muscle", "daysPerWeek": 5},
            rng=random.Random(1),
        )

        assert plan.level == "intermediaire"
        assert plan.goal == "prise_muscle"
        assert plan.days_per_week == 5
        assert len({e.day for e in plan.exercises}) == 5
        # French level resolves to the intermediate catalog tier
        assert {e.difficulty for e in plan.exercises} == {"intermediate"}
        assert {e.name for e in plan.exercises} <= exercise_names("intermediate")

    def test_invalid_values_are_coerced(self):
        plan = generate_workout_plan(
            {"level": "expert", "goal": "devenir_immortel", "daysPerWeek": 10},
            rng=random.Random(2),
        )

        assert plan.level == "beginner"
        assert plan.goal == "general"
        assert plan.days_per_week == 5
        assert plan.title == PROGRAM_TEMPLATES["general"].title

    def test_empty_profile(self):
        plan = generate_workout_plan({})

        assert plan.level == "beginner"
        assert plan.goal == "general"
        assert plan.days_per_week == 3
        assert len(plan.exercises) > 0

    @pytest.mark.parametrize("profile", [None, "not a mapping", 12, ["level"]])
    def test_non_mapping_profile_uses_defaults(self, profile):
        plan = generate_workout_plan(profile)
        assert plan.goal == "general"
        assert plan.exercises

    def test_snake_case_days_key(self):
        plan = generate_workout_plan({"days_per_week": 5}, rng=random.Random(3))
        assert plan.days_per_week == 5


# ---------------------------------------------------------------------------
# Properties over every (level, goal, cadence)
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("level", LEVELS)
@pytest.mark.parametrize("goal", SUPPORTED_GOALS)
@pytest.mark.parametrize("days", [1, 3, 4, 5, 7])
class TestPlanProperties:
    def test_plan_invariants(self, level, goal, days):
        plan = generate_workout_plan(
            {"level": level, "goal": goal, "daysPerWeek": days},
            rng=random.Random(f"{level}-{goal}-{days}"),
        )

        assert plan.days_per_week in (3, 5)
        day_set = {e.day for e in plan.exercises}
        assert day_set <= set(range(1, 8))
        assert len(day_set) <= plan.days_per_week
        assert len(plan.exercises) <= _max_exercises(goal, plan.days_per_week)

        per_slot = Counter((e.day, e.focus, e.name) for e in plan.exercises)
        assert all(count == 1 for count in per_slot.values())

        for exercise in plan.exercises:
            assert exercise.order >= 0
            assert exercise.completed is False
            assert exercise.focus != "full_body"


class TestDrawRules:
    def test_orders_run_per_day(self):
        plan = generate_workout_plan({"goal": "prise_muscle", "daysPerWeek": 5}, rng=random.Random(4))

        by_day = {}
        for exercise in plan.exercises:
            by_day.setdefault(exercise.day, []).append(exercise.order)
        for orders in by_day.values():
            assert orders == list(range(len(orders)))

    def test_cardio_contributes_one_and_full_body_nothing(self):
        plan = generate_workout_plan(
            {"level": "advanced", "goal": "forme_physique", "daysPerWeek": 3},
            rng=random.Random(5),
        )
        # Every 3-day general-fitness day is cardio + full_body
        assert len(plan.exercises) == 3
        assert {e.focus for e in plan.exercises} == {"cardio"}

    def test_small_bucket_is_taken_whole(self):
        assert len(get_bucket("beginner", "shoulders")) == 1
        plan = generate_workout_plan(
            {"level": "beginner", "goal": "prise_muscle", "daysPerWeek": 5},
            rng=random.Random(6),
        )
        shoulders_day1 = [e for e in plan.exercises if e.day == 1 and e.focus == "shoulders"]
        assert len(shoulders_day1) == 1

    def test_template_order_is_preserved(self):
        plan = generate_workout_plan({"goal": "general", "daysPerWeek": 5}, rng=random.Random(7))
        days = [e.day for e in plan.exercises]
        assert days == sorted(days)
        day_titles = {e.day: e.day_title for e in plan.exercises}
        expected = {d.day: d.title for d in PROGRAM_TEMPLATES["general"].days_for(5)}
        assert day_titles == expected

    def test_seeded_rng_is_reproducible(self):
        profile = {"level": "advanced", "goal": "endurance", "daysPerWeek": 5}
        first = generate_workout_plan(profile, rng=random.Random(42))
        second = generate_workout_plan(profile, rng=random.Random(42))
        assert [e.name for e in first.exercises] == [e.name for e in second.exercises]

    def test_exercise_ids_are_unique(self):
        plan = generate_workout_plan({"goal": "prise_muscle", "daysPerWeek": 5})
        ids = [e.id for e in plan.exercises]
        assert len(ids) == len(set(ids))


# ---------------------------------------------------------------------------
# Wrapper
# ---------------------------------------------------------------------------


class TestWrapPlan:
    def test_attaches_ownership_and_provenance(self):
        plan = generate_workout_plan({}, rng=random.Random(8))
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)

        program = wrap_plan("user-1", plan, now=now)

        assert program.user_id == "user-1"
        assert program.active is True
        assert program.created_by == "generated"
        assert program.generated_by_ai is False
        assert program.is_customized is False
        assert program.last_generated == now
        assert [e.name for e in program.exercises] == [e.name for e in plan.exercises]

    def test_ai_provenance(self):
        program = wrap_plan("user-1", generate_workout_plan({}), created_by="ai")
        assert program.created_by == "ai"
        assert program.generated_by_ai is True

    def test_wrapping_twice_differs_only_by_timestamp(self):
        plan = generate_workout_plan({"goal": "endurance"}, rng=random.Random(9))

        first = wrap_plan("user-1", plan, now=datetime(2024, 1, 1, tzinfo=timezone.utc))
        second = wrap_plan("user-1", plan, now=datetime(2024, 6, 1, tzinfo=timezone.utc))

        assert first.model_dump(exclude={"last_generated"}) == second.model_dump(exclude={"last_generated"})
        assert first.last_generated != second.last_generated

    def test_does_not_mutate_plan(self):
        plan = generate_workout_plan({}, rng=random.Random(10))
        before = plan.model_dump()
        wrap_plan("user-1", plan)
        assert plan.model_dump() == before

    def test_generate_default_workout_plan(self):
        program = generate_default_workout_plan(
            "user-2",
            {"level": "avance", "goal": "perte_poids", "daysPerWeek": 3},
            rng=random.Random(11),
        )
        assert program.user_id == "user-2"
        assert program.level == "avance"
        assert program.goal == "perte_poids"
        assert program.active is True
