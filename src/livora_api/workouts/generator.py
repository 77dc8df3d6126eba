"""Template-driven workout plan generator.

Given a loose profile (level, goal, days per week) the generator resolves a
program template and, for every training day and focus tag, draws a small
random subset of catalog exercises. Inputs are never rejected: anything
unknown is coerced to a default so callers always receive a usable plan.
"""
import logging
import random
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from livora_api.models import GeneratedPlan, PlacedExercise, SportProgram
from livora_api.utils import to_number, utcnow
from livora_api.workouts.catalog import get_bucket
from livora_api.workouts.templates import DEFAULT_GOAL, PROGRAM_TEMPLATES, get_template

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = "beginner"

# Accepted spellings -> catalog tier
LEVEL_TIERS = {
    "beginner": "beginner",
    "intermediate": "intermediate",
    "advanced": "advanced",
    "debutant": "beginner",
    "intermediaire": "intermediate",
    "avance": "advanced",
}

SINGLE_DRAW_TAGS = frozenset({"cardio", "full_body"})


def normalize_level(value: Any) -> str:
    """Return the accepted level spelling, or ``beginner``."""
    if isinstance(value, str):
        key = value.strip().lower()
        if key in LEVEL_TIERS:
            return key
    return DEFAULT_LEVEL


def normalize_goal(value: Any) -> str:
    """Return a known template key, or ``general``."""
    if isinstance(value, str):
        key = value.strip().lower()
        if key in PROGRAM_TEMPLATES:
            return key
    return DEFAULT_GOAL


def normalize_days(value: Any) -> int:
    """Snap the requested cadence to 5 when above 3, otherwise to 3."""
    days = to_number(value)
    if days is not None and days > 3:
        return 5
    return 3


def draw_count(tag: str) -> int:
    return 1 if tag in SINGLE_DRAW_TAGS else 2


def _profile_value(profile: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = profile.get(key)
        if value is not None:
            return value
    return None


def generate_workout_plan(
    profile: Optional[Mapping[str, Any]] = None,
    rng: Optional[random.Random] = None,
) -> GeneratedPlan:
    """
    Assemble a plan from the exercise catalog and program templates.

    Args:
        profile: Mapping with optional ``level``, ``goal`` and
            ``daysPerWeek``/``days_per_week``
        rng: Random source; pass a seeded ``random.Random`` for a
            reproducible draw

    Returns:
        GeneratedPlan whose exercises are ordered as the template lists days
        and focus tags
    """
    profile = profile if isinstance(profile, Mapping) else {}
    rng = rng or random.Random()

    level = normalize_level(profile.get("level"))
    goal = normalize_goal(profile.get("goal"))
    days_per_week = normalize_days(_profile_value(profile, "daysPerWeek", "days_per_week"))
    tier = LEVEL_TIERS[level]
    template = get_template(goal)

    exercises: List[PlacedExercise] = []
    for training_day in template.days_for(days_per_week):
        position = 0
        for tag in training_day.focus:
            bucket = get_bucket(tier, tag)
            if not bucket:
                continue
            for entry in rng.sample(bucket, k=min(draw_count(tag), len(bucket))):
                exercises.append(PlacedExercise(
                    name=entry.name,
                    sets=entry.sets,
                    reps=entry.reps,
                    description=entry.description,
                    difficulty=tier,
                    muscle_groups=list(entry.muscle_groups),
                    duration_minutes=entry.duration_minutes,
                    rest_seconds=entry.rest_seconds,
                    day=training_day.day,
                    order=position,
                    day_title=training_day.title,
                    focus=tag,
                ))
                position += 1

    logger.debug(
        "Generated %s plan (%s, %s days): %d exercises",
        goal, level, days_per_week, len(exercises),
    )
    return GeneratedPlan(
        title=template.title,
        description=template.description,
        level=level,
        goal=goal,
        days_per_week=days_per_week,
        exercises=exercises,
    )


def wrap_plan(
    owner_id: str,
    plan: GeneratedPlan,
    now: Optional[datetime] = None,
    created_by: str = "generated",
) -> SportProgram:
    """Attach ownership and provenance to an assembled plan. ``plan`` is not modified."""
    data: Dict[str, Any] = plan.model_dump()
    return SportProgram(
        **data,
        user_id=owner_id,
        active=True,
        created_by=created_by,
        generated_by_ai=created_by == "ai",
        is_customized=False,
        last_generated=now or utcnow(),
    )


def generate_default_workout_plan(
    owner_id: str,
    profile: Optional[Mapping[str, Any]] = None,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> SportProgram:
    """Generate a template plan and wrap it for ``owner_id``."""
    return wrap_plan(owner_id, generate_workout_plan(profile, rng=rng), now=now)
