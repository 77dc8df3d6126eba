"""LLM-assisted workout plan generation and optimization.

The model is asked for a JSON program; its reply is reduced to the same
``GeneratedPlan`` shape the template generator produces. Generation never
fails from the caller's point of view: any problem (no API key, API error,
unparseable reply) falls back to the template generator.
"""
import json
import logging
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from livora_api.ai import AIClientFactory, AIRequestContext, retry_sync_call
from livora_api.config import settings
from livora_api.errors import AIWorkoutServiceError
from livora_api.models import GeneratedPlan, PlacedExercise, SportProgram
from livora_api.utils import to_number
from livora_api.workouts.generator import (
    DEFAULT_LEVEL,
    generate_workout_plan,
    normalize_days,
    normalize_goal,
    normalize_level,
)
from livora_api.workouts.templates import DEFAULT_GOAL


logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

DEFAULT_PREFERENCES = {
    "cardio_preference": "medium",
    "equipment_available": ["none"],
    "focus_areas": [],
}


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Pull the JSON object out of a model reply.

    Markdown code fences are stripped first, then the outermost ``{...}``
    span is parsed.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    if not text:
        raise ValueError("Empty model reply")
    fenced = _CODE_FENCE_RE.search(text)
    candidate = fenced.group(1) if fenced else text
    match = _JSON_OBJECT_RE.search(candidate)
    if not match:
        raise ValueError("No JSON object found in model reply")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in model reply: {e}") from e
    if not isinstance(payload, dict):
        raise ValueError("Model reply is not a JSON object")
    return payload


def build_user_context(profile: Mapping[str, Any]) -> Dict[str, Any]:
    """Fill the profile fields the prompt needs with neutral defaults."""
    preferences = {**DEFAULT_PREFERENCES, **(profile.get("preferences") or {})}
    return {
        "level": profile.get("level") or DEFAULT_LEVEL,
        "goal": profile.get("goal") or DEFAULT_GOAL,
        "days_per_week": profile.get("days_per_week") or 3,
        "age": profile.get("age") or 30,
        "gender": profile.get("gender") or "unspecified",
        "weight": profile.get("weight") or 70,
        "height": profile.get("height") or 170,
        "health_conditions": list(profile.get("health_conditions") or []),
        "preferences": preferences,
        "restrictions": list(profile.get("restrictions") or []),
    }


def _finite_number(value: Any) -> Optional[float]:
    """Like ``to_number`` but rejects Infinity and NaN, which ``json.loads`` accepts."""
    number = to_number(value)
    if number is None or not math.isfinite(number):
        return None
    return number


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, str) and "-" in value:
        # "8-12" style ranges keep the upper bound
        value = value.replace("–", "-").split("-", 1)[1]
    number = _finite_number(value)
    if number is None or number < 1:
        return default
    return int(number)


def exercises_from_workouts(workouts: Any) -> List[PlacedExercise]:
    """Flatten ``workouts[].exercises[]`` from a model reply into placed exercises."""
    if not isinstance(workouts, list):
        raise ValueError("Invalid program structure: 'workouts' must be a list")

    placed: List[PlacedExercise] = []
    for index, workout in enumerate(workouts):
        if not isinstance(workout, dict):
            continue
        day = min(max(_positive_int(workout.get("day"), index + 1), 1), 7)
        focus = workout.get("focus") or []
        position = 0
        for item in workout.get("exercises") or []:
            if not isinstance(item, dict) or not item.get("name"):
                continue
            muscle_groups = item.get("muscleGroups") or item.get("muscle_groups") or []
            placed.append(PlacedExercise(
                name=str(item["name"]),
                sets=_positive_int(item.get("sets"), 1),
                reps=_positive_int(item.get("reps"), 1),
                description=item.get("description"),
                muscle_groups=[str(m) for m in muscle_groups] if isinstance(muscle_groups, list) else [],
                duration_minutes=max(_finite_number(item.get("durationMinutes")) or 0, 0),
                rest_seconds=max(int(_finite_number(item.get("restSeconds") or item.get("rest_seconds")) or 0), 0),
                day=day,
                order=position,
                day_title=workout.get("title"),
                focus=str(focus[0]) if isinstance(focus, list) and focus else None,
            ))
            position += 1
    return placed


class AIWorkoutService:
    """Generates and improves workout plans with an OpenAI chat model."""

    GENERATION_SYSTEM_PROMPT = (
        "You are a certified personal trainer who designs personalised workout programs."
    )
    OPTIMIZATION_SYSTEM_PROMPT = (
        "You are an expert coach who reviews and improves existing workout programs."
    )

    def __init__(self, model: Optional[str] = None):
        self.model = model or settings.OPENAI_MODEL

    @staticmethod
    def build_generation_prompt(context: Mapping[str, Any]) -> str:
        prefs = context["preferences"]
        conditions = ", ".join(context["health_conditions"]) or "none"
        restrictions = ", ".join(context["restrictions"]) or "none"
        focus_areas = ", ".join(prefs.get("focus_areas") or []) or "no particular area"
        equipment = ", ".join(prefs.get("equipment_available") or []) or "none"
        return f"""Create a personalised training program for a user with the following profile:

- Level: {context['level']}
- Main goal: {context['goal']}
- Training days per week: {context['days_per_week']}
- Age: {context['age']}
- Gender: {context['gender']}
- Weight: {context['weight']} kg
- Height: {context['height']} cm
- Health conditions: {conditions}
- Cardio preference: {prefs.get('cardio_preference')}
- Available equipment: {equipment}
- Focus areas: {focus_areas}
- Restrictions: {restrictions}

Return a COMPLETE program as JSON with this structure:
{{
  "title": "Program title",
  "description": "Program description",
  "weeks": 4,
  "workouts": [
    {{
      "day": 1,
      "title": "Session title",
      "focus": ["main muscle group"],
      "exercises": [
        {{
          "name": "Exercise name",
          "sets": number,
          "reps": number,
          "restSeconds": number,
          "description": "Technique cues",
          "muscleGroups": ["targeted muscle groups"]
        }}
      ]
    }}
  ],
  "recommendations": {{
    "nutrition": "Nutrition advice",
    "rest": "Recovery advice",
    "progression": "Progression advice"
  }}
}}

Adapt the exercises to the {context['level']} level, focus on the {context['goal']} goal,
include a warm-up and a cool-down in each session and plan rest days.
Return ONLY valid JSON, no additional text."""

    def _complete(self, system_prompt: str, prompt: str, user_id: Optional[str], feature: str) -> str:
        context = AIRequestContext(
            user_id=user_id,
            feature_name=feature,
            custom_properties={"model": self.model},
        )
        client = AIClientFactory.create_openai_client(context=context)

        def _make_api_call() -> str:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                max_tokens=2000,
            )
            return response.choices[0].message.content or ""

        return retry_sync_call(_make_api_call)

    def generate_ai_workout_plan(
        self,
        profile: Mapping[str, Any],
        user_id: Optional[str] = None,
    ) -> Tuple[GeneratedPlan, bool]:
        """
        Generate a plan with the model, falling back to the template generator.

        Returns:
            (plan, True) when the model produced the plan, (template plan, False)
            otherwise
        """
        context = build_user_context(profile)
        if not AIClientFactory.is_configured():
            logger.warning("OpenAI API key not configured. Using the template generator.")
            return generate_workout_plan(profile), False

        try:
            reply = self._complete(
                self.GENERATION_SYSTEM_PROMPT,
                self.build_generation_prompt(context),
                user_id,
                "generate_workout_plan",
            )
            payload = extract_json_object(reply)
            exercises = exercises_from_workouts(payload.get("workouts"))
            if not exercises:
                raise ValueError("Model returned a program without exercises")
        except Exception as e:
            logger.error(f"AI workout generation failed, using template generator: {e}")
            return generate_workout_plan(profile), False

        level = normalize_level(context["level"])
        goal = normalize_goal(context["goal"])
        plan = GeneratedPlan(
            title=str(payload.get("title") or "Personalised program"),
            description=payload.get("description"),
            level=level,
            goal=goal,
            days_per_week=normalize_days(context["days_per_week"]),
            exercises=exercises,
            recommendations=payload.get("recommendations") if isinstance(payload.get("recommendations"), dict) else None,
        )
        logger.info("AI generated %d exercises for %s/%s", len(exercises), level, goal)
        return plan, True

    def enhance_workout_plan(
        self,
        program: SportProgram,
        profile: Mapping[str, Any],
        user_id: Optional[str] = None,
    ) -> GeneratedPlan:
        """
        Ask the model to improve an existing program.

        Raises:
            AIWorkoutServiceError: If the model is unavailable or its reply
                contains no usable improvement
        """
        if not AIClientFactory.is_configured():
            raise AIWorkoutServiceError("AI optimization is not configured")

        current = program.model_dump(
            mode="json",
            include={"title", "description", "level", "goal", "days_per_week", "exercises", "recommendations"},
        )
        prompt = f"""Here is an existing training program:
{json.dumps(current, indent=2, ensure_ascii=False)}

User profile:
{json.dumps(build_user_context(profile), indent=2, ensure_ascii=False)}

Suggest SPECIFIC improvements to this program as JSON:
{{
  "improvedWorkouts": [/* same structure as a program's "workouts": day, title, focus, exercises */],
  "recommendations": {{
    "nutrition": "Personalised nutrition advice",
    "progression": "How to progress after this program"
  }}
}}
Return ONLY valid JSON, no additional text."""

        try:
            reply = self._complete(self.OPTIMIZATION_SYSTEM_PROMPT, prompt, user_id, "optimize_workout_plan")
            payload = extract_json_object(reply)
        except Exception as e:
            logger.error(f"AI workout optimization failed: {e}")
            raise AIWorkoutServiceError(f"AI optimization failed: {e}") from e

        improved: List[PlacedExercise] = []
        if payload.get("improvedWorkouts") is not None:
            try:
                improved = exercises_from_workouts(payload["improvedWorkouts"])
            except ValueError as e:
                logger.warning(f"Ignoring malformed improvedWorkouts: {e}")
        recommendations = payload.get("recommendations")
        if not isinstance(recommendations, dict):
            recommendations = None

        if not improved and recommendations is None:
            raise AIWorkoutServiceError("AI optimization returned no usable improvement")

        return GeneratedPlan(
            title=program.title,
            description=program.description,
            level=program.level,
            goal=program.goal,
            days_per_week=program.days_per_week,
            exercises=improved or [e.model_copy(update={"completed": False}) for e in program.exercises],
            recommendations=recommendations or program.recommendations,
        )
