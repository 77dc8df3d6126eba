"""Data models for programs, tracking, users and nutrition.

Request bodies accept both the camelCase keys sent by the mobile client
(``daysPerWeek``, ``exerciseId``...) and snake_case; stored records and
responses are snake_case.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from livora_api.utils import utcnow


class ApiModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"  # Ignore extra fields sent by the client


def _new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Sport programs
# ---------------------------------------------------------------------------


class PlacedExercise(ApiModel):
    """A catalog (or AI) exercise placed on a training day of a plan."""
    id: str = Field(default_factory=_new_id)
    name: str
    sets: int = Field(1, ge=1)
    reps: int = Field(1, ge=1)
    description: Optional[str] = None
    difficulty: Optional[str] = None  # Catalog tier the exercise was drawn from
    muscle_groups: List[str] = Field(default_factory=list)
    duration_minutes: float = Field(0, ge=0)  # 0 for rep-based exercises
    rest_seconds: int = Field(0, ge=0)
    video_url: Optional[str] = None
    day: int = Field(1, ge=1, le=7)
    order: int = Field(0, ge=0)  # Position within the day
    day_title: Optional[str] = None
    focus: Optional[str] = None  # Focus tag the exercise was drawn for
    completed: bool = False


class GeneratedPlan(ApiModel):
    """An assembled plan before any account metadata is attached."""
    title: str
    description: Optional[str] = None
    level: str
    goal: str
    days_per_week: int
    exercises: List[PlacedExercise] = Field(default_factory=list)
    recommendations: Optional[Dict[str, Any]] = None


class SportProgram(GeneratedPlan):
    """A plan owned by a user, as persisted in ``sport_programs``."""
    id: Optional[str] = None
    user_id: str
    active: bool = True
    created_by: str = "generated"  # generated | ai | user
    generated_by_ai: bool = False
    is_customized: bool = False
    optimized: bool = False
    based_on: Optional[str] = None
    last_generated: datetime = Field(default_factory=utcnow)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def find_exercise(self, exercise_id: str) -> Optional[PlacedExercise]:
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    def to_record(self) -> Dict[str, Any]:
        """Row payload for Supabase; lets the database assign id/timestamps."""
        return self.model_dump(
            mode="json",
            exclude={"id", "created_at", "updated_at"},
        )


class WorkoutTrack(ApiModel):
    """Append-only record of a completed (or attempted) exercise."""
    id: Optional[str] = None
    program_id: str
    user_id: str
    exercise_id: str
    date: datetime = Field(default_factory=utcnow)
    completed: bool = True
    actual_sets: Optional[int] = Field(None, ge=0)
    actual_reps: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class SportProgramRequest(ApiModel):
    """Body of ``POST /programs/sport``. Profile fields are coerced, never rejected."""
    level: Optional[Any] = None
    goal: Optional[Any] = None
    days_per_week: Optional[Any] = None
    regenerate: bool = False
    use_ai: bool = Field(False, alias="useAI")
    preferences: Optional[Dict[str, Any]] = None


class UpdateExercisesRequest(ApiModel):
    exercises: List[PlacedExercise]


class ExerciseStatusRequest(ApiModel):
    completed: bool


class TrackWorkoutRequest(ApiModel):
    exercise_id: str = Field(..., min_length=1)
    completed: Optional[bool] = None
    actual_sets: Optional[int] = Field(None, ge=0)
    actual_reps: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class OptimizeProgramRequest(ApiModel):
    program_id: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserMetadata(ApiModel):
    level: Optional[str] = None
    goal: Optional[str] = None
    days_per_week: Optional[int] = Field(None, ge=1, le=7)
    height: Optional[float] = None  # cm
    weight: Optional[float] = None  # kg
    age: Optional[int] = None
    gender: Optional[str] = None
    activity_level: Optional[str] = None
    birth_date: Optional[str] = None
    health_conditions: List[str] = Field(default_factory=list)
    preferences: Dict[str, Any] = Field(default_factory=dict)
    restrictions: List[str] = Field(default_factory=list)


class UserProfile(ApiModel):
    firebase_uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    email_verified: bool = False
    phone_number: Optional[str] = None
    last_login: Optional[datetime] = None
    metadata: UserMetadata = Field(default_factory=UserMetadata)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdateRequest(ApiModel):
    display_name: Optional[str] = None
    metadata: Optional[UserMetadata] = None  # Merged key-by-key into the stored metadata


# ---------------------------------------------------------------------------
# Nutrition
# ---------------------------------------------------------------------------


class NutritionPlan(ApiModel):
    user_id: str
    daily_calorie_target: int
    diet_type: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NutritionPlanRequest(ApiModel):
    # Range is checked by the service so that it answers 400, not 422
    daily_calorie_target: Optional[float] = None
    diet_type: Optional[str] = None
    notes: Optional[str] = None


class MealEntry(ApiModel):
    id: Optional[str] = None
    user_id: str
    food_name: str
    calories: float = Field(0, ge=0)
    timestamp: datetime = Field(default_factory=utcnow)


class MealEntryRequest(ApiModel):
    food_name: str = Field(..., min_length=1)
    calories: float = Field(0, ge=0)
    timestamp: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Nutrition programs (meal types, suggestions and meal tracking)
# ---------------------------------------------------------------------------


TimeOfDay = Literal["matin", "midi", "soir", "collation"]
DietType = Literal["equilibre", "vegetarien", "vegan", "paleo", "cetogene", "autres"]


class MacrosRatio(ApiModel):
    """Share of daily calories per macronutrient, in percent."""
    proteins: Optional[float] = Field(None, ge=0, le=100)
    carbs: Optional[float] = Field(None, ge=0, le=100)
    fats: Optional[float] = Field(None, ge=0, le=100)


class MealSuggestion(ApiModel):
    id: str = Field(default_factory=_new_id)
    name: str
    ingredients: List[str] = Field(default_factory=list)
    proteins: Optional[float] = Field(None, ge=0)  # g
    carbs: Optional[float] = Field(None, ge=0)  # g
    fats: Optional[float] = Field(None, ge=0)  # g
    calories: Optional[float] = Field(None, ge=0)
    preparation_time: Optional[int] = Field(None, ge=0)  # minutes
    recipe: Optional[str] = None
    image_url: Optional[str] = None


class MealType(ApiModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: Optional[str] = None
    time_of_day: TimeOfDay
    suggestions: List[MealSuggestion] = Field(default_factory=list)

    def find_suggestion(self, suggestion_id: str) -> Optional[MealSuggestion]:
        for suggestion in self.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None


class MealTrack(ApiModel):
    """Append-only record of a meal eaten from (or outside) a nutrition program."""
    id: Optional[str] = None
    program_id: Optional[str] = None
    date: datetime = Field(default_factory=utcnow)
    meal_type_id: str
    meal_suggestion_id: Optional[str] = None
    custom_meal: Optional[str] = None
    satisfied: bool = True
    notes: Optional[str] = None


class NutritionProgram(ApiModel):
    """Multi-meal nutrition program, as persisted in ``nutrition_programs``."""
    id: Optional[str] = None
    user_id: str
    title: str
    description: Optional[str] = None
    start_date: datetime = Field(default_factory=utcnow)
    end_date: Optional[datetime] = None
    daily_calorie_target: Optional[int] = Field(None, ge=0)
    macros_ratio: MacrosRatio = Field(default_factory=MacrosRatio)
    meals: List[MealType] = Field(default_factory=list)
    meal_tracks: List[MealTrack] = Field(default_factory=list)
    active: bool = True
    created_by: Literal["system", "nutritionist", "user"] = "system"
    diet_type: DietType = "equilibre"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def find_meal_type(self, meal_type_id: str) -> Optional[MealType]:
        for meal_type in self.meals:
            if meal_type.id == meal_type_id:
                return meal_type
        return None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(
            mode="json",
            exclude={"id", "created_at", "updated_at", "meal_tracks"},
        )


class NutritionProgramRequest(ApiModel):
    """Body of ``POST``/``PUT /programs/nutrition``; only non-empty fields are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    daily_calorie_target: Optional[int] = Field(None, ge=0)
    macros_ratio: Optional[MacrosRatio] = None
    diet_type: Optional[DietType] = None


class MealTrackRequest(ApiModel):
    meal_type_id: str = Field(..., min_length=1)
    meal_suggestion_id: Optional[str] = None
    custom_meal: Optional[str] = None
    satisfied: Optional[bool] = None
    notes: Optional[str] = None


class FoodAnalysisRequest(ApiModel):
    image: Optional[str] = None  # base64 payload
    image_url: Optional[str] = None


class ClarifaiPredictRequest(ApiModel):
    base64_image: Optional[str] = None
    image_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Speech recognition
# ---------------------------------------------------------------------------


class RecognitionConfig(ApiModel):
    language_code: str = "fr-FR"


class SpeechRecognitionRequest(ApiModel):
    audio: Optional[str] = None  # base64 payload
    config: RecognitionConfig = Field(default_factory=RecognitionConfig)
