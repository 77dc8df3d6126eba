"""Nutrition plans (daily calorie target), the meal journal and nutrition programs.

A nutrition program is the richer multi-meal document: meal types with
suggested dishes, a macronutrient split and an append-only log of tracked
meals. Like sport programs, at most one program per user is active.
"""
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from livora_api.errors import (
    ConcurrentModificationError,
    InvalidCalorieTargetError,
    MealNotFoundError,
    NutritionPlanNotFoundError,
    NutritionProgramNotFoundError,
    UserNotFoundError,
)
from livora_api.models import (
    MacrosRatio,
    MealEntry,
    MealSuggestion,
    MealTrack,
    MealTrackRequest,
    MealType,
    NutritionPlan,
    NutritionPlanRequest,
    NutritionProgram,
    NutritionProgramRequest,
)
from livora_api.services.supabase_client import SupabaseRepository
from livora_api.services.user_service import UserRepository
from livora_api.utils import utcnow

logger = logging.getLogger(__name__)

MIN_CALORIE_TARGET = 1000
MAX_CALORIE_TARGET = 10000


def validate_calorie_target(value: Optional[float]) -> int:
    """
    Check a daily calorie target against the accepted range.

    Raises:
        InvalidCalorieTargetError: If the value is missing or outside
            1000..10000 kcal
    """
    if value is None or not (MIN_CALORIE_TARGET <= value <= MAX_CALORIE_TARGET):
        raise InvalidCalorieTargetError(
            f"Calorie target must be between {MIN_CALORIE_TARGET} and {MAX_CALORIE_TARGET} kcal"
        )
    return int(round(value))


class NutritionPlanRepository(SupabaseRepository):
    TABLE_NAME = "nutrition_plans"

    def get(self, user_id: str) -> Optional[NutritionPlan]:
        result = self.client.table(self.TABLE_NAME) \
            .select("*") \
            .eq("user_id", user_id) \
            .limit(1) \
            .execute()
        rows = result.data or []
        return NutritionPlan.model_validate(rows[0]) if rows else None

    def upsert(self, plan: NutritionPlan) -> NutritionPlan:
        record = plan.model_dump(mode="json", exclude={"created_at", "updated_at"})
        record["updated_at"] = utcnow().isoformat()
        result = self.client.table(self.TABLE_NAME).upsert(record, on_conflict="user_id").execute()
        return NutritionPlan.model_validate(result.data[0]) if result.data else plan

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[NutritionPlan]:
        fields = {**fields, "updated_at": utcnow().isoformat()}
        result = self.client.table(self.TABLE_NAME) \
            .update(fields) \
            .eq("user_id", user_id) \
            .execute()
        rows = result.data or []
        return NutritionPlan.model_validate(rows[0]) if rows else None


class MealEntryRepository(SupabaseRepository):
    TABLE_NAME = "meal_entries"

    def insert(self, entry: MealEntry) -> MealEntry:
        record = entry.model_dump(mode="json", exclude={"id"})
        result = self.client.table(self.TABLE_NAME).insert(record).execute()
        return MealEntry.model_validate(result.data[0]) if result.data else entry

    def list_for_user(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[MealEntry]:
        query = self.client.table(self.TABLE_NAME).select("*").eq("user_id", user_id)
        if start is not None:
            query = query.gte("timestamp", start.isoformat())
        if end is not None:
            query = query.lt("timestamp", end.isoformat())
        result = query.order("timestamp", desc=True).execute()
        return [MealEntry.model_validate(row) for row in result.data or []]


def day_bounds(day: date) -> tuple:
    """``[day 00:00, next day 00:00)`` in UTC."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class NutritionService:
    def __init__(
        self,
        plans: Optional[NutritionPlanRepository] = None,
        entries: Optional[MealEntryRepository] = None,
    ):
        self.plans = plans or NutritionPlanRepository()
        self.entries = entries or MealEntryRepository()

    def get_plan(self, user_id: str) -> NutritionPlan:
        plan = self.plans.get(user_id)
        if plan is None:
            raise NutritionPlanNotFoundError("No nutrition plan found")
        return plan

    def upsert_plan(self, user_id: str, request: NutritionPlanRequest) -> NutritionPlan:
        target = validate_calorie_target(request.daily_calorie_target)
        plan = NutritionPlan(
            user_id=user_id,
            daily_calorie_target=target,
            diet_type=request.diet_type,
            notes=request.notes,
        )
        logger.info("Saving nutrition plan for user %s (%d kcal)", user_id, target)
        return self.plans.upsert(plan)

    def update_plan(self, user_id: str, request: NutritionPlanRequest) -> NutritionPlan:
        """Partial update; only fields present in the request are changed."""
        if self.plans.get(user_id) is None:
            raise NutritionPlanNotFoundError("No nutrition plan found")

        fields = request.model_dump(exclude_unset=True)
        if "daily_calorie_target" in fields:
            fields["daily_calorie_target"] = validate_calorie_target(fields["daily_calorie_target"])

        updated = self.plans.update(user_id, fields)
        if updated is None:
            raise NutritionPlanNotFoundError("No nutrition plan found")
        return updated

    def add_entry(
        self,
        user_id: str,
        food_name: str,
        calories: float,
        timestamp: Optional[datetime] = None,
    ) -> MealEntry:
        entry = MealEntry(
            user_id=user_id,
            food_name=food_name,
            calories=calories,
            timestamp=timestamp or utcnow(),
        )
        return self.entries.insert(entry)

    def list_entries(self, user_id: str, day: Optional[date] = None) -> List[MealEntry]:
        if day is None:
            return self.entries.list_for_user(user_id)
        start, end = day_bounds(day)
        return self.entries.list_for_user(user_id, start=start, end=end)


# ---------------------------------------------------------------------------
# Nutrition programs
# ---------------------------------------------------------------------------

DEFAULT_CALORIE_TARGET = 2000
DEFAULT_MACROS = {"proteins": 30, "carbs": 45, "fats": 25}
DEFAULT_PROGRAM_TITLE = "Balanced nutrition plan"
CUSTOM_PROGRAM_TITLE = "Custom nutrition program"

# (name, description, time_of_day, suggestions); each suggestion is
# (name, ingredients, proteins, carbs, fats, calories, preparation_time, recipe)
DEFAULT_MEALS = (
    ("Breakfast", "First meal of the day", "matin", (
        ("Oatmeal with fruit", ("Rolled oats", "Milk", "Banana", "Honey"),
         10, 60, 8, 350, 5,
         "Cook the oats in the milk, top with sliced banana and a drizzle of honey."),
        ("Eggs and avocado toast", ("Wholegrain bread", "Eggs", "Avocado"),
         15, 20, 15, 300, 10,
         "Toast the bread, spread the avocado and top with poached eggs."),
    )),
    ("Lunch", "Midday meal", "midi", (
        ("Protein salad", ("Chicken breast", "Mixed greens", "Cherry tomatoes", "Olive oil"),
         25, 15, 12, 400, 15,
         "Grill the chicken, slice it and toss with the greens, tomatoes and olive oil."),
        ("Quinoa bowl", ("Quinoa", "Chickpeas", "Cucumber", "Feta"),
         18, 45, 10, 450, 20,
         "Cook the quinoa, let it cool and mix with the chickpeas, cucumber and feta."),
    )),
    ("Dinner", "Evening meal", "soir", (
        ("Fish and greens", ("White fish", "Broccoli", "Green beans", "Lemon"),
         25, 10, 12, 350, 20,
         "Bake the fish with lemon and serve with steamed vegetables."),
        ("Chicken and sweet potato", ("Chicken breast", "Sweet potato", "Spinach"),
         30, 35, 8, 420, 25,
         "Roast the sweet potato, pan-fry the chicken and wilt the spinach alongside."),
    )),
)


def default_meals() -> List[MealType]:
    """Fresh copy of the default meal types; every call yields new ids."""
    meals = []
    for name, description, time_of_day, suggestions in DEFAULT_MEALS:
        meals.append(MealType(
            name=name,
            description=description,
            time_of_day=time_of_day,
            suggestions=[
                MealSuggestion(
                    name=dish,
                    ingredients=list(ingredients),
                    proteins=proteins,
                    carbs=carbs,
                    fats=fats,
                    calories=calories,
                    preparation_time=preparation_time,
                    recipe=recipe,
                )
                for dish, ingredients, proteins, carbs, fats, calories, preparation_time, recipe in suggestions
            ],
        ))
    return meals


def default_nutrition_program(user_id: str) -> NutritionProgram:
    return NutritionProgram(
        user_id=user_id,
        title=DEFAULT_PROGRAM_TITLE,
        description="Balanced plan to keep a healthy diet",
        daily_calorie_target=DEFAULT_CALORIE_TARGET,
        macros_ratio=MacrosRatio(**DEFAULT_MACROS),
        meals=default_meals(),
        created_by="system",
        diet_type="equilibre",
    )


def merge_macros(current: Optional[MacrosRatio], incoming: Optional[MacrosRatio]) -> MacrosRatio:
    """Overlay the macros present in ``incoming`` on ``current`` (or the defaults)."""
    merged = dict(DEFAULT_MACROS) if current is None else current.model_dump()
    if incoming is not None:
        merged.update(incoming.model_dump(exclude_none=True))
    return MacrosRatio(**merged)


class NutritionProgramRepository(SupabaseRepository):
    PROGRAMS_TABLE = "nutrition_programs"
    TRACKS_TABLE = "meal_tracks"

    def find_active(self, user_id: str) -> Optional[NutritionProgram]:
        result = self.client.table(self.PROGRAMS_TABLE) \
            .select("*") \
            .eq("user_id", user_id) \
            .eq("active", True) \
            .order("created_at", desc=True) \
            .limit(1) \
            .execute()
        rows = result.data or []
        return NutritionProgram.model_validate(rows[0]) if rows else None

    def insert(self, program: NutritionProgram) -> NutritionProgram:
        try:
            result = self.client.table(self.PROGRAMS_TABLE).insert(program.to_record()).execute()
        except Exception as e:
            if self.is_unique_violation(e):
                logger.warning("Concurrent nutrition program creation for user %s: %s", program.user_id, e)
                raise ConcurrentModificationError(
                    "Another nutrition program was created at the same time. Please retry."
                ) from e
            raise
        return NutritionProgram.model_validate(result.data[0]) if result.data else program

    def update(self, program_id: str, fields: Dict[str, Any]) -> Optional[NutritionProgram]:
        fields = {**fields, "updated_at": utcnow().isoformat()}
        result = self.client.table(self.PROGRAMS_TABLE) \
            .update(fields) \
            .eq("id", program_id) \
            .execute()
        rows = result.data or []
        return NutritionProgram.model_validate(rows[0]) if rows else None

    def insert_meal_track(self, user_id: str, track: MealTrack) -> MealTrack:
        record = track.model_dump(mode="json", exclude={"id"})
        record["user_id"] = user_id
        result = self.client.table(self.TRACKS_TABLE).insert(record).execute()
        return MealTrack.model_validate(result.data[0]) if result.data else track

    def list_meal_tracks(self, program_id: str) -> List[MealTrack]:
        result = self.client.table(self.TRACKS_TABLE) \
            .select("*") \
            .eq("program_id", program_id) \
            .order("date", desc=True) \
            .execute()
        return [MealTrack.model_validate(row) for row in result.data or []]


class NutritionProgramService:
    """Nutrition program operations on behalf of an authenticated user."""

    def __init__(
        self,
        programs: Optional[NutritionProgramRepository] = None,
        users: Optional[UserRepository] = None,
    ):
        self.programs = programs or NutritionProgramRepository()
        self.users = users or UserRepository()

    def _require_user(self, user_id: str) -> None:
        if self.users.get(user_id) is None:
            raise UserNotFoundError("User not found")

    def _require_active(self, user_id: str) -> NutritionProgram:
        program = self.programs.find_active(user_id)
        if program is None:
            raise NutritionProgramNotFoundError("No active nutrition program found")
        return program

    def _with_tracks(self, program: NutritionProgram) -> NutritionProgram:
        if not program.id:
            return program
        return program.model_copy(update={"meal_tracks": self.programs.list_meal_tracks(program.id)})

    def get_program(self, user_id: str) -> NutritionProgram:
        """
        Return the active program, creating the default one on first access.

        Raises:
            UserNotFoundError: If the user has no profile yet
        """
        self._require_user(user_id)
        program = self.programs.find_active(user_id)
        if program is not None:
            return self._with_tracks(program)

        logger.info("Creating default nutrition program for user %s", user_id)
        try:
            return self.programs.insert(default_nutrition_program(user_id))
        except ConcurrentModificationError:
            # A parallel first read created it
            program = self.programs.find_active(user_id)
            if program is None:
                raise
            return self._with_tracks(program)

    @staticmethod
    def _changes(program: NutritionProgram, request: NutritionProgramRequest) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if request.title:
            fields["title"] = request.title
        if request.description:
            fields["description"] = request.description
        if request.daily_calorie_target:
            fields["daily_calorie_target"] = request.daily_calorie_target
        if request.diet_type:
            fields["diet_type"] = request.diet_type
        if request.macros_ratio is not None:
            fields["macros_ratio"] = merge_macros(program.macros_ratio, request.macros_ratio).model_dump()
        return fields

    def _apply(self, program: NutritionProgram, request: NutritionProgramRequest) -> NutritionProgram:
        fields = self._changes(program, request)
        if not fields:
            return self._with_tracks(program)
        updated = self.programs.update(program.id, fields)
        if updated is None:
            raise NutritionProgramNotFoundError("Nutrition program not found")
        return self._with_tracks(updated)

    def save_program(
        self, user_id: str, request: NutritionProgramRequest
    ) -> Tuple[NutritionProgram, bool]:
        """
        Update the active program, or create a user-authored one.

        Returns:
            (program, created)
        """
        self._require_user(user_id)
        existing = self.programs.find_active(user_id)
        if existing is not None:
            return self._apply(existing, request), False

        program = NutritionProgram(
            user_id=user_id,
            title=request.title or CUSTOM_PROGRAM_TITLE,
            description=request.description,
            daily_calorie_target=request.daily_calorie_target or DEFAULT_CALORIE_TARGET,
            macros_ratio=merge_macros(None, request.macros_ratio),
            created_by="user",
            diet_type=request.diet_type or "equilibre",
        )
        logger.info("Creating custom nutrition program for user %s", user_id)
        return self.programs.insert(program), True

    def update_program(self, user_id: str, request: NutritionProgramRequest) -> NutritionProgram:
        program = self._require_active(user_id)
        return self._apply(program, request)

    def track_meal(self, user_id: str, request: MealTrackRequest) -> MealTrack:
        """
        Record a meal against the active program.

        Raises:
            NutritionProgramNotFoundError: If the user has no active program
            MealNotFoundError: If the meal type, or the given suggestion, is
                not part of the program
        """
        program = self._require_active(user_id)
        meal_type = program.find_meal_type(request.meal_type_id)
        if meal_type is None:
            raise MealNotFoundError("Meal type not found in the nutrition program")
        if request.meal_suggestion_id and meal_type.find_suggestion(request.meal_suggestion_id) is None:
            raise MealNotFoundError("Meal suggestion not found")

        return self.programs.insert_meal_track(user_id, MealTrack(
            program_id=program.id,
            meal_type_id=request.meal_type_id,
            meal_suggestion_id=request.meal_suggestion_id,
            custom_meal=request.custom_meal,
            satisfied=True if request.satisfied is None else request.satisfied,
            notes=request.notes,
        ))
