"""Sport program lifecycle: generation, supersede, customization and tracking.

A user owns any number of programs but at most one is active. Regenerating
marks the current active program inactive before the new one is inserted;
nothing is ever deleted. The ``sport_programs`` table carries a partial
unique index on ``user_id WHERE active`` so that two concurrent regenerations
cannot both leave an active program behind: the losing insert is reported as
a ``ConcurrentModificationError``.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from livora_api.errors import (
    ConcurrentModificationError,
    ExerciseNotFoundError,
    ProgramNotFoundError,
    UserNotFoundError,
)
from livora_api.models import (
    PlacedExercise,
    SportProgram,
    SportProgramRequest,
    TrackWorkoutRequest,
    UserProfile,
    WorkoutTrack,
)
from livora_api.services.ai_workout_service import AIWorkoutService
from livora_api.services.supabase_client import SupabaseRepository
from livora_api.services.user_service import UserRepository
from livora_api.utils import utcnow
from livora_api.workouts.generator import generate_workout_plan, wrap_plan

logger = logging.getLogger(__name__)

MAX_HISTORY_LIMIT = 50
DEFAULT_HISTORY_LIMIT = 10
STATUS_TRACK_NOTE = "Completed via the app"


class SportProgramRepository(SupabaseRepository):
    PROGRAMS_TABLE = "sport_programs"
    TRACKS_TABLE = "workout_tracks"

    def find_active(self, user_id: str) -> Optional[SportProgram]:
        result = self.client.table(self.PROGRAMS_TABLE) \
            .select("*") \
            .eq("user_id", user_id) \
            .eq("active", True) \
            .order("created_at", desc=True) \
            .limit(1) \
            .execute()
        rows = result.data or []
        return SportProgram.model_validate(rows[0]) if rows else None

    def find_by_id(self, program_id: str) -> Optional[SportProgram]:
        result = self.client.table(self.PROGRAMS_TABLE) \
            .select("*") \
            .eq("id", program_id) \
            .limit(1) \
            .execute()
        rows = result.data or []
        return SportProgram.model_validate(rows[0]) if rows else None

    def list_for_user(
        self,
        user_id: str,
        only_active: bool = False,
        limit: int = DEFAULT_HISTORY_LIMIT,
        offset: int = 0,
    ) -> List[SportProgram]:
        query = self.client.table(self.PROGRAMS_TABLE).select("*").eq("user_id", user_id)
        if only_active:
            query = query.eq("active", True)
        result = query.order("created_at", desc=True).range(offset, offset + limit - 1).execute()
        return [SportProgram.model_validate(row) for row in result.data or []]

    def deactivate_active(self, user_id: str) -> int:
        """Mark every active program of ``user_id`` inactive. Returns the row count."""
        result = self.client.table(self.PROGRAMS_TABLE) \
            .update({"active": False, "updated_at": utcnow().isoformat()}) \
            .eq("user_id", user_id) \
            .eq("active", True) \
            .execute()
        return len(result.data or [])

    def insert(self, program: SportProgram) -> SportProgram:
        try:
            result = self.client.table(self.PROGRAMS_TABLE).insert(program.to_record()).execute()
        except Exception as e:
            if self.is_unique_violation(e):
                logger.warning("Concurrent program creation for user %s: %s", program.user_id, e)
                raise ConcurrentModificationError(
                    "Another program was created at the same time. Please retry."
                ) from e
            raise
        return SportProgram.model_validate(result.data[0]) if result.data else program

    def update(self, program_id: str, fields: Dict[str, Any]) -> Optional[SportProgram]:
        fields = {**fields, "updated_at": utcnow().isoformat()}
        result = self.client.table(self.PROGRAMS_TABLE) \
            .update(fields) \
            .eq("id", program_id) \
            .execute()
        rows = result.data or []
        return SportProgram.model_validate(rows[0]) if rows else None

    def insert_track(self, track: WorkoutTrack) -> WorkoutTrack:
        record = track.model_dump(mode="json", exclude={"id"})
        result = self.client.table(self.TRACKS_TABLE).insert(record).execute()
        return WorkoutTrack.model_validate(result.data[0]) if result.data else track

    def list_tracks(self, program_id: str, user_id: str) -> List[WorkoutTrack]:
        result = self.client.table(self.TRACKS_TABLE) \
            .select("*") \
            .eq("program_id", program_id) \
            .eq("user_id", user_id) \
            .order("date", desc=True) \
            .execute()
        return [WorkoutTrack.model_validate(row) for row in result.data or []]


def _serialize_exercises(exercises: List[PlacedExercise]) -> List[Dict[str, Any]]:
    return [exercise.model_dump(mode="json") for exercise in exercises]


def _is_program_id(value: str) -> bool:
    """Program ids are UUIDs; anything else cannot match a row."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


class SportProgramService:
    """Program operations on behalf of an authenticated user."""

    def __init__(
        self,
        programs: Optional[SportProgramRepository] = None,
        users: Optional[UserRepository] = None,
        ai: Optional[AIWorkoutService] = None,
    ):
        self.programs = programs or SportProgramRepository()
        self.users = users or UserRepository()
        self.ai = ai or AIWorkoutService()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_active_program(self, user_id: str) -> SportProgram:
        program = self.programs.find_active(user_id)
        if program is None:
            raise ProgramNotFoundError("No active sport program found")
        return program

    def list_programs(
        self,
        user_id: str,
        only_active: bool = False,
        limit: int = DEFAULT_HISTORY_LIMIT,
        offset: int = 0,
    ) -> List[SportProgram]:
        limit = max(1, min(limit, MAX_HISTORY_LIMIT))
        offset = max(0, offset)
        return self.programs.list_for_user(user_id, only_active=only_active, limit=limit, offset=offset)

    def list_tracks(self, user_id: str) -> List[WorkoutTrack]:
        program = self.get_active_program(user_id)
        return self.programs.list_tracks(program.id, user_id)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _require_user(self, user_id: str) -> UserProfile:
        user = self.users.get(user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    @staticmethod
    def _profile_for(user: UserProfile, request: Optional[SportProgramRequest] = None) -> Dict[str, Any]:
        """Request fields first, then stored metadata; the generator fills the rest."""
        profile = user.metadata.model_dump()
        if request is not None:
            for key in ("level", "goal", "days_per_week"):
                value = getattr(request, key)
                if value not in (None, ""):
                    profile[key] = value
            if request.preferences:
                profile["preferences"] = {**profile.get("preferences", {}), **request.preferences}
        return profile

    def _supersede(self, program: SportProgram, previous: Optional[SportProgram]) -> SportProgram:
        """
        Deactivate the user's active program, then insert ``program``.

        If the insert fails for any reason other than a concurrent
        regenerate, ``previous`` is re-activated before the error propagates
        so the user is never left without an active program.
        """
        deactivated = self.programs.deactivate_active(program.user_id)
        if deactivated:
            logger.info("Deactivated %d program(s) for user %s", deactivated, program.user_id)
        try:
            return self.programs.insert(program)
        except ConcurrentModificationError:
            raise
        except Exception as e:
            if previous is not None and previous.id:
                logger.error(
                    f"Program insert failed for user {program.user_id}, restoring {previous.id}: {e}"
                )
                self.programs.update(previous.id, {"active": True})
            raise

    def create_program(self, user_id: str, request: SportProgramRequest) -> Tuple[SportProgram, bool]:
        """
        Return the active program, generating a new one when needed.

        Returns:
            (program, created) where ``created`` is False when the existing
            active program was returned unchanged

        Raises:
            UserNotFoundError: If the user has no profile yet
            ConcurrentModificationError: If a concurrent request activated
                another program first
        """
        user = self._require_user(user_id)

        existing = self.programs.find_active(user_id)
        if existing is not None and not request.regenerate:
            return existing, False

        profile = self._profile_for(user, request)
        if request.use_ai:
            plan, ai_used = self.ai.generate_ai_workout_plan(profile, user_id=user_id)
        else:
            plan, ai_used = generate_workout_plan(profile), False
        logger.info(
            "Generating %s program for user %s (%s)",
            plan.goal, user_id, "ai" if ai_used else "template",
        )

        program = wrap_plan(user_id, plan, created_by="ai" if ai_used else "generated")
        return self._supersede(program, previous=existing), True

    def optimize_program(
        self,
        user_id: str,
        program_id: Optional[str] = None,
        preferences: Optional[Dict[str, Any]] = None,
    ) -> SportProgram:
        """Store an AI-improved copy of a program as the new active program."""
        user = self._require_user(user_id)

        if program_id:
            if not _is_program_id(program_id):
                raise ProgramNotFoundError("Sport program not found")
            program = self.programs.find_by_id(program_id)
            if program is None or program.user_id != user_id:
                raise ProgramNotFoundError("Sport program not found")
            previous = program if program.active else self.programs.find_active(user_id)
        else:
            program = previous = self.get_active_program(user_id)

        profile = self._profile_for(user)
        if preferences:
            profile["preferences"] = {**profile.get("preferences", {}), **preferences}

        improved = self.ai.enhance_workout_plan(program, profile, user_id=user_id)
        optimized = wrap_plan(user_id, improved, created_by="ai").model_copy(
            update={"optimized": True, "based_on": program.id}
        )
        logger.info("Optimized program %s for user %s", program.id, user_id)
        return self._supersede(optimized, previous=previous)

    # ------------------------------------------------------------------
    # Customization and tracking
    # ------------------------------------------------------------------

    def _save_exercises(self, program: SportProgram, exercises: List[PlacedExercise], **fields: Any) -> SportProgram:
        updated = self.programs.update(program.id, {"exercises": _serialize_exercises(exercises), **fields})
        if updated is None:
            raise ProgramNotFoundError("Sport program not found")
        return updated

    def update_exercises(self, user_id: str, exercises: List[PlacedExercise]) -> SportProgram:
        program = self.get_active_program(user_id)
        return self._save_exercises(program, exercises, is_customized=True)

    def set_exercise_status(self, user_id: str, exercise_id: str, completed: bool) -> SportProgram:
        program = self.get_active_program(user_id)
        exercise = program.find_exercise(exercise_id)
        if exercise is None:
            raise ExerciseNotFoundError("Exercise not found")

        # Track first: a failed insert must not leave a completed flag without a record
        if completed:
            self.programs.insert_track(WorkoutTrack(
                program_id=program.id,
                user_id=user_id,
                exercise_id=exercise_id,
                completed=True,
                actual_sets=exercise.sets,
                actual_reps=exercise.reps,
                notes=STATUS_TRACK_NOTE,
            ))

        exercises = [
            e.model_copy(update={"completed": completed}) if e.id == exercise_id else e
            for e in program.exercises
        ]
        return self._save_exercises(program, exercises)

    def track_workout(self, user_id: str, request: TrackWorkoutRequest) -> WorkoutTrack:
        program = self.get_active_program(user_id)
        if program.find_exercise(request.exercise_id) is None:
            raise ExerciseNotFoundError("Exercise not found in the active program")

        track = self.programs.insert_track(WorkoutTrack(
            program_id=program.id,
            user_id=user_id,
            exercise_id=request.exercise_id,
            completed=True if request.completed is None else request.completed,
            actual_sets=request.actual_sets,
            actual_reps=request.actual_reps,
            notes=request.notes,
        ))

        if request.completed is not None:
            exercises = [
                e.model_copy(update={"completed": request.completed}) if e.id == request.exercise_id else e
                for e in program.exercises
            ]
            self._save_exercises(program, exercises)
        return track
