"""Unit tests for data models."""
import pytest
from pydantic import ValidationError

from livora_api.models import (
    PlacedExercise,
    SportProgram,
    SportProgramRequest,
    TrackWorkoutRequest,
    UserMetadata,
)


class TestModels:
    """Test cases for data models."""

    def test_placed_exercise_defaults(self):
        """Test PlacedExercise default values."""
        exercise = PlacedExercise(name="Squats")

        assert exercise.sets == 1
        assert exercise.reps == 1
        assert exercise.day == 1
        assert exercise.completed is False
        assert len(exercise.id) == 32

    def test_placed_exercise_ids_are_unique(self):
        assert PlacedExercise(name="A").id != PlacedExercise(name="A").id

    def test_placed_exercise_accepts_camel_case(self):
        exercise = PlacedExercise(name="Plank", muscleGroups=["core"], restSeconds=30, durationMinutes=1)

        assert exercise.muscle_groups == ["core"]
        assert exercise.rest_seconds == 30
        assert exercise.duration_minutes == 1

    def test_placed_exercise_day_range(self):
        with pytest.raises(ValidationError):
            PlacedExercise(name="Squats", day=8)

    def test_program_request_use_ai_alias(self):
        """The mobile client sends ``useAI``."""
        assert SportProgramRequest(useAI=True).use_ai is True
        assert SportProgramRequest(use_ai=True).use_ai is True
        assert SportProgramRequest().regenerate is False

    def test_program_request_ignores_unknown_fields(self):
        request = SportProgramRequest(daysPerWeek="4", somethingElse=1)
        assert request.days_per_week == "4"

    def test_track_request_requires_exercise_id(self):
        with pytest.raises(ValidationError):
            TrackWorkoutRequest(exerciseId="")

    def test_find_exercise(self):
        exercise = PlacedExercise(name="Push-ups")
        program = SportProgram(
            user_id="u1", title="T", level="beginner", goal="perte_poids",
            days_per_week=3, exercises=[exercise],
        )

        assert program.find_exercise(exercise.id) is exercise
        assert program.find_exercise("missing") is None

    def test_to_record_omits_database_fields(self):
        program = SportProgram(
            id="p1", user_id="u1", title="T", level="beginner",
            goal="perte_poids", days_per_week=3,
        )

        record = program.to_record()

        assert "id" not in record
        assert "created_at" not in record
        assert record["user_id"] == "u1"
        assert isinstance(record["last_generated"], str)

    def test_user_metadata_days_range(self):
        with pytest.raises(ValidationError):
            UserMetadata(daysPerWeek=9)
