"""API routes for sport programs and workout tracking."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from livora_api.api.dependencies import get_sport_program_service, success, to_http_exception
from livora_api.auth import get_current_user
from livora_api.errors import LivoraError
from livora_api.models import (
    ExerciseStatusRequest,
    OptimizeProgramRequest,
    SportProgramRequest,
    TrackWorkoutRequest,
    UpdateExercisesRequest,
)
from livora_api.services.sport_program_service import (
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    SportProgramService,
)

router = APIRouter(prefix="/programs/sport", tags=["sport"])


@router.get("")
def get_sport_program(
    user_id: str = Depends(get_current_user),
    service: SportProgramService = Depends(get_sport_program_service),
):
    """Get the caller's active sport program."""
    try:
        program = service.get_active_program(user_id)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(program.model_dump(mode="json"))


@router.post("")
def create_sport_program(
    request: SportProgramRequest,
    user_id: str = Depends(get_current_user),
    service: SportProgramService = Depends(get_sport_program_service),
):
    """
    Create (or regenerate) the caller's sport program.

    Returns 201 when a program was generated and 200 when the existing active
    program is returned because ``regenerate`` was not requested.
    """
    try:
        program, created = service.create_program(user_id, request)
    except LivoraError as e:
        raise to_http_exception(e) from e

    if not created:
        return success(program.model_dump(mode="json"), message="Active program already exists")
    return JSONResponse(
        status_code=201,
        content=success(program.model_dump(mode="json"), message="Sport program created"),
    )


@router.put("")
def update_sport_program(
    request: UpdateExercisesRequest,
    user_id: str = Depends(get_current_user),
    service: SportProgramService = Depends(get_sport_program_service),
):
    """Replace the exercises of the active program."""
    try:
        program = service.update_exercises(user_id, request.exercises)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(program.model_dump(mode="json"), message="Sport program updated")


@router.get("/history")
def list_sport_programs(
    only_active: bool = Query(False),
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=MAX_HISTORY_LIMIT),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user),
    service: SportProgramService = Depends(get_sport_program_service),
):
    try:
        programs = service.list_programs(user_id, only_active=only_active, limit=limit, offset=offset)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success([p.model_dump(mode="json") for p in programs])


@router.post("/optimize")
def optimize_sport_program(
    request: OptimizeProgramRequest,
    user_id: str = Depends(get_current_user),
    service: SportProgramService = Depends(get_sport_program_service),
):
    """Store an AI-improved copy of a program as the new active program."""
    try:
        program = service.optimize_program(
            user_id,
            program_id=request.program_id,
            preferences=request.preferences,
        )
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(program.model_dump(mode="json"), message="Sport program optimized")


@router.put("/exercise/{exercise_id}")
def set_exercise_status(
    exercise_id: str,
    request: ExerciseStatusRequest,
    user_id: str = Depends(get_current_user),
    service: SportProgramService = Depends(get_sport_program_service),
):
    try:
        program = service.set_exercise_status(user_id, exercise_id, request.completed)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(program.model_dump(mode="json"), message="Exercise status updated")


@router.post("/track", status_code=201)
def track_workout(
    request: TrackWorkoutRequest,
    user_id: str = Depends(get_current_user),
    service: SportProgramService = Depends(get_sport_program_service),
):
    """Record a completed (or attempted) exercise of the active program."""
    try:
        track = service.track_workout(user_id, request)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(track.model_dump(mode="json"), message="Workout tracked")


@router.get("/tracks")
def list_workout_tracks(
    user_id: str = Depends(get_current_user),
    service: SportProgramService = Depends(get_sport_program_service),
):
    try:
        tracks = service.list_tracks(user_id)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success([t.model_dump(mode="json") for t in tracks])
