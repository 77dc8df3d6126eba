"""Domain errors raised by services and translated to HTTP errors by the routes."""
from typing import Optional


class LivoraError(RuntimeError):
    """Base class for service-level failures."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class StorageUnavailableError(LivoraError):
    status_code = 503


class UserNotFoundError(LivoraError):
    status_code = 404


class ProgramNotFoundError(LivoraError):
    status_code = 404


class ExerciseNotFoundError(LivoraError):
    status_code = 404


class NutritionPlanNotFoundError(LivoraError):
    status_code = 404


class InvalidCalorieTargetError(LivoraError):
    status_code = 400


class ConcurrentModificationError(LivoraError):
    """Another request superseded the active plan while this one was writing."""

    status_code = 409


class AIWorkoutServiceError(LivoraError):
    status_code = 502


class ClarifaiServiceError(LivoraError):
    status_code = 502


class NutritionProgramNotFoundError(LivoraError):
    status_code = 404


class MealNotFoundError(LivoraError):
    """Unknown meal type or meal suggestion in the active nutrition program."""

    status_code = 404


class SpeechRecognitionError(LivoraError):
    status_code = 502
