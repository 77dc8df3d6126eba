"""Service providers and response helpers shared by the routers.

Routes receive their services through ``Depends`` so that tests can swap in
fakes with ``app.dependency_overrides``.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException

from livora_api.errors import LivoraError
from livora_api.services.clarifai_service import ClarifaiService
from livora_api.services.nutrition_service import NutritionProgramService, NutritionService
from livora_api.services.sport_program_service import SportProgramService
from livora_api.services.speech_service import SpeechRecognitionService
from livora_api.services.user_service import UserService

logger = logging.getLogger(__name__)


def get_user_service() -> UserService:
    return UserService()


def get_sport_program_service() -> SportProgramService:
    return SportProgramService()


def get_nutrition_service() -> NutritionService:
    return NutritionService()


def get_nutrition_program_service() -> NutritionProgramService:
    return NutritionProgramService()


def get_clarifai_service() -> ClarifaiService:
    return ClarifaiService()


def get_speech_service() -> SpeechRecognitionService:
    return SpeechRecognitionService()


def success(data: Any, message: Optional[str] = None) -> Dict[str, Any]:
    """Wrap a payload in the ``{"success": true, "data": ...}`` envelope."""
    body: Dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def to_http_exception(error: LivoraError) -> HTTPException:
    if error.status_code >= 500:
        logger.error(f"{type(error).__name__}: {error.message}")
    return HTTPException(status_code=error.status_code, detail=error.message)
