"""API routes for nutrition plans and programs, the meal journal and food image analysis."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from livora_api.api.dependencies import (
    get_clarifai_service,
    get_nutrition_program_service,
    get_nutrition_service,
    success,
    to_http_exception,
)
from livora_api.auth import get_current_user
from livora_api.errors import LivoraError
from livora_api.models import (
    ClarifaiPredictRequest,
    FoodAnalysisRequest,
    MealEntryRequest,
    MealTrackRequest,
    NutritionPlanRequest,
    NutritionProgramRequest,
)
from livora_api.services.clarifai_service import ClarifaiService
from livora_api.services.nutrition_service import NutritionProgramService, NutritionService

router = APIRouter(tags=["nutrition"])


# ---------------------------------------------------------------------------
# Nutrition plan
# ---------------------------------------------------------------------------


@router.get("/programme/nutrition")
def get_nutrition_plan(
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
):
    try:
        plan = service.get_plan(user_id)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(plan.model_dump(mode="json"))


@router.post("/programme/nutrition")
def save_nutrition_plan(
    request: NutritionPlanRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
):
    """Create or replace the caller's nutrition plan."""
    try:
        plan = service.upsert_plan(user_id, request)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(plan.model_dump(mode="json"), message="Nutrition plan saved")


@router.put("/programme/nutrition")
def update_nutrition_plan(
    request: NutritionPlanRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
):
    try:
        plan = service.update_plan(user_id, request)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(plan.model_dump(mode="json"), message="Nutrition plan updated")


# ---------------------------------------------------------------------------
# Nutrition program (meal types, suggestions and tracked meals)
# ---------------------------------------------------------------------------


@router.get("/programs/nutrition")
def get_nutrition_program(
    user_id: str = Depends(get_current_user),
    service: NutritionProgramService = Depends(get_nutrition_program_service),
):
    """Return the active nutrition program, creating the default one on first access."""
    try:
        program = service.get_program(user_id)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(program.model_dump(mode="json"))


@router.post("/programs/nutrition")
def save_nutrition_program(
    request: NutritionProgramRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionProgramService = Depends(get_nutrition_program_service),
):
    try:
        program, created = service.save_program(user_id, request)
    except LivoraError as e:
        raise to_http_exception(e) from e
    message = "Nutrition program created" if created else "Nutrition program updated"
    return success(program.model_dump(mode="json"), message=message)


@router.put("/programs/nutrition")
def update_nutrition_program(
    request: NutritionProgramRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionProgramService = Depends(get_nutrition_program_service),
):
    try:
        program = service.update_program(user_id, request)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(program.model_dump(mode="json"), message="Nutrition program updated")


@router.post("/programs/nutrition/track", status_code=201)
def track_meal(
    request: MealTrackRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionProgramService = Depends(get_nutrition_program_service),
):
    try:
        track = service.track_meal(user_id, request)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(track.model_dump(mode="json"), message="Meal tracked")


# ---------------------------------------------------------------------------
# Meal journal
# ---------------------------------------------------------------------------


@router.post("/programs/nutrition/entries", status_code=201)
def add_meal_entry(
    request: MealEntryRequest,
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
):
    try:
        entry = service.add_entry(
            user_id,
            food_name=request.food_name,
            calories=request.calories,
            timestamp=request.timestamp,
        )
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(entry.model_dump(mode="json"), message="Meal entry added")


@router.get("/programs/nutrition/entries")
def list_meal_entries(
    day: Optional[date] = Query(None, alias="date", description="YYYY-MM-DD"),
    user_id: str = Depends(get_current_user),
    service: NutritionService = Depends(get_nutrition_service),
):
    """List meal entries, optionally restricted to one UTC day."""
    try:
        entries = service.list_entries(user_id, day=day)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success([e.model_dump(mode="json") for e in entries])


# ---------------------------------------------------------------------------
# Food image analysis (Clarifai)
# ---------------------------------------------------------------------------


@router.post("/programs/nutrition/analyze")
def analyze_food_image(
    request: FoodAnalysisRequest,
    user_id: str = Depends(get_current_user),
    clarifai: ClarifaiService = Depends(get_clarifai_service),
):
    """Estimate the calories of the food in an image."""
    if not request.image and not request.image_url:
        raise HTTPException(status_code=400, detail="An image (base64) or imageUrl is required")
    try:
        estimate = clarifai.analyze_image_for_calories(
            base64_image=request.image,
            image_url=request.image_url,
        )
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(estimate)


@router.post("/clarifai/predict")
def clarifai_predict(
    request: ClarifaiPredictRequest,
    user_id: str = Depends(get_current_user),
    clarifai: ClarifaiService = Depends(get_clarifai_service),
):
    """Return the raw food concepts recognised in an image."""
    if not request.base64_image and not request.image_url:
        raise HTTPException(status_code=400, detail="base64Image or imageUrl is required")
    try:
        concepts = clarifai.analyze_food_image(
            base64_image=request.base64_image,
            image_url=request.image_url,
        )
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(concepts)
