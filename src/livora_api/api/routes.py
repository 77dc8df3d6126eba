"""API routes for health and the user profile."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from livora_api.api.dependencies import get_user_service, success, to_http_exception
from livora_api.auth import get_current_claims, get_current_user
from livora_api.config import settings
from livora_api.errors import LivoraError
from livora_api.models import ProfileUpdateRequest
from livora_api.services.user_service import UserService
from livora_api.utils import isoformat, utcnow

router = APIRouter()


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health")
def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": isoformat(utcnow()),
    }


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@router.get("/profile")
def get_profile(
    claims: Dict[str, Any] = Depends(get_current_claims),
    users: UserService = Depends(get_user_service),
):
    """Return the caller's profile, creating it on first use."""
    try:
        profile = users.get_or_create(claims)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(profile.model_dump(mode="json"))


@router.put("/profile")
def update_profile(
    request: ProfileUpdateRequest,
    user_id: str = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    try:
        profile = users.update_profile(user_id, request)
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success(profile.model_dump(mode="json"), message="Profile updated")
