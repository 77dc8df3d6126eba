"""
Test fixtures for livora-api.

Provides in-memory repositories, service fixtures and an authenticated
TestClient so that tests run offline with no Supabase, Firebase, OpenAI or
Clarifai access.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import livora_api...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from livora_api.api.dependencies import (
    get_clarifai_service,
    get_nutrition_program_service,
    get_nutrition_service,
    get_speech_service,
    get_sport_program_service,
    get_user_service,
)
from livora_api.auth import get_current_claims, get_current_user
from livora_api.main import app
from livora_api.models import UserMetadata, UserProfile
from livora_api.services.ai_workout_service import AIWorkoutService
from livora_api.services.clarifai_service import ClarifaiService
from livora_api.services.nutrition_service import NutritionProgramService, NutritionService
from livora_api.services.sport_program_service import SportProgramService
from livora_api.services.speech_service import SpeechRecognitionService
from livora_api.services.user_service import UserService

from fakes import (
    InMemoryMealEntryRepository,
    InMemoryNutritionPlanRepository,
    InMemoryNutritionProgramRepository,
    InMemorySportProgramRepository,
    InMemoryUserRepository,
    TEST_USER_ID,
)


# ---------------------------------------------------------------------------
# Auth Mock
# ---------------------------------------------------------------------------


TEST_CLAIMS = {
    "user_id": TEST_USER_ID,
    "email": "test@example.com",
    "name": "Test User",
    "picture": None,
    "email_verified": True,
}


async def mock_get_current_user() -> str:
    """Mock auth dependency that returns a test user."""
    return TEST_USER_ID


async def mock_get_current_claims() -> dict:
    return dict(TEST_CLAIMS)


# ---------------------------------------------------------------------------
# Repositories and services
# ---------------------------------------------------------------------------


@pytest.fixture
def test_user() -> UserProfile:
    return UserProfile(
        firebase_uid=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
        metadata=UserMetadata(level="intermediate", goal="prise_muscle", days_per_week=5),
    )


@pytest.fixture
def user_repo(test_user) -> InMemoryUserRepository:
    return InMemoryUserRepository([test_user])


@pytest.fixture
def program_repo() -> InMemorySportProgramRepository:
    return InMemorySportProgramRepository()


@pytest.fixture
def ai_service() -> MagicMock:
    """AI service double; tests set return values as needed."""
    return MagicMock(spec=AIWorkoutService)


@pytest.fixture
def sport_service(program_repo, user_repo, ai_service) -> SportProgramService:
    return SportProgramService(programs=program_repo, users=user_repo, ai=ai_service)


@pytest.fixture
def user_service(user_repo) -> UserService:
    return UserService(repository=user_repo)


@pytest.fixture
def nutrition_service() -> NutritionService:
    return NutritionService(
        plans=InMemoryNutritionPlanRepository(),
        entries=InMemoryMealEntryRepository(),
    )


@pytest.fixture
def nutrition_program_repo() -> InMemoryNutritionProgramRepository:
    return InMemoryNutritionProgramRepository()


@pytest.fixture
def nutrition_program_service(nutrition_program_repo, user_repo) -> NutritionProgramService:
    return NutritionProgramService(programs=nutrition_program_repo, users=user_repo)


@pytest.fixture
def clarifai_service() -> MagicMock:
    return MagicMock(spec=ClarifaiService)


@pytest.fixture
def speech_service() -> MagicMock:
    return MagicMock(spec=SpeechRecognitionService)


# ---------------------------------------------------------------------------
# Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def client(
    user_service,
    sport_service,
    nutrition_service,
    nutrition_program_service,
    clarifai_service,
    speech_service,
) -> TestClient:
    """Per-test FastAPI TestClient with auth and services overridden."""
    app.dependency_overrides[get_current_user] = mock_get_current_user
    app.dependency_overrides[get_current_claims] = mock_get_current_claims
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_sport_program_service] = lambda: sport_service
    app.dependency_overrides[get_nutrition_service] = lambda: nutrition_service
    app.dependency_overrides[get_nutrition_program_service] = lambda: nutrition_program_service
    app.dependency_overrides[get_clarifai_service] = lambda: clarifai_service
    app.dependency_overrides[get_speech_service] = lambda: speech_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client() -> TestClient:
    """TestClient with real auth dependencies."""
    app.dependency_overrides.clear()
    return TestClient(app)


# ---------------------------------------------------------------------------
# Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Keep tests away from real credentials."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    monkeypatch.delenv("API_KEYS", raising=False)
