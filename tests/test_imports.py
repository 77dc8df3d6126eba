"""Verify all modules can be imported without errors."""


def test_core_module_imports():
    """Import core modules to catch bad import paths."""
    import livora_api.main
    import livora_api.models
    import livora_api.config
    import livora_api.errors
    import livora_api.utils
    import livora_api.auth


def test_api_imports():
    """Import API route modules."""
    import livora_api.api.routes
    import livora_api.api.sport_routes
    import livora_api.api.nutrition_routes
    import livora_api.api.speech_routes
    import livora_api.api.dependencies


def test_service_imports():
    """Import service modules."""
    import livora_api.services.supabase_client
    import livora_api.services.user_service
    import livora_api.services.sport_program_service
    import livora_api.services.ai_workout_service
    import livora_api.services.nutrition_service
    import livora_api.services.calorie_estimator
    import livora_api.services.clarifai_service
    import livora_api.services.speech_service


def test_workout_imports():
    """Import workout generation modules."""
    import livora_api.workouts.catalog
    import livora_api.workouts.templates
    import livora_api.workouts.generator


def test_app_starts():
    """Verify FastAPI app can be instantiated."""
    from livora_api.main import app
    assert app is not None
    assert hasattr(app, 'routes')
