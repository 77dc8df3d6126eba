"""Main FastAPI application."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from livora_api.api.nutrition_routes import router as nutrition_router
from livora_api.api.routes import router
from livora_api.api.speech_routes import router as speech_router
from livora_api.api.sport_routes import router as sport_router
from livora_api.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Livora API", version=settings.APP_VERSION)

# Configure CORS to allow requests from the mobile client and Expo web
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(sport_router)
app.include_router(nutrition_router)
app.include_router(speech_router)
