"""Configuration settings for the Livora API."""
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production", "test"]

APP_VERSION = "1.0.0"


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    APP_VERSION: str = APP_VERSION
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = []

    # Feature flags
    HELICONE_ENABLED: bool = False

    # API Keys
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    HELICONE_API_KEY: str | None = None
    CLARIFAI_API_KEY: str | None = None
    OPENAI_TRANSCRIPTION_MODEL: str = "whisper-1"
    AZURE_SPEECH_KEY: str | None = None
    AZURE_SPEECH_REGION: str = "westeurope"

    # Auth
    FIREBASE_PROJECT_ID: str | None = None
    DEV_AUTH_TOKEN: str | None = None

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production", "test"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        origins = os.getenv("CORS_ORIGINS", "http://localhost:8081,http://localhost:19006")
        self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]

        # Feature flags
        self.HELICONE_ENABLED = os.getenv("HELICONE_ENABLED", "false").lower() == "true"

        # API Keys
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
        self.OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.HELICONE_API_KEY = os.getenv("HELICONE_API_KEY")
        self.CLARIFAI_API_KEY = os.getenv("CLARIFAI_API_KEY")
        self.OPENAI_TRANSCRIPTION_MODEL = os.getenv("OPENAI_TRANSCRIPTION_MODEL", "whisper-1")
        self.AZURE_SPEECH_KEY = os.getenv("AZURE_SPEECH_KEY")
        self.AZURE_SPEECH_REGION = os.getenv("AZURE_SPEECH_REGION", "westeurope")

        # Auth
        self.FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
        self.DEV_AUTH_TOKEN = os.getenv("DEV_AUTH_TOKEN")


settings = Settings()
