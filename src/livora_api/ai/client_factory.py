"""OpenAI client factory with optional Helicone proxying."""
import logging
from dataclasses import dataclass, field
from typing import Any

from livora_api.config import settings


logger = logging.getLogger(__name__)

_HELICONE_OPENAI_BASE_URL = "https://oai.helicone.ai/v1"

DEFAULT_TIMEOUT = 60.0


@dataclass
class AIRequestContext:
    """Who asked for a completion and for which feature, for request tracking."""

    user_id: str | None = None
    feature_name: str | None = None
    custom_properties: dict[str, str] = field(default_factory=dict)

    def to_tracking_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "Helicone-Property-Environment": settings.ENVIRONMENT,
        }
        if self.user_id:
            headers["Helicone-User-Id"] = self.user_id
        if self.feature_name:
            headers["Helicone-Property-Feature"] = self.feature_name
        for key, value in self.custom_properties.items():
            headers[f"Helicone-Property-{key.replace('_', '-').title()}"] = str(value)
        return headers


class AIClientFactory:
    """Builds OpenAI clients from the application settings."""

    @staticmethod
    def is_configured() -> bool:
        return bool(settings.OPENAI_API_KEY)

    @staticmethod
    def create_openai_client(
        context: AIRequestContext | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> Any:
        """
        Create an OpenAI client, proxied through Helicone when enabled.

        Raises:
            ValueError: If OPENAI_API_KEY is not configured
        """
        import openai

        api_key = settings.OPENAI_API_KEY
        if not api_key:
            raise ValueError("OpenAI API key not configured. Set OPENAI_API_KEY environment variable.")

        client_kwargs: dict[str, Any] = {
            "api_key": api_key,
            "timeout": timeout,
        }

        if settings.HELICONE_ENABLED:
            if not settings.HELICONE_API_KEY:
                logger.warning(
                    "HELICONE_ENABLED=true but HELICONE_API_KEY not set. "
                    "Falling back to direct OpenAI API calls."
                )
            else:
                default_headers = {"Helicone-Auth": f"Bearer {settings.HELICONE_API_KEY}"}
                if context:
                    default_headers.update(context.to_tracking_headers())
                client_kwargs["base_url"] = _HELICONE_OPENAI_BASE_URL
                client_kwargs["default_headers"] = default_headers
                logger.debug("Creating OpenAI client with Helicone proxy")
                return openai.OpenAI(**client_kwargs)

        logger.debug("Creating OpenAI client (direct)")
        return openai.OpenAI(**client_kwargs)
