"""Clarifai food-item-recognition client."""
import logging
from typing import Any, Dict, List, Optional

import requests

from livora_api.ai import retry_sync_call
from livora_api.config import settings
from livora_api.errors import ClarifaiServiceError
from livora_api.services.calorie_estimator import estimate_calories

logger = logging.getLogger(__name__)


class ClarifaiService:
    """Calls the Clarifai food model and turns its concepts into calorie estimates."""

    MODEL_ID = "food-item-recognition"
    API_URL = f"https://api.clarifai.com/v2/models/{MODEL_ID}/outputs"
    REQUEST_TIMEOUT = 30  # seconds
    SUCCESS_CODE = 10000  # Clarifai status code for a successful call

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.CLARIFAI_API_KEY

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = requests.post(
            self.API_URL,
            json=payload,
            headers={
                "Authorization": f"Key {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()

    def analyze_food_image(
        self,
        base64_image: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Recognise food in an image.

        Args:
            base64_image: Image bytes, base64-encoded (a ``data:`` URI prefix
                is stripped)
            image_url: Public URL of the image, used when no base64 payload
                is given

        Returns:
            List of ``{"name": str, "value": float}`` concepts, most confident
            first

        Raises:
            ClarifaiServiceError: If the service is not configured, no image
                was given, or the API call fails
        """
        if not self.is_configured():
            raise ClarifaiServiceError("Clarifai API is not configured")

        if base64_image:
            if base64_image.startswith("data:") and "," in base64_image:
                base64_image = base64_image.split(",", 1)[1]
            image: Dict[str, Any] = {"base64": base64_image}
        elif image_url:
            image = {"url": image_url}
        else:
            raise ClarifaiServiceError("An image (base64 or URL) is required", status_code=400)

        payload = {"inputs": [{"data": {"image": image}}]}

        try:
            body = retry_sync_call(self._post, payload)
        except requests.RequestException as e:
            logger.error(f"Clarifai request failed: {e}")
            raise ClarifaiServiceError(f"Clarifai request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Clarifai returned invalid JSON: {e}")
            raise ClarifaiServiceError("Clarifai returned an invalid response") from e

        status = body.get("status") or {}
        if status.get("code") not in (None, self.SUCCESS_CODE):
            raise ClarifaiServiceError(
                f"Clarifai error: {status.get('description') or status.get('code')}"
            )

        outputs = body.get("outputs") or []
        if not outputs:
            return []
        concepts = (outputs[0].get("data") or {}).get("concepts") or []
        logger.debug("Clarifai returned %d concepts", len(concepts))
        return [
            {"name": concept.get("name"), "value": concept.get("value", 0)}
            for concept in concepts
            if concept.get("name")
        ]

    def analyze_image_for_calories(
        self,
        base64_image: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Recognise the food in an image and estimate its calories."""
        concepts = self.analyze_food_image(base64_image=base64_image, image_url=image_url)
        estimate = estimate_calories(concepts)
        estimate["concepts"] = concepts[:5]
        return estimate
