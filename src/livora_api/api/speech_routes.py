"""API route for voice command transcription."""

from fastapi import APIRouter, Depends, HTTPException

from livora_api.api.dependencies import get_speech_service, success, to_http_exception
from livora_api.auth import get_current_user
from livora_api.errors import LivoraError
from livora_api.models import SpeechRecognitionRequest
from livora_api.services.speech_service import SpeechRecognitionService

router = APIRouter(tags=["speech"])


@router.post("/speech/recognize")
def recognize_speech(
    request: SpeechRecognitionRequest,
    user_id: str = Depends(get_current_user),
    speech: SpeechRecognitionService = Depends(get_speech_service),
):
    """Transcribe a base64-encoded WAV clip."""
    if not request.audio:
        raise HTTPException(status_code=400, detail="Audio (base64) is required")
    try:
        result = speech.recognize(
            request.audio,
            language=request.config.language_code,
            user_id=user_id,
        )
    except LivoraError as e:
        raise to_http_exception(e) from e
    return success({"transcript": result.text, "provider": result.provider})
