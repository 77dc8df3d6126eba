"""Server-side speech recognition for voice commands.

The mobile client records a short WAV clip and posts it base64-encoded; keys
for the transcription providers never leave the server. OpenAI Whisper is
tried first, then the Azure Speech REST API.
"""
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from livora_api.ai import AIClientFactory, AIRequestContext, retry_sync_call
from livora_api.config import settings
from livora_api.errors import SpeechRecognitionError

logger = logging.getLogger(__name__)


@dataclass
class TranscriptionResult:
    """Result from one transcription provider."""
    success: bool
    text: str = ""
    provider: str = ""
    language: str = "fr-FR"
    error: Optional[str] = None


def decode_audio(audio_base64: str) -> bytes:
    """
    Decode a base64 audio payload, stripping any ``data:`` URI prefix.

    Raises:
        SpeechRecognitionError: (400) If the payload is empty or not base64
    """
    if audio_base64.startswith("data:") and "," in audio_base64:
        audio_base64 = audio_base64.split(",", 1)[1]
    try:
        audio = base64.b64decode(audio_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SpeechRecognitionError("Audio must be base64-encoded", status_code=400) from e
    if not audio:
        raise SpeechRecognitionError("Audio payload is empty", status_code=400)
    return audio


class SpeechRecognitionService:
    """Transcribes audio with the first configured provider that succeeds."""

    AZURE_TOKEN_URL = "https://{region}.api.cognitive.microsoft.com/sts/v1.0/issueToken"
    AZURE_RECOGNITION_URL = (
        "https://{region}.stt.speech.microsoft.com"
        "/speech/recognition/conversation/cognitiveservices/v1"
    )
    AZURE_AUDIO_CONTENT_TYPE = "audio/wav; codecs=audio/pcm; samplerate=44100"
    REQUEST_TIMEOUT = 30  # seconds

    def __init__(
        self,
        azure_key: Optional[str] = None,
        azure_region: Optional[str] = None,
        model: Optional[str] = None,
    ):
        self.azure_key = azure_key if azure_key is not None else settings.AZURE_SPEECH_KEY
        self.azure_region = azure_region or settings.AZURE_SPEECH_REGION
        self.model = model or settings.OPENAI_TRANSCRIPTION_MODEL

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def transcribe_with_openai(
        self,
        audio: bytes,
        language: str = "fr-FR",
        user_id: Optional[str] = None,
    ) -> TranscriptionResult:
        """Transcribe with Whisper; ``language`` is reduced to its ISO-639-1 part."""
        if not AIClientFactory.is_configured():
            return TranscriptionResult(
                success=False,
                provider="openai",
                language=language,
                error="OpenAI API key not configured. Set OPENAI_API_KEY environment variable.",
            )

        try:
            client = AIClientFactory.create_openai_client(
                context=AIRequestContext(user_id=user_id, feature_name="speech_recognition"),
            )
            response = retry_sync_call(
                client.audio.transcriptions.create,
                model=self.model,
                file=("speech.wav", audio),
                language=language.split("-")[0].lower(),
            )
            text = (getattr(response, "text", "") or "").strip()
            if not text:
                return TranscriptionResult(
                    success=False,
                    provider="openai",
                    language=language,
                    error="No transcription results returned",
                )
            return TranscriptionResult(success=True, text=text, provider="openai", language=language)

        except Exception as e:
            logger.exception(f"OpenAI transcription failed: {e}")
            return TranscriptionResult(
                success=False,
                provider="openai",
                language=language,
                error=f"OpenAI transcription failed: {str(e)}",
            )

    def _azure_token(self) -> str:
        response = requests.post(
            self.AZURE_TOKEN_URL.format(region=self.azure_region),
            headers={"Ocp-Apim-Subscription-Key": self.azure_key},
            timeout=self.REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return response.text

    def _azure_recognize(self, token: str, audio: bytes, language: str) -> dict:
        response = requests.post(
            self.AZURE_RECOGNITION_URL.format(region=self.azure_region),
            params={"language": language},
            data=audio,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": self.AZURE_AUDIO_CONTENT_TYPE,
                "Accept": "application/json",
            },
            timeout=self.REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()

    def transcribe_with_azure(self, audio: bytes, language: str = "fr-FR") -> TranscriptionResult:
        """Transcribe with the Azure Speech short-audio REST API."""
        if not self.azure_key:
            return TranscriptionResult(
                success=False,
                provider="azure",
                language=language,
                error="Azure Speech key not configured. Set AZURE_SPEECH_KEY environment variable.",
            )

        try:
            token = retry_sync_call(self._azure_token)
            body = retry_sync_call(self._azure_recognize, token, audio, language)
            text = (body.get("DisplayText") or "").strip()
            if body.get("RecognitionStatus", "Success") != "Success" or not text:
                return TranscriptionResult(
                    success=False,
                    provider="azure",
                    language=language,
                    error=f"Azure recognition status: {body.get('RecognitionStatus', 'NoMatch')}",
                )
            return TranscriptionResult(success=True, text=text, provider="azure", language=language)

        except Exception as e:
            logger.exception(f"Azure transcription failed: {e}")
            return TranscriptionResult(
                success=False,
                provider="azure",
                language=language,
                error=f"Azure transcription failed: {str(e)}",
            )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def is_configured(self) -> bool:
        return AIClientFactory.is_configured() or bool(self.azure_key)

    def recognize(
        self,
        audio_base64: str,
        language: str = "fr-FR",
        user_id: Optional[str] = None,
    ) -> TranscriptionResult:
        """
        Transcribe a base64 audio clip.

        Raises:
            SpeechRecognitionError: 400 for an undecodable payload, 503 when
                no provider is configured, 502 when every provider failed
        """
        audio = decode_audio(audio_base64)
        if not self.is_configured():
            raise SpeechRecognitionError("Speech recognition is not configured", status_code=503)

        errors = []
        for result in self._attempts(audio, language, user_id):
            if result.success:
                logger.info(f"Transcribed {len(audio)} bytes with {result.provider}")
                return result
            errors.append(f"{result.provider}: {result.error}")
            logger.warning(f"Transcription with {result.provider} failed: {result.error}")

        raise SpeechRecognitionError("Speech recognition failed (" + "; ".join(errors) + ")")

    def _attempts(self, audio: bytes, language: str, user_id: Optional[str]):
        if AIClientFactory.is_configured():
            yield self.transcribe_with_openai(audio, language, user_id=user_id)
        if self.azure_key:
            yield self.transcribe_with_azure(audio, language)
