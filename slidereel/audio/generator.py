"""
Audio generator for SlideReel (audio package).

Prepares voiceover text for the speech provider and maps provider failures
onto the item-scoped error taxonomy.
"""

from pathlib import Path

from loguru import logger

from slidereel.configs.config import config
from slidereel.core.errors import MediaGenerationError

from .tts_factory import TTSFactory
from .tts_interface import TTSInterface

STAGE = "audio"


def sanitize_speech_text(text: str) -> str:
    """Drop embedded double quotes, which the provider reads out or chokes on."""
    return text.replace('"', "").strip()


class AudioGenerator:
    """Generator for text-to-speech audio files"""

    def __init__(self, tts_service: TTSInterface | None = None) -> None:
        self._tts_service = tts_service

    @property
    def tts_service(self) -> TTSInterface:
        if self._tts_service is None:
            self._tts_service = TTSFactory.create_service(config.tts_provider)
        return self._tts_service

    async def generate_audio(self, text: str, output_path: Path) -> Path:
        speech = sanitize_speech_text(text)
        if not speech:
            raise MediaGenerationError(STAGE, "voiceover text is empty")
        try:
            service = self.tts_service
            if not service.is_available():
                raise MediaGenerationError(
                    STAGE, f"{type(service).__name__} is not configured"
                )
            await service.generate_speech(speech, output_path)
        except MediaGenerationError:
            raise
        except Exception as e:
            logger.error(f"Speech synthesis failed for {output_path.name}: {e}")
            raise MediaGenerationError(STAGE, f"speech synthesis failed: {e}") from e

        if not output_path.exists() or output_path.stat().st_size == 0:
            raise MediaGenerationError(STAGE, f"no audio written to {output_path}")
        return output_path
