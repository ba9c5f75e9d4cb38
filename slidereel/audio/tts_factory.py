"""
Speech provider selection.

``TTS_PROVIDER`` names the backend used for slide narration.
"""

from loguru import logger

from .google_tts import GoogleTTSService
from .openai_tts import OpenAITTSService
from .tts_interface import TTSInterface


class TTSFactory:
    _services: dict[str, type[TTSInterface]] = {
        "google": GoogleTTSService,
        "openai": OpenAITTSService,
    }

    @classmethod
    def create_service(cls, provider: str | None = None) -> TTSInterface:
        """Build the provider named by ``provider`` (``google`` when unset).

        A ``/model`` suffix such as ``openai/tts-1`` is accepted and ignored;
        the OpenAI service reads its model from ``OPENAI_TTS_MODEL``.
        """
        name = (provider or "google").split("/", 1)[0].strip().lower()
        service_cls = cls._services.get(name)
        if service_cls is None:
            known = ", ".join(sorted(cls._services))
            raise ValueError(f"Unknown TTS service: {name} (expected one of: {known})")
        logger.debug(f"Using TTS provider: {name}")
        return service_cls()
