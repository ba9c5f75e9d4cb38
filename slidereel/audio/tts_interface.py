"""
TTS interface shared by all speech-synthesis providers.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class TTSInterface(ABC):
    """Abstract text-to-speech service"""

    @abstractmethod
    async def generate_speech(self, text: str, output_path: Path) -> None:
        """Synthesize ``text`` and write the audio to ``output_path``.

        Raises on any non-success response from the provider.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Return True when the provider is configured."""
