"""
OpenAI TTS Service Implementation

Alternative speech provider using OpenAI's text-to-speech API.
"""

import asyncio
from pathlib import Path

import aiofiles
from loguru import logger

from slidereel.configs.config import config
from slidereel.llm import tts_speech_stream

from .tts_interface import TTSInterface

VALID_MODELS = ["tts-1", "tts-1-hd", "gpt-4o-mini-tts"]


class OpenAITTSService(TTSInterface):
    """OpenAI TTS implementation"""

    def __init__(self, model: str | None = None, voice: str | None = None) -> None:
        if not config.openai_api_key:
            raise ValueError("OPENAI_API_KEY environment variable is not set")

        self.model = model or config.openai_tts_model
        self.voice = voice or config.openai_tts_voice

        if self.model not in VALID_MODELS:
            logger.warning(
                f"Invalid OpenAI TTS model '{self.model}'. "
                f"Using default 'tts-1-hd'. Valid models: {VALID_MODELS}"
            )
            self.model = "tts-1-hd"

    async def generate_speech(self, text: str, output_path: Path) -> None:
        if not text or not text.strip():
            raise ValueError("Text is empty or contains only whitespace")

        logger.info(
            f"TTS request: provider=openai, model={self.model}, voice={self.voice}, "
            f"text_len={len(text.strip())}"
        )
        chunks = await asyncio.to_thread(
            lambda: list(
                tts_speech_stream(
                    model=self.model, voice=self.voice, input_text=text.strip()
                )
            )
        )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(output_path, "wb") as f:
            for chunk in chunks:
                await f.write(chunk)
        logger.info(f"Generated OpenAI TTS: {output_path}")

    def is_available(self) -> bool:
        return bool(config.openai_api_key)
