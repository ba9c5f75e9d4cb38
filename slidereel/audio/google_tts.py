"""
Google Cloud Text-to-Speech service implementation.

Calls the REST ``text:synthesize`` endpoint with an API key and writes the
returned base64 MP3 payload to disk.
"""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import Any

import aiofiles
import httpx
from loguru import logger

from slidereel.configs.config import config

from .tts_interface import TTSInterface


class GoogleTTSError(RuntimeError):
    """Raised when the Google TTS API does not return usable audio."""


class GoogleTTSService(TTSInterface):
    """Google Cloud TTS implementation"""

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str | None = None,
        language_code: str | None = None,
        voice_name: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else config.google_tts_api_key
        self.endpoint = endpoint or config.google_tts_endpoint
        self.language_code = language_code or config.google_tts_language
        self.voice_name = voice_name or config.google_tts_voice
        self.timeout = timeout or config.google_tts_timeout
        self._transport = transport

    def build_request(self, text: str) -> dict[str, Any]:
        return {
            "audioConfig": {"audioEncoding": "MP3", "pitch": 0, "speakingRate": 1},
            "input": {"text": text},
            "voice": {"languageCode": self.language_code, "name": self.voice_name},
        }

    async def generate_speech(self, text: str, output_path: Path) -> None:
        if not text or not text.strip():
            raise ValueError("Text is empty or contains only whitespace")

        logger.info(
            f"TTS request: provider=google, voice={self.voice_name}, "
            f"language={self.language_code}, text_len={len(text)}"
        )
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self.build_request(text),
            )
        if not response.is_success:
            logger.error(f"Google TTS API error: {response.status_code}")
            raise GoogleTTSError(f"Google TTS API error: {response.status_code}")

        try:
            audio = base64.b64decode(response.json()["audioContent"], validate=True)
        except (KeyError, TypeError, ValueError, binascii.Error) as e:
            raise GoogleTTSError(f"Google TTS returned no audio content: {e}") from e

        output_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(output_path, "wb") as f:
            await f.write(audio)
        logger.info(f"Generated Google TTS: {output_path}")

    def is_available(self) -> bool:
        return bool(self.api_key)
