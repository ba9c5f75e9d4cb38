"""Slide image generation (image package)."""

from __future__ import annotations

import asyncio
import base64
import binascii
from collections.abc import Callable
from pathlib import Path

import aiofiles
import httpx
from loguru import logger

from slidereel.configs.config import config
from slidereel.core.errors import MediaGenerationError
from slidereel.llm import image_generate

ImageFn = Callable[..., list[str]]

STAGE = "image"


class ImageGenerator:
    """Generates one portrait image per prompt and writes it to disk."""

    def __init__(
        self,
        model: str | None = None,
        size: str | None = None,
        quality: str | None = None,
        image_fn: ImageFn | None = None,
        download_timeout: float = 30.0,
    ) -> None:
        self.model = model or config.image_model
        self.size = size or config.image_size
        self.quality = quality or config.image_quality
        self._image_fn = image_fn or image_generate
        self.download_timeout = download_timeout

    async def generate(self, prompt: str, output_path: Path) -> Path:
        logger.info(f"Generating image ({self.model}, {self.size}): {prompt[:80]}...")
        try:
            results = await asyncio.to_thread(
                self._image_fn,
                prompt=prompt,
                model=self.model,
                size=self.size,
                n=1,
                quality=self.quality,
            )
        except Exception as e:
            raise MediaGenerationError(STAGE, f"image request failed: {e}") from e
        if not results:
            raise MediaGenerationError(STAGE, "image service returned no image")

        data = await self._resolve_bytes(results[0])
        if not data:
            raise MediaGenerationError(STAGE, "image service returned empty data")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(output_path, "wb") as f:
                await f.write(data)
        except OSError as e:
            raise MediaGenerationError(STAGE, f"cannot write image: {e}") from e
        logger.debug(f"Wrote image {output_path} ({len(data)} bytes)")
        return output_path

    async def _resolve_bytes(self, ref: str) -> bytes:
        if ref.startswith("data:"):
            _, _, encoded = ref.partition(",")
            try:
                return base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as e:
                raise MediaGenerationError(STAGE, f"cannot decode image data: {e}") from e
        return await self._download_image(ref)

    async def _download_image(self, image_url: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self.download_timeout) as client:
                response = await client.get(image_url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise MediaGenerationError(STAGE, f"image download failed: {e}") from e
