"""
Per-slide rendering for SlideReel.

One call produces one video segment: image and narration are generated
concurrently, the narration is measured, and the image is encoded as a still
for exactly that long with the narration as its audio track.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from loguru import logger

from slidereel.audio import AudioGenerator
from slidereel.configs.config import config
from slidereel.core.models import RenderedSlide, Slide
from slidereel.core.workspace import Workspace
from slidereel.image import ImageGenerator
from slidereel.video import FFmpegEncoder


class SlideRenderer:
    """Turns a planned slide into an encoded segment inside a workspace."""

    def __init__(
        self,
        image_generator: ImageGenerator,
        audio_generator: AudioGenerator,
        encoder: FFmpegEncoder,
        width: int | None = None,
        height: int | None = None,
    ) -> None:
        self.image_generator = image_generator
        self.audio_generator = audio_generator
        self.encoder = encoder
        self.width = width or config.video_width
        self.height = height or config.video_height

    async def render(self, slide: Slide, index: int, workspace: Workspace) -> RenderedSlide:
        image_path = workspace.path_for("image", index)
        audio_path = workspace.path_for("audio", index)
        segment_path = workspace.path_for("segment", index)

        logger.info(f"Rendering slide {index}: {slide.heading}")
        await self._generate_media(slide, image_path, audio_path)

        duration = await self.encoder.probe_duration(audio_path)
        logger.debug(f"Slide {index} narration lasts {duration:.3f}s")

        await self.encoder.render_segment(
            image_path,
            audio_path,
            duration,
            segment_path,
            self.width,
            self.height,
        )
        logger.info(f"Slide {index} segment ready: {segment_path.name}")
        return RenderedSlide(index=index, segment_path=segment_path)

    async def _generate_media(
        self, slide: Slide, image_path: Path, audio_path: Path
    ) -> None:
        # Both requests finish before either error surfaces; image reported first
        image_result, audio_result = await asyncio.gather(
            self.image_generator.generate(slide.image_prompt, image_path),
            self.audio_generator.generate_audio(slide.speak_text, audio_path),
            return_exceptions=True,
        )
        for result in (image_result, audio_result):
            if isinstance(result, BaseException):
                raise result
