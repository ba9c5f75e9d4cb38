"""
Collaborator fakes and builders shared by the SlideReel tests.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from slidereel.core.errors import EncodingError, MediaGenerationError
from slidereel.core.models import RenderedSlide, Slide, SlidePlan
from slidereel.core.workspace import Workspace


def make_slides(count: int) -> list[dict[str, str]]:
    return [
        {
            "heading": f"Heading {i}",
            "description": f"Description {i}",
            "imagePrompt": f"A vivid picture number {i}",
            "speakText": f"Part {i} of the story.",
        }
        for i in range(count)
    ]


def make_plan(count: int) -> SlidePlan:
    return SlidePlan.model_validate({"slides": make_slides(count)})


class FakePlanner:
    """Planner returning a fixed number of slides and recording its calls."""

    def __init__(self, count: int = 5, error: Exception | None = None) -> None:
        self.count = count
        self.error = error
        self.calls: list[tuple[str | None, str | None, str | None]] = []

    async def plan(
        self, text: str | None, image_url: str | None, video_url: str | None
    ) -> SlidePlan:
        self.calls.append((text, image_url, video_url))
        if self.error is not None:
            raise self.error
        return make_plan(self.count)


class FakeRenderer:
    """Renderer writing a small segment file per slide.

    ``delays`` maps slide index to a sleep before finishing so tests can force
    any completion order; ``failures`` maps slide index to the error raised.
    """

    def __init__(
        self,
        delays: dict[int, float] | None = None,
        failures: dict[int, Exception] | None = None,
    ) -> None:
        self.delays = delays or {}
        self.failures = failures or {}
        self.started: list[int] = []
        self.finished: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def render(self, slide: Slide, index: int, workspace: Workspace) -> RenderedSlide:
        self.started.append(index)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(index, 0))
            if index in self.failures:
                raise self.failures[index]
            segment = workspace.path_for("segment", index)
            segment.write_text(f"segment:{index}:{slide.heading}")
            self.finished.append(index)
            return RenderedSlide(index=index, segment_path=segment)
        finally:
            self.in_flight -= 1


class FakeEncoder:
    """Encoder whose concat writes the manifest text as the output video."""

    def __init__(self, concat_error: EncodingError | None = None) -> None:
        self.concat_error = concat_error
        self.manifests: list[str] = []

    async def concatenate(self, manifest_path: Path, output_path: Path) -> Path:
        text = manifest_path.read_text(encoding="utf-8")
        self.manifests.append(text)
        if self.concat_error is not None:
            output_path.write_text("partial")
            raise self.concat_error
        output_path.write_text(text)
        return output_path



class FakeImageGenerator:
    def __init__(self) -> None:
        self.prompts: list[str] = []

    async def generate(self, prompt: str, output_path: Path) -> Path:
        self.prompts.append(prompt)
        output_path.write_bytes(b"\xff\xd8jpeg")
        return output_path


class FakeAudioGenerator:
    """Writes a stand-in mp3; ``fail_on`` lists narration texts that raise."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.texts: list[str] = []

    async def generate_audio(self, text: str, output_path: Path) -> Path:
        self.texts.append(text)
        if text in self.fail_on:
            raise MediaGenerationError("audio", "Google TTS API error: 503")
        output_path.write_bytes(b"ID3mp3")
        return output_path


class StubEncoder(FakeEncoder):
    """Encoder that writes placeholder segments instead of running ffmpeg."""

    def __init__(self, duration: float = 4.5) -> None:
        super().__init__()
        self.duration = duration
        self.segments: list[tuple[Path, Path, float, Path]] = []

    async def probe_duration(self, audio_path: Path) -> float:
        if not audio_path.is_file():
            raise EncodingError("probe", f"missing {audio_path}")
        return self.duration

    async def render_segment(
        self,
        image_path: Path,
        audio_path: Path,
        duration: float,
        output_path: Path,
        width: int,
        height: int,
    ) -> Path:
        self.segments.append((image_path, audio_path, duration, output_path))
        output_path.write_bytes(b"segment")
        return output_path
