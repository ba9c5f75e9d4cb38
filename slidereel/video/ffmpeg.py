"""
FFmpeg encoder for SlideReel.

Thin async wrapper over the ``ffprobe`` / ``ffmpeg`` binaries: measure an
audio file, encode a still-image segment for exactly that duration, and join
segments with the concat demuxer without re-encoding.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from loguru import logger

from slidereel.configs.config import config
from slidereel.core.errors import EncodingError


class FFmpegEncoder:
    """Encoder collaborator backed by ffmpeg subprocesses."""

    def __init__(
        self,
        ffmpeg_binary: str | None = None,
        ffprobe_binary: str | None = None,
        codec: str | None = None,
        audio_codec: str | None = None,
        preset: str | None = None,
        fps: int | None = None,
        threads: int | None = None,
    ) -> None:
        self.ffmpeg_binary = ffmpeg_binary or config.ffmpeg_binary
        self.ffprobe_binary = ffprobe_binary or config.ffprobe_binary
        self.codec = codec or config.ffmpeg_codec
        self.audio_codec = audio_codec or config.ffmpeg_audio_codec
        self.preset = preset or config.ffmpeg_preset
        self.fps = fps or config.ffmpeg_fps
        self.threads = threads or config.ffmpeg_threads

    async def _run(self, cmd: list[str]) -> tuple[int, str, str]:
        logger.debug(f"Running: {' '.join(cmd)}")
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        return (
            proc.returncode if proc.returncode is not None else -1,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    def probe_command(self, audio_path: Path) -> list[str]:
        return [
            self.ffprobe_binary,
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(audio_path),
        ]

    async def probe_duration(self, audio_path: Path) -> float:
        """Return the duration of ``audio_path`` in (fractional) seconds."""
        try:
            code, stdout, stderr = await self._run(self.probe_command(audio_path))
        except OSError as e:
            raise EncodingError("probe", f"cannot run ffprobe: {e}") from e
        if code != 0:
            raise EncodingError(
                "probe", f"ffprobe failed for {audio_path.name}: {stderr[:400]}"
            )
        duration = parse_probe_duration(stdout)
        if duration is None:
            raise EncodingError("probe", f"no duration reported for {audio_path.name}")
        return duration

    def segment_command(
        self,
        image_path: Path,
        audio_path: Path,
        duration: float,
        output_path: Path,
        width: int,
        height: int,
    ) -> list[str]:
        return [
            self.ffmpeg_binary,
            "-y",
            "-loop",
            "1",
            "-framerate",
            str(self.fps),
            "-t",
            f"{duration:.6f}",
            "-i",
            str(image_path),
            "-i",
            str(audio_path),
            "-c:v",
            self.codec,
            "-preset",
            self.preset,
            "-tune",
            "stillimage",
            "-c:a",
            self.audio_codec,
            "-vf",
            f"scale={width}:{height},setsar=1",
            "-pix_fmt",
            "yuv420p",
            "-threads",
            str(self.threads),
            "-shortest",
            str(output_path),
        ]

    async def render_segment(
        self,
        image_path: Path,
        audio_path: Path,
        duration: float,
        output_path: Path,
        width: int,
        height: int,
    ) -> Path:
        """Encode a still ``image_path`` held for ``duration`` seconds over ``audio_path``."""
        if duration <= 0:
            raise EncodingError("encode", f"invalid segment duration {duration}")
        cmd = self.segment_command(
            image_path, audio_path, duration, output_path, width, height
        )
        try:
            code, _, stderr = await self._run(cmd)
        except OSError as e:
            raise EncodingError("encode", f"cannot run ffmpeg: {e}") from e
        if code != 0:
            raise EncodingError(
                "encode", f"ffmpeg failed for {output_path.name}: {stderr[-400:]}"
            )
        if not output_path.exists() or output_path.stat().st_size == 0:
            raise EncodingError("encode", f"ffmpeg produced no output {output_path}")
        return output_path

    def concat_command(self, manifest_path: Path, output_path: Path) -> list[str]:
        return [
            self.ffmpeg_binary,
            "-y",
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            str(manifest_path),
            "-c",
            "copy",
            str(output_path),
        ]

    async def concatenate(self, manifest_path: Path, output_path: Path) -> Path:
        """Join the segments listed in ``manifest_path`` with stream copy."""
        try:
            code, _, stderr = await self._run(
                self.concat_command(manifest_path, output_path)
            )
        except OSError as e:
            raise EncodingError("concat", f"cannot run ffmpeg: {e}") from e
        if code != 0:
            raise EncodingError("concat", f"ffmpeg concat failed: {stderr[-400:]}")
        if not output_path.exists() or output_path.stat().st_size == 0:
            raise EncodingError("concat", f"ffmpeg produced no output {output_path}")
        return output_path


def parse_probe_duration(stdout: str) -> float | None:
    """Extract a positive duration from ffprobe JSON output."""
    if not stdout.strip():
        return None
    try:
        data: Any = json.loads(stdout)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    candidates: list[Any] = []
    fmt = data.get("format")
    if isinstance(fmt, dict):
        candidates.append(fmt.get("duration"))
    for stream in data.get("streams") or []:
        if isinstance(stream, dict):
            candidates.append(stream.get("duration"))

    for value in candidates:
        try:
            duration = float(value)
        except (TypeError, ValueError):
            continue
        if duration > 0:
            return duration
    return None
