"""
Segment concatenation for SlideReel.

Writes the concat-demuxer manifest in slide order and joins the segments
without re-encoding. The join targets a ``.part`` file that is renamed into
place only on success.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

import aiofiles
from loguru import logger

from slidereel.core.errors import ConcatenationError, EncodingError
from slidereel.core.models import RenderedSlide
from slidereel.core.workspace import Workspace
from slidereel.video import FFmpegEncoder


def manifest_line(segment_path: Path) -> str:
    escaped = str(segment_path.resolve()).replace("'", "'\\''")
    return f"file '{escaped}'"


class Concatenator:
    def __init__(self, encoder: FFmpegEncoder) -> None:
        self.encoder = encoder

    async def concatenate(
        self,
        rendered: Iterable[RenderedSlide],
        workspace: Workspace,
        output_path: Path,
    ) -> Path:
        ordered = sorted(rendered, key=lambda r: r.index)
        if not ordered:
            raise ConcatenationError("No segments to concatenate")
        indices = [r.index for r in ordered]
        if len(set(indices)) != len(indices):
            raise ConcatenationError(f"Duplicate slide indices: {indices}")
        missing = [str(r.segment_path) for r in ordered if not r.segment_path.is_file()]
        if missing:
            raise ConcatenationError(f"Missing segment file(s): {', '.join(missing)}")

        manifest = workspace.manifest_path()
        content = "\n".join(manifest_line(r.segment_path) for r in ordered) + "\n"
        try:
            async with aiofiles.open(manifest, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            raise ConcatenationError(f"Cannot write concat manifest: {e}") from e
        logger.debug(f"Wrote concat manifest with {len(ordered)} entries: {manifest}")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        partial = output_path.with_name(f"{output_path.stem}.part{output_path.suffix}")
        try:
            await self.encoder.concatenate(manifest, partial)
            os.replace(partial, output_path)
        except EncodingError as e:
            raise ConcatenationError(f"Join failed: {e.detail}") from e
        except OSError as e:
            raise ConcatenationError(f"Cannot move joined video into place: {e}") from e
        finally:
            partial.unlink(missing_ok=True)

        logger.info(f"Concatenated {len(ordered)} segment(s) into {output_path}")
        return output_path
