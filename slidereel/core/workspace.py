"""
Per-item workspace for SlideReel.

A workspace is a uniquely named directory under the output directory that
holds every transient artifact of one content item: generated images,
synthesized audio, encoded segments and the concatenation manifest. File
names are qualified by slide index so concurrent renders never share a path.
"""

from __future__ import annotations

import asyncio
import shutil
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Literal

from loguru import logger

ArtifactKind = Literal["image", "audio", "segment"]

_ARTIFACT_NAMES: dict[str, tuple[str, str]] = {
    "image": ("image", ".jpg"),
    "audio": ("audio", ".mp3"),
    "segment": ("slide", ".mp4"),
}

MANIFEST_NAME = "files.txt"


def _millis() -> int:
    return time.time_ns() // 1_000_000


class Workspace:
    """Ephemeral directory owned by one content item's processing attempt."""

    def __init__(self, root: Path, unique_id: str, item_index: int) -> None:
        self.unique_id = unique_id
        self.item_index = item_index
        self.path = Path(root) / f"temp_{unique_id}"
        self.released = False
        self.failed = False

    @classmethod
    def acquire(cls, root: Path, item_index: int) -> Workspace:
        """Create a fresh directory for ``item_index``; never reuses an existing one."""
        root = Path(root)
        root.mkdir(parents=True, exist_ok=True)
        token = _millis()
        while True:
            workspace = cls(root, f"content_{token}_{item_index}", item_index)
            try:
                workspace.path.mkdir(exist_ok=False)
            except FileExistsError:
                token += 1
                continue
            logger.debug(f"Acquired workspace {workspace.path}")
            return workspace

    @classmethod
    @asynccontextmanager
    async def scoped(
        cls, root: Path, item_index: int, keep_on_failure: bool = False
    ) -> AsyncIterator[Workspace]:
        workspace = cls.acquire(root, item_index)
        try:
            yield workspace
        except BaseException:
            workspace.failed = True
            raise
        finally:
            if workspace.failed and keep_on_failure:
                logger.warning(f"Keeping workspace of failed item: {workspace.path}")
            else:
                await workspace.release()

    def path_for(self, kind: ArtifactKind, slide_index: int) -> Path:
        if kind not in _ARTIFACT_NAMES:
            raise ValueError(f"Unknown artifact kind: {kind!r}")
        if slide_index < 0:
            raise ValueError(f"Slide index must be non-negative, got {slide_index}")
        prefix, suffix = _ARTIFACT_NAMES[kind]
        return self.path / f"{prefix}_{slide_index}{suffix}"

    def manifest_path(self) -> Path:
        return self.path / MANIFEST_NAME

    def mark_failed(self) -> None:
        self.failed = True

    async def release(self) -> None:
        if self.released:
            return
        await asyncio.to_thread(shutil.rmtree, self.path, ignore_errors=True)
        self.released = True
        logger.debug(f"Released workspace {self.path}")
