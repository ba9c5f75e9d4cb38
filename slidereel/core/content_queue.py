"""
Persisted content queue for SlideReel.

The store is a JSON array of content items. Records are kept as loaded so
that writing back preserves field order and any fields this package does not
know about; only ``video_name`` is ever added.
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import aiofiles
from loguru import logger
from pydantic import ValidationError

from .errors import StoreCorruptError
from .models import ContentItem


class ContentQueue:
    """Loads, tracks and persists completion markers for the content store."""

    def __init__(self, store_path: Path) -> None:
        self.store_path = Path(store_path)
        self._records: list[dict[str, Any]] = []
        self._items: list[ContentItem] = []

    @property
    def items(self) -> list[ContentItem]:
        return list(self._items)

    async def load(self) -> list[ContentItem]:
        try:
            async with aiofiles.open(self.store_path, encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError as e:
            raise StoreCorruptError(f"Content store not found: {self.store_path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StoreCorruptError(
                f"Content store unreadable: {self.store_path}: {e}"
            ) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreCorruptError(f"Content store is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise StoreCorruptError(
                f"Content store must be a JSON array, got {type(data).__name__}"
            )

        items: list[ContentItem] = []
        for position, record in enumerate(data):
            if not isinstance(record, dict):
                raise StoreCorruptError(
                    f"Content item {position} must be an object, got {type(record).__name__}"
                )
            try:
                items.append(ContentItem.model_validate(record))
            except ValidationError as e:
                raise StoreCorruptError(
                    f"Content item {position} has an unexpected shape: {e}"
                ) from e

        self._records = data
        self._items = items
        logger.info(f"Loaded {len(items)} content item(s) from {self.store_path}")
        return self.items

    @staticmethod
    def is_eligible(item: ContentItem) -> bool:
        return not item.is_complete and item.has_source

    def mark_complete(self, index: int, name: str) -> ContentItem:
        if not 0 <= index < len(self._items):
            raise IndexError(f"No content item at position {index}")
        if not name:
            raise ValueError("video_name must not be empty")
        current = self._items[index]
        if current.is_complete:
            raise ValueError(
                f"Content item {index} already has video_name={current.video_name!r}"
            )
        updated = current.model_copy(update={"video_name": name})
        self._items[index] = updated
        self._records[index]["video_name"] = name
        return updated

    def _merge_records(self, items: Sequence[ContentItem]) -> list[dict[str, Any]]:
        if len(items) != len(self._records):
            raise ValueError(
                f"Cannot persist {len(items)} item(s) over a store of {len(self._records)}"
            )
        merged: list[dict[str, Any]] = []
        for record, item in zip(self._records, items, strict=True):
            out = dict(record)
            if item.video_name and out.get("video_name") != item.video_name:
                if out.get("video_name"):
                    raise ValueError(
                        f"Refusing to overwrite video_name={out['video_name']!r}"
                    )
                out["video_name"] = item.video_name
            merged.append(out)
        return merged

    async def persist(self, items: Sequence[ContentItem] | None = None) -> None:
        if items is not None:
            records = self._merge_records(items)
            self._items = list(items)
        else:
            records = self._merge_records(self._items)
        payload = json.dumps(records, indent=2, ensure_ascii=False)

        tmp_path = self.store_path.with_name(f".{self.store_path.name}.tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
                await f.flush()
                await asyncio.to_thread(os.fsync, f.fileno())
            await asyncio.to_thread(os.replace, tmp_path, self.store_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        self._records = records
        logger.info(f"Persisted {len(records)} content item(s) to {self.store_path}")
