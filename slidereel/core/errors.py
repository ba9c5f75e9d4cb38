"""
Error taxonomy for SlideReel.

``StoreCorruptError`` is fatal for a run. Everything deriving from
``ItemError`` is scoped to a single content item: the orchestrator marks the
item failed and moves on to the next one.
"""

from __future__ import annotations


class SlideReelError(Exception):
    """Base class for all SlideReel errors."""


class StoreCorruptError(SlideReelError):
    """Raised when the persisted content store cannot be read into the expected shape."""


class ItemError(SlideReelError):
    """Base class for failures that only affect the item being processed."""


class PlanningError(ItemError):
    """Raised when the text-planning collaborator does not yield a usable slide plan."""


class _StagedError(ItemError):
    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        self.detail = message
        super().__init__(f"[{stage}] {message}")


class MediaGenerationError(_StagedError):
    """Raised when image or speech generation fails (stage: ``image`` | ``audio``)."""


class EncodingError(_StagedError):
    """Raised when the encoder cannot probe or encode (stage: ``probe`` | ``encode`` | ``concat``)."""


class ConcatenationError(ItemError):
    """Raised when rendered segments cannot be joined into the final video."""
