"""
Core package for SlideReel: data model, errors, content queue and workspace.
"""

from .content_queue import ContentQueue
from .errors import (
    ConcatenationError,
    EncodingError,
    ItemError,
    MediaGenerationError,
    PlanningError,
    SlideReelError,
    StoreCorruptError,
)
from .models import ContentItem, RenderedSlide, Slide, SlidePlan
from .workspace import Workspace

__all__ = [
    "ConcatenationError",
    "ContentItem",
    "ContentQueue",
    "EncodingError",
    "ItemError",
    "MediaGenerationError",
    "PlanningError",
    "RenderedSlide",
    "Slide",
    "SlidePlan",
    "SlideReelError",
    "StoreCorruptError",
    "Workspace",
]
