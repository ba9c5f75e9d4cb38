"""
Data models for SlideReel.

Pydantic models for the persisted content items and the planner output, plus
the small value types that flow through one pipeline run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_SLIDES = 4
MAX_SLIDES = 6


def _is_blank(value: str | None) -> bool:
    return not (value or "").strip()


class ContentItem(BaseModel):
    """One entry of the content store. Unknown fields are kept as extras."""

    model_config = ConfigDict(extra="allow")

    text: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    video_name: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.video_name)

    @property
    def has_source(self) -> bool:
        return not (_is_blank(self.text) and not self.image_url and not self.video_url)


class Slide(BaseModel):
    """A single narrated slide as returned by the planner."""

    model_config = ConfigDict(populate_by_name=True)

    heading: str = ""
    description: str = ""
    image_prompt: str = Field(alias="imagePrompt")
    speak_text: str = Field(alias="speakText")

    @field_validator("image_prompt", "speak_text")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class SlidePlan(BaseModel):
    """Ordered slides for one content item; order is the final video order."""

    slides: list[Slide] = Field(min_length=MIN_SLIDES, max_length=MAX_SLIDES)

    def __len__(self) -> int:
        return len(self.slides)

    def __iter__(self):  # type: ignore[override]
        return iter(self.slides)

    def __getitem__(self, index: int) -> Slide:
        return self.slides[index]


@dataclass(frozen=True)
class RenderedSlide:
    index: int
    segment_path: Path


class ItemState(str, Enum):
    PENDING = "pending"
    PLANNING = "planning"
    RENDERING = "rendering"
    CONCATENATING = "concatenating"
    COMPLETED = "completed"
    FAILED = "failed"


class OutcomeStatus(str, Enum):
    SKIPPED = "skipped"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ItemOutcome:
    index: int
    status: OutcomeStatus
    video_name: str | None = None
    failed_state: ItemState | None = None
    error: str | None = None
    reason: str | None = None


@dataclass
class RunReport:
    outcomes: list[ItemOutcome] = field(default_factory=list)

    def add(self, outcome: ItemOutcome) -> None:
        self.outcomes.append(outcome)

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def succeeded(self) -> int:
        return self._count(OutcomeStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)
