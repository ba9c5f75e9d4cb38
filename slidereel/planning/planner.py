"""
Slide planning for SlideReel.

Turns the raw inputs of one content item into an ordered plan of 4 to 6
narrated slides by asking the text-planning model for a JSON object and
validating what comes back.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

from loguru import logger
from pydantic import ValidationError

from slidereel.configs.config import config
from slidereel.core.errors import PlanningError
from slidereel.core.models import MAX_SLIDES, MIN_SLIDES, SlidePlan
from slidereel.llm import chat_completion

PLANNER_SYSTEM_PROMPT = (
    "You are an expert content creator making engaging short-form educational "
    "videos. You always answer with a single JSON object."
)

PLAN_PROMPT_TEMPLATE = """
Generate {min_slides} to {max_slides} engaging slides based on the content below.
Each slide must include:
- heading: a catchy, educational title (max 10 words)
- description: a punchy one-liner that explains or teases the concept
- imagePrompt: a descriptive, imaginative prompt for an image generation model (portrait, no text)
- speakText: the voiceover script for this slide (30-60 words)

Requirements:
- All content must be in English.
- Keep slides concise and visually rich.
- The speakText of consecutive slides must read as ONE continuous story: each
  slide picks up where the previous one stopped, so the voiceover flows
  naturally from the first slide to the last.

Input:
Text: {text}
Image URL: {image_url}
Video URL: {video_url}

Respond with a JSON object of this exact shape:
{{
  "slides": [
    {{
      "heading": "Catchy Title",
      "description": "Engaging one-liner",
      "imagePrompt": "Detailed image prompt",
      "speakText": "Voiceover that continues the story"
    }}
  ]
}}
"""

ChatFn = Callable[..., str]


def _or_na(value: str | None) -> str:
    value = (value or "").strip()
    return value or "N/A"


class SlidePlanner:
    """Builds a slide plan for one content item via the text-planning model."""

    def __init__(self, model: str | None = None, chat_fn: ChatFn | None = None) -> None:
        self.model = model or config.planner_model
        self._chat = chat_fn or chat_completion

    @staticmethod
    def build_prompt(
        text: str | None, image_url: str | None, video_url: str | None
    ) -> str:
        return PLAN_PROMPT_TEMPLATE.format(
            min_slides=MIN_SLIDES,
            max_slides=MAX_SLIDES,
            text=_or_na(text),
            image_url=_or_na(image_url),
            video_url=_or_na(video_url),
        ).strip()

    async def plan(
        self, text: str | None, image_url: str | None, video_url: str | None
    ) -> SlidePlan:
        prompt = self.build_prompt(text, image_url, video_url)
        logger.info(f"Requesting slide plan from model={self.model}")
        try:
            content = await asyncio.to_thread(
                self._chat,
                messages=[
                    {"role": "system", "content": PLANNER_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                model=self.model,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise PlanningError(f"Text-planning request failed: {e}") from e

        plan = self.parse_response(content)
        logger.info(f"Received slide plan with {len(plan)} slide(s)")
        for i, slide in enumerate(plan):
            logger.debug(f"Slide {i}: {slide.heading}")
        return plan

    @staticmethod
    def parse_response(content: str | None) -> SlidePlan:
        try:
            data: Any = json.loads(content or "")
        except json.JSONDecodeError as e:
            raise PlanningError(f"Planner response is not valid JSON: {e}") from e

        slides = data.get("slides") if isinstance(data, dict) else None
        if not isinstance(slides, list):
            raise PlanningError("Planner response has no 'slides' list")
        if not MIN_SLIDES <= len(slides) <= MAX_SLIDES:
            raise PlanningError(
                f"Planner returned {len(slides)} slide(s); expected {MIN_SLIDES}-{MAX_SLIDES}"
            )
        try:
            return SlidePlan.model_validate({"slides": slides})
        except ValidationError as e:
            raise PlanningError(f"Planner returned malformed slides: {e}") from e
