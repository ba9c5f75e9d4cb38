"""
Run orchestration for SlideReel.

Items are processed one at a time. Each eligible item walks an explicit state
machine (pending, planning, rendering, concatenating, completed) and lands in
``failed`` on any item-scoped error; a failed item keeps no ``video_name`` so
the next run picks it up again. Slides of one item are rendered concurrently
through a bounded pool.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from slidereel.configs.config import config
from slidereel.core.content_queue import ContentQueue
from slidereel.core.errors import EncodingError, ItemError
from slidereel.core.models import (
    ContentItem,
    ItemOutcome,
    ItemState,
    OutcomeStatus,
    RenderedSlide,
    RunReport,
    SlidePlan,
)
from slidereel.core.workspace import Workspace
from slidereel.planning import SlidePlanner

from .concatenator import Concatenator
from .pool import BoundedPool
from .renderer import SlideRenderer

_TRANSITIONS: dict[ItemState, frozenset[ItemState]] = {
    ItemState.PENDING: frozenset({ItemState.PLANNING, ItemState.FAILED}),
    ItemState.PLANNING: frozenset({ItemState.RENDERING, ItemState.FAILED}),
    ItemState.RENDERING: frozenset({ItemState.CONCATENATING, ItemState.FAILED}),
    ItemState.CONCATENATING: frozenset({ItemState.COMPLETED, ItemState.FAILED}),
    ItemState.COMPLETED: frozenset(),
    ItemState.FAILED: frozenset(),
}


class ItemRun:
    """Tracks the state of one content item through the pipeline."""

    def __init__(self, index: int) -> None:
        self.index = index
        self.state = ItemState.PENDING
        self.history: list[ItemState] = [ItemState.PENDING]

    def advance(self, new_state: ItemState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Illegal transition for item {self.index}: "
                f"{self.state.value} -> {new_state.value}"
            )
        logger.debug(f"Item {self.index}: {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)


class Orchestrator:
    """Drives every content item of the queue end to end."""

    def __init__(
        self,
        queue: ContentQueue,
        planner: SlidePlanner,
        renderer: SlideRenderer,
        concatenator: Concatenator,
        output_dir: Path | None = None,
        concurrency: int | None = None,
        keep_failed_workspaces: bool | None = None,
    ) -> None:
        self.queue = queue
        self.planner = planner
        self.renderer = renderer
        self.concatenator = concatenator
        self.output_dir = Path(output_dir) if output_dir else config.output_dir
        self.pool: BoundedPool = BoundedPool(
            concurrency if concurrency is not None else config.render_concurrency
        )
        self.keep_failed_workspaces = (
            config.keep_failed_workspaces
            if keep_failed_workspaces is None
            else keep_failed_workspaces
        )

    async def run(self) -> RunReport:
        items = await self.queue.load()
        self.output_dir.mkdir(parents=True, exist_ok=True)

        report = RunReport()
        for index, item in enumerate(items):
            outcome = await self.process_item(index, item)
            report.add(outcome)
            if outcome.status is OutcomeStatus.COMPLETED:
                # Persist per item so an interrupted run loses at most one video
                await self.queue.persist()

        logger.info(
            f"Run finished: {report.succeeded} succeeded, {report.failed} failed, "
            f"{report.skipped} skipped"
        )
        return report

    async def process_item(self, index: int, item: ContentItem) -> ItemOutcome:
        label = f"content {index + 1}"
        if item.is_complete:
            logger.info(f"Skipping {label}, video already generated: {item.video_name}")
            return ItemOutcome(index, OutcomeStatus.SKIPPED, item.video_name, reason="complete")
        if not self.queue.is_eligible(item):
            logger.info(f"Skipping {label}, no text, image_url or video_url")
            return ItemOutcome(index, OutcomeStatus.SKIPPED, reason="empty")

        run = ItemRun(index)
        logger.info(f"Processing {label}")
        async with Workspace.scoped(
            self.output_dir, index, keep_on_failure=self.keep_failed_workspaces
        ) as workspace:
            try:
                video_name = await self._drive(run, item, workspace)
            except ItemError as e:
                failed_in = run.state
                run.advance(ItemState.FAILED)
                workspace.mark_failed()
                logger.error(f"Failed {label} during {failed_in.value}: {e}")
                return ItemOutcome(
                    index,
                    OutcomeStatus.FAILED,
                    failed_state=failed_in,
                    error=str(e),
                )

        logger.info(f"Video created for {label}: {video_name}")
        return ItemOutcome(index, OutcomeStatus.COMPLETED, video_name)

    async def _drive(self, run: ItemRun, item: ContentItem, workspace: Workspace) -> str:
        run.advance(ItemState.PLANNING)
        plan = await self.planner.plan(item.text, item.image_url, item.video_url)

        run.advance(ItemState.RENDERING)
        rendered = await self._render_all(plan, workspace)

        run.advance(ItemState.CONCATENATING)
        output_path = self.output_dir / f"{workspace.unique_id}.mp4"
        await self.concatenator.concatenate(rendered, workspace, output_path)

        run.advance(ItemState.COMPLETED)
        self.queue.mark_complete(run.index, output_path.name)
        return output_path.name

    async def _render_all(
        self, plan: SlidePlan, workspace: Workspace
    ) -> list[RenderedSlide]:
        async def _render(position: int) -> RenderedSlide:
            return await self.renderer.render(plan[position], position, workspace)

        rendered = await self.pool.map(_render, list(range(len(plan))))
        rendered.sort(key=lambda r: r.index)

        expected = list(range(len(plan)))
        actual = [r.index for r in rendered]
        if actual != expected:
            raise EncodingError(
                "encode",
                f"Rendered slide indices {actual} do not match plan indices {expected}",
            )
        return rendered
