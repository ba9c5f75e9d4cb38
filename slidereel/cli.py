"""Command line entry point for SlideReel.

``slidereel run`` (the default command) renders every pending item of the
content store and prints a per-item summary. Individual item failures do not
change the exit status; a corrupt store or an unexpected error does.
"""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from slidereel.audio import AudioGenerator
from slidereel.configs.config import config
from slidereel.configs.logging_config import setup_logging
from slidereel.core.content_queue import ContentQueue
from slidereel.core.errors import StoreCorruptError
from slidereel.core.models import OutcomeStatus, RunReport
from slidereel.image import ImageGenerator
from slidereel.pipeline import Concatenator, Orchestrator, SlideRenderer
from slidereel.planning import SlidePlanner
from slidereel.video import FFmpegEncoder

EXIT_OK = 0
EXIT_FAILURE = 1

_STATUS_STYLES = {
    OutcomeStatus.COMPLETED: ("DONE", "bold green"),
    OutcomeStatus.FAILED: ("FAILED", "bold red"),
    OutcomeStatus.SKIPPED: ("SKIPPED", "dim"),
}


@lru_cache(maxsize=1)
def get_console() -> Console:
    """Return a shared stdout console instance."""
    return Console()


def status_label(status: OutcomeStatus) -> Text:
    label, style = _STATUS_STYLES[status]
    text = Text(f"[{label}]")
    text.stylize(style)
    return text


def _add_run_options(target: argparse.ArgumentParser, default: object) -> None:
    target.add_argument(
        "--store", type=Path, default=default, help="Path to the content JSON store"
    )
    target.add_argument(
        "--output-dir", type=Path, default=default, help="Directory for final videos"
    )
    target.add_argument(
        "--concurrency",
        type=int,
        default=default,
        help="Maximum slide renders in flight per item",
    )
    target.add_argument(
        "--keep-failed-workspaces",
        action="store_true",
        default=default,
        help="Keep the temp directory of failed items for debugging",
    )
    target.add_argument(
        "--log-level", default=default, help="Log level (INFO, DEBUG, ...)"
    )


def build_parser() -> argparse.ArgumentParser:
    # Options are accepted before or after ``run``; the subcommand copy must
    # not clobber values given before it.
    common = argparse.ArgumentParser(add_help=False)
    _add_run_options(common, argparse.SUPPRESS)

    parser = argparse.ArgumentParser(
        prog="slidereel",
        description="Render narrated vertical slide videos for a content store.",
    )
    _add_run_options(parser, None)
    sub = parser.add_subparsers(dest="command")
    sub.add_parser(
        "run", parents=[common], help="Process every pending content item (default)"
    )
    return parser


def build_orchestrator(args: argparse.Namespace) -> Orchestrator:
    encoder = FFmpegEncoder()
    return Orchestrator(
        queue=ContentQueue(args.store or config.store_path),
        planner=SlidePlanner(),
        renderer=SlideRenderer(ImageGenerator(), AudioGenerator(), encoder),
        concatenator=Concatenator(encoder),
        output_dir=args.output_dir or config.output_dir,
        concurrency=args.concurrency,
        keep_failed_workspaces=args.keep_failed_workspaces,
    )


def print_report(report: RunReport, console: Console | None = None) -> None:
    console = console or get_console()
    table = Table(title="SlideReel run")
    table.add_column("#", justify="right")
    table.add_column("Status")
    table.add_column("Detail")
    for outcome in report.outcomes:
        if outcome.status is OutcomeStatus.FAILED:
            state = outcome.failed_state.value if outcome.failed_state else "?"
            detail = f"{state}: {outcome.error}"
        elif outcome.status is OutcomeStatus.SKIPPED and outcome.reason == "empty":
            detail = "no source content"
        else:
            detail = outcome.video_name or ""
        table.add_row(str(outcome.index + 1), status_label(outcome.status), Text(detail))
    console.print(table)
    console.print(
        f"[bold green]{report.succeeded} succeeded[/], "
        f"[bold red]{report.failed} failed[/], "
        f"[dim]{report.skipped} skipped[/]"
    )


def cmd_run(args: argparse.Namespace) -> int:
    if args.concurrency is not None and args.concurrency < 1:
        get_console().print("[bold red]--concurrency must be at least 1[/]")
        return EXIT_FAILURE
    try:
        report = asyncio.run(build_orchestrator(args).run())
    except StoreCorruptError as exc:
        logger.error(f"Content store is unusable: {exc}")
        get_console().print(f"[bold red]Content store is unusable:[/] {escape(str(exc))}")
        return EXIT_FAILURE
    except Exception:
        logger.exception("Run aborted by an unexpected error")
        return EXIT_FAILURE
    print_report(report)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level, enable_file_logging=bool(config.log_file))
    return cmd_run(args)


if __name__ == "__main__":
    raise SystemExit(main())
