"""Scan a tree of .deb archives and load them into an in-memory fact store."""

import logging
import signal
from argparse import ArgumentParser
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from debfacts.constants import ARCHIVE_SUFFIX, LOG_LEVEL, WORKERS
from debfacts.facts import PACKAGE_RELATION, InMemoryFactStore
from debfacts.pipeline import IngestionPipeline, IngestSummary
from debfacts.scanner import scan_archives

logger = logging.getLogger(__name__)

parser = ArgumentParser(
    prog="debfacts",
    description="Extract package facts from every Debian binary package under a directory.",
)
parser.add_argument("root", type=Path, help="Directory to scan, e.g. a mirror's pool/ directory.")
parser.add_argument(
    "-w",
    "--workers",
    type=int,
    default=WORKERS,
    help=f"Number of worker threads. (default: {WORKERS})",
    dest="workers",
)
parser.add_argument(
    "-s",
    "--suffix",
    default=ARCHIVE_SUFFIX,
    help=f"Archive file suffix to look for. (default: {ARCHIVE_SUFFIX})",
    dest="suffix",
)
parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.", dest="verbose")
parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar.", dest="no_progress")


def setup_logging(level: int | str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )
    # UnrecognizedTagWarning goes through the warnings module
    logging.captureWarnings(True)


def print_summary(console: Console, summary: IngestSummary) -> None:
    console.print(f"[green]Succeeded:[/green] {summary.succeeded}")
    console.print(f"[red]Failed:[/red] {summary.failed}")
    if summary.causes:
        console.print("Distinct failure causes:")
        for cause in summary.causes:
            console.print(f"  - {cause}", markup=False)
    new_packages = sum(1 for fact in summary.new_facts if fact.relation == PACKAGE_RELATION)
    console.print(f"New facts: {len(summary.new_facts)} ({new_packages} packages)")
    if summary.cancelled:
        console.print("[yellow]Run was cancelled before all archives were processed.[/yellow]")


def main(argv: list[str] | None = None) -> int:
    args = parser.parse_args(argv)
    if not args.root.is_dir():
        parser.error(f"{args.root} is not a directory")

    setup_logging(logging.DEBUG if args.verbose else LOG_LEVEL)
    console = Console()

    paths = list(scan_archives(args.root, args.suffix))
    logger.info(f"Found {len(paths)} archives under {args.root}")

    store = InMemoryFactStore()
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        disable=args.no_progress,
    ) as progress:
        task = progress.add_task("Ingesting archives", total=len(paths))
        pipeline = IngestionPipeline(
            workers=args.workers,
            progress=lambda processed, _total: progress.update(task, completed=processed),
        )

        previous_handler = signal.signal(signal.SIGINT, lambda *_: pipeline.cancel())
        try:
            summary = pipeline.emit(paths, store, total=len(paths))
        finally:
            signal.signal(signal.SIGINT, previous_handler)

    print_summary(console, summary)
    return 1 if paths and summary.succeeded == 0 else 0


if __name__ == "__main__":
    raise SystemExit(main())
