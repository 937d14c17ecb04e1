"""Parallel ingestion of package archives."""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path

from pydantic import ConfigDict, Field
from pydantic.dataclasses import dataclass

from debfacts.archive import extract_control_map
from debfacts.builder import build_package
from debfacts.constants import IN_FLIGHT_FACTOR, WORKERS
from debfacts.errors import IngestError, MalformedArchiveError
from debfacts.facts import PACKAGE_RELATION, Fact, FactEmitter
from debfacts.models import Package

logger = logging.getLogger(__name__)

# Called with (processed, total); total is None when the path source is lazy.
# May be invoked from worker threads.
ProgressReporter = Callable[[int, int | None], None]


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class IngestFailure:
    path: Path
    error: IngestError


@dataclass
class IngestSummary:
    """What an operator needs to judge a run."""

    succeeded: int = 0
    failed: int = 0
    causes: list[str] = Field(default_factory=list)
    new_facts: list[Fact] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def processed(self) -> int:
        return self.succeeded + self.failed


@dataclass
class IngestResult:
    packages: list[Package] = Field(default_factory=list)
    failures: list[IngestFailure] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def processed(self) -> int:
        return len(self.packages) + len(self.failures)

    def summary(self) -> IngestSummary:
        return IngestSummary(
            succeeded=len(self.packages),
            failed=len(self.failures),
            causes=distinct_causes(self.failures),
            cancelled=self.cancelled,
        )


def distinct_causes(failures: Iterable[IngestFailure]) -> list[str]:
    """De-duplicated, sorted failure causes (error class and path-free reason)."""
    return sorted({failure.error.cause for failure in failures})


class ProgressCounter:
    """Monotonic counter shared by worker threads."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        return self._value

    def increment(self, report: ProgressReporter | None = None, total: int | None = None) -> int:
        """Bump the count, handing the new value to ``report`` while still locked.

        Reporters therefore see strictly increasing values even when several
        workers finish at once.
        """
        with self._lock:
            self._value += 1
            if report is not None:
                report(self._value, total)
            return self._value


def ingest_path(path: Path) -> Package | IngestFailure:
    """Extract, parse and build the record for one archive.

    Never raises for a bad archive: every failure comes back as an
    ``IngestFailure`` so one broken file cannot stop a run.
    """
    try:
        return build_package(extract_control_map(path))
    except IngestError as e:
        logger.warning(f"Skipping {path}: {e.cause}")
        return IngestFailure(path=path, error=e)
    except Exception as e:
        logger.exception(f"Unexpected error ingesting {path}")
        error = MalformedArchiveError(f"unexpected {type(e).__name__}: {e}")
        error.__cause__ = e
        return IngestFailure(path=path, error=error)


class IngestionPipeline:
    """Fans archive ingestion out over a bounded thread pool.

    Each archive is handled start to finish by one worker. At most
    ``workers * in_flight_factor`` archives are queued at a time, so paths are
    pulled from the scanner as capacity frees up and results can be streamed
    to a consumer without holding the whole corpus in memory.
    """

    def __init__(
        self,
        workers: int | None = None,
        progress: ProgressReporter | None = None,
        cancel_event: threading.Event | None = None,
        in_flight_factor: int = IN_FLIGHT_FACTOR,
    ):
        """Initialize the pipeline.

        Args:
            workers: Worker thread count. Defaults to the configured parallelism
            progress: Optional callback receiving (processed, total) after each archive
            cancel_event: Event that stops new archives from being started once set
            in_flight_factor: Queued archives allowed per worker
        """
        self.workers = max(1, workers or WORKERS)
        self.progress = progress
        self.cancel_event = cancel_event or threading.Event()
        self.max_in_flight = self.workers * max(1, in_flight_factor)
        self.counter = ProgressCounter()

    def cancel(self) -> None:
        """Stop starting new archives; those already running are allowed to finish."""
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def _process(self, path: Path, total: int | None) -> Package | IngestFailure:
        result = ingest_path(path)
        self.counter.increment(self.progress, total)
        return result

    def iter_results(self, paths: Iterable[Path], total: int | None = None) -> Iterator[Package | IngestFailure]:
        """Yield one result per archive in completion order.

        Args:
            paths: Archive paths, typically straight from ``scan_archives``
            total: Number of paths, if known, passed through to the progress callback

        Yields:
            A ``Package`` or an ``IngestFailure`` per path processed
        """
        self.counter = ProgressCounter()
        source = iter(paths)
        exhausted = False
        pending: set[Future] = set()

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="debfacts") as executor:
            while True:
                while not exhausted and len(pending) < self.max_in_flight and not self.cancelled:
                    try:
                        path = next(source)
                    except StopIteration:
                        exhausted = True
                        break
                    pending.add(executor.submit(self._process, path, total))

                if not pending:
                    break

                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    yield future.result()

        if self.cancelled and not exhausted:
            logger.warning(f"Ingestion cancelled after {self.counter.value} archives")

    def run(self, paths: Iterable[Path], total: int | None = None) -> IngestResult:
        """Ingest every path and collect all results in memory."""
        result = IngestResult()
        for item in self.iter_results(paths, total):
            if isinstance(item, IngestFailure):
                result.failures.append(item)
            else:
                result.packages.append(item)
        result.cancelled = self.cancelled
        logger.info(f"Ingested {len(result.packages)} packages, {len(result.failures)} failures")
        return result

    def emit(
        self,
        paths: Iterable[Path],
        emitter: FactEmitter,
        total: int | None = None,
        relation: str = PACKAGE_RELATION,
    ) -> IngestSummary:
        """Stream successful records into ``emitter`` within a single transaction.

        Records are inserted as soon as they complete. Failures are collected
        for the summary only. If inserting fails the transaction is rolled back
        and the error propagates.

        Args:
            paths: Archive paths to ingest
            emitter: Transactional fact sink
            total: Number of paths, if known
            relation: Base relation the packages are inserted into

        Returns:
            Run summary including the facts the emitter reported as new
        """
        summary = IngestSummary()
        failures: list[IngestFailure] = []

        emitter.begin()
        try:
            for item in self.iter_results(paths, total):
                if isinstance(item, IngestFailure):
                    failures.append(item)
                    continue
                emitter.insert(relation, item)
                summary.succeeded += 1
        except BaseException:
            logger.error("Aborting fact transaction")
            emitter.rollback()
            raise
        summary.new_facts = emitter.commit()

        summary.failed = len(failures)
        summary.causes = distinct_causes(failures)
        summary.cancelled = self.cancelled
        logger.info(
            f"Emitted {summary.succeeded} packages ({len(summary.new_facts)} new facts), "
            f"{summary.failed} failures"
        )
        return summary
