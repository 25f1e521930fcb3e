"""Bulk materialization of series instances over a date window.

Every call is stateless: the target series and their existing dates are
read from storage at the start. Each series is an independent unit run in a
bounded thread pool; one series failing never blocks the others, and the
unique (series_id, class_date) key in storage is what keeps concurrent
callers from producing duplicates.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..common.logging import get_logger
from ..core.constants import DEFAULT_GENERATION_MAX_WORKERS
from ..core.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from ..series.expander import expand
from ..series.model import Series
from ..series.repository import SeriesRepository
from .model import GenerationResult, InstanceDraft, SeriesFailure
from .reconciler import reconcile
from .repository import ClassInstanceRepository

log = get_logger(__name__)


@dataclass
class _SeriesOutcome:
    series_id: int
    created: List[date] = field(default_factory=list)
    existing_count: int = 0
    failure: Optional[SeriesFailure] = None


class InstanceGenerator:
    def __init__(
        self,
        series: SeriesRepository,
        instances: ClassInstanceRepository,
        *,
        max_workers: int = DEFAULT_GENERATION_MAX_WORKERS,
        default_timeout: Optional[float] = None,
    ):
        self._series = series
        self._instances = instances
        self._max_workers = max(1, int(max_workers))
        self._default_timeout = default_timeout

    def generate(
        self,
        *,
        window_start: date,
        window_end: date,
        series_id: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """Create every missing instance in [window_start, window_end].

        With series_id only that series is considered (NotFoundError if it
        does not exist); otherwise all active series intersecting the window.
        Units still running when the timeout expires are reported as
        retryable failures and stop before their next create; the creates
        they already issued stay in place.
        """
        if window_start > window_end:
            raise ValidationError("window_start must be on or before window_end", field="window_end")

        targets = self._load_targets(window_start=window_start, window_end=window_end, series_id=series_id)
        outcomes = self._run(targets, window_start, window_end, timeout if timeout is not None else self._default_timeout)

        created: List[Tuple[int, date]] = []
        errors: List[SeriesFailure] = []
        existing_count = 0
        for outcome in sorted(outcomes, key=lambda o: o.series_id):
            created.extend((outcome.series_id, d) for d in outcome.created)
            existing_count += outcome.existing_count
            if outcome.failure:
                errors.append(outcome.failure)

        result = GenerationResult(
            window_start=window_start,
            window_end=window_end,
            created_count=len(created),
            existing_count=existing_count,
            series_processed=len(targets),
            created=tuple(created),
            errors=tuple(errors),
        )
        log.info(
            "generation.completed",
            window_start=str(window_start),
            window_end=str(window_end),
            series_id=series_id,
            series_processed=result.series_processed,
            created=result.created_count,
            existing=result.existing_count,
            failed_series=[e.series_id for e in errors],
        )
        return result

    def _load_targets(self, *, window_start: date, window_end: date, series_id: Optional[int]) -> Sequence[Series]:
        if series_id is None:
            return list(self._series.list_active_in_window(start=window_start, end=window_end))

        series = self._series.get_by_id(series_id)
        if not series:
            raise NotFoundError(f"Series {series_id} not found")
        if not series.active or not series.intersects(window_start, window_end):
            return []
        return [series]

    def _run(self, targets: Sequence[Series], start: date, end: date, timeout: Optional[float]) -> List[_SeriesOutcome]:
        if not targets:
            return []

        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(targets)),
            thread_name_prefix="generate",
        )
        stop = threading.Event()
        futures = {executor.submit(self._generate_series, s, start, end, stop): s for s in targets}
        try:
            done, not_done = wait(futures, timeout=timeout)
        finally:
            # Stragglers stop before their next create; never block past the deadline on them.
            stop.set()
            executor.shutdown(wait=False, cancel_futures=True)

        outcomes: List[_SeriesOutcome] = []
        for future in done:
            series = futures[future]
            try:
                outcomes.append(future.result())
            except Exception as e:
                log.exception("generation.series_crashed", series_id=series.series_id)
                failure = SeriesFailure(series_id=series.series_id, message=str(e) or type(e).__name__, retryable=False)
                outcomes.append(_SeriesOutcome(series_id=series.series_id, failure=failure))

        for future in not_done:
            series = futures[future]
            log.warning("generation.series_timed_out", series_id=series.series_id, timeout=timeout)
            failure = SeriesFailure(series_id=series.series_id, message="Timed out before completion")
            outcomes.append(_SeriesOutcome(series_id=series.series_id, failure=failure))

        return outcomes

    def _generate_series(self, series: Series, start: date, end: date, stop: threading.Event) -> _SeriesOutcome:
        outcome = _SeriesOutcome(series_id=series.series_id)

        # Snapshot of what exists; every create below is decided from it.
        try:
            existing = self._instances.list_dates_for_series(series_id=series.series_id, start=start, end=end)
        except StorageError as e:
            outcome.failure = SeriesFailure(series_id=series.series_id, message=str(e))
            log.warning("generation.series_failed", series_id=series.series_id, error=str(e))
            return outcome

        to_create = reconcile(series, start, end, existing)
        outcome.existing_count = len(expand(series, start, end)) - len(to_create)

        for class_date in to_create:
            if stop.is_set():
                outcome.failure = SeriesFailure(
                    series_id=series.series_id,
                    message="Timed out before completion",
                    failed_date=class_date,
                )
                log.warning("generation.series_stopped", series_id=series.series_id, next_date=str(class_date))
                return outcome
            try:
                self._instances.create(InstanceDraft.from_series(series, class_date))
            except ConflictError:
                # Another caller materialized it first.
                outcome.existing_count += 1
                continue
            except (StorageError, NotFoundError) as e:
                outcome.failure = SeriesFailure(
                    series_id=series.series_id,
                    message=str(e),
                    failed_date=class_date,
                    retryable=isinstance(e, StorageError),
                )
                log.warning(
                    "generation.series_failed",
                    series_id=series.series_id,
                    failed_date=str(class_date),
                    error=str(e),
                )
                return outcome
            outcome.created.append(class_date)

        log.debug(
            "generation.series_done",
            series_id=series.series_id,
            created=len(outcome.created),
            existing=outcome.existing_count,
        )
        return outcome
