from __future__ import annotations

import threading
import time
from datetime import date

import pytest

from academy_scheduler.core.enums import InstanceStatus
from academy_scheduler.core.exceptions import NotFoundError, ValidationError
from academy_scheduler.instances.generator import InstanceGenerator
from academy_scheduler.instances.model import InstanceDraft

JAN_8 = date(2024, 1, 8)
JAN_29 = date(2024, 1, 29)


def test_generates_tuesdays_with_series_snapshot(series_repo, instances_repo, make_series):
    series_repo.add(make_series(series_id=1, weekday=2))
    generator = InstanceGenerator(series_repo, instances_repo)

    result = generator.generate(window_start=JAN_8, window_end=JAN_29)

    assert result.ok
    assert result.created_count == 3
    assert result.existing_count == 0
    assert result.series_processed == 1
    assert result.created == ((1, date(2024, 1, 9)), (1, date(2024, 1, 16)), (1, date(2024, 1, 23)))

    first = instances_repo.all()[0]
    assert first.series_id == 1
    assert first.title == "Kids Jiu-Jitsu"
    assert (first.start_time, first.end_time) == ("10:00", "11:00")
    assert first.capacity == 20
    assert first.status == InstanceStatus.SCHEDULED


def test_second_run_creates_nothing(series_repo, instances_repo, make_series):
    series_repo.add(make_series(series_id=1))
    series_repo.add(make_series(series_id=2, weekday=4))
    generator = InstanceGenerator(series_repo, instances_repo)

    first = generator.generate(window_start=JAN_8, window_end=JAN_29)
    snapshot = instances_repo.all()
    calls_after_first = instances_repo.create_calls
    second = generator.generate(window_start=JAN_8, window_end=JAN_29)

    assert first.created_count == 6
    assert second.created_count == 0
    assert second.existing_count == 6
    assert instances_repo.all() == snapshot
    assert instances_repo.create_calls == calls_after_first


def test_already_materialized_date_is_not_recreated_even_if_cancelled(series_repo, instances_repo, make_series):
    series = series_repo.add(make_series(series_id=1))
    existing_id = instances_repo.create(InstanceDraft.from_series(series, date(2024, 1, 9)))
    instances_repo.set_status(instance_id=existing_id, status=InstanceStatus.CANCELLED)

    result = InstanceGenerator(series_repo, instances_repo).generate(window_start=JAN_8, window_end=JAN_29)

    assert [d for _, d in result.created] == [date(2024, 1, 16), date(2024, 1, 23)]
    assert result.existing_count == 1
    assert instances_repo.get_by_id(existing_id).status == InstanceStatus.CANCELLED


def test_series_pairs_stay_unique(series_repo, instances_repo, make_series):
    series_repo.add(make_series(series_id=1))
    generator = InstanceGenerator(series_repo, instances_repo)
    for _ in range(3):
        generator.generate(window_start=date(2024, 1, 1), window_end=date(2024, 3, 31))

    pairs = [(i.series_id, i.class_date) for i in instances_repo.all()]
    assert len(pairs) == len(set(pairs))


def test_failing_series_does_not_block_siblings(series_repo, instances_repo, make_series):
    series_repo.add(make_series(series_id=1, weekday=1))
    series_repo.add(make_series(series_id=2, weekday=2))
    series_repo.add(make_series(series_id=3, weekday=3))
    instances_repo.fail_create_for_series.add(2)

    result = InstanceGenerator(series_repo, instances_repo, max_workers=3).generate(
        window_start=JAN_8, window_end=JAN_29
    )

    assert not result.ok
    assert result.series_processed == 3
    assert result.created_count == 7
    assert {sid for sid, _ in result.created} == {1, 3}
    assert len(result.errors) == 1
    failure = result.errors[0]
    assert failure.series_id == 2
    assert failure.failed_date == date(2024, 1, 9)
    assert failure.retryable


def test_output_is_ordered_by_series_then_date(series_repo, instances_repo, make_series):
    series_repo.add(make_series(series_id=7, weekday=0))
    series_repo.add(make_series(series_id=3, weekday=6))

    result = InstanceGenerator(series_repo, instances_repo, max_workers=2).generate(
        window_start=JAN_8, window_end=JAN_29
    )

    assert list(result.created) == sorted(result.created)
    assert result.created[0][0] == 3


def test_only_the_requested_series_is_generated(series_repo, instances_repo, make_series):
    series_repo.add(make_series(series_id=1))
    series_repo.add(make_series(series_id=2, weekday=5))

    result = InstanceGenerator(series_repo, instances_repo).generate(
        window_start=JAN_8, window_end=JAN_29, series_id=2
    )

    assert {sid for sid, _ in result.created} == {2}
    assert result.series_processed == 1


def test_unknown_series_is_not_found(series_repo, instances_repo):
    with pytest.raises(NotFoundError):
        InstanceGenerator(series_repo, instances_repo).generate(window_start=JAN_8, window_end=JAN_29, series_id=99)


def test_inactive_or_out_of_window_series_is_skipped(series_repo, instances_repo, make_series):
    series_repo.add(make_series(series_id=1, active=False))
    series_repo.add(make_series(series_id=2, active_from=date(2024, 6, 1)))
    generator = InstanceGenerator(series_repo, instances_repo)

    assert generator.generate(window_start=JAN_8, window_end=JAN_29).series_processed == 0
    assert generator.generate(window_start=JAN_8, window_end=JAN_29, series_id=1).created_count == 0
    assert instances_repo.all() == []


def test_retired_series_is_not_generated_past_its_end(series_repo, instances_repo, make_series):
    series_repo.add(make_series(series_id=1, active_until=date(2024, 1, 16)))

    result = InstanceGenerator(series_repo, instances_repo).generate(window_start=JAN_8, window_end=JAN_29)

    assert [d for _, d in result.created] == [date(2024, 1, 9), date(2024, 1, 16)]


def test_inverted_window_is_rejected(series_repo, instances_repo):
    with pytest.raises(ValidationError):
        InstanceGenerator(series_repo, instances_repo).generate(window_start=JAN_29, window_end=JAN_8)


def test_lost_insert_race_counts_as_existing(series_repo, instances_repo, make_series):
    series = series_repo.add(make_series(series_id=1))
    original_list = instances_repo.list_dates_for_series

    def stale_snapshot(**kwargs):
        dates = original_list(**kwargs)
        # Another caller inserts Jan 16 right after our read.
        instances_repo.create(InstanceDraft.from_series(series, date(2024, 1, 16)))
        return dates

    instances_repo.list_dates_for_series = stale_snapshot

    result = InstanceGenerator(series_repo, instances_repo).generate(window_start=JAN_8, window_end=JAN_29)

    assert result.ok
    assert result.created_count == 2
    assert result.existing_count == 1
    assert len(instances_repo.all()) == 3


def test_concurrent_generation_never_duplicates(series_repo, instances_repo, make_series):
    for sid in range(1, 5):
        series_repo.add(make_series(series_id=sid, weekday=sid))
    generator = InstanceGenerator(series_repo, instances_repo, max_workers=4)
    results = []

    def run():
        results.append(generator.generate(window_start=date(2024, 1, 1), window_end=date(2024, 4, 30)))

    threads = [threading.Thread(target=run) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    pairs = [(i.series_id, i.class_date) for i in instances_repo.all()]
    assert len(pairs) == len(set(pairs))
    assert sum(r.created_count for r in results) == len(pairs)
    assert all(r.ok for r in results)


def test_unfinished_series_are_reported_on_timeout(series_repo, instances_repo, make_series):
    series_repo.add(make_series(series_id=1))
    series_repo.add(make_series(series_id=2))
    release = threading.Event()
    resumed = threading.Event()
    original_list = instances_repo.list_dates_for_series

    def slow_for_series_2(*, series_id, start, end):
        if series_id == 2:
            release.wait(5)
            resumed.set()
        return original_list(series_id=series_id, start=start, end=end)

    instances_repo.list_dates_for_series = slow_for_series_2
    try:
        result = InstanceGenerator(series_repo, instances_repo, max_workers=2).generate(
            window_start=JAN_8, window_end=JAN_29, timeout=0.5
        )
    finally:
        release.set()

    assert {sid for sid, _ in result.created} == {1}
    assert [e.series_id for e in result.errors] == [2]
    assert result.errors[0].retryable

    # The straggler resumes after the deadline and must not write anything.
    assert resumed.wait(5)
    time.sleep(0.2)
    assert [i for i in instances_repo.all() if i.series_id == 2] == []
    assert len(instances_repo.all()) == result.created_count
