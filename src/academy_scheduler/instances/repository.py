from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence, Set

from .model import ClassInstance, InstanceDraft


class ClassInstanceRepository(Protocol):
    def get_by_id(self, instance_id: int) -> Optional[ClassInstance]:
        raise NotImplementedError

    def list_dates_for_series(self, *, series_id: int, start: date, end: date) -> Set[date]:
        """Dates already materialized for a series inside [start, end], any status."""

        raise NotImplementedError

    def list_cancellable(self, *, series_id: int, from_date: date) -> Sequence[ClassInstance]:
        """Instances dated on/after from_date that are neither completed nor cancelled."""

        raise NotImplementedError

    def create(self, draft: InstanceDraft) -> int:
        """Insert an instance. Returns instance_id.

        Raises ConflictError when (series_id, class_date) already exists; an
        existing row is never overwritten.
        """

        raise NotImplementedError

    def cancel_if_open(self, *, instance_id: int) -> bool:
        """Mark the instance cancelled unless it is already completed or cancelled.

        The status check and the write are one statement. Returns True only
        when a row actually changed.
        """

        raise NotImplementedError
