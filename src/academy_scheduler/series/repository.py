from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Series, SeriesDraft


class SeriesRepository(Protocol):
    def get_by_id(self, series_id: int) -> Optional[Series]:
        raise NotImplementedError

    def create(self, draft: SeriesDraft) -> int:
        """Persist a new series. Returns series_id."""

        raise NotImplementedError

    def update(self, *, series_id: int, changes: Mapping[str, Any]) -> None:
        """Apply normalized field changes to an existing series."""

        raise NotImplementedError

    def list_active_in_window(self, *, start: date, end: date) -> Sequence[Series]:
        """Active series whose [active_from, active_until] intersects [start, end], by series_id."""

        raise NotImplementedError
