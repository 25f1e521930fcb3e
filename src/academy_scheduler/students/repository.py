from __future__ import annotations

from typing import Protocol


class StudentRepository(Protocol):
    def exists(self, student_id: int) -> bool:
        raise NotImplementedError
