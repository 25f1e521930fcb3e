from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Audience a class is meant for."""

    CHILD = "child"
    ADULT = "adult"
    ALL = "all"


class ClassType(str, Enum):
    GROUP = "group"
    INDIVIDUAL = "individual"


class InstanceStatus(str, Enum):
    """Lifecycle of a dated class instance."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Instances in these states are left alone by cascade-cancel.
FINAL_INSTANCE_STATUSES = (InstanceStatus.COMPLETED, InstanceStatus.CANCELLED)


class AttendanceStatus(str, Enum):
    """Presence state of one student in one class instance."""

    SCHEDULED = "scheduled"
    PRESENT = "present"
    ABSENT = "absent"
    CANCELLED = "cancelled"


class CancelScope(str, Enum):
    SINGLE = "single"
    FUTURE = "future"


class Ordering(str, Enum):
    """Result of comparing two dates or two times of day."""

    BEFORE = "before"
    EQUAL = "equal"
    AFTER = "after"
