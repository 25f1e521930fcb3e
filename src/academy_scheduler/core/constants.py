"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Sunday=0 ... Saturday=6, shared by the validator and the expander.
SUNDAY = 0
SATURDAY = 6
DAYS_PER_WEEK = 7

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 80
INSTRUCTOR_MIN_LENGTH = 3
INSTRUCTOR_MAX_LENGTH = 60
CAPACITY_MIN = 1
CAPACITY_MAX = 100

DEFAULT_GENERATION_WINDOW_DAYS = 35
DEFAULT_GENERATION_MAX_WORKERS = 4
DEFAULT_GENERATION_TIMEOUT_SECONDS = 30.0
