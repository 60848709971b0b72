"""
Shared constants used across multiple modules.
Single source of truth for weekday names and effort levels.
"""

# Indexed by UTC weekday with Sunday = 0 (matches dayOfWeek in the report)
WEEKDAY_NAMES = [
    "Sunday", "Monday", "Tuesday", "Wednesday",
    "Thursday", "Friday", "Saturday",
]

HIGH_EFFORT = "high"
DEFAULT_EFFORT = "medium"

UNKNOWN_COMPONENT_LABEL = "Unknown"
