"""Scheduling errors

Only malformed input raises. Capacity and table conflicts are ordinary
outcomes and come back as return values.
"""


class SchedulingError(ValueError):
    """Base class for invalid scheduling input"""


class InvalidTimeRangeError(SchedulingError):
    """A reservation interval whose end is not after its start"""

    def __init__(self, time_from, time_to):
        self.time_from = time_from
        self.time_to = time_to
        super().__init__("End time must be after start time")


class InvalidHoursError(SchedulingError):
    """Malformed opening hours or slot parameters"""
