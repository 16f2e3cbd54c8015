"""Availability, capacity and table allocation"""

from app.scheduling.hours import HoursWindow, CLOSED, resolve_hours
from app.scheduling.slots import generate_slots, iter_slot_starts, slot_interval
from app.scheduling.capacity import (
    GlobalCapacity,
    TableExclusive,
    can_admit,
    intervals_overlap,
)
from app.scheduling.tables import TableAssignment, TableConflict, assign_table
from app.scheduling.admission import Admission, RejectionReason, admit_reservation
from app.scheduling.migration import MigrationResult, migrate_reservations
from app.scheduling.errors import SchedulingError, InvalidTimeRangeError, InvalidHoursError

__all__ = [
    "HoursWindow",
    "CLOSED",
    "resolve_hours",
    "generate_slots",
    "iter_slot_starts",
    "slot_interval",
    "GlobalCapacity",
    "TableExclusive",
    "can_admit",
    "intervals_overlap",
    "TableAssignment",
    "TableConflict",
    "assign_table",
    "Admission",
    "RejectionReason",
    "admit_reservation",
    "MigrationResult",
    "migrate_reservations",
    "SchedulingError",
    "InvalidTimeRangeError",
    "InvalidHoursError",
]
