"""Technician scheduling."""

from .request_parser import parse_schedule_request
from .scheduler import (
    DEFAULT_TECHNICIANS,
    Interval,
    JobNotFoundError,
    NoAvailableSlotError,
    ScheduleConflictError,
    Scheduler,
    SchedulingError,
    overlaps,
)

__all__ = [
    "DEFAULT_TECHNICIANS",
    "Interval",
    "JobNotFoundError",
    "NoAvailableSlotError",
    "ScheduleConflictError",
    "Scheduler",
    "SchedulingError",
    "overlaps",
    "parse_schedule_request",
]
