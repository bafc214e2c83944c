"""Scheduler - first-fit technician assignment with overlap detection.

The job registry (a Repository) is owned by the Scheduler. Slot search and
job insertion happen under one lock so two concurrent requests can never
claim the same technician window.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any

from ..clients.service import ClientService
from ..models.base import utc_now
from ..models.enums import JobStatus
from ..models.job import Job, ScheduleConflict, ScheduleRequest, TechnicianSchedule, TimeSlot
from ..storage.repository import InMemoryRepository, Repository
from ...observability.logger import get_logger
from .request_parser import job_title, parse_schedule_request

logger = get_logger(__name__)

DEFAULT_TECHNICIANS = ("John Smith", "Mike Johnson", "Sarah Davis", "Tom Wilson")
DEFAULT_START_HOUR = 9


class SchedulingError(Exception):
    """Base class for scheduling failures surfaced to callers."""


class NoAvailableSlotError(SchedulingError):
    """No technician is free on any preferred date."""


class ScheduleConflictError(SchedulingError):
    """The requested window overlaps another job of the same technician."""


class JobNotFoundError(SchedulingError):
    """No job with the given ID."""


@dataclass(frozen=True)
class Interval:
    """Half-open time interval [start, end)."""

    start: datetime
    end: datetime

    @classmethod
    def from_duration(cls, start: datetime, hours: float) -> "Interval":
        return cls(start, start + timedelta(hours=hours))


def overlaps(a: Interval, b: Interval) -> bool:
    """Back-to-back intervals (a.end == b.start) do not overlap."""
    return a.start < b.end and b.start < a.end


class Scheduler:
    """Assigns jobs to the roster and keeps their windows disjoint."""

    def __init__(
        self,
        repository: Repository[Job] | None = None,
        technicians: list[str] | tuple[str, ...] = DEFAULT_TECHNICIANS,
        clock: Callable[[], datetime] = utc_now,
        default_start_hour: int = DEFAULT_START_HOUR,
        clients: ClientService | None = None,
    ):
        """Initialize scheduler.

        Args:
            repository: Job registry (in-memory if omitted)
            technicians: Roster, in assignment preference order
            clock: Source of "now"
            default_start_hour: Start hour used for the default preferred date
            clients: Client records that new jobs are linked to, if any
        """
        if not technicians:
            raise ValueError("Technician roster must not be empty")
        self.repository = repository if repository is not None else InMemoryRepository()
        self.technicians = list(technicians)
        self.clock = clock
        self.default_start_hour = default_start_hour
        self.clients = clients
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        repository: Repository[Job] | None = None,
        clients: ClientService | None = None,
    ) -> "Scheduler":
        scheduling = config.get("scheduling", {})
        return cls(
            repository=repository,
            technicians=scheduling.get("technicians") or DEFAULT_TECHNICIANS,
            default_start_hour=scheduling.get("default_start_hour", DEFAULT_START_HOUR),
            clients=clients,
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def default_preferred_dates(self) -> list[datetime]:
        """Tomorrow at the default start hour."""
        tomorrow = self.clock() + timedelta(days=1)
        return [tomorrow.replace(hour=self.default_start_hour, minute=0, second=0, microsecond=0)]

    def create_from_description(self, text: str) -> Job:
        """Parse a free-text request and book the first feasible slot.

        Raises:
            NoAvailableSlotError: If no technician is free on the preferred date
        """
        request = parse_schedule_request(text, self.default_preferred_dates())
        return self.create_job(request)

    def create_job(self, request: ScheduleRequest) -> Job:
        """Book a structured request into the first feasible slot.

        Args:
            request: Structured schedule request

        Returns:
            The stored job

        Raises:
            NoAvailableSlotError: If no (date, technician) pair is free
        """
        preferred = [
            self._localize(d) for d in (request.preferred_dates or self.default_preferred_dates())
        ]

        with self._lock:
            slot = self.assign_slot(preferred, request.estimated_duration)
            if slot is None:
                logger.warning(
                    "no_available_slot",
                    preferred_dates=[d.isoformat() for d in preferred],
                    duration_hours=request.estimated_duration,
                )
                raise NoAvailableSlotError("No available time slots found for the requested dates")

            job = Job(
                title=job_title(request),
                location=request.location,
                scheduled_date=slot.date,
                technician=slot.technician,
                priority=request.priority,
                estimated_duration=request.estimated_duration,
                client_name=request.client_name,
                client_phone=request.client_phone,
                client_id=self._client_id(request),
                system_type=request.system_type,
                notes=request.notes,
            )
            self.repository.upsert(job)

        logger.info(
            "job_scheduled",
            job_id=job.id,
            technician=job.technician,
            scheduled_date=job.scheduled_date.isoformat(),
            duration_hours=job.estimated_duration,
            client_id=job.client_id,
        )
        return job

    def assign_slot(self, preferred_dates: list[datetime], duration_hours: float) -> TimeSlot | None:
        """First fit over dates (outer) then roster order (inner).

        Returns:
            The first free (date, technician) pair, or None
        """
        with self._lock:
            for start in map(self._localize, preferred_dates):
                for technician in self.technicians:
                    if self.is_technician_available(technician, start, duration_hours):
                        return TimeSlot(date=start, technician=technician)
        return None

    def is_technician_available(
        self,
        technician: str,
        start: datetime,
        duration_hours: float,
        exclude_job_id: str | None = None,
    ) -> bool:
        candidate = Interval.from_duration(self._localize(start), duration_hours)
        for job in self._active_jobs_for(technician):
            if job.id == exclude_job_id:
                continue
            if overlaps(candidate, self._window(job)):
                return False
        return True

    def check_conflicts(self, candidate: Job) -> list[ScheduleConflict]:
        """Every active job of the same technician overlapping the candidate."""
        window = self._window(candidate)
        return [
            ScheduleConflict(conflicting_job=job)
            for job in self._active_jobs_for(candidate.technician)
            if job.id != candidate.id and overlaps(window, self._window(job))
        ]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def get(self, job_id: str) -> Job:
        job = self.repository.get(job_id)
        if job is None:
            raise JobNotFoundError(f"Job not found: {job_id}")
        return job

    def update_status(self, job_id: str, status: JobStatus | str) -> Job:
        with self._lock:
            job = self.get(job_id)
            new_status = JobStatus(status)
            updated = job.model_copy(update={"status": new_status.value, "updated_at": self.clock()})
            self.repository.upsert(updated)

        logger.info("job_status_updated", job_id=job_id, status=new_status.value)
        return updated

    def reschedule(self, job_id: str, new_date: datetime) -> Job:
        """Move a job, keeping its technician and duration.

        Raises:
            JobNotFoundError: Unknown job ID
            ScheduleConflictError: The technician is busy in the new window;
                the stored job is left untouched
        """
        new_date = self._localize(new_date)
        with self._lock:
            job = self.get(job_id)
            if not self.is_technician_available(
                job.technician, new_date, job.estimated_duration, exclude_job_id=job.id
            ):
                logger.warning(
                    "reschedule_conflict",
                    job_id=job_id,
                    technician=job.technician,
                    requested=new_date.isoformat(),
                )
                raise ScheduleConflictError("Technician not available at the requested time")

            moved = job.model_copy(update={"scheduled_date": new_date, "updated_at": self.clock()})
            self.repository.upsert(moved)

        logger.info("job_rescheduled", job_id=job_id, scheduled_date=new_date.isoformat())
        return moved

    def delete(self, job_id: str) -> None:
        with self._lock:
            if not self.repository.delete(job_id):
                raise JobNotFoundError(f"Job not found: {job_id}")
        logger.info("job_deleted", job_id=job_id)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def jobs_for_date(self, day: date | datetime) -> list[Job]:
        """All jobs starting on the given calendar day, cancelled included."""
        target = day.date() if isinstance(day, datetime) else day
        return [job for job in self.repository.list() if job.scheduled_date.date() == target]

    def jobs_for_technician(self, technician: str) -> list[Job]:
        return self._active_jobs_for(technician)

    def daily_schedule(self, day: date | datetime) -> list[TechnicianSchedule]:
        """One entry per roster technician, in roster order."""
        jobs = sorted(self.jobs_for_date(day), key=lambda j: self._localize(j.scheduled_date))
        return [
            TechnicianSchedule(
                technician=technician,
                jobs=[job for job in jobs if job.technician == technician],
            )
            for technician in self.technicians
        ]

    def upcoming(self, days: int = 7) -> list[Job]:
        """Active jobs starting within [now, now + days], soonest first."""
        now = self.clock()
        horizon = now + timedelta(days=days)
        jobs = [
            job
            for job in self.repository.list()
            if job.is_active and now <= self._localize(job.scheduled_date) <= horizon
        ]
        return sorted(jobs, key=lambda j: self._localize(j.scheduled_date))

    def _localize(self, value: datetime) -> datetime:
        """Naive datetimes are read in the clock's timezone."""
        if value.tzinfo is not None:
            return value
        return value.replace(tzinfo=self.clock().tzinfo or timezone.utc)

    def _window(self, job: Job) -> Interval:
        return Interval.from_duration(self._localize(job.scheduled_date), job.estimated_duration)

    def _client_id(self, request: ScheduleRequest) -> str | None:
        if request.client_id or self.clients is None:
            return request.client_id
        client = self.clients.match(request.client_name, request.client_phone)
        return client.id if client else None

    def _active_jobs_for(self, technician: str) -> list[Job]:
        return [
            job
            for job in self.repository.list()
            if job.technician == technician and job.is_active
        ]
