"""Scheduling models: jobs, requests, slots and conflicts."""

from datetime import datetime, timedelta

from pydantic import Field

from .base import FirespectBaseModel, TimestampSchema, generate_id
from .enums import (
    ConflictResolution,
    ConflictType,
    JobPriority,
    JobStatus,
    ServiceType,
    SystemType,
)


class Job(TimestampSchema):
    """A schedulable unit of technician work."""

    id: str = Field(default_factory=lambda: generate_id("job-"), description="Job ID")
    title: str = Field(..., description="Display title")
    location: str = Field(..., description="Site location")
    scheduled_date: datetime = Field(..., description="Start instant")
    status: JobStatus = Field(JobStatus.SCHEDULED, description="Lifecycle status")
    technician: str = Field(..., description="Assigned technician")
    notes: str | None = Field(None, description="Free-text notes")
    priority: JobPriority = Field(JobPriority.MEDIUM, description="Priority")
    estimated_duration: float = Field(..., gt=0.0, description="Duration in hours")
    client_name: str | None = Field(None, description="Client name")
    client_phone: str | None = Field(None, description="Client phone")
    client_id: str | None = Field(None, description="Linked client record")
    system_type: SystemType = Field(SystemType.SPRINKLER, description="System type")

    @property
    def end_time(self) -> datetime:
        return self.scheduled_date + timedelta(hours=self.estimated_duration)

    @property
    def is_active(self) -> bool:
        """Cancelled jobs never block a technician's calendar."""
        return self.status != JobStatus.CANCELLED


class ScheduleRequest(FirespectBaseModel):
    """Structured form of a spoken or typed job request."""

    service_type: ServiceType = Field(ServiceType.INSPECTION, description="Kind of work")
    location: str = Field("Unknown Location", description="Site location")
    client_name: str = Field("Unknown Client", description="Client name")
    client_phone: str | None = Field(None, description="Client phone")
    client_id: str | None = Field(None, description="Known client record, if already resolved")
    system_type: SystemType = Field(SystemType.SPRINKLER, description="System type")
    priority: JobPriority = Field(JobPriority.MEDIUM, description="Priority")
    preferred_dates: list[datetime] = Field(default_factory=list, description="Candidate start times")
    notes: str | None = Field(None, description="Original request text")
    estimated_duration: float = Field(2.0, gt=0.0, description="Duration in hours")


class TimeSlot(FirespectBaseModel):
    """A technician and start time with room for the job."""

    date: datetime
    technician: str


class ScheduleConflict(FirespectBaseModel):
    """An existing job that collides with a candidate job."""

    conflicting_job: Job
    conflict_type: ConflictType = ConflictType.OVERLAP
    resolution: ConflictResolution = ConflictResolution.RESCHEDULE


class TechnicianSchedule(FirespectBaseModel):
    """One technician's jobs for a day."""

    technician: str
    jobs: list[Job] = Field(default_factory=list)
