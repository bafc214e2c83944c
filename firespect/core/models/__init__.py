"""Firespect data models for inspections, compliance, scheduling and clients."""

from .base import FirespectBaseModel, TimestampSchema, generate_id, utc_now
from .client import (
    Client,
    ClientSearchFilters,
    ClientStats,
    EmergencyContact,
    PostalAddress,
    ServiceHistory,
)
from .compliance import AgentResponse, ComplianceCheck, FollowUpQuestion
from .enums import (
    ButterflyValveStatus,
    CheckStatus,
    ConflictResolution,
    ConflictType,
    ControlValveStatus,
    CorrosionLevel,
    GaugeType,
    Industry,
    InspectionStatus,
    JobPriority,
    JobStatus,
    OverallStatus,
    QuestionPriority,
    ServiceFrequency,
    ServiceType,
    SystemType,
)
from .inspection import GaugeReading, Inspection, ParsedInspection, RiserReading
from .job import Job, ScheduleConflict, ScheduleRequest, TechnicianSchedule, TimeSlot

__all__ = [
    # Base
    "FirespectBaseModel",
    "TimestampSchema",
    "generate_id",
    "utc_now",
    # Enums
    "ButterflyValveStatus",
    "CheckStatus",
    "ConflictResolution",
    "ConflictType",
    "ControlValveStatus",
    "CorrosionLevel",
    "GaugeType",
    "Industry",
    "InspectionStatus",
    "JobPriority",
    "JobStatus",
    "OverallStatus",
    "QuestionPriority",
    "ServiceFrequency",
    "ServiceType",
    "SystemType",
    # Inspection
    "GaugeReading",
    "RiserReading",
    "ParsedInspection",
    "Inspection",
    # Compliance
    "ComplianceCheck",
    "FollowUpQuestion",
    "AgentResponse",
    # Scheduling
    "Job",
    "ScheduleRequest",
    "TimeSlot",
    "ScheduleConflict",
    "TechnicianSchedule",
    # Clients
    "Client",
    "ClientSearchFilters",
    "ClientStats",
    "EmergencyContact",
    "PostalAddress",
    "ServiceHistory",
]
