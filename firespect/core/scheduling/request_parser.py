"""Keyword parsing of free-text job requests into ScheduleRequest."""

import re
from datetime import datetime

from ..models.enums import JobPriority, ServiceType, SystemType
from ..models.job import ScheduleRequest

LOCATION_PATTERN = re.compile(
    r"(?:at|in|for)\s+([^,.]+?)(?:\s+(?:building|warehouse|office|facility))", re.IGNORECASE
)
CLIENT_PATTERN = re.compile(
    r"(?:for|client|customer)\s+([^,.]+?)(?:\s+(?:corporation|inc|llc|company))", re.IGNORECASE
)
PHONE_PATTERN = re.compile(r"(\d{3}[-.\s]?\d{3}[-.\s]?\d{4})")

# Hours by kind of work; emergencies override everything else
EMERGENCY_HOURS = 3.0
INSTALLATION_HOURS = 4.0
REPAIR_HOURS = 2.5
DEFAULT_HOURS = 2.0

SYSTEM_LABELS = {
    SystemType.SPRINKLER: "Sprinkler System",
    SystemType.FIRE_ALARM: "Fire Alarm",
    SystemType.FIRE_PUMP: "Fire Pump",
    SystemType.EMERGENCY_LIGHTING: "Emergency Lighting",
    SystemType.KITCHEN_HOOD: "Kitchen Hood",
    SystemType.OTHER: "Fire Safety System",
}


def parse_schedule_request(text: str, preferred_dates: list[datetime]) -> ScheduleRequest:
    """Build a ScheduleRequest from a spoken or typed description.

    Args:
        text: Free-text job description
        preferred_dates: Candidate start times, in preference order

    Returns:
        ScheduleRequest with defaults for anything not mentioned
    """
    normalized = text.lower()

    location_match = LOCATION_PATTERN.search(text)
    client_match = CLIENT_PATTERN.search(text)
    phone_match = PHONE_PATTERN.search(text)

    priority = _priority(normalized)

    return ScheduleRequest(
        service_type=_service_type(normalized),
        location=location_match.group(1).strip() if location_match else "Unknown Location",
        client_name=client_match.group(1).strip() if client_match else "Unknown Client",
        client_phone=phone_match.group(1) if phone_match else None,
        system_type=_system_type(normalized),
        priority=priority,
        preferred_dates=preferred_dates,
        notes=text,
        estimated_duration=_estimated_duration(normalized, priority),
    )


def job_title(request: ScheduleRequest) -> str:
    """E.g. "EMERGENCY: Fire Pump Service" or "Sprinkler System Inspection"."""
    prefix = "EMERGENCY: " if request.priority == JobPriority.EMERGENCY else ""
    kind = "Inspection" if request.service_type == ServiceType.INSPECTION else "Service"
    return f"{prefix}{SYSTEM_LABELS[SystemType(request.system_type)]} {kind}"


def _priority(normalized: str) -> JobPriority:
    if "emergency" in normalized or "urgent" in normalized:
        return JobPriority.EMERGENCY
    if "high priority" in normalized:
        return JobPriority.HIGH
    if "low priority" in normalized:
        return JobPriority.LOW
    return JobPriority.MEDIUM


def _system_type(normalized: str) -> SystemType:
    if "alarm" in normalized:
        return SystemType.FIRE_ALARM
    if "pump" in normalized:
        return SystemType.FIRE_PUMP
    if "hood" in normalized:
        return SystemType.KITCHEN_HOOD
    if "emergency light" in normalized or "lighting" in normalized:
        return SystemType.EMERGENCY_LIGHTING
    return SystemType.SPRINKLER


def _service_type(normalized: str) -> ServiceType:
    if "installation" in normalized or "install" in normalized:
        return ServiceType.INSTALLATION
    if "repair" in normalized:
        return ServiceType.REPAIR
    if "maintenance" in normalized:
        return ServiceType.MAINTENANCE
    return ServiceType.INSPECTION


def _estimated_duration(normalized: str, priority: JobPriority) -> float:
    if priority == JobPriority.EMERGENCY:
        return EMERGENCY_HOURS
    if "installation" in normalized:
        return INSTALLATION_HOURS
    if "repair" in normalized:
        return REPAIR_HOURS
    return DEFAULT_HOURS
