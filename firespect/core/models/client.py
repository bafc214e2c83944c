"""Client records and their service history."""

from datetime import datetime, timezone
from typing import Any

from pydantic import Field, field_validator

from .base import FirespectBaseModel, TimestampSchema, generate_id, utc_now
from .enums import Industry, OverallStatus, ServiceFrequency, ServiceType, SystemType


def _as_utc(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EmergencyContact(FirespectBaseModel):
    """After-hours contact for a site."""

    name: str
    phone: str
    relationship: str = ""


class PostalAddress(FirespectBaseModel):
    """Street address, used for billing."""

    address: str
    city: str
    state: str
    zip_code: str


class Client(TimestampSchema):
    """A customer site under a service contract."""

    id: str = Field(default_factory=lambda: generate_id("client-"), description="Client ID")
    name: str = Field(..., min_length=1, description="Display name")
    business_name: str | None = Field(None, description="Legal business name")
    address: str = Field("", description="Site street address")
    city: str = Field("", description="Site city")
    state: str = Field("", description="Site state")
    zip_code: str = Field("", description="Site ZIP code")
    phone: str = Field("", description="Main phone number")
    email: str | None = Field(None, description="Contact email")
    contact_person: str = Field("", description="Primary contact")
    contact_title: str | None = Field(None, description="Primary contact's title")
    industry: Industry = Field(Industry.COMMERCIAL, description="Industry segment")
    system_types: list[SystemType] = Field(default_factory=list, description="Installed systems")
    service_frequency: ServiceFrequency = Field(
        ServiceFrequency.ANNUAL, description="Contracted inspection cadence"
    )
    last_inspection_date: datetime | None = Field(None, description="Most recent inspection")
    next_inspection_date: datetime | None = Field(None, description="Next inspection due")
    is_active: bool = Field(True, description="Whether the contract is active")
    notes: str | None = Field(None, description="Free-text notes")
    emergency_contact: EmergencyContact | None = None
    billing_address: PostalAddress | None = None

    @field_validator("last_inspection_date", "next_inspection_date", mode="after")
    @classmethod
    def _naive_is_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class ServiceHistory(FirespectBaseModel):
    """One completed visit at a client site."""

    id: str = Field(default_factory=lambda: generate_id("service-"), description="Entry ID")
    client_id: str = Field(..., description="Client the service was performed for")
    service_date: datetime = Field(..., description="When the work was done")
    service_type: ServiceType = Field(ServiceType.INSPECTION, description="Kind of work")
    technician: str = Field(..., description="Technician who did the work")
    findings: str = Field("", description="What was found")
    recommendations: str = Field("", description="Recommended follow-up")
    compliance_status: OverallStatus = Field(OverallStatus.COMPLIANT, description="Verdict")
    next_service_date: datetime | None = Field(None, description="When the next visit is due")
    cost: float | None = Field(None, ge=0.0, description="Invoiced amount")
    invoice_id: str | None = Field(None, description="Invoice reference")
    notes: str | None = Field(None, description="Free-text notes")
    job_id: str | None = Field(None, description="Scheduled job this entry closes")
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("service_date", "next_service_date", mode="after")
    @classmethod
    def _naive_is_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class ClientSearchFilters(FirespectBaseModel):
    """Criteria for ClientService.search; unset fields match everything."""

    name: str | None = None
    city: str | None = None
    industry: Industry | None = None
    system_type: SystemType | None = None
    is_active: bool | None = None
    service_overdue: bool = False


class ClientStats(FirespectBaseModel):
    """Portfolio counts for the office dashboard."""

    total_clients: int = 0
    active_clients: int = 0
    overdue_services: int = 0
    upcoming_services: int = 0
    clients_by_industry: dict[str, int] = Field(default_factory=dict)
