"""Riser reading and inspection models.

These shapes are shared by the pattern extractor and the language-model
backend, so both parse paths hand identical structures to the rule engine.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator

from .base import FirespectBaseModel, generate_id, utc_now
from .enums import (
    ButterflyValveStatus,
    ControlValveStatus,
    CorrosionLevel,
    GaugeType,
    InspectionStatus,
)


class GaugeReading(FirespectBaseModel):
    """A single pressure value heard in the transcript."""

    type: GaugeType = Field(..., description="Static or residual")
    pressure: float = Field(..., ge=0.0, description="Pressure value")
    unit: Literal["psi"] = Field("psi", description="Pressure unit")
    timestamp: datetime = Field(default_factory=utc_now, description="When the reading was captured")


class RiserReading(FirespectBaseModel):
    """One riser's state for one inspection pass."""

    riser_number: int = Field(..., ge=1, description="Riser number")
    static_pressure: float | None = Field(None, ge=0.0, description="Static pressure in PSI")
    residual_pressure: float | None = Field(None, ge=0.0, description="Residual pressure in PSI")
    control_valve_status: ControlValveStatus = Field(
        ControlValveStatus.UNKNOWN, description="Control valve position"
    )
    butterfly_valve_status: ButterflyValveStatus = Field(
        ButterflyValveStatus.NOT_DETECTED, description="Butterfly valve observation"
    )
    corrosion: CorrosionLevel = Field(CorrosionLevel.UNKNOWN, description="Corrosion severity")
    gauge_readings: list[GaugeReading] = Field(default_factory=list, description="Gauge readings")

    @field_validator("control_valve_status", "corrosion", mode="before")
    @classmethod
    def _null_is_unknown(cls, value: Any) -> Any:
        if value is None or value == "":
            return "unknown"
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("butterfly_valve_status", mode="before")
    @classmethod
    def _null_is_not_detected(cls, value: Any) -> Any:
        if value is None or value == "":
            return "not_detected"
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def has_static_pressure(self) -> bool:
        """A zero reading counts as not stated."""
        return bool(self.static_pressure)

    @property
    def has_residual_pressure(self) -> bool:
        return bool(self.residual_pressure)


class ParsedInspection(FirespectBaseModel):
    """Structured result of parsing one transcript."""

    risers: list[RiserReading] = Field(default_factory=list, description="Riser readings")
    notes: str = Field("", description="Free-text notes (usually the transcript)")
    source: Literal["llm", "patterns"] = Field("patterns", description="Which parser produced this")


class Inspection(FirespectBaseModel):
    """A completed or in-progress inspection ready for persistence."""

    id: str = Field(default_factory=lambda: generate_id("inspection_"), description="Inspection ID")
    timestamp: datetime = Field(default_factory=utc_now, description="Inspection time")
    location: str = Field(..., description="Site address or name")
    technician: str = Field(..., description="Inspecting technician")
    risers: list[RiserReading] = Field(default_factory=list, description="Riser readings")
    notes: str = Field("", description="Notes")
    status: InspectionStatus = Field(InspectionStatus.PENDING, description="Lifecycle status")
