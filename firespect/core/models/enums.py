"""Enumeration types for Firespect models."""

from enum import Enum


class ControlValveStatus(str, Enum):
    """Riser control valve position."""

    OPEN = "open"
    CLOSED = "closed"
    PARTIALLY_OPEN = "partially_open"
    UNKNOWN = "unknown"


class ButterflyValveStatus(str, Enum):
    """Butterfly valve observation."""

    DETECTED_CLEAR = "detected_clear"
    DETECTED_OBSTRUCTED = "detected_obstructed"
    NOT_DETECTED = "not_detected"


class CorrosionLevel(str, Enum):
    """Corrosion severity, ordered none < minor < moderate < severe."""

    NONE = "none"
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"
    UNKNOWN = "unknown"


class GaugeType(str, Enum):
    """Which pressure a gauge reading captured."""

    STATIC = "static"
    RESIDUAL = "residual"


class CheckStatus(str, Enum):
    """Outcome of a single compliance rule."""

    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"


class QuestionPriority(str, Enum):
    """Follow-up question urgency."""

    CRITICAL = "critical"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


class OverallStatus(str, Enum):
    """Verdict for one evaluated transcript."""

    COMPLIANT = "compliant"
    NON_COMPLIANT = "non_compliant"
    REQUIRES_ATTENTION = "requires_attention"


class InspectionStatus(str, Enum):
    """Inspection lifecycle."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class JobStatus(str, Enum):
    """Scheduled job lifecycle."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class JobPriority(str, Enum):
    """Job priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


class SystemType(str, Enum):
    """Fire protection system families."""

    SPRINKLER = "sprinkler"
    FIRE_ALARM = "fire_alarm"
    FIRE_PUMP = "fire_pump"
    EMERGENCY_LIGHTING = "emergency_lighting"
    KITCHEN_HOOD = "kitchen_hood"
    OTHER = "other"


class ServiceType(str, Enum):
    """Kind of work requested."""

    INSPECTION = "inspection"
    MAINTENANCE = "maintenance"
    REPAIR = "repair"
    INSTALLATION = "installation"
    EMERGENCY_SERVICE = "emergency_service"


class ConflictType(str, Enum):
    """Why two jobs cannot coexist."""

    OVERLAP = "overlap"
    TECHNICIAN_UNAVAILABLE = "technician_unavailable"
    EQUIPMENT_CONFLICT = "equipment_conflict"


class ConflictResolution(str, Enum):
    """Suggested way out of a conflict."""

    RESCHEDULE = "reschedule"
    REASSIGN = "reassign"
    ACCEPT = "accept"


class Industry(str, Enum):
    """Client industry segment."""

    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    RESIDENTIAL = "residential"
    INSTITUTIONAL = "institutional"
    GOVERNMENT = "government"


class ServiceFrequency(str, Enum):
    """Contracted inspection cadence."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"
    AS_NEEDED = "as_needed"
