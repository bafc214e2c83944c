"""NFPA 25 rule engine for riser readings."""

from typing import Any

from ..models.compliance import ComplianceCheck
from ..models.enums import CheckStatus, ControlValveStatus, CorrosionLevel
from ..models.inspection import RiserReading

STATIC_PRESSURE_MIN_PSI = 30
STATIC_PRESSURE_MAX_PSI = 250

NFPA_RISER_INSPECTION = "NFPA 25 5.3.1"
NFPA_STATIC_PRESSURE = "NFPA 25 5.3.2.1"
NFPA_CONTROL_VALVE = "NFPA 25 5.3.3.1"
NFPA_CORROSION = "NFPA 25 5.2.1.1"


class ComplianceRuleEngine:
    """Evaluates riser readings against fixed NFPA 25 thresholds.

    Stateless apart from the pressure range, so evaluating the same
    readings twice yields equal check lists.
    """

    def __init__(
        self,
        static_pressure_min: float = STATIC_PRESSURE_MIN_PSI,
        static_pressure_max: float = STATIC_PRESSURE_MAX_PSI,
    ):
        if static_pressure_min > static_pressure_max:
            raise ValueError("static_pressure_min must not exceed static_pressure_max")
        self.static_pressure_min = static_pressure_min
        self.static_pressure_max = static_pressure_max

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "ComplianceRuleEngine":
        compliance = config.get("compliance", {})
        return cls(
            static_pressure_min=compliance.get("static_pressure_min", STATIC_PRESSURE_MIN_PSI),
            static_pressure_max=compliance.get("static_pressure_max", STATIC_PRESSURE_MAX_PSI),
        )

    def evaluate(self, readings: list[RiserReading]) -> list[ComplianceCheck]:
        """Run every rule for every riser.

        Args:
            readings: Parsed riser readings

        Returns:
            Checks grouped by riser in input order; a single fail check
            when there are no readings at all
        """
        if not readings:
            return [
                ComplianceCheck(
                    requirement="Riser Inspection Required",
                    status=CheckStatus.FAIL,
                    message="No riser data found in inspection",
                    nfpa_reference=NFPA_RISER_INSPECTION,
                )
            ]

        checks: list[ComplianceCheck] = []
        for riser in readings:
            checks.append(self._check_static_pressure(riser))
            checks.append(self._check_control_valve(riser))
            checks.append(self._check_corrosion(riser))
        return checks

    def _check_static_pressure(self, riser: RiserReading) -> ComplianceCheck:
        requirement = f"Riser {riser.riser_number} Static Pressure"

        # Zero is treated as not stated, same as the missing-field scan
        if not riser.has_static_pressure:
            return ComplianceCheck(
                requirement=requirement,
                status=CheckStatus.FAIL,
                message="Static pressure reading not recorded",
                nfpa_reference=NFPA_STATIC_PRESSURE,
            )

        pressure = riser.static_pressure
        if self.static_pressure_min <= pressure <= self.static_pressure_max:
            return ComplianceCheck(
                requirement=requirement,
                status=CheckStatus.PASS,
                message=f"Static pressure {_psi(pressure)} PSI is within acceptable range",
                nfpa_reference=NFPA_STATIC_PRESSURE,
            )

        return ComplianceCheck(
            requirement=requirement,
            status=CheckStatus.FAIL,
            message=(
                f"Static pressure {_psi(pressure)} PSI is outside the acceptable range of "
                f"{_psi(self.static_pressure_min)}-{_psi(self.static_pressure_max)} PSI"
            ),
            nfpa_reference=NFPA_STATIC_PRESSURE,
        )

    def _check_control_valve(self, riser: RiserReading) -> ComplianceCheck:
        requirement = f"Riser {riser.riser_number} Control Valve"

        if riser.control_valve_status == ControlValveStatus.OPEN:
            return ComplianceCheck(
                requirement=requirement,
                status=CheckStatus.PASS,
                message="Control valve is properly open",
                nfpa_reference=NFPA_CONTROL_VALVE,
            )

        return ComplianceCheck(
            requirement=requirement,
            status=CheckStatus.FAIL,
            message=f"Control valve is {riser.control_valve_status}, must be open for inspection",
            nfpa_reference=NFPA_CONTROL_VALVE,
        )

    def _check_corrosion(self, riser: RiserReading) -> ComplianceCheck:
        requirement = f"Riser {riser.riser_number} Corrosion Inspection"

        if riser.corrosion == CorrosionLevel.SEVERE:
            return ComplianceCheck(
                requirement=requirement,
                status=CheckStatus.FAIL,
                message="Severe corrosion detected - immediate maintenance required",
                nfpa_reference=NFPA_CORROSION,
            )
        if riser.corrosion == CorrosionLevel.MODERATE:
            return ComplianceCheck(
                requirement=requirement,
                status=CheckStatus.WARNING,
                message="Moderate corrosion detected - maintenance recommended",
                nfpa_reference=NFPA_CORROSION,
            )

        # none, minor and unknown all pass; unknown is reported as a missing field instead
        return ComplianceCheck(
            requirement=requirement,
            status=CheckStatus.PASS,
            message="No significant corrosion detected",
            nfpa_reference=NFPA_CORROSION,
        )


def summarize(checks: list[ComplianceCheck]) -> dict[str, int]:
    """Count checks per status for report tables."""
    counts = {status.value: 0 for status in CheckStatus}
    for check in checks:
        counts[str(check.status)] += 1
    return counts


def _psi(value: float) -> str:
    return f"{value:g}"
