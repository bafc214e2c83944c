"""Pattern-based extraction of riser readings from inspector transcripts.

This is the deterministic parse path. It is used directly when no language
model is configured and as the fallback whenever the model path fails, so
its output must match the model path field for field.

Every "riser N" mention yields one reading, and each reading is filled from
phrases found anywhere in the transcript. Mentions of the same riser number
are not merged.
"""

import re
from collections.abc import Callable
from datetime import datetime

from ..models.base import utc_now
from ..models.enums import (
    ButterflyValveStatus,
    ControlValveStatus,
    CorrosionLevel,
    GaugeType,
)
from ..models.inspection import GaugeReading, ParsedInspection, RiserReading
from ...observability.logger import get_logger

logger = get_logger(__name__)

_FLAGS = re.IGNORECASE

RISER_PATTERN = re.compile(r"riser\s*(\d+)", _FLAGS)
STATIC_PRESSURE_PATTERN = re.compile(r"static\s*pressure\s*(?:is\s*)?(\d+)\s*psi", _FLAGS)
RESIDUAL_PRESSURE_PATTERN = re.compile(r"residual\s*pressure\s*(?:is\s*)?(\d+)\s*psi", _FLAGS)

# First match wins, so "partially open" must not be shadowed by "open"
CONTROL_VALVE_PATTERNS: list[tuple[re.Pattern[str], ControlValveStatus]] = [
    (re.compile(r"control\s*valve\s*(?:is\s*)?open", _FLAGS), ControlValveStatus.OPEN),
    (re.compile(r"control\s*valve\s*(?:is\s*)?closed", _FLAGS), ControlValveStatus.CLOSED),
    (re.compile(r"control\s*valve\s*(?:is\s*)?partially", _FLAGS), ControlValveStatus.PARTIALLY_OPEN),
]

BUTTERFLY_DETECTED_PATTERN = re.compile(r"butterfly\s*valve\s*detected", _FLAGS)
# Once the valve is detected, an obstruction mentioned anywhere counts
BUTTERFLY_OBSTRUCTED_PATTERN = re.compile(r"\bobstruct(?:ed|ion)\b", _FLAGS)

CORROSION_PATTERNS: list[tuple[re.Pattern[str], CorrosionLevel]] = [
    (re.compile(r"\bno\s*corrosion|corrosion\s*free", _FLAGS), CorrosionLevel.NONE),
    (re.compile(r"(?:minor|slight)\s*corrosion", _FLAGS), CorrosionLevel.MINOR),
    (re.compile(r"moderate\s*corrosion", _FLAGS), CorrosionLevel.MODERATE),
    (re.compile(r"(?:severe|heavy)\s*corrosion", _FLAGS), CorrosionLevel.SEVERE),
]


class FieldExtractor:
    """Turns free text into RiserReading objects using fixed patterns.

    Never raises on odd input: anything not heard resolves to None for
    pressures and to the "unknown"/"not_detected" sentinels for categories.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        """Initialize extractor.

        Args:
            clock: Source of gauge reading timestamps
        """
        self.clock = clock

    def extract(self, transcript: str) -> list[RiserReading]:
        """Extract one reading per "riser N" mention.

        Args:
            transcript: Raw transcript text

        Returns:
            Riser readings in mention order (empty if no riser is named)
        """
        if not transcript:
            return []

        riser_numbers = [int(m.group(1)) for m in RISER_PATTERN.finditer(transcript)]
        if not riser_numbers:
            return []

        static_pressure = _first_int(STATIC_PRESSURE_PATTERN, transcript)
        residual_pressure = _first_int(RESIDUAL_PRESSURE_PATTERN, transcript)
        control_valve = _first_label(CONTROL_VALVE_PATTERNS, transcript, ControlValveStatus.UNKNOWN)
        butterfly_valve = self._butterfly_status(transcript)
        corrosion = _first_label(CORROSION_PATTERNS, transcript, CorrosionLevel.UNKNOWN)

        readings = []
        for riser_number in riser_numbers:
            if riser_number < 1:
                logger.debug("riser_number_ignored", riser_number=riser_number)
                continue
            readings.append(
                RiserReading(
                    riser_number=riser_number,
                    static_pressure=static_pressure,
                    residual_pressure=residual_pressure,
                    control_valve_status=control_valve,
                    butterfly_valve_status=butterfly_valve,
                    corrosion=corrosion,
                    gauge_readings=self._gauge_readings(static_pressure, residual_pressure),
                )
            )

        logger.debug(
            "patterns_extracted",
            riser_count=len(readings),
            static_pressure=static_pressure,
            residual_pressure=residual_pressure,
        )
        return readings

    def parse(self, transcript: str) -> ParsedInspection:
        """Extract readings and wrap them with the transcript as notes."""
        return ParsedInspection(
            risers=self.extract(transcript),
            notes=transcript or "",
            source="patterns",
        )

    def _butterfly_status(self, transcript: str) -> ButterflyValveStatus:
        if not BUTTERFLY_DETECTED_PATTERN.search(transcript):
            return ButterflyValveStatus.NOT_DETECTED
        if BUTTERFLY_OBSTRUCTED_PATTERN.search(transcript):
            return ButterflyValveStatus.DETECTED_OBSTRUCTED
        # Detected without a qualifier is reported clear
        return ButterflyValveStatus.DETECTED_CLEAR

    def _gauge_readings(
        self, static_pressure: int | None, residual_pressure: int | None
    ) -> list[GaugeReading]:
        readings = []
        if static_pressure is not None:
            readings.append(
                GaugeReading(type=GaugeType.STATIC, pressure=static_pressure, timestamp=self.clock())
            )
        if residual_pressure is not None:
            readings.append(
                GaugeReading(type=GaugeType.RESIDUAL, pressure=residual_pressure, timestamp=self.clock())
            )
        return readings


def _first_int(pattern: re.Pattern[str], text: str) -> int | None:
    match = pattern.search(text)
    return int(match.group(1)) if match else None


def _first_label(patterns, text, default):
    for pattern, label in patterns:
        if pattern.search(text):
            return label
    return default
