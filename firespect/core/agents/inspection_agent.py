"""Inspection Agent - turns a transcript into checks, questions and a verdict."""

import asyncio
import json
import re
from typing import Any

from pydantic import ValidationError

from ..compliance.rules import ComplianceRuleEngine
from ..extraction.field_extractor import FieldExtractor
from ..models.compliance import AgentResponse, ComplianceCheck, FollowUpQuestion
from ..models.enums import (
    CheckStatus,
    ControlValveStatus,
    CorrosionLevel,
    GaugeType,
    InspectionStatus,
    OverallStatus,
    QuestionPriority,
)
from ..models.inspection import GaugeReading, Inspection, ParsedInspection, RiserReading
from ...integrations.llm_client import DEFAULT_TIMEOUT_SECONDS, LLMClient, extract_json_object
from ...observability.logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are an expert NFPA fire safety inspection AI assistant. Parse fire safety inspection transcriptions and extract structured data.

Extract the following information and respond in JSON format:
- riserNumber: The riser number mentioned
- staticPressure: Static pressure in PSI (null if not mentioned)
- residualPressure: Residual pressure in PSI (null if not mentioned)
- controlValveStatus: "open", "closed", "partially_open", or "unknown"
- butterflyValveStatus: "detected_clear", "detected_obstructed", or "not_detected"
- corrosion: "none", "minor", "moderate", "severe", or "unknown"

Respond only with valid JSON, no explanations:
{
  "risers": [
    {
      "riserNumber": 1,
      "staticPressure": 55,
      "residualPressure": 45,
      "controlValveStatus": "open",
      "butterflyValveStatus": "detected_clear",
      "corrosion": "none"
    }
  ]
}"""

INTERRUPTION_MESSAGES = {
    "static_pressure": "I didn't hear the static pressure reading. Could you provide the PSI reading?",
    "control_valve": "I didn't hear the control valve status. Is the valve open or closed?",
    "butterfly_valve": "I didn't hear about the butterfly valve. Is it detected and clear?",
    "corrosion": "I didn't hear about corrosion. Did you notice any corrosion on the fittings?",
}
DEFAULT_INTERRUPTION_MESSAGE = "I need a bit more information. Could you provide the missing details?"

_PRESSURE_MENTION = re.compile(r"pressure|psi", re.IGNORECASE)
_VALVE_MENTION = re.compile(r"valve|open|close", re.IGNORECASE)


class InspectionAgent:
    """Orchestrates parsing, rule evaluation and follow-up generation.

    Holds only configuration and collaborators; every call to process()
    builds a fresh AgentResponse.
    """

    def __init__(
        self,
        llm_client: LLMClient | None = None,
        extractor: FieldExtractor | None = None,
        rule_engine: ComplianceRuleEngine | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize agent.

        Args:
            llm_client: Optional language model backend
            extractor: Pattern extractor used directly or as fallback
            rule_engine: NFPA rule engine
            timeout_seconds: Upper bound on the model call
        """
        self.llm_client = llm_client
        self.extractor = extractor or FieldExtractor()
        self.rule_engine = rule_engine or ComplianceRuleEngine()
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "InspectionAgent":
        return cls(
            llm_client=LLMClient.from_config(config),
            rule_engine=ComplianceRuleEngine.from_config(config),
            timeout_seconds=float(
                config.get("llm", {}).get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
            ),
        )

    async def process(
        self,
        transcription: str,
        prior_inspection: Inspection | None = None,
    ) -> AgentResponse:
        """Evaluate one transcript.

        Args:
            transcription: Raw transcript text
            prior_inspection: Inspection in progress, if any. Accepted for
                context only; parsing does not depend on it.

        Returns:
            AgentResponse with checks, questions and overall status
        """
        logger.info(
            "agent_processing_start",
            transcript_length=len(transcription or ""),
            prior_inspection_id=prior_inspection.id if prior_inspection else None,
        )

        parsed = await self.parse_transcription(transcription)
        checks = self.rule_engine.evaluate(parsed.risers)
        missing = self.identify_missing_fields(parsed)
        questions = self.generate_follow_up_questions(parsed, checks)
        overall = self.determine_overall_status(checks, missing)

        logger.info(
            "agent_processing_complete",
            source=parsed.source,
            riser_count=len(parsed.risers),
            checks=len(checks),
            missing_fields=len(missing),
            overall_status=str(overall),
        )

        return AgentResponse(
            transcription=transcription,
            parsed_data=parsed,
            compliance_checks=checks,
            follow_up_questions=questions,
            missing_critical_fields=missing,
            overall_status=overall,
        )

    def process_sync(
        self,
        transcription: str,
        prior_inspection: Inspection | None = None,
    ) -> AgentResponse:
        """Run process() from synchronous code (no running event loop)."""
        return asyncio.run(self.process(transcription, prior_inspection))

    async def parse_transcription(self, transcription: str) -> ParsedInspection:
        """Parse with the model when available, otherwise with patterns."""
        if self.llm_client is not None and self.llm_client.is_configured:
            parsed = await self._parse_with_llm(transcription)
            if parsed is not None:
                return parsed

        return self.extractor.parse(transcription)

    async def _parse_with_llm(self, transcription: str) -> ParsedInspection | None:
        """Ask the model for riser JSON; None means use the fallback."""
        try:
            reply = await asyncio.wait_for(
                self.llm_client.chat(
                    SYSTEM_PROMPT,
                    f'Parse this inspection transcription: "{transcription}"',
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("llm_parse_timeout", timeout_seconds=self.timeout_seconds)
            return None
        except Exception as e:
            logger.warning("llm_parse_failed", error=str(e), error_type=type(e).__name__)
            return None

        payload = extract_json_object(reply)
        if payload is None:
            logger.warning("llm_reply_without_json", reply_length=len(reply))
            return None

        try:
            data = json.loads(payload)
            return self._to_parsed_inspection(data, transcription)
        except (ValueError, ValidationError) as e:
            logger.warning("llm_reply_invalid", error=str(e))
            return None

    def _to_parsed_inspection(self, data: Any, transcription: str) -> ParsedInspection:
        """Validate model JSON against the riser schema.

        Accepts {"risers": [...]} or a single riser object.
        """
        if not isinstance(data, dict):
            raise ValueError("Model reply is not a JSON object")

        if "risers" in data:
            risers = data["risers"]
        elif "riserNumber" in data or "riser_number" in data:
            risers = [data]
        else:
            raise ValueError("Model reply has no riser data")

        parsed = ParsedInspection.model_validate(
            {"risers": risers, "notes": transcription, "source": "llm"}
        )

        # Same shape as the pattern path: gauge readings mirror stated pressures
        risers = [_with_gauge_readings(riser) for riser in parsed.risers]
        return parsed.model_copy(update={"risers": risers})

    def identify_missing_fields(self, parsed: ParsedInspection) -> list[str]:
        if not parsed.risers:
            return ["No riser inspection data found"]

        missing = []
        for riser in parsed.risers:
            if not riser.has_static_pressure:
                missing.append(f"Riser {riser.riser_number}: Missing static pressure reading")
            if riser.control_valve_status == ControlValveStatus.UNKNOWN:
                missing.append(f"Riser {riser.riser_number}: Control valve status unclear")
            if riser.corrosion == CorrosionLevel.UNKNOWN:
                missing.append(f"Riser {riser.riser_number}: Corrosion assessment missing")
        return missing

    def generate_follow_up_questions(
        self,
        parsed: ParsedInspection,
        checks: list[ComplianceCheck],
    ) -> list[FollowUpQuestion]:
        """Two fixed rules: missing flow test, and failed checks to log."""
        questions = []

        has_static = any(r.has_static_pressure for r in parsed.risers)
        has_residual = any(r.has_residual_pressure for r in parsed.risers)
        if has_static and not has_residual:
            questions.append(
                FollowUpQuestion(
                    question=(
                        "I noticed static pressure readings but no residual pressure. "
                        "Did you perform a flow test?"
                    ),
                    priority=QuestionPriority.CRITICAL,
                    context="NFPA 25 requires residual pressure testing during annual inspections",
                )
            )

        failed = [c for c in checks if c.status == CheckStatus.FAIL]
        if failed:
            questions.append(
                FollowUpQuestion(
                    question=(
                        f"I found {len(failed)} compliance issues that need immediate attention. "
                        "Should I document these for follow-up maintenance?"
                    ),
                    priority=QuestionPriority.CRITICAL,
                    context="Failed compliance items require immediate corrective action",
                )
            )

        return questions

    def determine_overall_status(
        self,
        checks: list[ComplianceCheck],
        missing_fields: list[str],
    ) -> OverallStatus:
        """Missing fields or any fail beat warnings, which beat compliant."""
        if missing_fields:
            return OverallStatus.NON_COMPLIANT
        if any(c.status == CheckStatus.FAIL for c in checks):
            return OverallStatus.NON_COMPLIANT
        if any(c.status == CheckStatus.WARNING for c in checks):
            return OverallStatus.REQUIRES_ATTENTION
        return OverallStatus.COMPLIANT

    def should_interrupt(self, transcription: str, context: str) -> bool:
        """Whether to cut in because the inspector moved on without a reading.

        Args:
            transcription: Latest utterance
            context: Outstanding-item markers such as "missing_static_pressure"

        Returns:
            True if a required reading is still outstanding
        """
        text = transcription or ""
        if "missing_static_pressure" in context and not _PRESSURE_MENTION.search(text):
            return True
        if "missing_control_valve" in context and not _VALVE_MENTION.search(text):
            return True
        return False

    def interruption_message(self, missing_field: str) -> str:
        return INTERRUPTION_MESSAGES.get(missing_field, DEFAULT_INTERRUPTION_MESSAGE)

    def build_inspection(
        self,
        response: AgentResponse,
        technician: str,
        location: str,
    ) -> Inspection:
        """Package an evaluated transcript as a completed inspection."""
        return Inspection(
            location=location,
            technician=technician,
            risers=response.parsed_data.risers,
            notes=response.parsed_data.notes,
            status=InspectionStatus.COMPLETED,
        )


def _with_gauge_readings(riser: RiserReading) -> RiserReading:
    if riser.gauge_readings:
        return riser
    readings = []
    if riser.static_pressure is not None:
        readings.append(GaugeReading(type=GaugeType.STATIC, pressure=riser.static_pressure))
    if riser.residual_pressure is not None:
        readings.append(GaugeReading(type=GaugeType.RESIDUAL, pressure=riser.residual_pressure))
    return riser.model_copy(update={"gauge_readings": readings})
