"""Compliance check, follow-up question and agent response models."""

from pydantic import Field

from .base import FirespectBaseModel
from .enums import CheckStatus, OverallStatus, QuestionPriority
from .inspection import ParsedInspection


class ComplianceCheck(FirespectBaseModel):
    """One evaluated NFPA 25 rule outcome."""

    requirement: str = Field(..., description="Requirement label")
    status: CheckStatus = Field(..., description="pass, fail or warning")
    message: str = Field(..., description="Human-readable outcome")
    nfpa_reference: str = Field(..., description="NFPA 25 section citation")


class FollowUpQuestion(FirespectBaseModel):
    """A question the inspector should answer before leaving the riser."""

    question: str = Field(..., description="Question text")
    priority: QuestionPriority = Field(..., description="Urgency")
    context: str = Field("", description="Why the question is asked")


class AgentResponse(FirespectBaseModel):
    """Everything produced by one evaluation of a transcript."""

    transcription: str = Field(..., description="Input transcript")
    parsed_data: ParsedInspection = Field(..., description="Parsed riser data")
    compliance_checks: list[ComplianceCheck] = Field(default_factory=list)
    follow_up_questions: list[FollowUpQuestion] = Field(default_factory=list)
    missing_critical_fields: list[str] = Field(default_factory=list)
    overall_status: OverallStatus = Field(..., description="Overall verdict")

    @property
    def parse_source(self) -> str:
        return self.parsed_data.source
