"""Inspection agent: parsing paths, follow-ups and overall status."""

import asyncio

from firespect.core.agents.inspection_agent import InspectionAgent
from firespect.core.models.inspection import Inspection

SCENARIO_A = (
    "Riser 1. Static pressure is 55 psi. Residual pressure is 45 psi. "
    "Control valve open. No corrosion."
)
SCENARIO_B = "Riser 2. Static pressure is 20 psi. Control valve closed. Severe corrosion."
SCENARIO_C = "Riser 3. Static pressure is 60 psi. Control valve open. No corrosion."

LLM_REPLY = """Sure, here is the data:
```json
{"risers": [{"riserNumber": 7, "staticPressure": 65, "residualPressure": 50,
  "controlValveStatus": "open", "butterflyValveStatus": "detected_clear", "corrosion": "none"}]}
```"""


class FakeLLM:
    """Stands in for LLMClient."""

    def __init__(self, reply="", error=None, delay=0.0, configured=True):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.is_configured = configured
        self.calls = []

    async def chat(self, system_prompt, user_message):
        self.calls.append((system_prompt, user_message))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.reply


def test_scenario_a_is_compliant():
    response = InspectionAgent().process_sync(SCENARIO_A)

    assert response.parse_source == "patterns"
    assert all(c.status == "pass" for c in response.compliance_checks)
    assert response.missing_critical_fields == []
    assert response.follow_up_questions == []
    assert response.overall_status == "compliant"


def test_scenario_b_is_non_compliant():
    response = InspectionAgent().process_sync(SCENARIO_B)
    by_req = {c.requirement: c.status for c in response.compliance_checks}

    assert by_req["Riser 2 Control Valve"] == "fail"
    assert by_req["Riser 2 Corrosion Inspection"] == "fail"
    assert response.missing_critical_fields == []
    assert response.overall_status == "non_compliant"
    assert any(q.priority == "critical" for q in response.follow_up_questions)


def test_scenario_c_asks_for_flow_test():
    response = InspectionAgent().process_sync(SCENARIO_C)

    assert response.overall_status == "compliant"
    assert len(response.follow_up_questions) == 1
    question = response.follow_up_questions[0]
    assert question.priority == "critical"
    assert "flow test" in question.question


def test_failed_checks_question_counts_failures():
    response = InspectionAgent().process_sync(SCENARIO_B)
    failure_question = response.follow_up_questions[-1]

    assert failure_question.question.startswith("I found 3 compliance issues")


def test_no_risers_reports_single_missing_entry():
    response = InspectionAgent().process_sync("Just walking the site for now.")

    assert response.missing_critical_fields == ["No riser inspection data found"]
    assert len(response.compliance_checks) == 1
    assert response.compliance_checks[0].status == "fail"
    assert response.overall_status == "non_compliant"


def test_unknown_fields_are_missing_and_non_compliant():
    response = InspectionAgent().process_sync(
        "Riser 4. Static pressure is 80 psi. Residual pressure is 60 psi."
    )

    assert response.missing_critical_fields == [
        "Riser 4: Control valve status unclear",
        "Riser 4: Corrosion assessment missing",
    ]
    assert response.overall_status == "non_compliant"


def test_missing_static_pressure_is_flagged():
    response = InspectionAgent().process_sync("Riser 6. Control valve open. No corrosion.")

    assert "Riser 6: Missing static pressure reading" in response.missing_critical_fields


def test_moderate_corrosion_requires_attention():
    response = InspectionAgent().process_sync(
        "Riser 5. Static pressure is 70 psi. Residual pressure is 50 psi. "
        "Control valve open. Moderate corrosion."
    )

    assert response.overall_status == "requires_attention"


def test_minor_corrosion_is_compliant():
    response = InspectionAgent().process_sync(
        "Riser 5. Static pressure is 70 psi. Residual pressure is 50 psi. "
        "Control valve open. Minor corrosion."
    )

    assert response.parsed_data.risers[0].corrosion == "minor"
    assert response.compliance_checks[-1].status == "pass"
    assert response.overall_status == "compliant"


def test_missing_fields_outrank_warnings():
    agent = InspectionAgent()
    response = agent.process_sync("Riser 5. Residual pressure is 50 psi. Control valve open. Moderate corrosion.")

    assert response.overall_status == "non_compliant"


def test_llm_path_is_used_when_configured():
    llm = FakeLLM(reply=LLM_REPLY)
    response = InspectionAgent(llm_client=llm).process_sync("Riser seven looks good")

    assert len(llm.calls) == 1
    system_prompt, user_message = llm.calls[0]
    assert "JSON" in system_prompt
    assert "Riser seven looks good" in user_message

    assert response.parse_source == "llm"
    riser = response.parsed_data.risers[0]
    assert riser.riser_number == 7
    assert riser.static_pressure == 65
    assert [g.type for g in riser.gauge_readings] == ["static", "residual"]
    assert response.overall_status == "compliant"


def test_llm_and_pattern_paths_share_shape():
    llm_response = InspectionAgent(llm_client=FakeLLM(reply=LLM_REPLY)).process_sync("x")
    pattern_response = InspectionAgent().process_sync(SCENARIO_A)

    llm_riser = llm_response.parsed_data.risers[0].model_dump(by_alias=True)
    pattern_riser = pattern_response.parsed_data.risers[0].model_dump(by_alias=True)
    assert llm_riser.keys() == pattern_riser.keys()


def test_llm_single_riser_object_is_accepted():
    reply = '{"riserNumber": 2, "staticPressure": 90, "controlValveStatus": "open", "corrosion": null}'
    response = InspectionAgent(llm_client=FakeLLM(reply=reply)).process_sync("x")

    riser = response.parsed_data.risers[0]
    assert response.parse_source == "llm"
    assert riser.corrosion == "unknown"
    assert riser.residual_pressure is None


def test_llm_without_json_falls_back_to_patterns():
    response = InspectionAgent(llm_client=FakeLLM(reply="I could not parse that.")).process_sync(SCENARIO_A)

    assert response.parse_source == "patterns"
    assert response.overall_status == "compliant"


def test_llm_malformed_json_falls_back():
    response = InspectionAgent(llm_client=FakeLLM(reply='{"risers": [1, 2,}')).process_sync(SCENARIO_A)
    assert response.parse_source == "patterns"


def test_llm_schema_violation_falls_back():
    reply = '{"risers": [{"riserNumber": 1, "controlValveStatus": "wide open", "corrosion": "rusty"}]}'
    response = InspectionAgent(llm_client=FakeLLM(reply=reply)).process_sync(SCENARIO_A)

    assert response.parse_source == "patterns"
    assert response.parsed_data.risers[0].corrosion == "none"


def test_llm_error_falls_back():
    llm = FakeLLM(error=ConnectionError("connection refused"))
    response = InspectionAgent(llm_client=llm).process_sync(SCENARIO_A)

    assert response.parse_source == "patterns"
    assert response.overall_status == "compliant"


def test_llm_timeout_falls_back():
    llm = FakeLLM(reply=LLM_REPLY, delay=5.0)
    agent = InspectionAgent(llm_client=llm, timeout_seconds=0.05)

    response = agent.process_sync(SCENARIO_B)

    assert response.parse_source == "patterns"
    assert response.parsed_data.risers[0].riser_number == 2


def test_unconfigured_llm_is_not_called():
    llm = FakeLLM(reply=LLM_REPLY, configured=False)
    response = InspectionAgent(llm_client=llm).process_sync(SCENARIO_A)

    assert llm.calls == []
    assert response.parse_source == "patterns"


def test_prior_inspection_does_not_change_result():
    prior = Inspection(location="Plant 4", technician="Sarah Davis")
    agent = InspectionAgent()

    with_prior = asyncio.run(agent.process(SCENARIO_B, prior_inspection=prior))
    without_prior = asyncio.run(agent.process(SCENARIO_B))

    assert with_prior.compliance_checks == without_prior.compliance_checks
    assert with_prior.overall_status == without_prior.overall_status


def test_should_interrupt():
    agent = InspectionAgent()

    assert agent.should_interrupt("moving on to the next room", "missing_static_pressure")
    assert not agent.should_interrupt("static is 60 psi", "missing_static_pressure")
    assert agent.should_interrupt("moving on", "missing_control_valve")
    assert not agent.should_interrupt("the valve is open", "missing_control_valve")
    assert not agent.should_interrupt("moving on", "")


def test_interruption_messages():
    agent = InspectionAgent()

    assert "PSI" in agent.interruption_message("static_pressure")
    assert "control valve" in agent.interruption_message("control_valve")
    assert agent.interruption_message("something_else").startswith("I need a bit more information")


def test_build_inspection():
    agent = InspectionAgent()
    response = agent.process_sync(SCENARIO_A)

    inspection = agent.build_inspection(response, technician="Tom Wilson", location="123 Main St")

    assert inspection.status == "completed"
    assert inspection.technician == "Tom Wilson"
    assert inspection.location == "123 Main St"
    assert inspection.notes == SCENARIO_A
    assert inspection.risers[0].riser_number == 1
    assert inspection.id.startswith("inspection_")
