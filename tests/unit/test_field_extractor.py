"""Pattern extraction of riser readings."""

from datetime import datetime, timezone

from firespect.core.extraction.field_extractor import FieldExtractor

FIXED = datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)


def _extractor():
    return FieldExtractor(clock=lambda: FIXED)


def test_scenario_a_full_reading():
    readings = _extractor().extract(
        "Riser 1. Static pressure is 55 psi. Residual pressure is 45 psi. "
        "Control valve open. No corrosion."
    )

    assert len(readings) == 1
    riser = readings[0]
    assert riser.riser_number == 1
    assert riser.static_pressure == 55
    assert riser.residual_pressure == 45
    assert riser.control_valve_status == "open"
    assert riser.corrosion == "none"
    assert riser.butterfly_valve_status == "not_detected"


def test_no_riser_mention_yields_nothing():
    extractor = _extractor()
    assert extractor.extract("Static pressure is 55 psi. Control valve open.") == []
    assert extractor.extract("") == []


def test_every_riser_mention_is_a_separate_reading():
    readings = _extractor().extract("Riser 1 looks fine. Back at riser 1 again, then RISER 2.")

    assert [r.riser_number for r in readings] == [1, 1, 2]


def test_whole_transcript_is_scanned_for_each_riser():
    readings = _extractor().extract("Riser 3 and riser 4. Static pressure 80 psi. Control valve closed.")

    assert all(r.static_pressure == 80 for r in readings)
    assert all(r.control_valve_status == "closed" for r in readings)


def test_riser_zero_is_skipped():
    readings = _extractor().extract("Riser 0, riser 5")
    assert [r.riser_number for r in readings] == [5]


def test_unstated_fields_default_to_unknown():
    riser = _extractor().extract("Riser 9 inspected.")[0]

    assert riser.static_pressure is None
    assert riser.residual_pressure is None
    assert riser.control_valve_status == "unknown"
    assert riser.corrosion == "unknown"
    assert riser.gauge_readings == []


def test_control_valve_phrases():
    extractor = _extractor()
    assert extractor.extract("Riser 1, control valve is open")[0].control_valve_status == "open"
    assert extractor.extract("Riser 1, control valve closed")[0].control_valve_status == "closed"
    assert (
        extractor.extract("Riser 1, control valve partially open")[0].control_valve_status
        == "partially_open"
    )


def test_butterfly_valve_phrases():
    extractor = _extractor()
    assert (
        extractor.extract("Riser 1. Butterfly valve detected and clear.")[0].butterfly_valve_status
        == "detected_clear"
    )
    assert (
        extractor.extract("Riser 1. Butterfly valve detected and obstructed.")[0].butterfly_valve_status
        == "detected_obstructed"
    )
    assert (
        extractor.extract("Riser 1. Butterfly valve detected.")[0].butterfly_valve_status
        == "detected_clear"
    )
    assert (
        extractor.extract("Riser 1. Butterfly valve clear.")[0].butterfly_valve_status
        == "not_detected"
    )


def test_butterfly_obstruction_in_later_sentence():
    extractor = _extractor()
    assert (
        extractor.extract(
            "Riser 1. Butterfly valve detected. Obstructed. Control valve open."
        )[0].butterfly_valve_status
        == "detected_obstructed"
    )
    assert (
        extractor.extract(
            "Riser 1. Butterfly valve detected, there is an obstruction near the disc."
        )[0].butterfly_valve_status
        == "detected_obstructed"
    )
    assert (
        extractor.extract("Riser 1. Obstructed view. No butterfly valve.")[0].butterfly_valve_status
        == "not_detected"
    )


def test_corrosion_synonyms():
    extractor = _extractor()
    cases = {
        "no corrosion": "none",
        "corrosion free": "none",
        "minor corrosion": "minor",
        "slight corrosion": "minor",
        "moderate corrosion": "moderate",
        "severe corrosion": "severe",
        "heavy corrosion": "severe",
    }
    for phrase, expected in cases.items():
        assert extractor.extract(f"Riser 2, {phrase}.")[0].corrosion == expected, phrase


def test_gauge_readings_follow_matched_pressures():
    riser = _extractor().extract(
        "Riser 1. Static pressure is 60 psi. Residual pressure is 48 psi."
    )[0]

    assert [(g.type, g.pressure, g.unit) for g in riser.gauge_readings] == [
        ("static", 60, "psi"),
        ("residual", 48, "psi"),
    ]
    assert all(g.timestamp == FIXED for g in riser.gauge_readings)


def test_only_static_pressure_gets_one_gauge_reading():
    riser = _extractor().extract("Riser 1. Static pressure 70 psi.")[0]
    assert [g.type for g in riser.gauge_readings] == ["static"]


def test_parse_wraps_transcript_as_notes():
    text = "Riser 1. Control valve open."
    parsed = _extractor().parse(text)

    assert parsed.source == "patterns"
    assert parsed.notes == text
    assert len(parsed.risers) == 1
