from __future__ import annotations

import pytest

from conftest import messages, program
from core.analyzer import ProgramAnalyzer
from core.machine_state import Turret

WAIT_WARNINGS = (
    "Wait code (M950-M997 or P1-P99999999) should precede M562",
    "turret needs wait code before balance cutting",
    "Mismatched wait codes",
)


def _wait_warnings(result) -> list[str]:
    return [m for m in messages(result.warnings) if any(w in m for w in WAIT_WARNINGS)]


def test_invalid_g_code_is_an_error(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "N10 G999 X1.;"))

    assert messages(result.errors) == ["Invalid or unsupported G-code: G999"]
    assert result.errors[0].line_number == 2


def test_each_invalid_g_code_is_reported(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "G999 G01 G999 G500;"))

    assert messages(result.errors) == [
        "Invalid or unsupported G-code: G999",
        "Invalid or unsupported G-code: G999",
        "Invalid or unsupported G-code: G500",
    ]


def test_supported_machine_code_passes(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "G236 X1. C0.;"))

    assert result.errors == ()


def test_zero_feed_is_exactly_one_error(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "G01 X50. F0;"))

    assert messages(result.errors) == ["Feed rate F0 will cause alarm 816 (FEEDRATE ZERO)"]
    assert result.warnings == ()


@pytest.mark.parametrize(
    ("feed", "expected"),
    [
        ("F0.00005", ["Feed rate F0.00005 is unusually low"]),
        ("F0.0001", []),
        ("F0.25", []),
    ],
)
def test_low_feed_warning(analyzer: ProgramAnalyzer, feed: str, expected: list[str]) -> None:
    result = analyzer.analyze(program("G109 L1;", f"G01 X50. {feed};"))

    assert messages(result.warnings) == expected
    assert result.errors == ()


def test_high_spindle_speed_warning(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "G97 S5000 M03;", "G97 S5001 M03;"))

    assert messages(result.warnings) == ["Spindle speed S5001 RPM is unusually high"]
    assert result.warnings[0].line_number == 3


def test_spindle_speed_in_balance_cutting_is_info(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "G109 L2;",
        "M950;",
        "G109 L1;",
        "M950;",
        "M562;",
        "M03 S6000;",
        "M563;",
        "M951;",
        "M03 S800;",
    ))

    assert "Spindle speed 6000 RPM in balance cutting" in messages(result.info)
    assert "Spindle speed 800 RPM in balance cutting" not in messages(result.info)
    assert messages(result.warnings) == ["Spindle speed S6000 RPM is unusually high"]


def test_block_length_limit(analyzer: ProgramAnalyzer) -> None:
    at_limit = "N1 X" + "1" * 124
    over_limit = "N2 X" + "1" * 125
    assert len(at_limit) == 128 and len(over_limit) == 129

    result = analyzer.analyze(program("G109 L1;", at_limit, over_limit))

    assert messages(result.errors) == ["Block exceeds 128 character limit (129 chars)"]
    assert result.errors[0].line_number == 3


def test_block_length_uses_trimmed_text(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "    " + "N1 X" + "1" * 124 + "   "))

    assert result.errors == ()


def test_balance_without_master_wait_code(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "G00 X10.;", "M562;"))

    assert messages(result.warnings) == [
        "Wait code (M950-M997 or P1-P99999999) should precede M562",
    ]
    assert messages(result.info)[-1] == "Balance cutting starts (Master: upper)"


def test_matching_wait_codes_give_no_wait_warnings(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "G109 L2;",
        "M950;",
        "G109 L1;",
        "M950;",
        "M562;",
        "G01 X10. F0.2;",
        "M563;",
        "M951;",
    ))

    assert result.warnings == ()
    assert result.errors == ()


def test_slave_without_wait_code(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L2;", "P10;", "M562;"))

    assert messages(result.warnings) == ["Upper turret needs wait code before balance cutting"]
    assert "Balance cutting starts (Master: lower)" in messages(result.info)


def test_mismatched_wait_codes(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L2;", "M951;", "G109 L1;", "M950;", "M562;"))

    assert _wait_warnings(result) == ["Mismatched wait codes - Master: M950, Slave: M951"]
    assert result.warnings[0].line_number == 5


def test_only_latest_wait_codes_are_compared(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "G109 L2;",
        "M960;",
        "M950;",
        "G109 L1;",
        "M970;",
        "M950;",
        "M562;",
    ))

    assert _wait_warnings(result) == []


def test_wait_code_on_balance_start_line_counts(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L2;", "P5;", "G109 L1;", "P5 M562;"))

    assert _wait_warnings(result) == []


def test_missing_release_after_balance_end(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "G109 L2;",
        "M950;",
        "G109 L1;",
        "M950;",
        "M562;",
        "G01 X1. F0.1;",
        "M563;",
        "G00 X5.;",
        "G00 X6.;",
        "G00 X7.;",
        "G00 X8.;",
        "M951;",
    ))

    assert messages(result.warnings) == [
        "Wait code required after M563 to release slave turret",
    ]
    assert result.warnings[0].line_number == 7


def test_release_found_at_edge_of_window(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "G109 L2;",
        "M950;",
        "G109 L1;",
        "M950;",
        "M562;",
        "M563;",
        "G00 X5.;",
        "G00 X6.;",
        "G00 X7.;",
        "M951;",
    ))

    assert result.warnings == ()


def test_release_window_counts_raw_lines(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "G109 L2;",
        "M950;",
        "G109 L1;",
        "M950;",
        "M562;",
        "M563;",
        "",
        "",
        "",
        "",
        "M951;",
    ))

    assert messages(result.warnings) == [
        "Wait code required after M563 to release slave turret",
    ]


def test_all_severities_from_one_line(analyzer: ProgramAnalyzer) -> None:
    long_tail = " X" + "1" * 120
    result = analyzer.analyze(program(
        "G109 L2;",
        "P7;",
        "G109 L1;",
        "P7;",
        "M562;",
        "G999 F0 S9000 M901" + long_tail,
    ))

    line = 6
    assert [d.message for d in result.errors if d.line_number == line] == [
        "Invalid or unsupported G-code: G999",
        "Feed rate F0 will cause alarm 816 (FEEDRATE ZERO)",
        "Block exceeds 128 character limit (140 chars)",
    ]
    assert [d.message for d in result.warnings if d.line_number == line] == [
        "Spindle speed S9000 RPM is unusually high",
    ]
    assert [d.message for d in result.info if d.line_number == line] == [
        "1st spindle selected (M901)",
        "Spindle speed 9000 RPM in balance cutting",
    ]


def test_diagnostic_str_format(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "G999;"))

    assert str(result.errors[0]) == "Line 2: Invalid or unsupported G-code: G999"
    assert result.errors[0].severity.value == "error"


def test_overlong_spindle_word_is_above_ceiling(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "S" + "9" * 5000))

    assert messages(result.errors) == ["Block exceeds 128 character limit (5001 chars)"]
    assert len(result.warnings) == 1
    assert result.warnings[0].message.startswith("Spindle speed S999")
    assert result.warnings[0].line_number == 2


def test_overlong_m_word_reports_block_length_only(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "M" + "9" * 5000))

    assert messages(result.errors) == ["Block exceeds 128 character limit (5001 chars)"]
    assert result.warnings == ()
    assert result.final_state[Turret.UPPER].wait_history == []
