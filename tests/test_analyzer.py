from __future__ import annotations

import pytest

from conftest import messages, program
from core.analyzer import MARKER_RULES, ProgramAnalyzer
from core.machine_state import Spindle, StreamTag, Turret


def test_preamble_goes_to_common_stream(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "O1234 (HEADER)",
        "(SETUP NOTE)",
        "",
        "(==========)",
        "N1 G28 U0 W0;",
        "N2 G999;",
        "N3 G109 L1;",
    ))

    assert [line.text for line in result.common] == ["(SETUP NOTE)", "N1 G28 U0 W0;", "N2 G999;"]
    assert [line.line_number for line in result.common] == [2, 5, 6]
    assert [line.is_comment for line in result.common] == [True, False, False]
    assert all(line.stream_tag is StreamTag.COMMON for line in result.common)
    # preamble lines are not validated
    assert result.errors == ()


def test_lines_route_to_selected_turret(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "G109 L1;",
        "G00 X10.;",
        "G109 L2;",
        "G00 X20.;",
        "(==== divider ====)",
        "(LOWER NOTE)",
        "G109 L1;",
        "G00 X30.;",
    ))

    assert [line.text for line in result.upper] == ["G109 L1;", "G00 X10.;", "G109 L1;", "G00 X30.;"]
    assert [line.text for line in result.lower] == ["G109 L2;", "G00 X20.;", "(LOWER NOTE)"]
    assert result.upper[0].stream_tag is StreamTag.TURRET_SELECT
    assert result.upper[1].stream_tag is StreamTag.NORMAL
    assert result.lower[2].is_comment
    assert result.common == ()


def test_single_turret_program_leaves_other_stream_empty(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "M950;", "G01 X1. F0.2;", "M30;"))

    assert len(result.upper) == 4
    assert result.lower == ()
    assert not any("turret needs wait code" in m for m in messages(result.warnings))


def test_turret_select_line_skips_block_rules(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("N1 G109 L1 G999 F0;"))

    assert result.errors == ()
    assert messages(result.info) == ["Upper turret selected (G109 L1)"]


def test_turret_select_with_motion_code_warns_but_is_accepted(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L2 G00 X10.;", "G01 X5. F0.1;"))

    assert messages(result.warnings) == ["G109 should not be combined with G00-G03 in same block"]
    assert result.warnings[0].line_number == 1
    assert messages(result.info) == ["Lower turret selected (G109 L2)"]
    assert result.lower[0].stream_tag is StreamTag.TURRET_SELECT
    assert len(result.lower) == 2


def test_spindle_notes_only_on_change(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "M901;", "M901;", "M902;"))

    assert messages(result.info) == [
        "Upper turret selected (G109 L1)",
        "1st spindle selected (M901)",
        "2nd spindle selected (M902)",
    ]
    assert [line.spindle for line in result.upper] == [None, Spindle.HD1, Spindle.HD1, Spindle.HD2]
    assert result.final_state[Turret.UPPER].active_spindle is Spindle.HD2
    assert result.final_state[Turret.LOWER].active_spindle is None


def test_markers_in_space_free_blocks(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("N10G109 L1;", "N11M901;", "N12M200;"))

    state = result.final_state[Turret.UPPER]
    assert state.active_spindle is Spindle.HD1
    assert state.milling_active
    assert messages(result.info)[:2] == [
        "Upper turret selected (G109 L1)",
        "1st spindle selected (M901)",
    ]


def test_milling_mode_transitions(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "G109 L1;",
        "M205;",
        "M200;",
        "M303;",
        "G01 C90. F100.;",
        "M305;",
        "G00 X10.;",
    ))

    assert messages(result.info) == [
        "Upper turret selected (G109 L1)",
        "Milling mode activated",
        "Milling mode cancelled",
    ]
    assert [line.milling for line in result.upper] == [False, False, True, True, True, False, False]
    assert result.warnings == () and result.errors == ()


def test_cross_machining_is_per_turret(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program(
        "G109 L1;",
        "G110;",
        "G109 L2;",
        "G00 X1.;",
        "G109 L1;",
        "G111;",
    ))

    assert messages(result.info) == [
        "Upper turret selected (G109 L1)",
        "Cross machining control active",
        "Lower turret selected (G109 L2)",
        "Upper turret selected (G109 L1)",
        "Cross machining control cancelled",
    ]
    assert result.upper[1].cross_machining
    assert not result.lower[1].cross_machining
    assert not result.final_state[Turret.UPPER].cross_machining_active


def test_wait_history_is_per_turret(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "P10;", "M950;", "G109 L2;", "M951;"))

    upper = result.final_state[Turret.UPPER].wait_history
    lower = result.final_state[Turret.LOWER].wait_history
    assert [(e.code, e.line_number) for e in upper] == [("P10", 2), ("M950", 3)]
    assert [(e.code, e.line_number) for e in lower] == [("M951", 5)]


def test_balance_section_lines_are_tagged(analyzer: ProgramAnalyzer) -> None:
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

    assert [line.stream_tag for line in result.upper] == [
        StreamTag.TURRET_SELECT,
        StreamTag.NORMAL,
        StreamTag.BALANCE,
        StreamTag.BALANCE,
        StreamTag.NORMAL,
        StreamTag.NORMAL,
    ]


def test_analysis_is_idempotent(analyzer: ProgramAnalyzer, sample_text: str) -> None:
    first = analyzer.analyze(sample_text)
    second = analyzer.analyze(sample_text)

    assert first == second
    assert [str(d) for d in first.info] == [str(d) for d in second.info]


def test_new_analysis_carries_nothing_over(analyzer: ProgramAnalyzer) -> None:
    analyzer.analyze(program("G109 L1;", "M901;", "M950;", "M200;"))
    result = analyzer.analyze(program("G109 L1;", "G00 X1.;"))

    state = result.final_state[Turret.UPPER]
    assert state.active_spindle is None
    assert not state.milling_active
    assert state.wait_history == []


def test_final_state_is_a_snapshot(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze(program("G109 L1;", "M950;"))
    result.final_state[Turret.UPPER].wait_history.clear()

    again = analyzer.analyze(program("G109 L1;", "M950;"))
    assert len(again.final_state[Turret.UPPER].wait_history) == 1


def test_empty_program(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze("")

    assert result.common == result.upper == result.lower == ()
    assert result.errors == result.warnings == result.info == ()


def test_crlf_lines_are_trimmed(analyzer: ProgramAnalyzer) -> None:
    result = analyzer.analyze("G109 L1;\r\nG01 X1. F0;\r\n")

    assert result.upper[1].text == "G01 X1. F0;"
    assert messages(result.errors) == ["Feed rate F0 will cause alarm 816 (FEEDRATE ZERO)"]


def test_non_text_input_is_rejected(analyzer: ProgramAnalyzer) -> None:
    with pytest.raises(TypeError, match="bytes"):
        analyzer.analyze(b"G109 L1;")


def test_marker_rules_are_ordered() -> None:
    assert [rule.name for rule in MARKER_RULES] == [
        "spindle", "milling_start", "milling_stop", "cross_start", "cross_stop",
    ]
