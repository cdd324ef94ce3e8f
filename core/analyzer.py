"""
Stream partitioner and turret state tracker.

A single forward pass routes every line of a dual-turret program to the
common preamble or to the upper/lower turret stream, updates the turret
modes as markers go by, and runs the block rules.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from config.machine_config import MachineConfig, ConfigManager
from core import classifiers, rules
from core.machine_state import (Turret, Spindle, StreamTag, TurretState,
                                ClassifiedLine, ProgramLine, WaitCodeEntry,
                                BalanceCuttingSession)
from core.scan_context import ScanContext, AnalysisResult
from dialects import get_dialect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerRule:
    """A mode marker: ``detect`` finds it on a line, ``apply`` updates the turret."""
    name: str
    detect: Callable
    apply: Callable


def _apply_spindle(ctx: ScanContext, state: TurretState, found: str, line_number: int):
    spindle = Spindle(found)
    if state.active_spindle is spindle:
        return
    state.active_spindle = spindle
    order = "1st" if spindle is Spindle.HD1 else "2nd"
    ctx.diagnostics.add_info(
        line_number, f"{order} spindle selected ({ctx.dialect.spindle_select[found]})")


def _apply_milling_start(ctx, state, found, line_number):
    if not state.milling_active:
        state.milling_active = True
        ctx.diagnostics.add_info(line_number, "Milling mode activated")


def _apply_milling_stop(ctx, state, found, line_number):
    if state.milling_active:
        state.milling_active = False
        ctx.diagnostics.add_info(line_number, "Milling mode cancelled")


def _apply_cross_start(ctx, state, found, line_number):
    if not state.cross_machining_active:
        state.cross_machining_active = True
        ctx.diagnostics.add_info(line_number, "Cross machining control active")


def _apply_cross_stop(ctx, state, found, line_number):
    if state.cross_machining_active:
        state.cross_machining_active = False
        ctx.diagnostics.add_info(line_number, "Cross machining control cancelled")


# Evaluated in order on every routed line
MARKER_RULES = (
    MarkerRule("spindle", classifiers.detect_spindle_selection, _apply_spindle),
    MarkerRule("milling_start", classifiers.detect_milling_mode_start, _apply_milling_start),
    MarkerRule("milling_stop", classifiers.detect_milling_mode_stop, _apply_milling_stop),
    MarkerRule("cross_start", classifiers.detect_cross_machining_start, _apply_cross_start),
    MarkerRule("cross_stop", classifiers.detect_cross_machining_stop, _apply_cross_stop),
)


class ProgramAnalyzer:
    """Partitions a dual-turret NC program and collects its diagnostics."""

    def __init__(self, config: Optional[MachineConfig] = None):
        self.config = config if config is not None else ConfigManager.get_config()
        self.dialect = get_dialect(self.config.dialect)

    def analyze(self, program_text: str) -> AnalysisResult:
        """
        Analyze a complete program.

        Each call starts from fresh turret state, so the same text always
        gives the same result.
        """
        if not isinstance(program_text, str):
            raise TypeError(
                f"program text must be str, not {type(program_text).__name__}")

        raw_lines = program_text.split('\n')
        ctx = ScanContext(config=self.config, dialect=self.dialect, raw_lines=raw_lines)

        program_lines = [ProgramLine(line, number)
                         for number, line in enumerate(raw_lines, 1)]
        for index, program_line in enumerate(program_lines):
            text = program_line.text.strip()
            if not text or classifiers.is_section_divider(text):
                continue
            self._process_line(ctx, index, program_line.line_number, text)

        result = ctx.to_result()
        logger.debug("Analyzed %d lines: %d errors, %d warnings, %d info",
                     result.total_lines, len(result.errors),
                     len(result.warnings), len(result.info))
        return result

    def _process_line(self, ctx: ScanContext, index: int, line_number: int, text: str):
        turret_name = classifiers.detect_turret_selection(text, self.dialect)

        if not ctx.routing:
            if turret_name is None:
                if not classifiers.is_program_number(text):
                    ctx.common.append(ClassifiedLine(
                        text, line_number, StreamTag.COMMON,
                        is_comment=classifiers.is_comment(text)))
                return
            ctx.routing = True

        if turret_name is not None:
            self._select_turret(ctx, Turret(turret_name), line_number, text)
            return

        if ctx.current_turret is None:
            return

        state = ctx.current_state
        for rule in MARKER_RULES:
            found = rule.detect(text, self.dialect)
            if found:
                rule.apply(ctx, state, found, line_number)

        wait = rules.waiting_code(ctx, text)
        if wait is not None:
            state.record_wait(WaitCodeEntry(wait.code, line_number, wait.value))

        if classifiers.detect_balance_start(text, self.dialect):
            self._start_balance(ctx, line_number)

        if classifiers.detect_balance_end(text, self.dialect):
            self._end_balance(ctx, index, line_number)

        for rule in rules.BLOCK_RULES:
            rule(ctx, line_number, text)

        tag = StreamTag.BALANCE if ctx.in_balance_cutting else StreamTag.NORMAL
        ctx.streams[ctx.current_turret].append(
            state.snapshot(text, line_number, tag, classifiers.is_comment(text)))

    def _select_turret(self, ctx: ScanContext, turret: Turret, line_number: int, text: str):
        ctx.current_turret = turret
        rules.check_turret_select_block(ctx, line_number, text)
        ctx.streams[turret].append(ctx.turrets[turret].snapshot(
            text, line_number, StreamTag.TURRET_SELECT, is_comment=False))
        ctx.diagnostics.add_info(
            line_number,
            f"{turret.label} turret selected ({self.dialect.turret_select[turret.value]})")
        logger.debug("Line %d: switched to %s turret", line_number, turret.value)

    def _start_balance(self, ctx: ScanContext, line_number: int):
        rules.check_balance_start(ctx, line_number)
        # A new M562 closes any open session; each session keeps its own master
        ctx.session = BalanceCuttingSession(master=ctx.current_turret, start_line=line_number)
        ctx.diagnostics.add_info(
            line_number, f"Balance cutting starts (Master: {ctx.current_turret.value})")

    def _end_balance(self, ctx: ScanContext, index: int, line_number: int):
        if ctx.session is not None:
            ctx.session.active = False
        ctx.session = None
        rules.check_balance_release(ctx, index, line_number)
        ctx.diagnostics.add_info(line_number, "Balance cutting ends")
