"""
Per-line validation rules.

Each rule inspects one block and appends to the scan's diagnostics. Rules
are independent: none of them suppresses another on the same line.
"""
import re
from typing import Optional

from core.lexer import (extract_g_codes, extract_feed_rate,
                        extract_spindle_digits, detect_waiting_code,
                        word_value, WaitCode)
from core.classifiers import validate_g_code
from core.scan_context import ScanContext

MOTION_G_CODE = re.compile(r'^G0?[0-3]$')


def _format_number(value: float) -> str:
    """Render a feed value the way it would be typed, without exponent."""
    text = f"{value:.10f}".rstrip('0').rstrip('.')
    return text or "0"


def waiting_code(ctx: ScanContext, text: str) -> Optional[WaitCode]:
    return detect_waiting_code(text, ctx.dialect.wait_m_range,
                               ctx.dialect.wait_p_range)


def check_turret_select_block(ctx: ScanContext, line_number: int, text: str):
    """G109 must not share a block with G00-G03."""
    if any(MOTION_G_CODE.match(code) for code in extract_g_codes(text)):
        ctx.diagnostics.add_warning(
            line_number, "G109 should not be combined with G00-G03 in same block")


def check_balance_start(ctx: ScanContext, line_number: int):
    """
    Both turrets must have issued the same wait code right before M562.

    Only the most recent entry on each side is compared.
    """
    master = ctx.current_turret
    master_wait = ctx.turrets[master].last_wait
    if master_wait is None:
        ctx.diagnostics.add_warning(
            line_number,
            f"Wait code (M{ctx.dialect.wait_m_range[0]}-M{ctx.dialect.wait_m_range[1]} "
            f"or P{ctx.dialect.wait_p_range[0]}-P{ctx.dialect.wait_p_range[1]}) "
            f"should precede {ctx.dialect.balance_start}")
        return

    slave = master.opposite
    slave_wait = ctx.turrets[slave].last_wait
    if slave_wait is None:
        ctx.diagnostics.add_warning(
            line_number, f"{slave.label} turret needs wait code before balance cutting")
    elif slave_wait.code != master_wait.code:
        ctx.diagnostics.add_warning(
            line_number,
            f"Mismatched wait codes - Master: {master_wait.code}, Slave: {slave_wait.code}")


def check_balance_release(ctx: ScanContext, index: int, line_number: int):
    """A wait code must follow M563 within the lookahead window (M563 line included)."""
    window = ctx.raw_lines[index:index + ctx.config.release_lookahead_lines + 1]
    if not any(waiting_code(ctx, line.strip()) for line in window):
        ctx.diagnostics.add_warning(
            line_number,
            f"Wait code required after {ctx.dialect.balance_end} to release slave turret")


def check_g_codes(ctx: ScanContext, line_number: int, text: str):
    for code in extract_g_codes(text):
        if not validate_g_code(code, ctx.dialect):
            ctx.diagnostics.add_error(line_number, f"Invalid or unsupported G-code: {code}")


def check_feed_rate(ctx: ScanContext, line_number: int, text: str):
    feed_rate = extract_feed_rate(text)
    if feed_rate is None:
        return
    if feed_rate == 0:
        ctx.diagnostics.add_error(
            line_number, "Feed rate F0 will cause alarm 816 (FEEDRATE ZERO)")
    elif feed_rate < ctx.config.min_feed_rate:
        ctx.diagnostics.add_warning(
            line_number, f"Feed rate F{_format_number(feed_rate)} is unusually low")


def check_spindle_speed(ctx: ScanContext, line_number: int, text: str):
    digits = extract_spindle_digits(text)
    if digits is None:
        return
    speed = word_value(digits)
    # An S value too long to convert is above any ceiling
    if speed is None or speed > ctx.config.max_spindle_speed:
        ctx.diagnostics.add_warning(
            line_number, f"Spindle speed S{digits} RPM is unusually high")
    if ctx.in_balance_cutting:
        ctx.diagnostics.add_info(
            line_number, f"Spindle speed {digits} RPM in balance cutting")


def check_block_length(ctx: ScanContext, line_number: int, text: str):
    limit = ctx.config.max_block_length
    if len(text) > limit:
        ctx.diagnostics.add_error(
            line_number, f"Block exceeds {limit} character limit ({len(text)} chars)")


BLOCK_RULES = (
    check_g_codes,
    check_feed_rate,
    check_spindle_speed,
    check_block_length,
)
