"""
Predicates recognising the semantically significant markers of a
dual-turret program: turret and spindle selection, milling and cross
machining modes, balance cutting boundaries and comment lines.

Markers may follow a sequence number directly (N11M901) but never another
address letter, and never run into further digits, so M9010 never reads as M901.
"""
import re
from functools import lru_cache
from typing import Iterable, Optional

from dialects import get_dialect
from dialects.base_dialect import BaseDialect

DEFAULT_DIALECT = "mazak_integrex"

PROGRAM_NUMBER_PATTERN = re.compile(r'^O\d+')


@lru_cache(maxsize=None)
def _marker_pattern(marker: str):
    """Compile 'G109 L1' into a pattern tolerant of extra spaces."""
    words = [re.escape(word) for word in marker.split()]
    return re.compile(r'(?<![A-Za-z])' + r'\s+'.join(words) + r'(?![\d.])')


def contains_marker(line: str, marker: str) -> bool:
    return _marker_pattern(marker).search(line) is not None


def _contains_any(line: str, markers: Iterable[str]) -> bool:
    return any(contains_marker(line, marker) for marker in markers)


def _resolve(dialect: Optional[BaseDialect]) -> BaseDialect:
    return dialect if dialect is not None else get_dialect(DEFAULT_DIALECT)


def detect_turret_selection(line: str, dialect: Optional[BaseDialect] = None) -> Optional[str]:
    """Return 'upper', 'lower' or None."""
    for turret, marker in _resolve(dialect).turret_select.items():
        if contains_marker(line, marker):
            return turret
    return None


def detect_spindle_selection(line: str, dialect: Optional[BaseDialect] = None) -> Optional[str]:
    """Return 'HD1', 'HD2' or None."""
    for spindle, marker in _resolve(dialect).spindle_select.items():
        if contains_marker(line, marker):
            return spindle
    return None


def detect_milling_mode_start(line: str, dialect: Optional[BaseDialect] = None) -> bool:
    return _contains_any(line, _resolve(dialect).milling_start)


def detect_milling_mode_stop(line: str, dialect: Optional[BaseDialect] = None) -> bool:
    return _contains_any(line, _resolve(dialect).milling_stop)


def detect_cross_machining_start(line: str, dialect: Optional[BaseDialect] = None) -> bool:
    return _contains_any(line, _resolve(dialect).cross_machining_start)


def detect_cross_machining_stop(line: str, dialect: Optional[BaseDialect] = None) -> bool:
    return _contains_any(line, _resolve(dialect).cross_machining_stop)


def detect_balance_start(line: str, dialect: Optional[BaseDialect] = None) -> bool:
    return contains_marker(line, _resolve(dialect).balance_start)


def detect_balance_end(line: str, dialect: Optional[BaseDialect] = None) -> bool:
    return contains_marker(line, _resolve(dialect).balance_end)


def is_comment(line: str) -> bool:
    return line.strip().startswith('(')


def is_section_divider(line: str) -> bool:
    """Decoration such as '(=====)' that never reaches an output stream."""
    return line.strip().startswith('(=')


def is_program_number(line: str) -> bool:
    """Program header line, e.g. 'O0001 (PART)'."""
    return PROGRAM_NUMBER_PATTERN.match(line.strip()) is not None


def validate_g_code(code: str, dialect: Optional[BaseDialect] = None) -> bool:
    """Check the code against the control's supported G-code table."""
    return _resolve(dialect).is_supported_g_code(code)
