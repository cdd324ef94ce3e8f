"""
NC block lexer and address-code extractors.

The extractors are pure functions of a single line of text. They never keep
scan state, so the same string always yields the same result.
"""
import re
from enum import Enum
from dataclasses import dataclass
from typing import List, Optional

# Reserved synchronisation band on the Integrex controls
WAIT_M_RANGE = (950, 997)
WAIT_P_RANGE = (1, 99999999)

# Longest significant digit run converted to int
MAX_VALUE_DIGITS = 18

G_CODE_PATTERN = re.compile(r'\bG(\d+(?:\.\d+)?)\b')
FEED_RATE_PATTERN = re.compile(r'\bF(\d+\.?\d*|\.\d+)')
SPINDLE_SPEED_PATTERN = re.compile(r'\bS(\d+)\b')
M_WORD_PATTERN = re.compile(r'\bM(\d+)\b')
P_WORD_PATTERN = re.compile(r'\bP(\d+)\b')


class TokenType(Enum):
    WORD = "WORD"
    COMMENT = "COMMENT"
    END_OF_BLOCK = "END_OF_BLOCK"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Token:
    """Represents a single token of an NC block."""
    type: TokenType
    text: str
    char_start: int
    char_end: int
    address: str = ""
    value: str = ""

    def __str__(self):
        return f"{self.type.value}:{self.text}"


@dataclass(frozen=True)
class WaitCode:
    """A synchronisation token: an M-code in the wait band or a P-address."""
    kind: str  # "M" or "P"
    code: str  # full word as written, e.g. "M950" or "P10"
    value: int


def word_value(digits: str) -> Optional[int]:
    """
    Convert an address digit run to int.

    Returns None when the run has more than MAX_VALUE_DIGITS significant
    digits. Such a value lies outside every band and ceiling.
    """
    significant = digits.lstrip('0') or '0'
    if len(significant) > MAX_VALUE_DIGITS:
        return None
    return int(significant)


def extract_g_codes(line: str) -> List[str]:
    """Return every G-code on the line, left to right, duplicates kept."""
    return ['G' + match.group(1) for match in G_CODE_PATTERN.finditer(line)]


def extract_feed_rate(line: str) -> Optional[float]:
    """Return the first F word as a float, or None."""
    match = FEED_RATE_PATTERN.search(line)
    return float(match.group(1)) if match else None


def extract_spindle_digits(line: str) -> Optional[str]:
    """Return the digits of the first S word without leading zeros, or None."""
    match = SPINDLE_SPEED_PATTERN.search(line)
    if not match:
        return None
    return match.group(1).lstrip('0') or '0'


def extract_spindle_speed(line: str) -> Optional[int]:
    """Return the first S word as an int, or None (also for an overlong S value)."""
    digits = extract_spindle_digits(line)
    return word_value(digits) if digits is not None else None


def detect_waiting_code(line: str, m_range=WAIT_M_RANGE,
                        p_range=WAIT_P_RANGE) -> Optional[WaitCode]:
    """
    Find the synchronisation code on a line.

    An M-code inside ``m_range`` wins over a P-address inside ``p_range``
    when both appear. Ranges are inclusive.
    """
    for match in M_WORD_PATTERN.finditer(line):
        value = word_value(match.group(1))
        if value is not None and m_range[0] <= value <= m_range[1]:
            return WaitCode("M", match.group(0), value)

    for match in P_WORD_PATTERN.finditer(line):
        value = word_value(match.group(1))
        if value is not None and p_range[0] <= value <= p_range[1]:
            return WaitCode("P", match.group(0), value)

    return None


# Display categories per address letter
WORD_CATEGORIES = {
    'G': 'gcode',
    'M': 'mcode',
    'X': 'axis', 'Y': 'axis', 'Z': 'axis',
    'U': 'axis', 'V': 'axis', 'W': 'axis',
    'A': 'axis', 'B': 'axis', 'C': 'axis',
    'I': 'arc', 'J': 'arc', 'K': 'arc',
    'F': 'feed',
    'S': 'speed',
    'T': 'tool',
    'N': 'sequence',
    'O': 'sequence',
    'P': 'parameter', 'Q': 'parameter', 'R': 'parameter',
    'L': 'parameter', 'H': 'parameter', 'D': 'parameter',
}


def word_category(token: Token) -> str:
    """Get the display category of a token."""
    if token.type is TokenType.COMMENT:
        return 'comment'
    if token.type is TokenType.WORD:
        return WORD_CATEGORIES.get(token.address, 'parameter')
    return 'plain'


class NCLexer:
    """Splits one NC block into address/value words, comments and end-of-block."""

    WORD_PATTERN = re.compile(r'([A-Za-z])([+-]?(?:\d+\.?\d*|\.\d+))')
    PAREN_COMMENT_PATTERN = re.compile(r'\([^)]*\)?')

    def tokenize_line(self, line: str) -> List[Token]:
        """Tokenize a single block. Unrecognised characters become UNKNOWN tokens."""
        tokens = []
        pos = 0
        length = len(line)

        while pos < length:
            char = line[pos]

            if char.isspace():
                pos += 1
                continue

            # Comments run to the closing parenthesis, or to end of line if unclosed
            if char == '(':
                match = self.PAREN_COMMENT_PATTERN.match(line, pos)
                tokens.append(Token(TokenType.COMMENT, match.group(0), pos, match.end()))
                pos = match.end()
                continue

            if char == ';':
                tokens.append(Token(TokenType.END_OF_BLOCK, char, pos, pos + 1))
                pos += 1
                continue

            word_match = self.WORD_PATTERN.match(line, pos)
            if word_match:
                tokens.append(Token(
                    TokenType.WORD, word_match.group(0), pos, word_match.end(),
                    address=word_match.group(1).upper(),
                    value=word_match.group(2),
                ))
                pos = word_match.end()
                continue

            tokens.append(Token(TokenType.UNKNOWN, char, pos, pos + 1))
            pos += 1

        return tokens
