import pytest

from config.sample_programs import BALANCE_CUTTING_SAMPLE
from core.analyzer import ProgramAnalyzer


def program(*lines: str) -> str:
    return "\n".join(lines)


def line_number_of(text: str, sequence_word: str) -> int:
    """Physical line number of the block starting with ``sequence_word``."""
    for number, line in enumerate(text.split("\n"), 1):
        words = line.split()
        if words and words[0] == sequence_word:
            return number
    raise LookupError(sequence_word)


def messages(diagnostics) -> list:
    return [d.message for d in diagnostics]


@pytest.fixture
def analyzer() -> ProgramAnalyzer:
    return ProgramAnalyzer()


@pytest.fixture
def sample_text() -> str:
    return BALANCE_CUTTING_SAMPLE


@pytest.fixture
def sample_result(analyzer, sample_text):
    return analyzer.analyze(sample_text)
