"""
Main NC program processor interface.
This is the primary entry point for dual-turret program analysis.
"""
from typing import List, Dict, Any, Optional, Tuple
from config.machine_config import MachineConfig, ConfigManager
from core.analyzer import ProgramAnalyzer
from core.machine_state import ClassifiedLine, Turret
from core.scan_context import AnalysisResult
from utils.errors import Diagnostic


class NCProgramProcessor:
    """
    Main interface for program analysis.
    Provides a simple API for editors and viewers.
    """

    def __init__(self, config: Optional[MachineConfig] = None):
        self.analyzer = ProgramAnalyzer(config)
        self._last_processed_text = ""
        self._result: Optional[AnalysisResult] = None

    @property
    def config(self) -> MachineConfig:
        return self.analyzer.config

    def set_machine(self, machine_type: str):
        """Switch machine preset; the next process call uses it."""
        self.analyzer = ProgramAnalyzer(ConfigManager.get_config(machine_type))

    def process_program(self, program_text: str) -> bool:
        """
        Analyze program text and keep the result.

        Args:
            program_text: Raw program text to analyze

        Returns:
            True if the program has no hard errors
        """
        self._last_processed_text = program_text
        self._result = self.analyzer.analyze(program_text)
        return not self._result.errors

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self._result

    # Diagnostics for editor integration

    def get_diagnostics_for_line(self, line_number: int) -> List[Diagnostic]:
        """Get all diagnostics for a specific line number."""
        if self._result is None:
            return []
        return self._result.diagnostics_for_line(line_number)

    def get_all_diagnostics(self) -> List[Diagnostic]:
        """Get errors, then warnings, then info from the last analysis."""
        if self._result is None:
            return []
        return list(self._result.errors + self._result.warnings + self._result.info)

    def get_error_lines(self) -> List[int]:
        if self._result is None:
            return []
        return sorted({d.line_number for d in self._result.errors})

    def has_errors(self) -> bool:
        return bool(self._result and self._result.errors)

    # Streams for the turret panes

    def get_common_section(self) -> Tuple[ClassifiedLine, ...]:
        return self._result.common if self._result else ()

    def get_turret_stream(self, turret: Turret) -> Tuple[ClassifiedLine, ...]:
        return self._result.stream(turret) if self._result else ()

    # Statistics and information methods

    def get_statistics(self) -> Dict[str, Any]:
        """Get line and diagnostic counts of the last analysis."""
        if self._result is None:
            return {'total_lines': 0, 'common_lines': 0, 'upper_lines': 0,
                    'lower_lines': 0, 'errors': 0, 'warnings': 0, 'info': 0}
        return self._result.statistics()

    def get_machine_state(self) -> Dict[str, Any]:
        """Get the end-of-program state of both turrets."""
        if self._result is None:
            return {}
        return {turret.value: state.get_state_summary()
                for turret, state in self._result.final_state.items()}

    def get_last_processed_text(self) -> str:
        return self._last_processed_text

    def reset(self):
        """Reset processor to initial state."""
        self._last_processed_text = ""
        self._result = None
