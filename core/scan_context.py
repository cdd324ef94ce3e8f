"""
State threaded through a single analysis pass, and the result it produces.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Any, List, Optional, Tuple

from config.machine_config import MachineConfig
from core.machine_state import (Turret, TurretState, ClassifiedLine,
                                BalanceCuttingSession)
from dialects.base_dialect import BaseDialect
from utils.errors import Diagnostic, DiagnosticCollector


@dataclass
class ScanContext:
    """Everything one pass mutates. Built fresh for every analysis."""
    config: MachineConfig
    dialect: BaseDialect
    raw_lines: List[str]
    turrets: Dict[Turret, TurretState] = field(
        default_factory=lambda: {Turret.UPPER: TurretState(), Turret.LOWER: TurretState()})
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)
    common: List[ClassifiedLine] = field(default_factory=list)
    streams: Dict[Turret, List[ClassifiedLine]] = field(
        default_factory=lambda: {Turret.UPPER: [], Turret.LOWER: []})
    current_turret: Optional[Turret] = None
    routing: bool = False
    session: Optional[BalanceCuttingSession] = None

    @property
    def current_state(self) -> TurretState:
        return self.turrets[self.current_turret]

    @property
    def in_balance_cutting(self) -> bool:
        return self.session is not None and self.session.active

    def to_result(self) -> 'AnalysisResult':
        final_state = {
            turret: replace(state, wait_history=list(state.wait_history))
            for turret, state in self.turrets.items()
        }
        return AnalysisResult(
            common=tuple(self.common),
            upper=tuple(self.streams[Turret.UPPER]),
            lower=tuple(self.streams[Turret.LOWER]),
            errors=tuple(self.diagnostics.errors),
            warnings=tuple(self.diagnostics.warnings),
            info=tuple(self.diagnostics.info),
            final_state=final_state,
            total_lines=len(self.raw_lines),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Classified streams and diagnostics of one program."""
    common: Tuple[ClassifiedLine, ...]
    upper: Tuple[ClassifiedLine, ...]
    lower: Tuple[ClassifiedLine, ...]
    errors: Tuple[Diagnostic, ...]
    warnings: Tuple[Diagnostic, ...]
    info: Tuple[Diagnostic, ...]
    final_state: Dict[Turret, TurretState]
    total_lines: int

    def stream(self, turret: Turret) -> Tuple[ClassifiedLine, ...]:
        return self.upper if turret is Turret.UPPER else self.lower

    def diagnostics_for_line(self, line_number: int) -> List[Diagnostic]:
        """Get every diagnostic for a line, errors first."""
        return [d for d in self.errors + self.warnings + self.info
                if d.line_number == line_number]

    def statistics(self) -> Dict[str, Any]:
        """Line and diagnostic counts for display."""
        def code_lines(stream):
            return len([line for line in stream if not line.is_comment])

        return {
            'total_lines': self.total_lines,
            'common_lines': code_lines(self.common),
            'upper_lines': code_lines(self.upper),
            'lower_lines': code_lines(self.lower),
            'errors': len(self.errors),
            'warnings': len(self.warnings),
            'info': len(self.info),
        }
