"""
Machine state management for dual-turret program analysis.
Tracks per-turret spindle, milling and cross machining modes and the
synchronisation wait codes each turret has issued.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
from enum import Enum


class Turret(Enum):
    UPPER = "upper"
    LOWER = "lower"

    @property
    def opposite(self) -> 'Turret':
        return Turret.LOWER if self is Turret.UPPER else Turret.UPPER

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Spindle(Enum):
    HD1 = "HD1"
    HD2 = "HD2"


class StreamTag(Enum):
    COMMON = "common"
    TURRET_SELECT = "turret-select"
    NORMAL = "normal"
    BALANCE = "balance"


@dataclass(frozen=True)
class ProgramLine:
    """One raw line of program text and its 1-based position."""
    text: str
    line_number: int


@dataclass(frozen=True)
class ClassifiedLine:
    """A program line routed to a stream, with the turret state at that point."""
    text: str
    line_number: int
    stream_tag: StreamTag
    is_comment: bool = False
    spindle: Optional[Spindle] = None
    milling: bool = False
    cross_machining: bool = False


@dataclass(frozen=True)
class WaitCodeEntry:
    code: str
    line_number: int
    value: int = 0


@dataclass
class TurretState:
    """Live state of one turret during a scan."""
    active_spindle: Optional[Spindle] = None
    milling_active: bool = False
    cross_machining_active: bool = False
    wait_history: List[WaitCodeEntry] = field(default_factory=list)

    def record_wait(self, entry: WaitCodeEntry):
        """Append a wait code; the history is never rewritten."""
        self.wait_history.append(entry)

    @property
    def last_wait(self) -> Optional[WaitCodeEntry]:
        return self.wait_history[-1] if self.wait_history else None

    def snapshot(self, text: str, line_number: int, stream_tag: StreamTag,
                 is_comment: bool) -> ClassifiedLine:
        """Build a classified line carrying this turret's current modes."""
        return ClassifiedLine(
            text=text,
            line_number=line_number,
            stream_tag=stream_tag,
            is_comment=is_comment,
            spindle=self.active_spindle,
            milling=self.milling_active,
            cross_machining=self.cross_machining_active,
        )

    def get_state_summary(self) -> Dict[str, Any]:
        """Get a summary of the turret state for display."""
        return {
            'spindle': self.active_spindle.value if self.active_spindle else None,
            'milling': self.milling_active,
            'cross_machining': self.cross_machining_active,
            'wait_codes': [entry.code for entry in self.wait_history],
        }


@dataclass
class BalanceCuttingSession:
    """An open M562 ... M563 section. The master turret never changes."""
    master: Turret
    start_line: int
    active: bool = True
