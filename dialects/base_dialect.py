"""
Defines the abstract base class for a dual-turret NC dialect.
"""
from abc import ABC, abstractmethod


class BaseDialect(ABC):
    """
    Code vocabulary of one machine control.

    Subclasses fill the supported G-code table and the marker codes the
    analyzer looks for. Marker codes are stored as full address words
    (e.g. 'M562') so they can be matched on word boundaries.
    """
    name = "base"

    def __init__(self):
        self.g_code_table = frozenset()
        self.turret_select = {}
        self.spindle_select = {}
        self.milling_start = ()
        self.milling_stop = ()
        self.cross_machining_start = ()
        self.cross_machining_stop = ()
        self.balance_start = ""
        self.balance_end = ""
        self.wait_m_range = (0, 0)
        self.wait_p_range = (0, 0)
        self._populate()

    @abstractmethod
    def _populate(self):
        """Fill the code tables for this control."""

    def is_supported_g_code(self, code: str) -> bool:
        return code in self.g_code_table
