"""
Defines the G-code table and marker codes for the Mazak Integrex
dual-turret multi-tasking lathe (MATRIX / SmoothX style controls).
This is based on the Mazak EIA/ISO Programming Manual.
"""
from .base_dialect import BaseDialect


class MazakIntegrexDialect(BaseDialect):
    name = "mazak_integrex"

    def _populate(self):
        self._populate_g_code_table()
        self._populate_marker_codes()

    def _populate_g_code_table(self):
        """Populates the supported G-code table.

        Codes are kept in the zero-padded form the control documents
        (G00, not G0); membership is an exact string match.
        """
        self.g_code_table = frozenset([
            # Interpolation
            'G00', 'G01', 'G01.1', 'G02', 'G03', 'G02.1', 'G03.1',
            'G04', 'G05', 'G06.1', 'G06.2', 'G07', 'G07.1', 'G09',
            # Data setting, polar / cylindrical interpolation
            'G10', 'G10.1', 'G10.9', 'G11', 'G12.1', 'G13.1',
            # Plane selection, units, stroke check
            'G17', 'G18', 'G19', 'G20', 'G21', 'G22', 'G23',
            # Reference point return and skip
            'G27', 'G28', 'G29', 'G30', 'G31', 'G31.1', 'G31.2', 'G31.3',
            # Threading
            'G32', 'G33', 'G34', 'G34.1', 'G35', 'G36', 'G37', 'G37.1',
            # Compensation and coordinate setting
            'G40', 'G41', 'G42', 'G43', 'G44', 'G49', 'G50', 'G52',
            # Work coordinate systems
            'G53', 'G53.5', 'G54', 'G54.1', 'G54.2', 'G55', 'G56', 'G57', 'G58', 'G59',
            # Exact stop, macro calls
            'G60', 'G61', 'G61.1', 'G62', 'G63', 'G64', 'G65', 'G66', 'G66.1', 'G67',
            # Coordinate rotation, inclined plane
            'G68', 'G68.2', 'G68.5', 'G69', 'G69.5',
            # Turning canned cycles
            'G70', 'G71', 'G71.1', 'G72', 'G72.1', 'G73', 'G74', 'G75', 'G76', 'G77', 'G78', 'G79',
            # Hole machining canned cycles
            'G80', 'G81', 'G82', 'G83', 'G84', 'G84.2', 'G84.3', 'G85', 'G86', 'G87', 'G88', 'G88.2', 'G89',
            # Modes
            'G90', 'G91', 'G92', 'G92.5', 'G93', 'G94', 'G95', 'G96', 'G97', 'G98', 'G99',
            # Dual-turret control
            'G109', 'G110', 'G111', 'G112', 'G113', 'G114.3',
            'G122', 'G122.1', 'G123', 'G123.1', 'G130', 'G136', 'G137',
            # Milling-side interpolation
            'G234.1', 'G235', 'G236', 'G237.1',
            # Milling canned cycles
            'G270', 'G271', 'G272', 'G273', 'G274', 'G275', 'G276',
            'G283', 'G284', 'G284.2', 'G285', 'G287', 'G288', 'G288.2', 'G289',
            'G290', 'G292', 'G294',
        ])

    def _populate_marker_codes(self):
        """Populates the turret, spindle and mode marker codes."""
        self.turret_select = {
            'upper': 'G109 L1',
            'lower': 'G109 L2',
        }
        self.spindle_select = {
            'HD1': 'M901',
            'HD2': 'M902',
        }
        # M2xx family for the first milling spindle, M3xx for the second
        self.milling_start = ('M200', 'M203', 'M204', 'M300', 'M303', 'M304')
        self.milling_stop = ('M205', 'M305')
        self.cross_machining_start = ('G110',)
        self.cross_machining_stop = ('G111',)
        self.balance_start = 'M562'
        self.balance_end = 'M563'
        self.wait_m_range = (950, 997)
        self.wait_p_range = (1, 99999999)
