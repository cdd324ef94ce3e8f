"""
Read-only pane showing one classified line stream (common, upper or lower).
"""
from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel, QListWidget, QListWidgetItem
from PySide6.QtGui import QColor, QFont, QBrush
from PySide6.QtCore import Qt, Signal

from core.machine_state import StreamTag

TAG_BACKGROUNDS = {
    StreamTag.COMMON: '#1e2a4a',
    StreamTag.TURRET_SELECT: '#16325c',
    StreamTag.BALANCE: '#4a3510',
}
COMMENT_COLOR = '#6c757d'


def format_stream_line(line) -> str:
    """Physical line number prefix plus the block text."""
    return f"N{line.line_number:04d}  {line.text}"


class StreamView(QWidget):
    """Title bar, state badges and the list of lines of one stream."""

    lineActivated = Signal(int)

    def __init__(self, title, accent, parent=None):
        super().__init__(parent)
        self.title = title

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.header = QLabel(title)
        self.header.setStyleSheet(
            f"QLabel {{ background-color: {accent}; color: white; "
            f"font-weight: bold; padding: 4px; }}")
        layout.addWidget(self.header)

        self.list = QListWidget()
        font = QFont("Consolas", 10)
        font.setStyleHint(QFont.StyleHint.Monospace)
        self.list.setFont(font)
        self.list.setStyleSheet("QListWidget { background-color: #1b1b1b; color: #e9ecef; }")
        self.list.itemDoubleClicked.connect(self._on_item_activated)
        layout.addWidget(self.list)

    def set_lines(self, lines, empty_text="No operations"):
        """Replace the pane contents with ``lines``."""
        self.list.clear()
        if not lines:
            item = QListWidgetItem(empty_text)
            item.setForeground(QBrush(QColor(COMMENT_COLOR)))
            item.setFlags(Qt.NoItemFlags)
            self.list.addItem(item)
            return

        for line in lines:
            item = QListWidgetItem(format_stream_line(line))
            item.setData(Qt.UserRole, line.line_number)
            background = TAG_BACKGROUNDS.get(line.stream_tag)
            if background:
                item.setBackground(QBrush(QColor(background)))
            if line.is_comment:
                item.setForeground(QBrush(QColor(COMMENT_COLOR)))
            self.list.addItem(item)

    def set_badges(self, state_summary, line_count):
        """Show spindle / MILL / X-MACH badges and the code line count."""
        badges = []
        if state_summary.get('spindle'):
            badges.append(state_summary['spindle'])
        if state_summary.get('milling'):
            badges.append("MILL")
        if state_summary.get('cross_machining'):
            badges.append("X-MACH")
        badges.append(f"{line_count} LINES")
        self.header.setText(f"{self.title}   [{'] ['.join(badges)}]")

    def line_count(self):
        return self.list.count()

    def _on_item_activated(self, item):
        line_number = item.data(Qt.UserRole)
        if line_number:
            self.lineActivated.emit(int(line_number))
