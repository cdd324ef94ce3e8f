"""
NC program editor widget with Mazak syntax highlighting and dark mode.
"""
from PySide6.QtWidgets import QPlainTextEdit, QWidget, QTextEdit
from PySide6.QtGui import (QColor, QTextFormat, QPainter, QFont, QSyntaxHighlighter,
                          QTextCharFormat, QPalette)
from PySide6.QtCore import Qt, QRect, QSize

from core.lexer import NCLexer, TokenType, word_category

# Colors per word category, dark theme
CATEGORY_COLORS = {
    'gcode': '#74c0fc',
    'mcode': '#ff8cc8',
    'axis': '#51cf66',
    'arc': '#63e6be',
    'feed': '#cc99ff',
    'speed': '#f783ac',
    'tool': '#ffd43b',
    'sequence': '#adb5bd',
    'parameter': '#66d9e8',
    'comment': '#6c757d',
}

BOLD_CATEGORIES = {'gcode', 'mcode'}


def build_char_formats():
    """Create one QTextCharFormat per word category."""
    font = QFont('Consolas', 11)
    font.setFixedPitch(True)

    formats = {}
    for category, color in CATEGORY_COLORS.items():
        fmt = QTextCharFormat()
        fmt.setForeground(QColor(color))
        fmt.setFont(font)
        if category in BOLD_CATEGORIES:
            fmt.setFontWeight(QFont.Weight.Bold)
        if category == 'comment':
            fmt.setFontItalic(True)
        formats[category] = fmt
    return formats


class NCHighlighter(QSyntaxHighlighter):
    """Highlights address words and comments of Mazak EIA/ISO blocks."""

    def __init__(self, document):
        super().__init__(document)
        self.lexer = NCLexer()
        self.formats = build_char_formats()

    def highlightBlock(self, text):
        """Apply syntax highlighting to a block of text."""
        for token in self.lexer.tokenize_line(text):
            if token.type is TokenType.UNKNOWN or token.type is TokenType.END_OF_BLOCK:
                continue
            fmt = self.formats.get(word_category(token))
            if fmt is not None:
                self.setFormat(token.char_start, token.char_end - token.char_start, fmt)


class LineNumberArea(QWidget):
    """Line number area widget for the editor."""

    def __init__(self, editor):
        super().__init__(editor)
        self.editor = editor

    def sizeHint(self):
        return QSize(self.editor.lineNumberAreaWidth(), 0)

    def paintEvent(self, event):
        self.editor.lineNumberAreaPaintEvent(event)


class Editor(QPlainTextEdit):
    """Program editor with line numbers and diagnostic line highlighting."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self.setup_dark_mode()
        self.lineNumberArea = LineNumberArea(self)

        self.error_lines = set()
        self.warning_lines = set()

        self.setup_editor()
        self.highlighter = NCHighlighter(self.document())

        self.blockCountChanged.connect(self.updateLineNumberAreaWidth)
        self.updateRequest.connect(self.updateLineNumberArea)
        self.cursorPositionChanged.connect(self.update_extra_selections)

    def setup_dark_mode(self):
        """Configure dark mode appearance."""
        palette = self.palette()
        palette.setColor(QPalette.Base, QColor('#2b2b2b'))
        palette.setColor(QPalette.Text, QColor('#f8f8f2'))
        palette.setColor(QPalette.Highlight, QColor('#44475a'))
        palette.setColor(QPalette.HighlightedText, QColor('#f8f8f2'))
        self.setPalette(palette)

    def setup_editor(self):
        """Configure the editor appearance and behavior."""
        self.setLineWrapMode(QPlainTextEdit.NoWrap)

        font = QFont("Consolas", 11)
        if not font.exactMatch():
            font = QFont("Courier New", 11)
        font.setStyleHint(QFont.StyleHint.Monospace)
        font.setFixedPitch(True)
        self.setFont(font)

        self.updateLineNumberAreaWidth(0)

    def highlight_diagnostic_lines(self, error_lines, warning_lines):
        """Mark lines carrying errors (red) and warnings (amber)."""
        self.error_lines = set(error_lines)
        self.warning_lines = set(warning_lines) - self.error_lines
        self.update_extra_selections()

    def clear_diagnostic_highlights(self):
        self.error_lines.clear()
        self.warning_lines.clear()
        self.update_extra_selections()

    def _line_selection(self, line_num, color):
        block = self.document().findBlockByNumber(line_num - 1)
        if not block.isValid():
            return None
        selection = QTextEdit.ExtraSelection()
        selection.format.setBackground(QColor(color))
        selection.format.setProperty(QTextFormat.FullWidthSelection, True)
        selection.cursor = self.textCursor()
        selection.cursor.setPosition(block.position())
        selection.cursor.clearSelection()
        return selection

    def update_extra_selections(self):
        """Update current line and diagnostic line highlighting."""
        selections = []

        if not self.isReadOnly():
            cursor = self.textCursor()
            if not cursor.hasSelection():
                selection = QTextEdit.ExtraSelection()
                selection.format.setBackground(QColor('#44475a'))
                selection.format.setProperty(QTextFormat.FullWidthSelection, True)
                selection.cursor = cursor
                selection.cursor.clearSelection()
                selections.append(selection)

        for line_num, color in ([(n, '#660000') for n in sorted(self.error_lines)] +
                                [(n, '#5c4300') for n in sorted(self.warning_lines)]):
            selection = self._line_selection(line_num, color)
            if selection is not None:
                selections.append(selection)

        self.setExtraSelections(selections)

    # Line number area methods
    def lineNumberAreaWidth(self):
        """Calculate the width needed for line numbers."""
        digits = len(str(max(1, self.blockCount())))
        return 3 + self.fontMetrics().horizontalAdvance('9') * digits

    def updateLineNumberAreaWidth(self, _):
        self.setViewportMargins(self.lineNumberAreaWidth(), 0, 0, 0)

    def updateLineNumberArea(self, rect, dy):
        """Update the line number area when scrolling."""
        if dy:
            self.lineNumberArea.scroll(0, dy)
        else:
            self.lineNumberArea.update(0, rect.y(), self.lineNumberArea.width(), rect.height())

        if rect.contains(self.viewport().rect()):
            self.updateLineNumberAreaWidth(0)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        cr = self.contentsRect()
        self.lineNumberArea.setGeometry(QRect(cr.left(), cr.top(), self.lineNumberAreaWidth(), cr.height()))

    def lineNumberAreaPaintEvent(self, event):
        """Paint the line number area."""
        painter = QPainter(self.lineNumberArea)
        painter.fillRect(event.rect(), QColor('#383838'))

        block = self.firstVisibleBlock()
        blockNumber = block.blockNumber()
        top = self.blockBoundingGeometry(block).translated(self.contentOffset()).top()
        bottom = top + self.blockBoundingRect(block).height()

        while block.isValid() and top <= event.rect().bottom():
            if block.isVisible() and bottom >= event.rect().top():
                if (blockNumber + 1) in self.error_lines:
                    painter.setPen(QColor('#ff6b6b'))
                elif (blockNumber + 1) in self.warning_lines:
                    painter.setPen(QColor('#ffd43b'))
                else:
                    painter.setPen(QColor('#6c757d'))

                painter.drawText(0, int(top), self.lineNumberArea.width() - 3,
                                 self.fontMetrics().height(), Qt.AlignRight, str(blockNumber + 1))

            block = block.next()
            top = bottom
            bottom = top + self.blockBoundingRect(block).height()
            blockNumber += 1

    def goto_line(self, line_number):
        """Jump to a specific line number."""
        if line_number > 0:
            block = self.document().findBlockByNumber(line_number - 1)
            if block.isValid():
                cursor = self.textCursor()
                cursor.setPosition(block.position())
                self.setTextCursor(cursor)
                self.centerCursor()
