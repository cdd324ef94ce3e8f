"""
The main window for the dual-turret program analyzer.
"""
import logging

from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                               QPushButton, QFileDialog, QMessageBox, QTextEdit,
                               QSplitter, QLabel, QComboBox)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QFont

from .editor import Editor
from .stream_view import StreamView
from nc_processor import NCProgramProcessor
from config.machine_config import ConfigManager
from config.sample_programs import BALANCE_CUTTING_SAMPLE
from core.machine_state import Turret

logger = logging.getLogger(__name__)

# Info notes shown before the panel collapses the rest
INFO_PREVIEW = 5


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Integrex Dual-Turret Program Analyzer")
        self.setGeometry(100, 100, 1600, 1000)

        self.processor = NCProgramProcessor()

        # Re-analyze shortly after typing stops
        self.analysis_timer = QTimer()
        self.analysis_timer.setSingleShot(True)
        self.analysis_timer.timeout.connect(self.process_program)

        self.setup_ui()
        self.connect_signals()

        self.load_sample_program()

    def setup_ui(self):
        """Set up the user interface."""
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_layout = QVBoxLayout(main_widget)

        # Top toolbar
        toolbar_layout = QHBoxLayout()

        self.load_button = QPushButton("Load Program")
        self.save_button = QPushButton("Save Program")
        self.process_button = QPushButton("Analyze")

        self.machine_selector = QComboBox()
        self.machine_selector.addItems(list(ConfigManager.presets()))

        self.status_label = QLabel("Ready")

        toolbar_layout.addWidget(self.load_button)
        toolbar_layout.addWidget(self.save_button)
        toolbar_layout.addWidget(self.process_button)
        toolbar_layout.addStretch()
        toolbar_layout.addWidget(QLabel("Machine:"))
        toolbar_layout.addWidget(self.machine_selector)
        toolbar_layout.addWidget(self.status_label)

        main_layout.addLayout(toolbar_layout)

        main_splitter = QSplitter(Qt.Vertical)
        main_layout.addWidget(main_splitter)

        # Editor and the three stream panes
        workspace_splitter = QSplitter(Qt.Horizontal)

        self.editor = Editor()
        workspace_splitter.addWidget(self.editor)

        self.common_view = StreamView("COMMON SECTION", "#4c51bf")
        self.upper_view = StreamView("UPPER TURRET (G109 L1)", "#2f855a")
        self.lower_view = StreamView("LOWER TURRET (G109 L2)", "#6b46c1")
        for view in (self.common_view, self.upper_view, self.lower_view):
            workspace_splitter.addWidget(view)

        # Diagnostics and statistics
        bottom_pane = QWidget()
        bottom_layout = QHBoxLayout(bottom_pane)
        bottom_layout.setContentsMargins(0, 0, 0, 0)

        diagnostics_widget = QWidget()
        diagnostics_layout = QVBoxLayout(diagnostics_widget)
        diagnostics_layout.setContentsMargins(0, 0, 0, 0)
        diagnostics_layout.addWidget(QLabel("Errors, Warnings and Info:"))
        self.diagnostics_console = QTextEdit()
        self.diagnostics_console.setReadOnly(True)
        diagnostics_layout.addWidget(self.diagnostics_console)
        bottom_layout.addWidget(diagnostics_widget, 3)

        self.stats_label = QLabel("Statistics:\nNo program analyzed")
        self.stats_label.setFont(QFont("Courier", 9))
        self.stats_label.setStyleSheet("QLabel { background-color: #f0f0f0; padding: 5px; }")
        self.stats_label.setAlignment(Qt.AlignTop | Qt.AlignLeft)
        bottom_layout.addWidget(self.stats_label, 1)

        main_splitter.addWidget(workspace_splitter)
        main_splitter.addWidget(bottom_pane)

        workspace_splitter.setSizes([500, 350, 375, 375])
        main_splitter.setSizes([750, 250])

    def connect_signals(self):
        """Connect all signal handlers."""
        self.load_button.clicked.connect(self.load_program_file)
        self.save_button.clicked.connect(self.save_program_file)
        self.process_button.clicked.connect(self.process_program)
        self.machine_selector.currentTextChanged.connect(self.change_machine_config)
        self.editor.textChanged.connect(self.on_text_changed)
        for view in (self.common_view, self.upper_view, self.lower_view):
            view.lineActivated.connect(self.editor.goto_line)

    def load_sample_program(self):
        """Load the balance cutting demonstration program."""
        self.editor.setPlainText(BALANCE_CUTTING_SAMPLE)
        self.process_program()

    def open_path(self, file_path):
        """Load a program from ``file_path`` into the editor."""
        try:
            with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
                content = f.read()
        except OSError as e:
            logger.error("Could not open %s: %s", file_path, e)
            QMessageBox.warning(self, "Open Program", f"Could not open {file_path}:\n{e}")
            return
        self.editor.setPlainText(content)
        logger.info("Loaded: %s", file_path)
        self.process_program()

    def load_program_file(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open NC Program", "",
            "NC Programs (*.nc *.eia *.mpf *.txt);;All Files (*)"
        )
        if file_path:
            self.open_path(file_path)

    def save_program_file(self):
        file_path, _ = QFileDialog.getSaveFileName(
            self, "Save NC Program", "",
            "NC Programs (*.nc *.eia);;All Files (*)"
        )
        if not file_path:
            return
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(self.editor.toPlainText())
        except OSError as e:
            logger.error("Could not save %s: %s", file_path, e)
            QMessageBox.warning(self, "Save Program", f"Could not save {file_path}:\n{e}")
            return
        logger.info("Saved: %s", file_path)

    def change_machine_config(self, machine_type):
        self.processor.set_machine(machine_type)
        logger.info("Switched to %s", self.processor.config.name)
        self.process_program()

    def process_program(self):
        """Analyze the editor text and refresh every pane."""
        self.processor.process_program(self.editor.toPlainText())

        self.update_streams()
        self.update_diagnostics_display()
        self.update_statistics()

        if self.processor.has_errors():
            self.status_label.setText("Analysis complete with errors")
        else:
            self.status_label.setText("Analysis complete")

    def update_streams(self):
        stats = self.processor.get_statistics()
        state = self.processor.get_machine_state()

        self.common_view.set_lines(self.processor.get_common_section(), "No common section")
        self.upper_view.set_lines(self.processor.get_turret_stream(Turret.UPPER),
                                  "No upper turret operations")
        self.lower_view.set_lines(self.processor.get_turret_stream(Turret.LOWER),
                                  "No lower turret operations")

        self.upper_view.set_badges(state.get('upper', {}), stats['upper_lines'])
        self.lower_view.set_badges(state.get('lower', {}), stats['lower_lines'])

    def update_diagnostics_display(self):
        result = self.processor.result
        if not (result.errors or result.warnings or result.info):
            self.diagnostics_console.setText("No findings.")
            self.editor.clear_diagnostic_highlights()
            return

        text = []
        for diagnostic in result.errors:
            text.append(f"[ERROR] {diagnostic}")
        for diagnostic in result.warnings:
            text.append(f"[WARNING] {diagnostic}")
        for diagnostic in result.info[:INFO_PREVIEW]:
            text.append(f"[INFO] {diagnostic}")
        if len(result.info) > INFO_PREVIEW:
            text.append(f"[INFO] ...and {len(result.info) - INFO_PREVIEW} more")
        self.diagnostics_console.setText("\n".join(text))

        self.editor.highlight_diagnostic_lines(
            [d.line_number for d in result.errors],
            [d.line_number for d in result.warnings])

    def update_statistics(self):
        stats = self.processor.get_statistics()
        self.stats_label.setText(f"""Statistics:
Machine: {self.processor.config.name}
Total Lines: {stats['total_lines']}
Common: {stats['common_lines']}
Upper Turret: {stats['upper_lines']}
Lower Turret: {stats['lower_lines']}

Errors: {stats['errors']}
Warnings: {stats['warnings']}
Info: {stats['info']}""")

    def on_text_changed(self):
        self.analysis_timer.stop()
        self.analysis_timer.start(500)
