"""
Main entry point for the dual-turret program analyzer.
Initializes the Qt application, sets up the main window, and starts the event loop.
"""

import logging
import sys
from PySide6.QtWidgets import QApplication
from gui.main_window import MainWindow


def main():
    """Initializes and runs the PySide6 application.

    A program path given on the command line is opened instead of the sample.
    """
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    window = MainWindow()
    if len(sys.argv) > 1:
        window.open_path(sys.argv[1])
    window.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
