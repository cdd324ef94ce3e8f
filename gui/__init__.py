"""PySide6 viewer for analyzed programs."""
