"""PySide6 editor for photo sheets."""
