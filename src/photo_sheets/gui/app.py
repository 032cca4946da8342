"""
Entry point for the PySide6 editor.
"""
import logging
import sys


def run() -> int:
    """
    Main entry point for the GUI application.
    """
    from PySide6.QtWidgets import QApplication
    from photo_sheets.gui.main_window import MainWindow

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    app = QApplication(sys.argv)
    app.setApplicationName("Photo Sheets")
    app.setOrganizationName("Photo Sheets")

    window = MainWindow()
    window.show()
    return app.exec()
