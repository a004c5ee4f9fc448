#!/usr/bin/env python3
"""
Video Recall Desktop Application - Main Entry Point

Launch with: python main.py [--config PATH] [--debug]
"""

import argparse
import sys
import traceback
from pathlib import Path

# Ensure package is importable
sys.path.insert(0, str(Path(__file__).parent))

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from PySide6.QtGui import QPalette, QColor

from video_recall.config import Config, DEFAULT_CONFIG_PATH
from video_recall.logging_config import configure_from_settings, get_logger
from video_recall.error_handler import handle_error

logger = get_logger("video_recall.main")


def global_exception_handler(exc_type, exc_value, exc_tb):
    """Handle uncaught exceptions globally"""
    # Don't catch keyboard interrupt
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return

    details = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
    title, message = handle_error(exc_value, "uncaught exception")

    logger.critical(f"Uncaught exception: {exc_value}")
    logger.critical(details)

    # Show dialog if app is running
    if QApplication.instance():
        from ui.error_dialog import show_error
        show_error(title, message, details)


# Install global handler
sys.excepthook = global_exception_handler


def _dark_palette() -> QPalette:
    from ui.styles import COLORS

    palette = QPalette()
    fg_primary = QColor(COLORS["fg_primary"])
    accent = QColor(COLORS["accent_primary"])

    palette.setColor(QPalette.Window, QColor(COLORS["bg_darkest"]))
    palette.setColor(QPalette.WindowText, fg_primary)
    palette.setColor(QPalette.Base, QColor(COLORS["bg_panel"]))
    palette.setColor(QPalette.AlternateBase, QColor(COLORS["bg_dark"]))
    palette.setColor(QPalette.Text, fg_primary)
    palette.setColor(QPalette.Button, QColor(COLORS["bg_panel"]))
    palette.setColor(QPalette.ButtonText, fg_primary)
    palette.setColor(QPalette.BrightText, Qt.white)
    palette.setColor(QPalette.Highlight, accent)
    palette.setColor(QPalette.HighlightedText, Qt.white)
    palette.setColor(QPalette.PlaceholderText, QColor(COLORS["fg_secondary"]))
    return palette


def main():
    """Main entry point for the Video Recall desktop app."""
    parser = argparse.ArgumentParser(description="Video player that remembers recent videos")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH,
                        help="Path to YAML config file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args, qt_args = parser.parse_known_args()

    config_error = None
    try:
        config = Config.load(args.config)
    except Exception as e:
        handle_error(e, "loading configuration")
        config_error = e
        config = Config()

    configure_from_settings(config.logging, debug_mode=args.debug)

    app = QApplication([sys.argv[0]] + qt_args)
    app.setApplicationName("Video Recall")
    app.setApplicationDisplayName("Video Recall")
    app.setOrganizationName("VideoRecall")

    from ui.main_window import MainWindow
    from ui.styles import DARK_STYLESHEET

    app.setPalette(_dark_palette())
    app.setStyleSheet(DARK_STYLESHEET)

    window = MainWindow(config)
    window.show()

    if config_error is not None:
        from ui.error_dialog import show_exception
        show_exception(config_error, parent=window)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
