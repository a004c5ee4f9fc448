"""
Error dialog for Video Recall.

Shows the friendly title/message from video_recall.error_handler. When the
error is about a particular video, the dialog names it and offers to reveal
its folder so the user can find a file that was moved or renamed.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QTextEdit, QCheckBox
)
from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QDesktopServices

from video_recall.error_handler import UserFriendlyError, error_path, get_friendly_message
from video_recall.logging_config import get_log_dir

logger = logging.getLogger(__name__)


def _nearest_existing_folder(path: Path) -> Optional[Path]:
    """The file's folder, or the closest ancestor that still exists."""
    for folder in path.parents:
        if folder.is_dir():
            return folder
    return None


class ErrorDialog(QDialog):
    def __init__(self, title: str, message: str, details: str = None,
                 video_path: str = "", parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumWidth(440)
        self.details = details
        self.video_path = Path(video_path) if video_path else None

        self._setup_ui(title, message)

    def _setup_ui(self, title: str, message: str):
        layout = QVBoxLayout(self)

        title_label = QLabel(title)
        title_label.setStyleSheet("font-size: 16px; font-weight: 700; color: #f5f5f8;")
        layout.addWidget(title_label)

        message_label = QLabel(message)
        message_label.setWordWrap(True)
        message_label.setStyleSheet(
            "padding: 12px; background: #12121a; border-radius: 6px; color: #f5f5f8; border: 1px solid #282838;"
        )
        layout.addWidget(message_label)

        if self.video_path is not None:
            path_label = QLabel(str(self.video_path))
            path_label.setWordWrap(True)
            path_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
            path_label.setStyleSheet("color: #a1a1aa; font-family: monospace; font-size: 11px;")
            layout.addWidget(path_label)

        if self.details:
            self.details_toggle = QCheckBox("Show technical details")
            self.details_toggle.toggled.connect(self._toggle_details)
            layout.addWidget(self.details_toggle)

            self.details_text = QTextEdit()
            self.details_text.setPlainText(self.details)
            self.details_text.setReadOnly(True)
            self.details_text.setMaximumHeight(150)
            self.details_text.setVisible(False)
            self.details_text.setStyleSheet(
                "background: #0f0f14; color: #b0b0c0; border: 1px solid #282838; font-family: monospace; font-size: 11px;"
            )
            layout.addWidget(self.details_text)

        btn_layout = QHBoxLayout()

        if self.video_path is not None:
            folder = _nearest_existing_folder(self.video_path)
            reveal_btn = QPushButton("Show Folder")
            reveal_btn.setEnabled(folder is not None)
            reveal_btn.clicked.connect(lambda: self._reveal(folder))
            btn_layout.addWidget(reveal_btn)

        log_btn = QPushButton("Open Log Folder")
        log_btn.clicked.connect(lambda: self._reveal(get_log_dir()))
        btn_layout.addWidget(log_btn)

        btn_layout.addStretch()

        ok_btn = QPushButton("OK")
        ok_btn.setDefault(True)
        ok_btn.clicked.connect(self.accept)
        btn_layout.addWidget(ok_btn)

        layout.addLayout(btn_layout)

    def _toggle_details(self, checked):
        self.details_text.setVisible(checked)
        self.adjustSize()

    def _reveal(self, folder: Path):
        if not QDesktopServices.openUrl(QUrl.fromLocalFile(str(folder))):
            logger.warning(f"Could not open folder {folder}")


def show_error(title: str, message: str, details: str = None, parent=None, video_path: str = ""):
    """Convenience function to show error dialog"""
    dialog = ErrorDialog(title, message, details, video_path, parent)
    dialog.exec()


def show_exception(error: Exception, parent=None):
    """Show the friendly form of an exception, naming the video it concerns."""
    if isinstance(error, UserFriendlyError):
        title, message, details = error.title, error.user_message, error.technical_message
    else:
        title, message = get_friendly_message(error)
        details = str(error)
    show_error(title, message, details, parent=parent, video_path=error_path(error))
