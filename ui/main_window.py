"""
Main Window for the Video Recall desktop app.

A single window with the video player on the left and the Recent Videos
list on the right. The list is always re-rendered from the controller
after an action; the window keeps no copy of its own.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QFileDialog, QListWidget, QListWidgetItem, QSplitter, QMenu
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence, QShortcut

from video_recall.config import Config
from video_recall.error_handler import UserFriendlyError, get_friendly_message, safe_operation
from video_recall.recent_entry import RecentEntry
from video_recall.recent_store import RecentStore
from video_recall.session import RecentVideosController
from video_recall.stores import create_store

from .error_dialog import show_error, show_exception
from .player import VideoPlayerWidget

logger = logging.getLogger(__name__)

# Supported video formats
VIDEO_EXTENSIONS = ('.mp4', '.mkv', '.avi', '.mov', '.m4v', '.wmv', '.webm')


class MainWindow(QMainWindow):
    """Player window with a Recent Videos sidebar."""

    def __init__(self, config: Optional[Config] = None):
        super().__init__()
        self.config = config or Config()
        self.setWindowTitle("Video Recall")
        self.resize(1100, 640)

        self.player = VideoPlayerWidget(
            seek_step=self.config.player.seek_step_seconds,
            rates=self.config.player.rates,
        )
        self.player.playback_failed.connect(self._on_playback_failed)

        recent_store = RecentStore.from_config(self.config, create_store(self.config))
        self.controller = RecentVideosController(
            recent_store,
            self.player,
            default_rate=self.config.player.default_rate,
            autoplay=self.config.player.autoplay,
        )

        self._create_menu_bar()
        self._create_ui()
        self._create_shortcuts()
        self._render_recent()

    def _create_menu_bar(self):
        file_menu = self.menuBar().addMenu("File")

        open_action = QAction("Open Video...", self)
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(self._choose_file)
        file_menu.addAction(open_action)

        clear_action = QAction("Clear Recent", self)
        clear_action.triggered.connect(self._clear_recent)
        file_menu.addAction(clear_action)

        file_menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

    def _create_ui(self):
        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(self.player)

        sidebar = QWidget()
        sidebar_layout = QVBoxLayout(sidebar)
        sidebar_layout.setContentsMargins(12, 12, 12, 12)

        title = QLabel("Recent Videos")
        title.setProperty("class", "section-title")
        sidebar_layout.addWidget(title)

        self.recent_list = QListWidget()
        self.recent_list.setContextMenuPolicy(Qt.CustomContextMenu)
        self.recent_list.customContextMenuRequested.connect(self._show_recent_menu)
        self.recent_list.itemActivated.connect(
            lambda item: self._open_recent(self.recent_list.row(item))
        )
        sidebar_layout.addWidget(self.recent_list, 1)

        self.empty_label = QLabel("Videos you open will appear here.")
        self.empty_label.setProperty("class", "helper")
        sidebar_layout.addWidget(self.empty_label)

        buttons = QHBoxLayout()
        open_btn = QPushButton("Open Video...")
        open_btn.clicked.connect(self._choose_file)
        buttons.addWidget(open_btn)
        sidebar_layout.addLayout(buttons)

        splitter.addWidget(sidebar)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

    def _create_shortcuts(self):
        # Ctrl+1..9 open the matching recent video
        for number in range(1, 10):
            QShortcut(
                QKeySequence(f"Ctrl+{number}"), self,
                activated=lambda index=number - 1: self._open_recent(index)
            )
        QShortcut(QKeySequence.Delete, self.recent_list, activated=self._delete_selected)
        QShortcut(QKeySequence("Space"), self, activated=self.player.toggle_playback)
        QShortcut(QKeySequence("Left"), self,
                  activated=lambda: self.player.seek_by(-self.config.player.seek_step_seconds))
        QShortcut(QKeySequence("Right"), self,
                  activated=lambda: self.player.seek_by(self.config.player.seek_step_seconds))

    def _render_recent(self):
        self.recent_list.clear()
        for number, entry in enumerate(self.controller.entries, start=1):
            item = QListWidgetItem(self._entry_label(number, entry))
            recorded = entry.file_ref.recorded_path
            if recorded is not None:
                item.setToolTip(str(recorded))
            self.recent_list.addItem(item)
        self.empty_label.setVisible(self.recent_list.count() == 0)

    def _entry_label(self, number: int, entry: RecentEntry) -> str:
        watched = entry.last_watched.astimezone().strftime("%b %d, %H:%M")
        prefix = f"{number}. " if number <= 9 else ""
        return f"{prefix}{entry.display_name}\n{watched}"

    def _choose_file(self):
        patterns = " ".join(f"*{ext}" for ext in VIDEO_EXTENSIONS)
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Video", str(Path.home()), f"Video Files ({patterns})"
        )
        if not path:
            return

        try:
            remembered = self._play_path(path)
        except UserFriendlyError as e:
            self._render_recent()
            show_exception(e, parent=self)
            return

        self._render_recent()
        self.setWindowTitle(f"Video Recall - {Path(path).name}")
        if not remembered and self.controller.last_error is not None:
            show_exception(self.controller.last_error, parent=self)

    def _open_recent(self, index: int):
        try:
            path = self._play_recent(index)
        except UserFriendlyError as e:
            self._render_recent()
            show_exception(e, parent=self)
            return

        self._render_recent()
        if path is not None:
            self.setWindowTitle(f"Video Recall - {path.name}")
        elif self.controller.last_error is not None:
            show_exception(self.controller.last_error, parent=self)

    @safe_operation("opening video")
    def _play_path(self, path: str) -> bool:
        return self.controller.open_path(path)

    @safe_operation("opening recent video")
    def _play_recent(self, index: int) -> Optional[Path]:
        return self.controller.open_recent(index)

    def _delete_selected(self):
        row = self.recent_list.currentRow()
        if row >= 0:
            self.controller.delete_recent(row)
            self._render_recent()

    def _clear_recent(self):
        self.controller.clear_recent()
        self._render_recent()

    def _show_recent_menu(self, pos):
        item = self.recent_list.itemAt(pos)
        if item is None:
            return
        row = self.recent_list.row(item)

        menu = QMenu(self)
        play_action = menu.addAction("Play")
        remove_action = menu.addAction("Remove from Recent")
        chosen = menu.exec(self.recent_list.mapToGlobal(pos))

        if chosen == play_action:
            self._open_recent(row)
        elif chosen == remove_action:
            self.controller.delete_recent(row)
            self._render_recent()

    def _on_playback_failed(self, message: str):
        title, friendly = get_friendly_message(RuntimeError(f"codec: {message}"))
        show_error(title, friendly, message, parent=self)
