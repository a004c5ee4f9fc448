"""
Video Player Widget for Video Recall.
Wraps QMediaPlayer and QVideoWidget with transport controls.
"""

import logging
from typing import List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QSlider, QLabel,
    QStyle, QFrame, QComboBox
)
from PySide6.QtMultimedia import QMediaPlayer, QAudioOutput
from PySide6.QtMultimediaWidgets import QVideoWidget
from PySide6.QtCore import Qt, Signal, QUrl

logger = logging.getLogger(__name__)


class VideoPlayerWidget(QWidget):
    """
    A video player widget with play/pause, skip, seek and speed controls.

    Implements the player interface used by RecentVideosController:
    open_file(path), play(rate), pause(), seek_by(seconds), current_rate.
    """

    position_changed = Signal(int)  # Emitted when playback position changes (ms)
    duration_changed = Signal(int)  # Emitted when media duration changes (ms)
    playback_failed = Signal(str)  # Emitted with the player's error string

    def __init__(self, seek_step: float = 10.0, rates: Optional[List[float]] = None, parent=None):
        super().__init__(parent)
        self.seek_step = seek_step
        self.rates = rates or [0.5, 1.0, 1.25, 1.5, 2.0]

        # Media Player components
        self.media_player = QMediaPlayer()
        self.audio_output = QAudioOutput()
        self.video_widget = QVideoWidget()

        self.media_player.setAudioOutput(self.audio_output)
        self.media_player.setVideoOutput(self.video_widget)

        self.media_player.positionChanged.connect(self._on_position_changed)
        self.media_player.durationChanged.connect(self._on_duration_changed)
        self.media_player.playbackStateChanged.connect(self._on_state_changed)
        self.media_player.errorOccurred.connect(self._handle_error)

        self._create_ui()

    def _create_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        # Video Area
        self.video_container = QFrame()
        self.video_container.setStyleSheet("background: black; border-radius: 6px;")
        video_layout = QVBoxLayout(self.video_container)
        video_layout.setContentsMargins(0, 0, 0, 0)
        video_layout.addWidget(self.video_widget)

        layout.addWidget(self.video_container, 1)

        # Controls Area
        controls = QFrame()
        controls.setStyleSheet("background: #181820; padding: 4px;")
        controls_layout = QHBoxLayout(controls)

        self.play_btn = QPushButton()
        self.play_btn.setIcon(self.style().standardIcon(QStyle.SP_MediaPlay))
        self.play_btn.setFixedSize(32, 32)
        self.play_btn.setEnabled(False)
        self.play_btn.clicked.connect(self.toggle_playback)
        self.play_btn.setStyleSheet("border: none; border-radius: 4px; background: #2a2a35;")
        controls_layout.addWidget(self.play_btn)

        step = int(self.seek_step)
        self.back_btn = QPushButton(f"-{step}s")
        self.back_btn.setFixedHeight(32)
        self.back_btn.clicked.connect(lambda: self.seek_by(-self.seek_step))
        controls_layout.addWidget(self.back_btn)

        self.forward_btn = QPushButton(f"+{step}s")
        self.forward_btn.setFixedHeight(32)
        self.forward_btn.clicked.connect(lambda: self.seek_by(self.seek_step))
        controls_layout.addWidget(self.forward_btn)

        self.time_label = QLabel("00:00")
        self.time_label.setStyleSheet("color: #a1a1aa; font-family: monospace; font-size: 11px;")
        controls_layout.addWidget(self.time_label)

        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(0, 0)
        self.slider.sliderMoved.connect(self.set_position)
        controls_layout.addWidget(self.slider)

        self.duration_label = QLabel("00:00")
        self.duration_label.setStyleSheet("color: #71717a; font-family: monospace; font-size: 11px;")
        controls_layout.addWidget(self.duration_label)

        # Playback speed
        self.rate_combo = QComboBox()
        for rate in self.rates:
            self.rate_combo.addItem(f"{rate:g}x", rate)
        self.rate_combo.setCurrentIndex(self._rate_index(1.0))
        self.rate_combo.currentIndexChanged.connect(self._on_rate_selected)
        controls_layout.addWidget(self.rate_combo)

        self.volume_slider = QSlider(Qt.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setValue(70)
        self.volume_slider.setFixedWidth(80)
        self.volume_slider.valueChanged.connect(lambda v: self.audio_output.setVolume(v / 100))
        controls_layout.addWidget(self.volume_slider)

        layout.addWidget(controls)

    def open_file(self, path: str):
        """Load a video file."""
        self.media_player.setSource(QUrl.fromLocalFile(path))
        self.play_btn.setEnabled(True)

    @property
    def current_rate(self) -> float:
        return self.media_player.playbackRate()

    def toggle_playback(self):
        if self.media_player.playbackState() == QMediaPlayer.PlayingState:
            self.pause()
        else:
            self.play(self.current_rate)

    def play(self, rate: float = 1.0):
        self.media_player.setPlaybackRate(rate)
        index = self.rate_combo.findData(rate)
        if index >= 0:
            self.rate_combo.blockSignals(True)
            self.rate_combo.setCurrentIndex(index)
            self.rate_combo.blockSignals(False)
        self.media_player.play()

    def pause(self):
        self.media_player.pause()

    def seek_by(self, seconds: float):
        """Skip forward (positive) or back (negative), clamped to the media."""
        target = self.media_player.position() + int(seconds * 1000)
        duration = self.media_player.duration()
        if duration > 0:
            target = min(target, duration)
        self.set_position(max(0, target))

    def set_position(self, position: int):
        """Seek to position in ms."""
        self.media_player.setPosition(position)

    def _rate_index(self, rate: float) -> int:
        index = self.rate_combo.findData(rate)
        return index if index >= 0 else 0

    def _on_rate_selected(self, index: int):
        rate = self.rate_combo.itemData(index)
        if rate:
            self.media_player.setPlaybackRate(rate)

    def _on_position_changed(self, position: int):
        self.slider.setValue(position)
        self.time_label.setText(self._format_time(position))
        self.position_changed.emit(position)

    def _on_duration_changed(self, duration: int):
        self.slider.setRange(0, duration)
        self.duration_label.setText(self._format_time(duration))
        self.duration_changed.emit(duration)

    def _on_state_changed(self, state):
        if state == QMediaPlayer.PlayingState:
            self.play_btn.setIcon(self.style().standardIcon(QStyle.SP_MediaPause))
        else:
            self.play_btn.setIcon(self.style().standardIcon(QStyle.SP_MediaPlay))

    def _handle_error(self):
        self.play_btn.setEnabled(False)
        self.time_label.setText("Error")
        message = self.media_player.errorString()
        logger.error(f"Video player error: {message}")
        self.playback_failed.emit(message)

    def _format_time(self, ms: int) -> str:
        seconds = (ms // 1000) % 60
        minutes = (ms // 60000) % 60
        hours = (ms // 3600000)

        if hours > 0:
            return f"{hours}:{minutes:02}:{seconds:02}"
        return f"{minutes:02}:{seconds:02}"
