# Video Recall UI Package
from .main_window import MainWindow
from .player import VideoPlayerWidget
from .styles import DARK_STYLESHEET

__all__ = ['MainWindow', 'VideoPlayerWidget', 'DARK_STYLESHEET']
