"""
Dark stylesheet for Video Recall.
"""

COLORS = {
    "bg_darkest": "#050507",
    "bg_dark": "#0a0a0e",
    "bg_panel": "#111116",
    "bg_hover": "#1f1f2b",
    "border_medium": "#282838",
    "fg_primary": "#f5f5f8",
    "fg_secondary": "#a8a8b8",
    "fg_muted": "#5a5a6a",
    "accent_primary": "#6366f1",
}

DARK_STYLESHEET = """
* {
    font-family: "SF Pro Display", "Inter", "Segoe UI", sans-serif;
}

QMainWindow, QDialog {
    background: #050507;
    color: #f5f5f8;
}

QWidget {
    background-color: transparent;
    color: #f5f5f8;
    font-size: 13px;
}

QLabel {
    background: transparent;
    color: #f5f5f8;
}

QLabel[class="section-title"] {
    font-size: 16px;
    font-weight: 700;
    color: #f5f5f8;
    padding-bottom: 8px;
}

QLabel[class="helper"] {
    font-size: 11px;
    color: #5a5a6a;
}

QPushButton {
    background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
        stop:0 #6366f1, stop:1 #4f46e5);
    color: #ffffff;
    border: none;
    border-radius: 10px;
    padding: 6px 14px;
    font-weight: 600;
}

QPushButton:hover {
    background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
        stop:0 #818cf8, stop:1 #6366f1);
}

QPushButton:disabled {
    background: #1c1c28;
    color: #4a4a5a;
}

QListWidget {
    background: #111116;
    border: 1px solid #282838;
    border-radius: 10px;
    padding: 4px;
}

QListWidget::item {
    padding: 8px;
    border-radius: 6px;
}

QListWidget::item:hover {
    background: #1f1f2b;
}

QListWidget::item:selected {
    background: #6366f1;
    color: #ffffff;
}

QComboBox {
    background: #1a1a25;
    border: 1px solid #282838;
    border-radius: 6px;
    padding: 4px 8px;
}
"""
