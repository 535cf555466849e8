# taskman_app/ui/styles.py

from taskman_app.models.theme import Theme


def darken_color(color: str, factor: float = 0.8) -> str:
    """'#rrggbb' -> same hue, each channel scaled by factor."""
    hex_value = color.lstrip('#')
    if len(hex_value) != 6:
        return color
    try:
        r, g, b = (int(hex_value[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return color
    r, g, b = (max(0, min(255, int(c * factor))) for c in (r, g, b))
    return f"#{r:02x}{g:02x}{b:02x}"


_TEMPLATE = """
/* Window */
QMainWindow {{
    background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
        stop:0 {gradient_start}, stop:1 {gradient_end});
}}

QWidget {{
    font-family: 'Segoe UI', 'Roboto', sans-serif;
    font-size: 14px;
    color: #e2e8f0;
}}

QLabel {{
    color: #e2e8f0;
    background: transparent;
}}

QLabel#HeaderLabel {{
    font-size: 28px;
    font-weight: bold;
    color: {accent};
}}

/* Navigation */
QPushButton#NavButton {{
    background-color: transparent;
    border: none;
    color: #cbd5e1;
    padding: 10px 20px;
    text-align: left;
}}
QPushButton#NavButton:checked {{
    background-color: {primary};
    color: #ffffff;
    border-radius: 8px;
}}

/* Stat cards */
QFrame#StatCard {{
    background-color: rgba(255, 255, 255, 0.08);
    border: 1px solid {secondary};
    border-radius: 12px;
}}
QLabel#StatNumber {{
    font-size: 26px;
    font-weight: bold;
    color: {accent};
}}
QLabel#StatLabel {{
    font-size: 11px;
    color: #94a3b8;
}}

QProgressBar {{
    border: 1px solid {secondary};
    border-radius: 6px;
    background: rgba(255, 255, 255, 0.08);
    text-align: center;
}}
QProgressBar::chunk {{
    background-color: {primary};
    border-radius: 6px;
}}

/* Buttons */
QPushButton {{
    background-color: {primary};
    border: none;
    border-radius: 8px;
    color: #ffffff;
    padding: 8px 16px;
    font-weight: bold;
}}
QPushButton:hover {{
    background-color: {primary_dark};
}}
QPushButton:pressed {{
    background-color: {secondary};
}}
QPushButton#DangerButton {{
    background-color: #ef4444;
}}
QPushButton#DangerButton:hover {{
    background-color: #b91c1c;
}}

QLineEdit, QComboBox, QDateTimeEdit {{
    background-color: rgba(255, 255, 255, 0.08);
    border: 1px solid #475569;
    border-radius: 6px;
    padding: 6px;
}}
QLineEdit:focus, QComboBox:focus, QDateTimeEdit:focus {{
    border-color: {accent};
}}

QListWidget {{
    background-color: rgba(0, 0, 0, 0.25);
    border: 1px solid #334155;
    border-radius: 8px;
}}
QListWidget::item {{
    padding: 6px;
}}
QListWidget::item:selected {{
    background-color: {secondary};
}}

QCheckBox {{
    spacing: 10px;
}}
QCheckBox::indicator:checked {{
    background-color: {accent};
    border-color: {accent};
}}
"""


def build_stylesheet(theme: Theme) -> str:
    return _TEMPLATE.format(
        primary=theme.primary,
        primary_dark=darken_color(theme.primary),
        secondary=theme.secondary,
        accent=theme.accent,
        gradient_start=theme.gradient_start,
        gradient_end=theme.gradient_end,
    )
