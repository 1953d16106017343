"""
Theme management and styling for the application.
"""
from PyQt5.QtWidgets import QWidget

from .models import ThemeColors


class ThemeManager:
    """Manages application themes and styling."""

    DARK_THEME = ThemeColors(
        # Backgrounds
        bg_primary="#2e2e2e",
        bg_secondary="#3e3e3e",
        bg_tertiary="#4e4e4e",
        canvas="#252525",

        # Text
        text_primary="#f0f0f0",
        text_secondary="#B5B5C5",
        text_muted="#8899AA",

        # Accent
        accent_primary="#4a9eff",
        accent_hover="#3a8eef",
        accent_active="#2a7edf",

        # Borders
        border_primary="#555555",
        border_secondary="#3e3e3e",

        # Status
        error="#ff6b6b",
        success="#51cf66"
    )

    LIGHT_THEME = ThemeColors(
        # Backgrounds
        bg_primary="#f0f0f0",
        bg_secondary="#ffffff",
        bg_tertiary="#e0e0e0",
        canvas="#d8d8d8",

        # Text
        text_primary="#2e2e2e",
        text_secondary="#7A899C",
        text_muted="#8899AA",

        # Accent
        accent_primary="#4a9eff",
        accent_hover="#3a8eef",
        accent_active="#2a7edf",

        # Borders
        border_primary="#cccccc",
        border_secondary="#e0e0e0",

        # Status
        error="#e03131",
        success="#2f9e44"
    )

    @classmethod
    def apply_theme(cls, widget: QWidget, dark_mode: bool) -> None:
        """
        Apply theme to a widget and its children.

        Args:
            widget: Widget to style
            dark_mode: Whether to use dark theme
        """
        theme = cls.get_theme_colors(dark_mode)
        widget.setStyleSheet(cls._generate_stylesheet(theme))

    @classmethod
    def get_theme_colors(cls, dark_mode: bool) -> ThemeColors:
        return cls.DARK_THEME if dark_mode else cls.LIGHT_THEME

    @classmethod
    def _generate_stylesheet(cls, theme: ThemeColors) -> str:
        """
        Generate a complete stylesheet from theme colors.

        Args:
            theme: Theme colors to use

        Returns:
            Complete CSS stylesheet string
        """
        return f"""
            /* --- GENERAL STYLES --- */
            QMainWindow, QWidget, QLineEdit, QLabel, QFrame {{
                background-color: {theme.bg_primary};
                color: {theme.text_primary};
                border: none;
            }}

            /* --- BUTTONS --- */
            QPushButton {{
                background-color: {theme.bg_tertiary};
                color: {theme.text_primary};
                border: none;
                border-radius: 6px;
                padding: 8px 16px;
                font-weight: bold;
            }}
            QPushButton:hover {{
                background-color: {theme.bg_secondary};
            }}
            QPushButton:default {{
                background-color: {theme.accent_primary};
                color: white;
            }}

            /* --- TOOL BUTTONS --- */
            QToolButton {{
                background-color: transparent;
                color: {theme.text_secondary};
                border: none;
                border-radius: 4px;
                padding: 4px 8px;
            }}
            QToolButton:hover {{
                background-color: {theme.bg_secondary};
            }}
            QToolButton:pressed {{
                background-color: {theme.accent_active};
                color: white;
            }}
            QToolButton:disabled {{
                color: {theme.text_muted};
            }}

            /* --- INPUTS --- */
            QLineEdit, QDoubleSpinBox {{
                background-color: {theme.bg_secondary};
                border: 1px solid {theme.border_primary};
                border-radius: 6px;
                padding: 6px 10px;
                color: {theme.text_primary};
            }}
            QLineEdit:focus, QDoubleSpinBox:focus {{
                border: 1px solid {theme.accent_primary};
            }}

            /* --- LABELS --- */
            QLabel {{
                background-color: transparent;
            }}
            QLabel[objectName="errorLabel"] {{
                color: {theme.error};
                font-weight: bold;
            }}
            QLabel[objectName="statusLabel"] {{
                color: {theme.text_muted};
            }}
            QLabel[objectName="dropHint"] {{
                color: {theme.text_muted};
                font-size: 16px;
                border: 2px dashed {theme.border_primary};
                border-radius: 12px;
                padding: 40px;
            }}

            /* --- SCROLL AREA --- */
            QScrollArea, QScrollArea > QWidget > QWidget {{
                background-color: {theme.canvas};
                border: none;
            }}

            /* --- FRAMES --- */
            #TopFrame {{
                background-color: {theme.bg_primary};
                border-bottom: 1px solid {theme.border_secondary};
            }}
            #TextPropertiesPanel {{
                background-color: {theme.bg_primary};
                border-left: 1px solid {theme.border_secondary};
            }}

            /* --- MENU --- */
            QMenu {{
                background-color: {theme.bg_secondary};
                border: 1px solid {theme.border_primary};
                border-radius: 4px;
                padding: 4px;
            }}
            QMenu::item {{
                padding: 6px 20px;
                border-radius: 4px;
            }}
            QMenu::item:selected {{
                background-color: {theme.accent_primary};
                color: white;
            }}
        """


def apply_style(widget: QWidget, dark_mode: bool) -> None:
    """Apply the light or dark theme to ``widget``."""
    ThemeManager.apply_theme(widget, dark_mode)
