"""
Warning manager for handling one-time warnings per session.
"""
from enum import Enum
from typing import Optional, Set

from PyQt5.QtWidgets import QCheckBox, QMessageBox, QWidget


class WarningType(Enum):
    """Types of warnings that can be suppressed."""
    DELETE_ANNOTATION = "delete_annotation"
    CLEAR_ANNOTATIONS = "clear_annotations"
    REPLACE_DOCUMENT = "replace_document"
    CLOSE_DOCUMENT = "close_document"
    OVERWRITE_FILE = "overwrite_file"


class WarningManager:
    """
    Manages warning dialogs to show them only once per session.
    Singleton pattern to maintain state across the application.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self._suppressed_warnings: Set[WarningType] = set()
        self._last_choices = {}

    def should_show_warning(self, warning_type: WarningType) -> bool:
        """
        Check if a warning should be shown.

        Args:
            warning_type: Type of warning to check

        Returns:
            True if warning should be shown, False if suppressed
        """
        return warning_type not in self._suppressed_warnings

    def suppress_warning(self, warning_type: WarningType) -> None:
        """Suppress a warning for the rest of the session."""
        self._suppressed_warnings.add(warning_type)

    def get_last_choice(self, warning_type: WarningType) -> Optional[int]:
        return self._last_choices.get(warning_type)

    def show_confirmation(self, parent: QWidget, warning_type: WarningType,
                          title: str, message: str,
                          show_dont_ask: bool = True) -> bool:
        """
        Show a Yes/No confirmation dialog with an optional "don't ask again" box.

        Args:
            parent: Parent widget
            warning_type: Type of warning
            title: Dialog title
            message: Confirmation message
            show_dont_ask: Whether to show "don't ask again" checkbox

        Returns:
            True if user clicked Yes, False otherwise
        """
        if not self.should_show_warning(warning_type):
            last_choice = self.get_last_choice(warning_type)
            return last_choice is None or last_choice == QMessageBox.Yes

        msg_box = QMessageBox(parent)
        msg_box.setIcon(QMessageBox.Question)
        msg_box.setWindowTitle(title)
        msg_box.setText(message)
        msg_box.setStandardButtons(QMessageBox.Yes | QMessageBox.No)
        msg_box.setDefaultButton(QMessageBox.No)

        dont_ask_checkbox = None
        if show_dont_ask:
            dont_ask_checkbox = QCheckBox("Don't ask again this session")
            msg_box.setCheckBox(dont_ask_checkbox)

        result = msg_box.exec_()
        self._last_choices[warning_type] = result

        if dont_ask_checkbox and dont_ask_checkbox.isChecked():
            self.suppress_warning(warning_type)

        return result == QMessageBox.Yes


# Global instance for easy access
warning_manager = WarningManager()
