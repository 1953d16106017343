"""
Application entry point.
"""
import logging
import sys

from PyQt5.QtWidgets import QApplication

from inkstamp.core.config import EditorConfig
from inkstamp.ui import MainWindow


def main():
    """
    Run the annotator.
    An optional PDF path may be passed as the first command-line argument.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Inkstamp")

    config = EditorConfig.load()

    file_path = None
    if len(sys.argv) > 1:
        file_path = sys.argv[1]

    window = MainWindow(config, file_path)
    window.show()
    sys.exit(app.exec_())


if __name__ == '__main__':
    main()
