from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QStyleFactory

from todolist.config import PROJECT_ROOT
from todolist.infra.logging import setup_logging
from todolist.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def _apply_dark_palette(app: QApplication) -> None:
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor("#0F172A"))
    palette.setColor(QPalette.WindowText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Base, QColor("#111827"))
    palette.setColor(QPalette.AlternateBase, QColor("#1B2230"))
    palette.setColor(QPalette.Text, QColor("#E6EDF3"))
    palette.setColor(QPalette.Button, QColor("#202A3B"))
    palette.setColor(QPalette.ButtonText, QColor("#E6EDF3"))
    palette.setColor(QPalette.Highlight, QColor("#2563EB"))
    palette.setColor(QPalette.HighlightedText, QColor("#FFFFFF"))
    app.setPalette(palette)


def _find_qss_path() -> Path | None:
    candidates = [
        Path(__file__).resolve().parent / "ui" / "styles.qss",
        PROJECT_ROOT / "todolist" / "ui" / "styles.qss",
    ]
    meipass = getattr(sys, "_MEIPASS", None)
    if meipass:
        candidates.append(Path(meipass) / "todolist" / "ui" / "styles.qss")

    for path in candidates:
        if path.exists():
            return path
    return None


def load_styles(app: QApplication) -> None:
    qss_path = _find_qss_path()
    if not qss_path:
        logger.debug("No stylesheet found")
        return
    app.setStyleSheet(qss_path.read_text(encoding="utf-8"))


def main() -> None:
    setup_logging()

    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_dark_palette(app)
    app.setFont(QFont("Segoe UI", 10))
    load_styles(app)

    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
