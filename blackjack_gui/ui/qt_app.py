"""PyQt6 application bootstrap."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from PyQt6 import QtCore, QtWidgets

from ..core.persist import JsonFileStore
from ..core.table_manager import TableConfig, TableManager, load_table_config
from .table import TableWindow

LOGGER = logging.getLogger(__name__)


class QtClock:
    """Paces the table on the Qt event loop.

    ``pause`` spins a nested event loop so the window keeps painting and
    receiving clicks, which the table ignores outside input phases.
    """

    def pause(self, seconds: float) -> None:
        loop = QtCore.QEventLoop()
        QtCore.QTimer.singleShot(int(seconds * 1000), loop.quit)
        loop.exec()

    def call_later(self, seconds: float, callback: Callable[[], None]) -> None:
        QtCore.QTimer.singleShot(int(seconds * 1000), callback)


def _load_config(argv: Sequence[str]) -> tuple[TableConfig, Optional[str]]:
    if len(argv) > 1:
        candidate = Path(argv[1]).expanduser()
        if candidate.exists():
            try:
                return load_table_config(candidate), str(candidate)
            except (OSError, ValueError) as exc:  # pragma: no cover - GUI feedback
                QtWidgets.QMessageBox.critical(None, "Configuration Error", str(exc))
        else:
            QtWidgets.QMessageBox.warning(None, "Missing Configuration", f"Unable to open {candidate}.")
    return TableConfig(), None


def launch_qt(argv: Sequence[str]) -> int:
    app = QtWidgets.QApplication(list(argv))
    config, source = _load_config(argv)
    store = JsonFileStore(config.save_path)
    manager = TableManager(config, clock=QtClock(), store=store)
    LOGGER.info("Saving session to %s", config.save_path)

    window = TableWindow(manager, store, source)
    window.show()
    return app.exec()


__all__ = ["launch_qt", "QtClock"]
