"""Application bootstrap for the blackjack GUI."""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

LOGGER = logging.getLogger(__name__)


def run(argv: Optional[list[str]] = None) -> int:
    """Run the blackjack GUI application."""

    argv = list(sys.argv if argv is None else argv)
    try:
        from .ui.qt_app import launch_qt
    except ImportError as exc:  # pragma: no cover - Qt not available during tests
        LOGGER.warning("Falling back to Tkinter UI due to PyQt6 load failure")
        LOGGER.debug("PyQt6 import error: %s", exc)
        from .core.table_manager import TableConfig, load_table_config
        from .ui.tk_app import launch_tk

        config = load_table_config(argv[1]) if len(argv) > 1 else TableConfig()
        try:
            return launch_tk(config)
        except Exception:  # pragma: no cover - headless CI
            LOGGER.warning("Tkinter fallback unavailable", exc_info=True)
            print("Unable to launch a graphical interface in this environment.")
            return 1

    return launch_qt(argv)


def main() -> int:
    logging.basicConfig(
        level=os.environ.get("BLACKJACK_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return run()


__all__ = ["run", "main"]


if __name__ == "__main__":
    sys.exit(main())
