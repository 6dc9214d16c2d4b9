"""Application entry point and setup for the Zip puzzle."""

import logging
import os
import random
import sys
from typing import Optional

from PySide6.QtWidgets import QApplication

from zippath.core.levels import LevelRepository
from zippath.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    level_name = os.environ.get("ZIPPATH_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def seeded_rng() -> Optional[random.Random]:
    """Random generator seeded from ZIPPATH_SEED, or None when unset."""
    seed = os.environ.get("ZIPPATH_SEED")
    if not seed:
        return None
    try:
        return random.Random(int(seed))
    except ValueError:
        logging.warning(f"Ignoring non-integer ZIPPATH_SEED: {seed!r}")
        return None


def run() -> None:
    """Initialize the application, load presets, and start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Zip")
    app.setApplicationDisplayName("Zip")

    try:
        levels = LevelRepository()
    except (FileNotFoundError, ValueError) as e:
        logging.error(f"Could not load puzzle presets: {e}")
        sys.exit(1)

    window = MainWindow(levels=levels, rng=seeded_rng())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
