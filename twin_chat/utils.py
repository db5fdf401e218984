"""Logging helpers shared by the API and the CLI."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_FILENAME = "twin_chat.log"
CONSOLE_HANDLER = "twin_chat.console"


def setup_logging(log_dir: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """Configure console logging and, when ``log_dir`` is given, a log file.

    Calling this more than once does not stack duplicate handlers.
    """
    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    if not any(handler.get_name() == CONSOLE_HANDLER for handler in root.handlers):
        console = logging.StreamHandler()
        console.set_name(CONSOLE_HANDLER)
        console.setFormatter(formatter)
        root.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        log_file = (path / LOG_FILENAME).resolve()
        existing = {
            Path(handler.baseFilename)
            for handler in root.handlers
            if isinstance(handler, logging.FileHandler)
        }
        if log_file not in existing:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    return root
