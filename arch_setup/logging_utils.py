from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

from .config import DEFAULT_LOG_DIR, expand_home

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    log_dir: Optional[str] = DEFAULT_LOG_DIR,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure logging for one installer run.

    Console gets `[LEVEL] message`; when log_dir is given, a timestamped
    `setup-YYYYmmdd-HHMMSS.log` under it gets the full record. If the log
    directory cannot be created we keep going with console output only.

    Returns the log file path, or None when logging to the console only.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_arch_setup_configured", False):
        return getattr(logger, "_arch_setup_log_path", None)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console)

    chosen_path: Optional[str] = None
    if log_dir:
        directory = Path(expand_home(log_dir))
        path = directory / time.strftime("setup-%Y%m%d-%H%M%S.log")
        try:
            directory.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path, encoding="utf-8")
        except OSError as e:
            logging.getLogger(__name__).warning(
                "Could not create log file under %s (%s), logging to console only", directory, e
            )
        else:
            file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            logger.addHandler(file_handler)
            chosen_path = str(path)

    setattr(logger, "_arch_setup_configured", True)
    setattr(logger, "_arch_setup_log_path", chosen_path)

    if chosen_path:
        logging.getLogger(__name__).info("Logging initialized: %s", chosen_path)
    return chosen_path
