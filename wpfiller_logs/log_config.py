"""
Log Configuration - process-wide logging setup for the server entry point
"""

import logging
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("werkzeug", "asyncio", "urllib3")


def configure_logging(config) -> logging.Logger:
    """
    Console handler always; a file handler when config.log_file is set.

    Safe to call more than once: handlers added by a previous call are
    replaced, not duplicated.
    """
    root = logging.getLogger()
    level = getattr(logging, str(config.log_level).upper(), logging.INFO)
    log_file = config.log_file
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, "_wpfiller", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console._wpfiller = True
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler._wpfiller = True
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return root
