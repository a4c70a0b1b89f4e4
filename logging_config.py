"""Console and rotating-file logging for the till."""

import logging
import logging.handlers
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(funcName)s] %(message)s"


def configure_logging(log_dir="logs", level="INFO"):
    """
    Set up the root logger with a console handler and a rotating file
    handler under log_dir. Calling it again replaces the handlers.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    os.makedirs(log_dir, exist_ok=True)
    logger = logging.getLogger()
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, "pos.log"),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    return logger
