import logging
import os

from studyposts.config import LOG_FILE, LOG_LEVEL

FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name='studyposts', log_file=LOG_FILE, level=LOG_LEVEL, console_level=logging.INFO):
    """Configure a logger with a console handler and an optional file handler.

    Child loggers (``studyposts.storage`` etc.) propagate here, so calling this
    once for the package logger is enough for the whole application.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Calling twice must not duplicate output
    logger.handlers.clear()

    formatter = logging.Formatter(FORMAT, datefmt=DATE_FORMAT)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
