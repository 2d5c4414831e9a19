"""Console and file logging for the mipsync CLI"""

import logging

from mipsync.config import Settings

ROOT_LOGGER = "mipsync"
CONSOLE_FORMAT = "[mipsync] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(settings: Settings, verbose: bool = False) -> logging.Logger:
    """
    Send mipsync records to the console and, when `settings.log_file` is set,
    append them to that file as well.

    Handlers installed by an earlier call are closed and replaced, so a
    process running several syncs logs each record once.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if settings.log_file:
        sink = logging.FileHandler(settings.log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    return logger
