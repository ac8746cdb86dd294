"""
Logging setup for scripts and demos.

The package itself only creates module loggers; handlers are attached here,
by whoever runs a simulation.
"""
import logging
import sys
from typing import Optional, Union

# Chatty at DEBUG while the PNG/HTML outputs are written
NOISY_LOGGERS = ("matplotlib", "PIL")


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Attach a console handler (and optionally a file handler) to the
    'ripple_tank' logger.

    Args:
        level: Level number or name ("DEBUG", "info", ...)
        log_file: Also write the run log to this file, overwriting it.

    Returns:
        The 'ripple_tank' logger.

    Calling it again replaces the handlers instead of stacking them.
    """
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger("ripple_tank")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s %(levelname)-7s %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logger.level, logging.WARNING))

    logger.debug("Logging at %s", logging.getLevelName(logger.level))
    return logger
