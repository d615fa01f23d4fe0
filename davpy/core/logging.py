"""Logger naming for davpy."""

import logging

ROOT_LOGGER = 'davpy'

# Every area logger; setup_logging() tunes them together
LOGGER_NAMES = (
    ROOT_LOGGER,
    'davpy.client',
    'davpy.api',
    'davpy.listing',
    'davpy.view',
    'davpy.upload',
    'davpy.upload.file',
    'davpy.menu',
)


def get_logger(name: str) -> logging.Logger:
    """Return the davpy logger for an area.

    Short names are placed under the package ('api' -> 'davpy.api').
    Until the application configures the root logger the area stays at
    WARNING, so importing davpy prints nothing.
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + '.'):
        name = f"{ROOT_LOGGER}.{name}"
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)
    return logger


def setup_logging(level=logging.INFO) -> None:
    """Set every davpy area logger to level."""
    for logger_name in LOGGER_NAMES:
        logging.getLogger(logger_name).setLevel(level)
