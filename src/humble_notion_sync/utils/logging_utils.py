import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
ROOT_LOGGER = "humble"


def _resolve(level_name: str) -> int:
    level = getattr(logging, str(level_name).upper(), None)
    return level if isinstance(level, int) else logging.INFO


def set_level(level_name: str) -> None:
    """Set the level every ``humble.*`` logger inherits."""
    logging.getLogger(ROOT_LOGGER).setLevel(_resolve(level_name))


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return the ``humble.<name>`` logger with one stream handler attached.

    Without ``level`` the logger inherits from ``humble``, which starts at the
    process LOG_LEVEL and is updated once settings are loaded.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if root.level == logging.NOTSET:
        root.setLevel(_resolve(os.getenv("LOG_LEVEL", "INFO")))

    logger = logging.getLogger(f"{ROOT_LOGGER}.{name}")
    if level:
        logger.setLevel(_resolve(level))

    # Add a handler once (scripts call get_logger at import time)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def log_counts(logger: logging.Logger, title: str, **counts: int) -> None:
    """Emit a closing summary block, one bullet per counter."""
    logger.info(title)
    for label, value in counts.items():
        logger.info("   • %s: %d", label.replace("_", " ").capitalize(), value)
