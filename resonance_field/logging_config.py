"""
Logging setup for resonance field processes.

Every module logs under the ``resonance`` hierarchy
(``resonance.engine``, ``resonance.oscillator``, ...), so configuring the
root ``resonance`` logger once covers the whole package. The level comes
from RF_LOG_LEVEL unless passed explicitly.
"""

import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from . import config as cfg

ROOT_LOGGER = "resonance"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[int, str, None]) -> int:
    """Accept a level number or name; None means the configured default."""
    if level is None:
        level = cfg.LOG_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    name: str = ROOT_LOGGER,
    level: Union[int, str, None] = None,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """
    Attach a rotating file handler and a WARNING+ console handler to ``name``.

    The file is ``<log_dir>/<name>.log``. Calling it again for the same
    logger only updates the level.
    """
    level = resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    log_dir = log_dir or str(cfg.LOG_DIR)
    os.makedirs(log_dir, exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    fh = RotatingFileHandler(
        os.path.join(log_dir, f"{name}.log"),
        maxBytes=cfg.LOG_MAX_BYTES,
        backupCount=cfg.LOG_BACKUP_COUNT,
    )
    fh.setFormatter(fmt)
    fh.setLevel(level)
    logger.addHandler(fh)

    # stderr stays quiet below WARNING
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    ch.setLevel(logging.WARNING)
    logger.addHandler(ch)

    logger.debug(f"Logging to {fh.baseFilename} at {logging.getLevelName(level)}")
    return logger
