"""
Logging setup for the invite bot.

Handlers live on the package logger only; module loggers created with
logging.getLogger(__name__) anywhere under `invitebot` propagate to it.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from invitebot.config import Config

PACKAGE_LOGGER = 'invitebot'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _log_file(log_dir: Path) -> Path:
    return log_dir / f'invite_bot_{datetime.now().strftime("%Y%m%d")}.log'


def configure_logging(
    log_dir: Optional[Union[str, Path]] = None,
    root: str = PACKAGE_LOGGER
) -> logging.Logger:
    """Attach console and daily file handlers to `root` once."""
    logger = logging.getLogger(root)
    if logger.handlers:
        return logger

    level = logging.DEBUG if Config.DEBUG else logging.INFO
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_dir = Path(log_dir or Config.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(_log_file(log_dir), encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def setup_logger(name: str) -> logging.Logger:
    """Logger for `name`, nested under the package logger."""
    configure_logging()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        # Scripts run as __main__
        name = f'{PACKAGE_LOGGER}.{name}'
    return logging.getLogger(name)
