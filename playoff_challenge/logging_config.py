"""Centralized logging configuration for the playoff challenge pipeline."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure the 'playoff_challenge' logger.

    Module loggers ('playoff_challenge.sync', ...) propagate to it, so one
    call at CLI or handler start-up covers the whole package.

    Args:
        log_dir: Directory for log files (default: ./logs)
        level: Logging level (default: INFO)
        log_to_file: Whether to log to a timestamped file (default: True)
        log_to_console: Whether to log to stdout (default: True)

    Returns:
        Configured logger instance

    Example:
        from playoff_challenge.logging_config import setup_logging
        logger = setup_logging(log_to_file=False)
        logger.info("Starting score sync")
    """
    logger = logging.getLogger('playoff_challenge')
    logger.setLevel(level)
    logger.handlers = []

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    simple_formatter = logging.Formatter('%(levelname)s: %(message)s')

    if log_to_file:
        if log_dir is None:
            log_dir = Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f'playoff_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(simple_formatter)
        logger.addHandler(console_handler)

    return logger
