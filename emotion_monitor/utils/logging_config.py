"""
Centralized logging configuration for the application.
"""

import logging
import sys
from typing import Optional

from .config import AppConfig, load_config


def _resolve_level(config: Optional[AppConfig]) -> int:
    if config is None:
        config = load_config()
    return getattr(logging, config.log_level.upper(), logging.INFO)


def setup_logging(config: Optional[AppConfig] = None) -> None:
    """
    Setup centralized logging configuration.

    Args:
        config: AppConfig instance, loaded from the environment if None
    """
    # Configure root logger
    logging.basicConfig(level=_resolve_level(config),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                        handlers=[logging.StreamHandler(sys.stdout)])


def get_logger(name: str, config: Optional[AppConfig] = None) -> logging.Logger:
    """
    Get a logger with proper configuration.

    Args:
        name: Logger name (usually __name__)
        config: AppConfig instance, loaded from the environment if None

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(config))
    return logger
