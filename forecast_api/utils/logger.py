"""
Logger utility for the forecast API
Provides structured logging with file and console output
"""

import logging
import sys
from pathlib import Path


_loggers = {}


class Logger:
    """Custom logger with file and console output"""

    def __init__(self, name="forecast_api", config=None):
        """
        Initialize logger

        Args:
            name: Logger name
            config: Configuration dictionary with logging settings
        """
        self.name = name
        self.logger = logging.getLogger(name)

        # Default configuration
        if config is None:
            config = {
                'level': 'INFO',
                'file': None,
                'console': True
            }

        level = getattr(logging, str(config.get('level', 'INFO')).upper())
        self.logger.setLevel(level)
        self.logger.propagate = False

        # Remove existing handlers
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        simple_formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        # File handler (optional)
        log_file = config.get('file')
        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(level)
            file_handler.setFormatter(detailed_formatter)
            self.logger.addHandler(file_handler)

        # Console handler
        if config.get('console', True):
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(simple_formatter)
            self.logger.addHandler(console_handler)

    def debug(self, message, *args):
        """Log debug message"""
        self.logger.debug(message, *args, stacklevel=2)

    def info(self, message, *args):
        """Log info message"""
        self.logger.info(message, *args, stacklevel=2)

    def warning(self, message, *args):
        """Log warning message"""
        self.logger.warning(message, *args, stacklevel=2)

    def error(self, message, *args, exc_info=False):
        """Log error message"""
        self.logger.error(message, *args, exc_info=exc_info, stacklevel=2)

    def exception(self, message, *args):
        """Log error message with the active traceback"""
        self.logger.exception(message, *args, stacklevel=2)

    def section(self, title):
        """Log a section separator"""
        separator = "=" * 80
        self.logger.info(separator)
        self.logger.info(f"  {title}")
        self.logger.info(separator)


def setup_logging(config=None, name="forecast_api"):
    """
    (Re)configure the named logger from a logging config section

    Args:
        config: Configuration dictionary
        name: Logger name

    Returns:
        Logger instance
    """
    _loggers[name] = Logger(name, config)
    return _loggers[name]


def get_logger(name="forecast_api", config=None):
    """
    Get or create a logger instance

    Args:
        name: Logger name
        config: Configuration dictionary, only used on first creation

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = Logger(name, config)
    return _loggers[name]
