"""
logger.py - Centralized Logging Configuration

Provides consistent logging for the dashboard and the elevation proxy with:
- File rotation (prevents huge log files)
- Console and file output
- Configurable log levels

Usage:
    from crack_monitor.logger import setup_logging, get_logger

    setup_logging()  # Call once at application start
    logger = get_logger(__name__)
    logger.info("Dashboard started")
"""

import logging
import logging.handlers
from pathlib import Path
import sys


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    log_dir: str = "logs",
    log_level: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    console_output: bool = True,
    file_output: bool = True
) -> None:
    """
    Configure logging system for the entire application.

    Args:
        log_dir: Directory for log files
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        max_bytes: Maximum size of each log file before rotation
        backup_count: Number of backup files to keep
        console_output: Enable console logging
        file_output: Enable file logging
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Streamlit reruns the script on every interaction
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    log_path = Path(log_dir)
    if file_output:
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path / "app.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info("Logging system initialized")
    root_logger.info(f"Log level: {log_level}")
    if file_output:
        root_logger.info(f"Log directory: {log_path.absolute()}")


def setup_logging_from_config(config: dict) -> None:
    """
    Configure logging from the 'logging' and 'paths' sections of a config dict.

    Args:
        config: Configuration dictionary from config_loader.load_config()
    """
    log_config = config.get('logging', {})
    setup_logging(
        log_dir=config.get('paths', {}).get('logs_dir', 'logs'),
        log_level=log_config.get('level', 'INFO'),
        max_bytes=log_config.get('max_file_size_mb', 10) * 1024 * 1024,
        backup_count=log_config.get('backup_count', 5),
        console_output=log_config.get('console_logging', True),
        file_output=log_config.get('file_logging', True)
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
