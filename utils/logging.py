"""S7 client logging utilities."""

import logging
import sys
from typing import Optional


# Module-level logger
_logger: Optional[logging.Logger] = None


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for the S7 client.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to
        log_format: Optional custom log format string

    Returns:
        Configured logger instance
    """
    global _logger

    if log_format is None:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logger = logging.getLogger("s7link")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_handler)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """
    Get the S7 client logger.

    Returns:
        Logger instance (creates default if not initialized)
    """
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


def log_buffer(
    data: bytes,
    direction: str = "RX",
    label: str = "",
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a raw data buffer in hex format.

    Args:
        data: Buffer bytes to log
        direction: "TX" for written data, "RX" for read data
        label: Optional prefix (PLC name, address)
        logger: Optional logger instance (uses default if not provided)
    """
    if logger is None:
        logger = get_logger()

    hex_str = " ".join(f"{b:02X}" for b in data)
    prefix = f"{label} " if label else ""
    logger.debug(f"{prefix}{direction}: [{len(data)} bytes] {hex_str}")
