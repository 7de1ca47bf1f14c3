"""
S7 client utility modules.

This package provides:
- Events: EventEmitter (observer registry behind S7Client.on/off).
- Logging: setup_logging, get_logger, log_buffer.
"""

from s7link.utils.events import EventEmitter
from s7link.utils.logging import get_logger, log_buffer, setup_logging

__all__ = [
    "EventEmitter",
    "get_logger",
    "log_buffer",
    "setup_logging",
]
