"""Utility modules."""
from .logging import setup_logging, get_logger
from .stdout_guard import ProtocolSafeStdout, StdoutGuardError, is_protocol_frame

__all__ = [
    "setup_logging",
    "get_logger",
    "ProtocolSafeStdout",
    "StdoutGuardError",
    "is_protocol_frame",
]
