"""
Common utilities shared across tools
"""

from .logging_config import (
    configure_logging,
    get_logger,
    get_logging_manager,
    resolve_level,
)
from .output_manager import OutputManager
from .telemetry import get_telemetry_manager, trace_function, trace_operation

__all__ = [
    "configure_logging",
    "get_logger",
    "get_logging_manager",
    "resolve_level",
    "get_telemetry_manager",
    "trace_function",
    "trace_operation",
    "OutputManager",
]
