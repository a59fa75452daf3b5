"""
Centralized logging configuration for helm-changelog.

Provides loguru-based logging with consistent formatting across all
components, plus the mapping from CLI verbosity names to loguru levels.
"""

import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger

# Verbosity names accepted on the command line, mapped to loguru levels
VERBOSITY_LEVELS = {
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
    "fatal": "CRITICAL",
    "panic": "CRITICAL",
}


def resolve_level(verbosity: str) -> str:
    """
    Translate a verbosity name into a loguru level name.

    Args:
        verbosity: Name such as "warn" or "debug" (case-insensitive)

    Returns:
        Loguru level name

    Raises:
        ValueError: If the name is not a known verbosity
    """
    try:
        return VERBOSITY_LEVELS[verbosity.strip().lower()]
    except KeyError:
        allowed = ", ".join(VERBOSITY_LEVELS)
        raise ValueError(
            f"Unknown log level '{verbosity}' (expected one of: {allowed})"
        ) from None


class LoggingManager:
    """Manages centralized logging configuration."""

    def __init__(self, service_name: str = "helm-changelog"):
        """
        Initialize logging manager.

        Args:
            service_name: Name of the service for logging identification
        """
        self.service_name = service_name

    def configure_logging(
        self,
        level: str = "WARNING",
        log_file_path: Path | None = None,
    ) -> None:
        """
        Configure logging for the entire application.

        Calling this again replaces the sinks installed by a previous call,
        so the CLI can reconfigure after reading its options.

        Args:
            level: Loguru level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file_path: Optional path for a rotating log file
        """
        logger.remove()
        logger.add(
            sys.stderr,
            format=self._get_console_format(level == "DEBUG"),
            level=level,
            colorize=True,
            backtrace=level == "DEBUG",
            diagnose=False,
        )

        if log_file_path is not None:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                str(log_file_path),
                format=self._get_file_format(),
                level=level,
                rotation="10 MB",
                retention="30 days",
                compression="gz",
            )

        logger.configure(extra={"service_name": self.service_name})

        logger.debug(
            "Logging configured",
            service=self.service_name,
            level=level,
            file_logging=log_file_path is not None,
        )

    def _get_console_format(self, detailed: bool) -> str:
        """Get console logging format."""
        if detailed:
            return (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level> | {extra}"
            )
        return "<level>{level: <8}</level> | <level>{message}</level>"

    def _get_file_format(self) -> str:
        """Get file logging format."""
        return (
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
            "{name}:{function}:{line} | {message} | {extra}"
        )

    def get_logger(self, name: str) -> Any:
        """
        Get a logger instance with the given name.

        Args:
            name: Logger name (usually __name__)

        Returns:
            Bound loguru logger
        """
        return logger.bind(component=name)


# Global logging manager instance
_logging_manager: LoggingManager | None = None


def get_logging_manager() -> LoggingManager:
    """Get or create the global logging manager instance."""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def configure_logging(
    verbosity: str | None = None,
    log_file: str | Path | None = None,
) -> None:
    """
    Configure application logging.

    Args:
        verbosity: Verbosity name; falls back to HELM_CHANGELOG_VERBOSITY,
            then "warning"
        log_file: Optional log file path
    """
    if verbosity is None:
        verbosity = os.getenv("HELM_CHANGELOG_VERBOSITY", "warning")

    manager = get_logging_manager()
    manager.configure_logging(
        level=resolve_level(verbosity),
        log_file_path=Path(log_file) if log_file else None,
    )


def get_logger(name: str) -> Any:
    """
    Get a logger instance for the given component.

    Args:
        name: Component name (usually __name__)

    Returns:
        Bound loguru logger
    """
    return get_logging_manager().get_logger(name)
