"""
Logger Utility
==============

Context-aware logging for the coach service.

Every line goes to stderr as:

    [TIMESTAMP] [LEVEL] [Context] message {"optional": "data"}

so the server's stdout stays free and one request's story can be read
top to bottom. Colour is only used when stderr is a terminal.

Usage:
    from icpc_coach.utils.logger import Logger

    logger = Logger("Resolver")
    logger.info("Resolving simulations", {"handle": "tourist"})

    child = logger.child("Standings")
    child.warning("Standings unavailable", {"contest_id": 105789})
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Log levels with numeric values for comparison."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for coloured terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVELS = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def _get_log_level_from_env() -> LogLevel:
    """Parse LOG_LEVEL, defaulting to INFO."""
    return _LEVELS.get(os.getenv("LOG_LEVEL", "INFO").upper(), LogLevel.INFO)


class Logger:
    """
    A context-aware logger.

    Example:
        logger = Logger("Agent")
        logger.info("Turn started", {"turn": 1})

        tool_logger = logger.child("Tools")
        # Logs will show [Agent:Tools]
    """

    def __init__(self, context: str = ""):
        self.context = context
        self._min_level = _get_log_level_from_env()

    def child(self, child_context: str) -> "Logger":
        """Create a child logger with additional context."""
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def _paint(self, text: str, color: str) -> str:
        if not sys.stderr.isatty():
            return text
        return f"{color}{text}{Colors.RESET}"

    def _format_message(
        self,
        level: str,
        message: str,
        color: str,
        data: dict[str, Any] | None
    ) -> str:
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""
        line = (
            f"{self._paint(f'[{timestamp}]', Colors.DIM)} "
            f"{self._paint(f'[{level}]', color)} "
            f"{context_str}{message}"
        )
        if data:
            line += " " + self._paint(json.dumps(data, default=str, ensure_ascii=False), Colors.DIM)
        return line

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        if level < self._min_level:
            return
        print(self._format_message(level_name, message, color, data), file=sys.stderr)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a debug message. Only shown when LOG_LEVEL=DEBUG."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a recoverable problem."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: Exception | None = None) -> None:
        """
        Log an error message.

        Errors are always shown regardless of log level.

        Args:
            message: The error message
            error: Optional exception to include details from
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)


logger = Logger("Coach")
