"""
Colored logging helpers for the entity model.

The library itself only emits records through module loggers. Host tools
(generators, CLIs) call ``setup_colored_logging`` to get readable, colored
console output of the model build.
"""

import logging
import sys
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """
    Colored logging formatter that adds ANSI color codes to log messages.

    Different log levels get different colors for better visual distinction.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }

    SPECIAL_COLORS = {
        'success': '\033[92m',    # Bright Green
        'progress': '\033[94m',   # Bright Blue
        'highlight': '\033[96m',  # Bright Cyan
    }

    RESET = '\033[0m'
    BOLD = '\033[1m'

    SUCCESS_MARKER = "✓"
    PROGRESS_MARKER = "→"
    HIGHLIGHT_MARKER = "•"

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True, stream=None):
        """
        Initialize the colored formatter.

        Args:
            fmt: Log format string (uses default if None)
            use_colors: Whether to use colors
            stream: Stream the handler writes to, checked for TTY support
        """
        if fmt is None:
            fmt = "%(levelname)s: %(message)s"
        super().__init__(fmt)

        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors."""
        formatted_message = super().format(record)
        if not self.use_colors:
            return formatted_message

        message = record.getMessage()

        # WARNING and above always keep their level color
        if record.levelname in ('ERROR', 'CRITICAL', 'WARNING'):
            return f"{self.COLORS[record.levelname]}{formatted_message}{self.RESET}"

        if message.startswith(self.SUCCESS_MARKER):
            return f"{self.SPECIAL_COLORS['success']}{self.BOLD}{formatted_message}{self.RESET}"
        if message.startswith(self.PROGRESS_MARKER):
            return f"{self.SPECIAL_COLORS['progress']}{formatted_message}{self.RESET}"
        if message.startswith(self.HIGHLIGHT_MARKER):
            return f"{self.SPECIAL_COLORS['highlight']}{formatted_message}{self.RESET}"
        if self._is_section_message(message):
            return f"{self.BOLD}{self.SPECIAL_COLORS['highlight']}{formatted_message}{self.RESET}"
        if record.levelname == 'DEBUG':
            return f"{self.COLORS['DEBUG']}{formatted_message}{self.RESET}"

        return formatted_message

    def _is_section_message(self, message: str) -> bool:
        """Check if message is a section header."""
        return message.strip().startswith("=" * 20)


def setup_colored_logging(level: int = logging.INFO, use_colors: bool = True,
                          logger_name: str = "entity_model") -> logging.Logger:
    """
    Attach a colored console handler to the package logger.

    Args:
        level: Logging level (default: INFO)
        use_colors: Whether to use colors (default: True)
        logger_name: Logger to configure, the package root by default

    Returns:
        The configured logger
    """
    target = logging.getLogger(logger_name)

    # Drop handlers installed by an earlier call to avoid duplicated output
    for handler in target.handlers[:]:
        if isinstance(handler.formatter, ColoredFormatter):
            target.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(use_colors=use_colors, stream=sys.stderr))
    console_handler.setLevel(level)

    target.addHandler(console_handler)
    target.setLevel(level)
    return target


def log_success(logger: logging.Logger, message: str) -> None:
    """Log a success message with special formatting."""
    logger.info(f"{ColoredFormatter.SUCCESS_MARKER} {message}")


def log_progress(logger: logging.Logger, message: str) -> None:
    """Log a progress message with special formatting."""
    logger.info(f"{ColoredFormatter.PROGRESS_MARKER} {message}")


def log_highlight(logger: logging.Logger, message: str) -> None:
    """Log a highlighted detail. Emitted at DEBUG since it fires per table."""
    logger.debug(f"{ColoredFormatter.HIGHLIGHT_MARKER} {message}")


def log_section(logger: logging.Logger, section_name: str) -> None:
    """Log a section header with special formatting."""
    separator = "=" * 60
    logger.info(separator)
    logger.info(f"  {section_name.upper()}")
    logger.info(separator)
