"""
Console log formatting for the gorm-gen command.

Everything goes to stderr: stdout is reserved for the generated Go
source when no -o file is given.
"""

import logging
import sys
from typing import Optional, TextIO

RESET = "\033[0m"
BOLD = "\033[1m"

LEVEL_COLORS = {
    logging.DEBUG: "\033[2m",        # Dim
    logging.WARNING: "\033[33m",     # Yellow
    logging.ERROR: "\033[31m",       # Red
    logging.CRITICAL: "\033[1;31m",  # Bold red
}

SUCCESS_MARK = "✓"
PROGRESS_MARK = "→"

MARK_COLORS = {
    SUCCESS_MARK: "\033[32m" + BOLD,  # Bold green
    PROGRESS_MARK: "\033[34m",        # Blue
}


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colours a record by level, or by its leading marker
    for INFO records written through log_success/log_progress.
    """

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(fmt or "%(levelname)s: %(message)s")
        target = stream if stream is not None else sys.stderr
        # Piped or redirected output stays plain
        self.use_colors = use_colors and getattr(target, "isatty", lambda: False)()

    def _color_for(self, record: logging.LogRecord) -> Optional[str]:
        if record.levelno != logging.INFO:
            return LEVEL_COLORS.get(record.levelno)
        return MARK_COLORS.get(record.getMessage()[:1])

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = self._color_for(record) if self.use_colors else None
        return f"{color}{text}{RESET}" if color else text


def setup_colored_logging(level: int = logging.INFO, use_colors: bool = True) -> None:
    """Route the root logger to stderr through ColoredFormatter, replacing earlier handlers."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(use_colors=use_colors, stream=sys.stderr))
    handler.setLevel(level)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


def log_success(logger: logging.Logger, message: str) -> None:
    logger.info(f"{SUCCESS_MARK} {message}")


def log_progress(logger: logging.Logger, message: str) -> None:
    logger.info(f"{PROGRESS_MARK} {message}")
