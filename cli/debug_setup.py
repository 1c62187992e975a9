"""Logging and debug console setup for the CLI

When debug mode is enabled every log record goes to the debug log file and
stderr, and everything printed through the rich console is mirrored into the
same file as plain text.
"""

import logging
import os
from typing import Optional

from rich.console import Console

import settings

logger = logging.getLogger(__name__)


class DebugCapturingConsole(Console):
    """Rich Console that mirrors each print into a logger as plain text"""

    def __init__(self, debug_logger: logging.Logger, **kwargs):
        super().__init__(record=True, **kwargs)
        self.debug_logger = debug_logger

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        # Drains the record buffer so each line is logged once
        plain_text = self.export_text(clear=True).rstrip()
        if plain_text:
            self.debug_logger.debug(f"[CONSOLE] {plain_text}")


def _console_logger(log_file: str) -> logging.Logger:
    """Dedicated non-propagating logger for captured console output"""
    console_logger = logging.getLogger("debug_console")
    console_logger.setLevel(logging.DEBUG)

    for handler in console_logger.handlers[:]:
        console_logger.removeHandler(handler)

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    console_logger.addHandler(file_handler)

    # Root already writes to the same file
    console_logger.propagate = False

    return console_logger


def setup_logging(debug: bool, log_file: Optional[str] = None) -> Console:
    """
    Configure logging and return the console the CLI should print through

    Args:
        debug: Whether debug mode is enabled
        log_file: Debug log path, defaults to settings.DEBUG_LOG_FILE

    Returns:
        DebugCapturingConsole in debug mode, a plain rich Console otherwise
    """
    if not debug:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
        logging.basicConfig(level=level, format='%(levelname)s - %(name)s - %(message)s')
        return Console()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_file = os.path.abspath(log_file or settings.DEBUG_LOG_FILE)
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(formatter)
    stream_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(stream_handler)

    console_logger = _console_logger(log_file)
    console_logger.debug("[CLI] ===== LOGIN SESSION STARTED =====")

    logger.info(f"Debug logging enabled - appending to {log_file}")
    return DebugCapturingConsole(debug_logger=console_logger)
