"""Logging configuration."""

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = 'operations.log'


class StripNewlinesFilter(logging.Filter):
    """Filter to remove leading/trailing newlines from log messages."""
    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = record.msg.strip()
        return True


class ImmediateHandler(logging.StreamHandler):
    """Handler that flushes immediately."""
    def emit(self, record):
        super().emit(record)
        self.flush()


def setup_logging(log_dir: str = 'output', debug: bool = False):
    """Configure logging for both console and file output.

    Args:
        log_dir: directory for the operations log, created if missing
        debug: show DEBUG messages on the console as well
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # Configure root logger
    logging.root.setLevel(logging.DEBUG)

    # Console handler - INFO level, minimal format
    console_handler = ImmediateHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(message)s'))

    # File handler - DEBUG level, detailed format
    file_handler = ImmediateHandler(open(log_path / LOG_FILE_NAME, 'a', encoding='utf-8'))
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    file_handler.addFilter(StripNewlinesFilter())

    # Clear any existing handlers
    for handler in logging.root.handlers:
        handler.close()
    logging.root.handlers = []

    logging.root.addHandler(console_handler)
    logging.root.addHandler(file_handler)

    # Add session separator to log file
    logging.debug("=" * 80)
    logging.debug("Starting new NFC tag session")
