"""
Logging Configuration
Sets up the global logger for the package.

The console handler writes to stdout by default. The command-line tool
passes stderr instead: its stdout carries the JSON design result, which
must stay parseable when piped into another program.
"""
import logging
import sys
from typing import Optional, TextIO


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configures the root logger for the 'gradientgenerator' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        stream: Console stream. Defaults to stdout; the CLI passes stderr so that
            log lines never mix with the JSON result on stdout.
    """
    # Get the logger for our package
    logger = logging.getLogger("gradientgenerator")
    logger.setLevel(level)

    # Check if handlers already exist to avoid duplicate logs on repeated setup
    if logger.hasHandlers():
        logger.handlers.clear()

    # 1. Console Handler
    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    # 2. File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized.")
