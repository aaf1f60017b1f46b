"""
Utility functions for the npm release action.

Logging setup for CI runs and a small string helper for commit subjects.
"""

import logging
import sys
from typing import Optional

# Every module logs under this name via logging.getLogger(__name__).
PACKAGE_LOGGER = "npm_release"

CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"


def setup_logging(
    *,
    verbosity: int = 0,
    log_file: Optional[str] = None,
    quiet: bool = False,
) -> None:
    """Configure the ``npm_release`` logger for one action run.

    Stdout belongs to the progress lines and workflow commands
    (``::set-output``, ``::error::``) the runner parses, so log records
    go to stderr only. The runner stamps every line with its own time,
    which is why the console format leaves the timestamp out.

    Args:
        verbosity: 0 = WARNING (default), 1 = INFO (``--verbose``),
                   2+ = DEBUG (``--debug``).
        log_file: Optional path that receives every DEBUG record, with
                  timestamps, for attaching to a failed run.
        quiet: Only report errors on the console.
    """
    if quiet:
        console_level = logging.ERROR
    elif verbosity >= 2:
        console_level = logging.DEBUG
    elif verbosity >= 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.setLevel(logging.DEBUG)
    pkg_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    pkg_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        pkg_logger.addHandler(file_handler)

    pkg_logger.debug(
        "Logging to stderr at %s, file=%s",
        logging.getLevelName(console_level),
        log_file or "none",
    )


def truncate_string(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate a string to a maximum length.

    Only the first line of a multi-line string is kept.

    Args:
        text: String to truncate.
        max_length: Maximum length of the result.
        suffix: Suffix to add if truncated.

    Returns:
        Truncated string.
    """
    lines = text.splitlines()
    first_line = lines[0] if lines else ""
    if len(first_line) <= max_length and len(lines) <= 1:
        return first_line

    return first_line[:max_length - len(suffix)] + suffix
