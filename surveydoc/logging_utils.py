"""
Logging helpers for surveydoc.

``LOG`` is the package logger. ``setup_logging`` maps the CLI verbosity to a
console level and optionally adds a full-detail log file.
"""

from __future__ import annotations

import logging
from typing import List, Optional

LOG = logging.getLogger("surveydoc")

# Verbosity levels
VERBOSITY_QUIET = 0    # Warnings and the final status only (default)
VERBOSITY_NORMAL = 1   # One status line per survey
VERBOSITY_VERBOSE = 2  # Per-placeholder debug output

_LEVELS = {
    VERBOSITY_QUIET: logging.WARNING,
    VERBOSITY_NORMAL: logging.INFO,
    VERBOSITY_VERBOSE: logging.DEBUG,
}

# Loggers of the template stack (docxtpl renders through jinja2 and python-docx)
_QUIET_LIBRARIES = ("docxtpl", "docx")


def _console_formatter(verbosity: int) -> logging.Formatter:
    if verbosity >= VERBOSITY_NORMAL:
        return logging.Formatter("%(levelname)s: %(message)s")
    return logging.Formatter("%(message)s")


def _file_handler(log_file: str) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    return handler


def setup_logging(debug: bool, log_file: Optional[str] = None, verbosity: int = VERBOSITY_QUIET) -> None:
    """
    Configure console logging for a CLI run.

    Args:
        debug: Forces VERBOSITY_VERBOSE
        log_file: Optional path of a UTF-8 log file that receives every record
        verbosity: 0=quiet, 1=normal, 2=verbose (higher values count as verbose)
    """
    if debug:
        verbosity = VERBOSITY_VERBOSE
    verbosity = max(VERBOSITY_QUIET, min(verbosity, VERBOSITY_VERBOSE))
    level = _LEVELS[verbosity]

    consoles = [
        h for h in logging.root.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]
    if logging.root.handlers:
        # Already configured (pytest, embedding apps): retune the console handlers only
        for handler in consoles:
            handler.setLevel(level)
            handler.setFormatter(_console_formatter(verbosity))
        logging.root.setLevel(level)
    else:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(_console_formatter(verbosity))
        logging.basicConfig(level=level, handlers=[console], force=True)

    if log_file:
        logging.root.addHandler(_file_handler(log_file))

    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)


def fmt_issues(errors: List[str], warnings: List[str]) -> str:
    """One-line error/warning summary for the per-survey status line."""
    parts: List[str] = []
    if errors:
        parts.append("errors: " + ", ".join(errors))
    if warnings:
        parts.append("warnings: " + ", ".join(warnings))
    return " | ".join(parts) if parts else "-"


__all__ = [
    "LOG",
    "VERBOSITY_NORMAL",
    "VERBOSITY_QUIET",
    "VERBOSITY_VERBOSE",
    "fmt_issues",
    "setup_logging",
]
