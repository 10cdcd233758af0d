"""
Error reporting utilities for the KATOTTG geo application.

This module builds short, error-specific descriptions of loader and snapshot
failures and logs them at a level derived from the error severity.
"""

import time
import logging
from typing import Any, Dict, List, Optional

from ..exceptions import (
    DataLoadError,
    FileAccessError,
    SnapshotError,
    UnknownCategoryError,
    get_error_severity
)

SEVERITY_LOG_LEVELS = {
    'critical': logging.CRITICAL,
    'high': logging.ERROR,
    'medium': logging.WARNING,
    'low': logging.INFO,
}

MAX_LOGGED_ISSUES = 3


def create_error_context(operation: str, **kwargs) -> Dict[str, Any]:
    """
    Create an error context dictionary.

    Args:
        operation: Name of the operation being performed
        **kwargs: Additional context such as file_path

    Returns:
        Dictionary with the operation, a timestamp and the extra values
    """
    context = {
        'operation': operation,
        'timestamp': time.time(),
    }
    context.update(kwargs)
    return context


def describe_error(error: Exception) -> str:
    """
    Summarise an error in one line.

    Snapshot errors report the issue count, the first offending node and the
    first few issues; file and load errors report the path involved.
    """
    if isinstance(error, SnapshotError):
        parts = [f"snapshot rejected with {len(error.issues)} issue(s)"]
        if error.item_index is not None:
            parts.append(f"first bad node at index {error.item_index}")
        shown: List[str] = error.issues[:MAX_LOGGED_ISSUES]
        if shown:
            parts.append("; ".join(shown))
        if not error.issues:
            parts.append(error.message)
        return ", ".join(parts)

    if isinstance(error, FileAccessError):
        return f"cannot {error.operation} '{error.file_path}': {error.original_error or error.message}"

    if isinstance(error, DataLoadError):
        summary = f"cannot load '{error.file_path}': {error.message}"
        if error.missing_fields:
            summary += f" (missing: {', '.join(error.missing_fields)})"
        return summary

    if isinstance(error, UnknownCategoryError):
        return f"unknown category letter {error.category!r}"

    return f"{type(error).__name__}: {error}"


def log_error_details(logger: logging.Logger, error: Exception,
                      context: Optional[Dict[str, Any]] = None):
    """
    Log an error summary at its severity level, with the context at debug.

    Args:
        logger: Logger instance to use
        error: Exception to log
        context: Optional context from create_error_context()
    """
    severity = get_error_severity(error)
    operation = (context or {}).get('operation', 'unknown operation')

    logger.log(SEVERITY_LOG_LEVELS[severity],
               f"{operation} failed ({severity}): {describe_error(error)}")

    if context:
        logger.debug(f"Error context for {operation}: {context}")
