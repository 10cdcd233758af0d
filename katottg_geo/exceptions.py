"""
Custom exception classes for the KATOTTG geo application.

This module defines the exception hierarchy used by the compaction pipeline,
the hierarchy builder and the data loader. Data irregularities such as
unresolved parents are never raised; only structurally broken input is fatal.
"""

from typing import Optional, List, Dict, Any


class KatottgError(Exception):
    """Base exception class for all KATOTTG geo errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        """
        Initialize the base error.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional context information about the error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code,
            'context': self.context
        }


class UnknownCategoryError(KatottgError):
    """Exception raised when a category letter is outside the KATOTTG set."""

    def __init__(self, category: Any, valid_categories: Optional[List[str]] = None):
        context = {
            'category': str(category) if category is not None else None,
            'valid_categories': valid_categories or []
        }
        super().__init__(
            f"Unknown KATOTTG category: {category!r}",
            error_code='UNKNOWN_CATEGORY',
            context=context
        )
        self.category = category
        self.valid_categories = valid_categories or []


class SnapshotError(KatottgError):
    """Exception raised for structurally invalid compacted snapshots."""

    def __init__(self, message: str, issues: Optional[List[str]] = None,
                 item_index: Optional[int] = None):
        """
        Initialize snapshot error.

        Args:
            message: Human-readable error message
            issues: List of structural problems found in the snapshot
            item_index: Index of the first offending node, if known
        """
        context = {
            'issues': issues or [],
            'item_index': item_index
        }
        super().__init__(message, error_code='SNAPSHOT_ERROR', context=context)
        self.issues = issues or []
        self.item_index = item_index


class DataLoadError(KatottgError):
    """Exception raised for data loading errors."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 missing_fields: Optional[List[str]] = None,
                 original_error: Optional[Exception] = None):
        """
        Initialize data load error.

        Args:
            message: Human-readable error message
            file_path: Path to the file that caused the error
            missing_fields: Required fields absent from the document
            original_error: Original exception that caused this error
        """
        context = {
            'file_path': file_path,
            'missing_fields': missing_fields or [],
            'original_error': str(original_error) if original_error else None,
            'original_error_type': type(original_error).__name__ if original_error else None
        }
        super().__init__(message, error_code='DATA_LOAD_ERROR', context=context)
        self.file_path = file_path
        self.missing_fields = missing_fields or []
        self.original_error = original_error


class FileAccessError(KatottgError):
    """Exception raised for file access and I/O errors."""

    def __init__(self, message: str, file_path: str, operation: str,
                 original_error: Optional[Exception] = None):
        """
        Initialize file access error.

        Args:
            message: Human-readable error message
            file_path: Path to the file that caused the error
            operation: Type of operation that failed (read, write, create, etc.)
            original_error: Original exception that caused this error
        """
        context = {
            'file_path': file_path,
            'operation': operation,
            'original_error': str(original_error) if original_error else None,
            'original_error_type': type(original_error).__name__ if original_error else None
        }
        super().__init__(message, error_code='FILE_ACCESS_ERROR', context=context)
        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class ConfigurationError(KatottgError):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, config_key: Optional[str] = None,
                 config_value: Any = None, valid_values: Optional[List[Any]] = None):
        """
        Initialize configuration error.

        Args:
            message: Human-readable error message
            config_key: Configuration key that has invalid value
            config_value: Invalid configuration value
            valid_values: List of valid values for the configuration key
        """
        context = {
            'config_key': config_key,
            'config_value': str(config_value) if config_value is not None else None,
            'valid_values': [str(v) for v in valid_values] if valid_values else None
        }
        super().__init__(message, error_code='CONFIGURATION_ERROR', context=context)
        self.config_key = config_key
        self.config_value = config_value
        self.valid_values = valid_values or []


def create_snapshot_error(issues: List[str], item_index: Optional[int] = None) -> SnapshotError:
    """
    Create a snapshot error summarising a list of structural issues.

    Args:
        issues: Structural problems found while validating the snapshot
        item_index: Index of the first offending node, if known

    Returns:
        SnapshotError with a readable message
    """
    shown = '; '.join(issues[:5])
    if len(issues) > 5:
        shown += f" (and {len(issues) - 5} more)"
    return SnapshotError(
        f"Malformed snapshot: {len(issues)} issue(s): {shown}",
        issues=issues,
        item_index=item_index
    )


def create_file_error(operation: str, file_path: str, original_error: Exception) -> FileAccessError:
    """
    Create a file access error with standardized message.

    Args:
        operation: Type of file operation that failed
        file_path: Path to the file
        original_error: Original exception

    Returns:
        FileAccessError with formatted message
    """
    message = f"Failed to {operation} file '{file_path}': {original_error}"
    return FileAccessError(message, file_path=file_path, operation=operation,
                           original_error=original_error)


def get_error_severity(error: Exception) -> str:
    """
    Determine the severity level of an error.

    Args:
        error: Exception to evaluate

    Returns:
        Severity level: 'low', 'medium', 'high', or 'critical'
    """
    if isinstance(error, (SnapshotError, ConfigurationError)):
        return 'critical'
    elif isinstance(error, (DataLoadError, FileAccessError)):
        return 'high'
    elif isinstance(error, UnknownCategoryError):
        # Unknown letters are filtered out upstream and never stop processing
        return 'low'
    else:
        return 'medium'
